from .auth import auth_bp
from .catalog import catalog_bp
from .customer import customer_bp
from .vendor import vendor_bp
from .orders import order_bp
from .admin import admin_bp
from .marketing import marketing_bp


__all__ = [
    'auth_bp',
    'catalog_bp',
    'customer_bp',
    'vendor_bp',
    'order_bp',
    'admin_bp',
    'marketing_bp',
]
