from app.routes import (
    auth_bp,
    catalog_bp,
    customer_bp,
    vendor_bp,
    order_bp,
    admin_bp,
    marketing_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(vendor_bp)
    app.register_blueprint(order_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(marketing_bp)
