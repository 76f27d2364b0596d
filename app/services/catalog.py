import logging

from models import db
from models.product import Product
from models.user import ROLE_ADMIN
from app.services.errors import AuthorizationError, NotFoundError
from app.services.stock import set_stock_quantity

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "category", "description", "price_per_day", "security_deposit", "sizes", "images")


def list_products():
    return Product.query.order_by(Product.created_at.desc()).all()


def list_vendor_products(vendor_id: str):
    return Product.query.filter_by(sub_admin_id=vendor_id).order_by(Product.created_at.desc()).all()


def get_product(product_id: str) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def get_owned_product(actor, product_id: str) -> Product:
    """Product that ``actor`` may manage: their own, or any for an admin."""
    product = get_product(product_id)
    if actor.role != ROLE_ADMIN and product.sub_admin_id != actor.id:
        raise AuthorizationError("Not authorized to manage this product")
    return product


def create_product(vendor, **fields) -> Product:
    stock = int(fields.pop("stock_quantity", 0))
    product = Product(
        sub_admin_id=vendor.id,
        stock_quantity=stock,
        available_quantity=stock,
        **fields,
    )
    db.session.add(product)
    db.session.flush()
    logger.info("Vendor %s listed product %s", vendor.id, product.id)
    return product


def update_product(actor, product_id: str, changes: dict) -> Product:
    product = get_owned_product(actor, product_id)
    for name in _EDITABLE_FIELDS:
        if changes.get(name) is not None:
            setattr(product, name, changes[name])
    db.session.flush()
    if changes.get("stock_quantity") is not None:
        set_stock_quantity(product.id, changes["stock_quantity"])
    return product


def delete_product(actor, product_id: str) -> None:
    product = get_owned_product(actor, product_id)
    db.session.delete(product)
    logger.info("Product %s deleted by %s", product_id, actor.id)


__all__ = [
    "list_products",
    "list_vendor_products",
    "get_product",
    "get_owned_product",
    "create_product",
    "update_product",
    "delete_product",
]
