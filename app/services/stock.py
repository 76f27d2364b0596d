import logging
from sqlalchemy import case, update, select

from models import db
from models.product import Product
from app.metrics import STOCK_CLAMP_COUNTER
from app.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def apply_delta(available: int, stock: int, delta: int) -> int:
    """Clamp ``available + delta`` into ``[0, stock]``."""
    return max(0, min(stock, available + delta))


def _clamped(expr, ceiling):
    return case(
        (expr < 0, 0),
        (expr > ceiling, ceiling),
        else_=expr,
    )


def adjust_availability(product_id: str, delta: int) -> int:
    """
    Apply ``delta`` to a product's available quantity and return the new value.

    The clamp is evaluated by the database inside a single UPDATE, so
    concurrent checkouts cannot lose each other's decrements. Does NOT commit.
    """
    try:
        delta = int(delta)
    except (TypeError, ValueError):
        raise ValidationError("delta must be an integer")

    before = db.session.execute(
        select(Product.available_quantity, Product.stock_quantity).where(Product.id == product_id)
    ).first()
    if before is None:
        raise NotFoundError("Product not found")

    result = db.session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(available_quantity=_clamped(Product.available_quantity + delta, Product.stock_quantity))
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFoundError("Product not found")

    new_available = db.session.execute(
        select(Product.available_quantity).where(Product.id == product_id)
    ).scalar_one()

    expected = before.available_quantity + delta
    if new_available != expected:
        STOCK_CLAMP_COUNTER.labels("floor" if expected < new_available else "ceiling").inc()
        logger.warning(
            "Availability for product %s clamped to %s (requested delta %s)",
            product_id, new_available, delta,
        )
    return new_available


def set_stock_quantity(product_id: str, stock_quantity: int) -> int:
    """Change total stock, keeping the available quantity inside the new bounds."""
    try:
        stock_quantity = int(stock_quantity)
    except (TypeError, ValueError):
        raise ValidationError("stock_quantity must be an integer")
    if stock_quantity < 0:
        raise ValidationError("stock_quantity must be zero or more")
    result = db.session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            stock_quantity=stock_quantity,
            available_quantity=_clamped(Product.available_quantity, stock_quantity),
        )
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFoundError("Product not found")
    return db.session.execute(
        select(Product.available_quantity).where(Product.id == product_id)
    ).scalar_one()


__all__ = ["apply_delta", "adjust_availability", "set_stock_quantity"]
