import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from flask import current_app
from opentelemetry import trace
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.order import Order, OrderStatusLog, CheckoutAttempt
from models.product import Product
from app.metrics import CHECKOUT_FAILURE_COUNTER, ORDERS_PLACED_COUNTER
from app.services.cart_store import CartStore
from app.services.errors import (
    DuplicateCheckoutError,
    PartialCheckoutFailure,
    StyleSwapError,
    ValidationError,
)
from app.services.lifecycle import OrderStatus
from app.services.pricing import coupon_discount, coupon_percent
from app.services.stock import adjust_availability

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_PAYMENT_METHOD = "Cash on Delivery"


@dataclass
class CheckoutResult:
    checkout_id: str
    orders: List[Order] = field(default_factory=list)
    discount_total: float = 0.0
    replayed: bool = False


def _replay(customer_id: str, idempotency_key: str) -> Optional[CheckoutResult]:
    attempt = CheckoutAttempt.query.filter_by(customer_id=customer_id, idempotency_key=idempotency_key).first()
    if attempt is None:
        return None
    orders = Order.query.filter(Order.id.in_(attempt.order_ids or [])).order_by(Order.order_date).all()
    # keep the placement order recorded on the attempt
    position = {oid: i for i, oid in enumerate(attempt.order_ids or [])}
    orders.sort(key=lambda o: position.get(o.id, 0))
    return CheckoutResult(
        checkout_id=attempt.checkout_id,
        orders=orders,
        discount_total=sum(o.discount_amount or 0.0 for o in orders),
        replayed=True,
    )


def _validate(cart: CartStore, payment_method: str, payment_methods, coupon_code, coupons) -> None:
    items = cart.items
    if not items:
        raise ValidationError("Cart is empty")
    problems = cart.checkout_problems()
    if problems:
        raise ValidationError(
            "Some cart items have invalid rental dates or quantity: " + ", ".join(problems)
        )
    if payment_method not in payment_methods:
        raise ValidationError(f"Unsupported payment method: {payment_method}")
    coupon_percent(coupon_code, coupons)
    product_ids = {item.product_id for item in items}
    found = {pid for (pid,) in db.session.query(Product.id).filter(Product.id.in_(product_ids)).all()}
    missing = product_ids - found
    if missing:
        raise ValidationError("Some products are no longer available: " + ", ".join(sorted(missing)))


def place_checkout(customer, cart: CartStore, payment_method: str = None, coupon_code: str = None,
                   idempotency_key: str = None) -> CheckoutResult:
    """
    Turn the customer's cart into one Active order per vendor.

    Orders, stock decrements and the idempotency record are staged in the
    caller's transaction; any failure while staging raises
    PartialCheckoutFailure and the caller rolls everything back. The cart is
    only read here; the caller clears it once the transaction has committed.
    A repeated
    ``idempotency_key`` returns the orders placed the first time. Does NOT
    commit.
    """
    cfg = current_app.config
    payment_method = payment_method or DEFAULT_PAYMENT_METHOD

    with tracer.start_as_current_span("checkout") as span:
        span.set_attribute("styleswap.customer_id", customer.id)
        if idempotency_key:
            replay = _replay(customer.id, idempotency_key)
            if replay is not None:
                logger.info("Checkout %s replayed for customer %s", replay.checkout_id, customer.id)
                span.set_attribute("styleswap.replayed", True)
                return replay

        coupons = cfg.get("COUPONS", {})
        _validate(cart, payment_method, cfg.get("PAYMENT_METHODS", [DEFAULT_PAYMENT_METHOD]), coupon_code, coupons)
        groups = cart.group_by_vendor()

        checkout_id = uuid.uuid4().hex
        order_date = datetime.utcnow()
        span.set_attribute("styleswap.checkout_id", checkout_id)
        span.set_attribute("styleswap.vendor_groups", len(groups))

        attempt = None
        if idempotency_key:
            attempt = CheckoutAttempt(
                checkout_id=checkout_id,
                customer_id=customer.id,
                idempotency_key=idempotency_key,
                order_ids=[],
            )
            db.session.add(attempt)
            try:
                db.session.flush()
            except IntegrityError:
                raise DuplicateCheckoutError("A checkout with this idempotency key is already in progress")

        result = CheckoutResult(checkout_id=checkout_id)
        for vendor_id, group in groups.items():
            items = group["items"]
            try:
                rental_fees = sum(item.subtotal for item in items)
                deposits = sum(item.deposit_total for item in items)
                discount = coupon_discount(coupon_code, rental_fees, coupons)
                first = items[0]
                order = Order(
                    checkout_id=checkout_id,
                    customer_id=customer.id,
                    customer_name=getattr(customer, "name", None),
                    vendor_id=vendor_id,
                    shop_name=group["shop_name"],
                    items=[item.snapshot() for item in items],
                    total_amount=rental_fees + deposits - discount,
                    discount_amount=discount,
                    rental_start_date=first.rental_start_date,
                    rental_end_date=first.rental_end_date,
                    payment_method=payment_method,
                    status=OrderStatus.ACTIVE.value,
                    issues=[],
                    order_date=order_date,
                )
                db.session.add(order)
                db.session.flush()
                db.session.add(
                    OrderStatusLog(order_id=order.id, status=order.status, updated_by=customer.id)
                )
                for item in items:
                    adjust_availability(item.product_id, -item.quantity)
            except (StyleSwapError, SQLAlchemyError) as exc:
                CHECKOUT_FAILURE_COUNTER.inc()
                logger.error(
                    "Checkout %s failed for vendor %s after %s staged order(s): %s",
                    checkout_id, vendor_id, len(result.orders), exc,
                )
                raise PartialCheckoutFailure(vendor_id, len(result.orders), exc) from exc
            result.orders.append(order)
            result.discount_total += discount

        if attempt is not None:
            attempt.order_ids = [o.id for o in result.orders]
        db.session.flush()

        ORDERS_PLACED_COUNTER.inc(len(result.orders))
        logger.info(
            "Checkout %s placed %s order(s) for customer %s",
            checkout_id, len(result.orders), customer.id,
        )
        return result


__all__ = ["CheckoutResult", "place_checkout", "DEFAULT_PAYMENT_METHOD"]
