"""Order status machine plus the feedback and issue sub-flows of an order.

None of these functions commit; routes wrap them in ``transactional``.
"""
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from models import db
from models.order import Order, OrderStatusLog
from models.user import ROLE_ADMIN
from app.services.errors import (
    AuthorizationError,
    IllegalTransitionError,
    NotFoundError,
    ValidationError,
)
from app.services.pricing import parse_date
from app.services.stock import adjust_availability

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    ACTIVE = "Active"
    PENDING_RETURN = "Pending Return"
    OVERDUE = "Overdue"
    RETURNED = "Returned"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown order status: {value}")


TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.ACTIVE: frozenset({
        OrderStatus.PENDING_RETURN,
        OrderStatus.OVERDUE,
        OrderStatus.RETURNED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.PENDING_RETURN: frozenset({OrderStatus.RETURNED, OrderStatus.OVERDUE}),
    OrderStatus.OVERDUE: frozenset({OrderStatus.RETURNED}),
    OrderStatus.RETURNED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Entering one of these puts the rented quantity back on the shelf
RESTOCK_STATUSES = frozenset({OrderStatus.RETURNED, OrderStatus.CANCELLED})

ISSUE_STATUSES = ("Open", "In Progress", "Resolved", "Rejected")


def can_transition(current, target) -> bool:
    return OrderStatus(target) in TRANSITIONS.get(OrderStatus(current), frozenset())


def effective_status(order: Order, now: Optional[datetime] = None) -> str:
    """Persisted status, except an unreturned rental past its end date reads as Overdue."""
    now = now or datetime.utcnow()
    if order.status in (OrderStatus.ACTIVE.value, OrderStatus.PENDING_RETURN.value):
        end = parse_date(order.rental_end_date)
        if end is not None and now > end:
            return OrderStatus.OVERDUE.value
    return order.status


def serialize(order: Order, now: Optional[datetime] = None) -> dict:
    return order.to_dict(effective_status=effective_status(order, now))


def _is_admin(actor) -> bool:
    return getattr(actor, "role", None) == ROLE_ADMIN


def is_party(actor, order: Order) -> bool:
    return _is_admin(actor) or actor.id in (order.customer_id, order.vendor_id)


def get_order(order_id: str) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def get_order_for(actor, order_id: str) -> Order:
    order = get_order(order_id)
    if not is_party(actor, order):
        raise AuthorizationError("Forbidden")
    return order


def update_status(actor, order_id: str, new_status) -> Order:
    order = get_order(order_id)
    if not is_party(actor, order):
        raise AuthorizationError("Forbidden")
    target = OrderStatus.parse(new_status)
    current = OrderStatus.parse(order.status)
    if not can_transition(current, target):
        raise IllegalTransitionError(current.value, target.value)

    order.status = target.value
    db.session.add(
        OrderStatusLog(order_id=order.id, from_status=current.value, status=target.value, updated_by=actor.id)
    )
    if target in RESTOCK_STATUSES:
        _restock(order)
    logger.info("Order %s moved %s -> %s by %s", order.id, current.value, target.value, actor.id)
    return order


def _restock(order: Order) -> None:
    for item in order.items or []:
        try:
            adjust_availability(item["product_id"], int(item.get("quantity", 0)))
        except NotFoundError:
            logger.warning("Order %s: product %s no longer exists, skipping restock", order.id, item.get("product_id"))


def submit_feedback(actor, order_id: str, rating, review: str = "", tags=None,
                    item_index=None, item_name=None) -> Order:
    order = get_order(order_id)
    if order.customer_id != actor.id:
        raise AuthorizationError("Forbidden")
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be between 1 and 5")
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")

    # last write wins
    order.feedback = {
        "rating": rating,
        "review": review or "",
        "tags": list(tags or []),
        "item_index": item_index,
        "item_name": item_name,
        "submitted_at": datetime.utcnow().isoformat(),
    }
    return order


def raise_issue(actor, order_id: str, type: str, description: str = "",
                item_index=None, item_name=None) -> Order:
    order = get_order(order_id)
    if order.customer_id != actor.id:
        raise AuthorizationError("Forbidden")
    if not type:
        raise ValidationError("Issue type required")

    issue = {
        "issue_id": f"issue-{uuid.uuid4().hex[:12]}",
        "type": type,
        "description": description or "",
        "item_index": item_index,
        "item_name": item_name,
        "status": "Open",
        "raised_at": datetime.utcnow().isoformat(),
        "admin_response": None,
    }
    # reassign a new list so the JSON column is flagged dirty
    order.issues = list(order.issues or []) + [issue]
    return order


def resolve_issue(actor, order_id: str, issue_id: str, status: str, admin_response: str = None) -> Order:
    if not _is_admin(actor):
        raise AuthorizationError("Admin access required")
    if status not in ISSUE_STATUSES:
        raise ValidationError(f"Unknown issue status: {status}")
    order = get_order(order_id)
    issues = [dict(issue) for issue in (order.issues or [])]
    for issue in issues:
        if issue.get("issue_id") == issue_id:
            issue["status"] = status
            issue["admin_response"] = admin_response or None
            break
    else:
        raise NotFoundError("Issue not found")
    order.issues = issues
    return order


def list_all_orders():
    return Order.query.order_by(Order.order_date.desc()).all()


def list_customer_orders(customer_id: str):
    return Order.query.filter_by(customer_id=customer_id).order_by(Order.order_date.desc()).all()


def list_vendor_orders(vendor_id: str):
    return Order.query.filter_by(vendor_id=vendor_id).order_by(Order.order_date.desc()).all()


__all__ = [
    "OrderStatus",
    "TRANSITIONS",
    "ISSUE_STATUSES",
    "can_transition",
    "effective_status",
    "serialize",
    "get_order",
    "get_order_for",
    "update_status",
    "submit_feedback",
    "raise_issue",
    "resolve_issue",
    "list_all_orders",
    "list_customer_orders",
    "list_vendor_orders",
]
