import uuid
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, JSON
from models import BIGINT
from models import db
from datetime import datetime


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_vendor_status", "vendor_id", "status"),
    )
    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    checkout_id = Column(String(32), nullable=False, index=True)
    customer_id = Column(String(32), ForeignKey("user.id"), nullable=False, index=True)
    customer_name = Column(String(100), nullable=True)
    vendor_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    shop_name = Column(String(100), nullable=True)

    # Snapshot of the cart lines at checkout time; never re-synced from products
    items = Column(JSON, nullable=False, default=list)

    total_amount = Column(Float, nullable=False)
    discount_amount = Column(Float, nullable=False, default=0.0)
    rental_start_date = Column(String(32), nullable=True)
    rental_end_date = Column(String(32), nullable=True)
    payment_method = Column(String(30), nullable=False, default="Cash on Delivery")
    status = Column(String(20), nullable=False, default="Active")  # see app.services.lifecycle.OrderStatus

    feedback = Column(JSON, nullable=True)
    issues = Column(JSON, nullable=False, default=list)

    order_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    status_logs = db.relationship("OrderStatusLog", backref="order", lazy=True, order_by="OrderStatusLog.id")

    def to_dict(self, effective_status=None):
        return {
            "id": self.id,
            "checkout_id": self.checkout_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "vendor_id": self.vendor_id,
            "shop_name": self.shop_name,
            "items": self.items or [],
            "total_amount": self.total_amount,
            "discount_amount": self.discount_amount or 0.0,
            "rental_start_date": self.rental_start_date,
            "rental_end_date": self.rental_end_date,
            "payment_method": self.payment_method,
            "status": self.status,
            "effective_status": effective_status or self.status,
            "feedback": self.feedback,
            "issues": self.issues or [],
            "order_date": self.order_date.isoformat() if self.order_date else None,
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(String(32), ForeignKey("order.id"), nullable=False, index=True)
    from_status = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False)
    updated_by = Column(String(32), nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "from_status": self.from_status,
            "status": self.status,
            "updated_by": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class CheckoutAttempt(db.Model):
    """One row per (customer, idempotency key); written in the checkout transaction."""

    __tablename__ = "checkout_attempt"
    __table_args__ = (
        db.UniqueConstraint("customer_id", "idempotency_key", name="uq_checkout_attempt_key"),
    )
    id = Column(BIGINT, primary_key=True)
    checkout_id = Column(String(32), nullable=False, unique=True)
    customer_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    idempotency_key = Column(String(100), nullable=False)
    order_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
