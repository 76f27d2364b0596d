# --- models/product.py ---
import uuid
from models import db
from datetime import datetime


class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.CheckConstraint("available_quantity >= 0", name="ck_product_available_floor"),
        db.CheckConstraint("available_quantity <= stock_quantity", name="ck_product_available_ceiling"),
    )

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    sub_admin_id = db.Column(db.String(32), db.ForeignKey("user.id"), nullable=False, index=True)

    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)

    # Pricing
    price_per_day = db.Column(db.Float, nullable=False)
    security_deposit = db.Column(db.Float, nullable=False, default=0.0)

    # Inventory; available_quantity is only written through app.services.stock
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    available_quantity = db.Column(db.Integer, nullable=False, default=0)

    sizes = db.Column(db.JSON, nullable=False, default=list)
    images = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def shop_name(self):
        return self.vendor.shop_name if self.vendor else None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "price_per_day": self.price_per_day,
            "security_deposit": self.security_deposit,
            "stock_quantity": self.stock_quantity,
            "available_quantity": self.available_quantity,
            "sizes": self.sizes or [],
            "images": self.images or [],
            "sub_admin_id": self.sub_admin_id,
            "shop_name": self.shop_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
