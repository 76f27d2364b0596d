# --- models/user.py ---
import uuid
from models import db
from datetime import datetime


ROLE_CUSTOMER = "customer"
ROLE_VENDOR = "vendor"
ROLE_ADMIN = "admin"
ROLES = (ROLE_CUSTOMER, ROLE_VENDOR, ROLE_ADMIN)


def _new_id():
    return uuid.uuid4().hex


class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_CUSTOMER)

    # Vendor (sub-admin) shop details
    shop_name = db.Column(db.String(100), nullable=True)
    shop_address = db.Column(db.String(255), nullable=True)
    mobile_number = db.Column(db.String(15), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    products = db.relationship("Product", backref="vendor", lazy=True)

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "shop_name": self.shop_name,
        }

    def profile(self):
        data = self.to_dict()
        data.update({
            "shop_address": self.shop_address,
            "mobile_number": self.mobile_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        })
        return data
