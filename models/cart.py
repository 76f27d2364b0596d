from models import db
from datetime import datetime


class CartSnapshot(db.Model):
    """Persisted cart document for one user, written by DatabaseCartStorage."""

    __tablename__ = "cart_snapshot"

    user_id = db.Column(db.String(32), db.ForeignKey("user.id"), primary_key=True)
    items = db.Column(db.JSON, nullable=False, default=list)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
