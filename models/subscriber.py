import uuid
from models import db
from datetime import datetime


class Subscriber(db.Model):
    """Marketing newsletter sign-up."""

    __tablename__ = "subscriber"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    email = db.Column(db.String(255), unique=True, nullable=False)
    subscribed_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "subscribed_at": self.subscribed_at.isoformat() if self.subscribed_at else None,
        }
