from datetime import datetime
from runlab.models.db import db


class User(db.Model):
    """Entitlement record for a signed-in user."""
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(255), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    is_pro = db.Column(db.Boolean, nullable=False, default=False)
    pro_since = db.Column(db.DateTime)
    lemon_squeezy_customer_id = db.Column(db.String(255))
    lemon_squeezy_order_id = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.name,
            "is_pro": self.is_pro,
            "pro_since": self.pro_since.isoformat() if self.pro_since else None,
        }
