from datetime import datetime
from runlab.models.db import db


class Snippet(db.Model):
    __tablename__ = "snippets"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    user_name = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    language = db.Column(db.String(20), nullable=False)
    code = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    stars = db.relationship("Star", backref="snippet", lazy=True, cascade="all, delete-orphan")


class Star(db.Model):
    __tablename__ = "stars"
    __table_args__ = (
        db.UniqueConstraint("user_id", "snippet_id", name="uq_stars_user_snippet"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    snippet_id = db.Column(db.Integer, db.ForeignKey("snippets.id"), nullable=False, index=True)
