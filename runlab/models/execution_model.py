from datetime import datetime
from runlab.models.db import db


class CodeExecution(db.Model):
    __tablename__ = "code_executions"
    __table_args__ = (
        db.Index("ix_code_executions_user_created", "user_id", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    language = db.Column(db.String(20), nullable=False)
    code = db.Column(db.Text, nullable=False)
    output = db.Column(db.Text)
    error = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "language": self.language,
            "code": self.code,
            "output": self.output,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
        }
