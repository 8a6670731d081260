# db/models/audit_log.py
from configs import db
from utils.dates import utcnow
import enum


class AuditAction(enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    VIEW = "VIEW"
    EXPORT = "EXPORT"


class AuditLog(db.Model):
    __tablename__ = "audit_log"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    action = db.Column(db.Enum(AuditAction, name="auditaction"), nullable=False)
    resource = db.Column(db.String(80), nullable=False)
    resource_id = db.Column(db.String(80))

    old_values = db.Column(db.JSON)
    new_values = db.Column(db.JSON)
    # "metadata" is reserved on declarative classes
    meta = db.Column("metadata", db.JSON)

    severity = db.Column(db.String(20), nullable=False)
    category = db.Column(db.String(40), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "action": self.action.value,
            "resource": self.resource,
            "resource_id": self.resource_id,
            "old_values": self.old_values,
            "new_values": self.new_values,
            "metadata": self.meta,
            "severity": self.severity,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
