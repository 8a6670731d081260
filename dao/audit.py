# dao/audit.py
import logging
from typing import List, Optional

from configs import db
from db.models.audit_log import AuditLog, AuditAction

logger = logging.getLogger(__name__)

_SEVERITY_BY_ACTION = {
    AuditAction.DELETE: "CRITICAL",
    AuditAction.LOGIN: "HIGH",
    AuditAction.EXPORT: "HIGH",
    AuditAction.CREATE: "MEDIUM",
    AuditAction.UPDATE: "MEDIUM",
    AuditAction.APPROVE: "MEDIUM",
}

_CATEGORY_BY_ACTION = {
    AuditAction.LOGIN: "AUTHENTICATION",
    AuditAction.LOGOUT: "AUTHENTICATION",
    AuditAction.VIEW: "DATA_ACCESS",
    AuditAction.EXPORT: "DATA_ACCESS",
    AuditAction.CREATE: "DATA_MODIFICATION",
    AuditAction.UPDATE: "DATA_MODIFICATION",
    AuditAction.DELETE: "DATA_MODIFICATION",
}


def determine_severity(action: AuditAction) -> str:
    return _SEVERITY_BY_ACTION.get(action, "LOW")


def categorize_action(action: AuditAction) -> str:
    return _CATEGORY_BY_ACTION.get(action, "SYSTEM")


def log(
    action: AuditAction,
    resource: str,
    resource_id=None,
    *,
    user_id: Optional[int] = None,
    old_values: Optional[dict] = None,
    new_values: Optional[dict] = None,
    metadata: Optional[dict] = None,
    severity: Optional[str] = None,
    category: Optional[str] = None,
) -> AuditLog:
    """Add an audit entry to the current session.

    The caller commits, so the entry lands in the same transaction as the
    change it records.
    """
    entry = AuditLog(
        user_id=user_id,
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        old_values=old_values,
        new_values=new_values,
        meta=metadata,
        severity=severity or determine_severity(action),
        category=category or categorize_action(action),
    )
    db.session.add(entry)
    logger.info(
        "audit %s %s/%s by user=%s", action.value, resource, entry.resource_id, user_id
    )
    return entry


def _to_action(value) -> Optional[AuditAction]:
    if value is None or isinstance(value, AuditAction):
        return value
    value = str(value).strip().upper()
    if not value:
        return None
    try:
        return AuditAction[value]
    except KeyError:
        raise ValueError(f"Unknown audit action '{value}'.")


def list_logs(
    resource: Optional[str] = None,
    resource_id=None,
    action=None,
) -> List[AuditLog]:
    action = _to_action(action)
    q = AuditLog.query
    if resource:
        q = q.filter(AuditLog.resource == resource)
    if resource_id is not None:
        q = q.filter(AuditLog.resource_id == str(resource_id))
    if action is not None:
        q = q.filter(AuditLog.action == action)
    return q.order_by(AuditLog.id.asc()).all()
