# routes/audit.py
from flask import Blueprint, request
from dao import audit as audit_dao
from db.models.user import UserRole
from utils.auth import roles_required
from utils.http import ok

audit_bp = Blueprint("audit_api", __name__, url_prefix="/api/audit-logs")


@audit_bp.route("", methods=["GET"])
@roles_required(UserRole.ADMIN)
def audit_log_list():
    logs = audit_dao.list_logs(
        resource=request.args.get("resource"),
        resource_id=request.args.get("resource_id") or None,
        action=request.args.get("action"),
    )
    return ok([entry.to_dict() for entry in logs])
