# routes/auth.py
import logging
from flask import Blueprint
from flask_login import login_user, logout_user, current_user, login_required
from werkzeug.security import check_password_hash
from configs import db
from dao import audit as audit_dao
from db.models.audit_log import AuditAction
from db.models.user import User
from utils.errors import AppError
from utils.http import ok, json_body

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    body = json_body()
    username = (body.get("username") or "").strip()
    password = body.get("password") or ""
    user = User.query.filter_by(username=username).first()

    if not user or not check_password_hash(user.password_hash, password):
        logger.warning("Failed login for %r", username)
        raise AppError("Invalid username or password", 401, "INVALID_CREDENTIALS")

    if not user.is_active:
        raise AppError("Account is disabled", 403, "ACCOUNT_DISABLED")

    login_user(user, remember=True)
    audit_dao.log(AuditAction.LOGIN, "user", user.id, user_id=user.id)
    db.session.commit()
    return ok(user.to_dict(), "Logged in")


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    audit_dao.log(AuditAction.LOGOUT, "user", current_user.id, user_id=current_user.id)
    db.session.commit()
    logout_user()
    return ok(None, "Logged out")


@auth_bp.route("/me")
@login_required
def me():
    return ok(current_user.to_dict())
