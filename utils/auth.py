# utils/auth.py
from functools import wraps
from flask import abort
from flask_login import current_user

from db.models.user import UserRole

# role groups used by the quote comparison endpoints
BUYER_ROLES = (
    UserRole.PROCUREMENT_MANAGER,
    UserRole.SUPERINTENDENT,
    UserRole.ADMIN,
)
REPORT_ROLES = BUYER_ROLES + (UserRole.FINANCE_TEAM,)
MANAGER_ROLES = (UserRole.PROCUREMENT_MANAGER, UserRole.ADMIN)


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                abort(403)
            return fn(*a, **kw)

        return inner

    return deco
