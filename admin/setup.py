# admin/setup.py
from flask import abort, redirect, url_for
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from configs import db
from db.models.user import UserRole


def _check_admin():
    # 401 when anonymous, 403 when logged in without the ADMIN role
    if not current_user.is_authenticated:
        abort(401)
    if not current_user.has_role(UserRole.ADMIN):
        abort(403)


class ProcurementAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        _check_admin()
        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
        return redirect(url_for("main.home"))

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        _check_admin()


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        _check_admin()


class UserView(SecureModelView):
    column_list = ["id", "username", "full_name", "role", "is_active"]
    column_exclude_list = ["password_hash"]
    form_excluded_columns = ["password_hash"]


class VendorView(SecureModelView):
    column_searchable_list = ["code", "name"]
    column_filters = ["country", "is_active", "quality_rating"]
    column_list = ["id", "code", "name", "country", "quality_rating", "is_active"]


class RFQView(SecureModelView):
    column_searchable_list = ["rfq_number", "title"]
    column_filters = ["status", "delivery_date"]
    column_list = [
        "id",
        "rfq_number",
        "title",
        "delivery_location",
        "delivery_date",
        "status",
    ]
    form_excluded_columns = ["quotes"]


class QuoteView(SecureModelView):
    # scores come from the comparison run, status from the award
    can_create = False
    column_filters = ["status", "rfq_id", "vendor_id"]
    column_default_sort = ("total_score", True)
    column_list = [
        "id",
        "rfq",
        "vendor",
        "total_amount",
        "currency",
        "delivery_date",
        "status",
        "total_score",
    ]
    form_columns = ["notes"]


class AuditLogView(SecureModelView):
    can_create = False
    can_edit = False
    can_delete = False
    column_default_sort = ("created_at", True)
    column_filters = ["action", "resource", "severity", "category"]
    column_list = [
        "created_at",
        "user",
        "action",
        "resource",
        "resource_id",
        "severity",
        "category",
    ]


def init_admin(app):

    admin = Admin(
        app,
        name="Procurement Admin",
        index_view=ProcurementAdminIndex(url="/manage"),
        url="/manage",
    )
    # models imported here to avoid circular imports
    from db.models.user import User
    from db.models.vendor import Vendor, VendorServiceArea, VendorPortCapability
    from db.models.rfq import RFQ
    from db.models.quote import Quote
    from db.models.audit_log import AuditLog

    admin.add_view(
        UserView(User, db.session, category="System", endpoint="admin_user", name="Users")
    )
    admin.add_view(
        AuditLogView(
            AuditLog,
            db.session,
            category="System",
            endpoint="admin_audit_log",
            name="Audit Log",
        )
    )
    admin.add_view(
        VendorView(
            Vendor, db.session, category="Vendors", endpoint="admin_vendor", name="Vendors"
        )
    )
    admin.add_view(
        SecureModelView(
            VendorServiceArea,
            db.session,
            category="Vendors",
            endpoint="admin_service_area",
            name="Service Areas",
        )
    )
    admin.add_view(
        SecureModelView(
            VendorPortCapability,
            db.session,
            category="Vendors",
            endpoint="admin_port_capability",
            name="Port Capabilities",
        )
    )
    admin.add_view(
        RFQView(RFQ, db.session, category="Sourcing", endpoint="admin_rfq", name="RFQs")
    )
    admin.add_view(
        QuoteView(
            Quote, db.session, category="Sourcing", endpoint="admin_quote", name="Quotes"
        )
    )
    admin.add_link(
        MenuLink(
            name="Logout",
            category="System",
            endpoint="admin.admin_logout",
        )
    )
    return admin
