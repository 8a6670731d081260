# routes/vendor.py
from flask import Blueprint, request
from flask_login import login_required, current_user
from dao import vendor as vendor_dao
from utils.auth import roles_required, MANAGER_ROLES
from utils.errors import NotFoundError
from utils.http import ok, json_body

vendor_bp = Blueprint("vendor_api", __name__, url_prefix="/api/vendors")


@vendor_bp.route("", methods=["GET"])
@login_required
def vendor_list():
    active_only = request.args.get("include_inactive", "").lower() not in ("1", "true")
    vendors = vendor_dao.list_vendors(active_only=active_only)
    return ok([v.to_dict() for v in vendors])


@vendor_bp.route("", methods=["POST"])
@roles_required(*MANAGER_ROLES)
def vendor_add():
    body = json_body()
    v = vendor_dao.create_vendor(
        code=body.get("code", ""),
        name=body.get("name", ""),
        email=body.get("email"),
        phone=body.get("phone"),
        country=body.get("country"),
        quality_rating=body.get("quality_rating"),
        service_areas=body.get("service_areas"),
        port_capabilities=body.get("port_capabilities"),
        user_id=current_user.id,
    )
    return ok(v.to_dict(), "Vendor created", 201)


@vendor_bp.route("/<int:vendor_id>", methods=["GET"])
@login_required
def vendor_detail(vendor_id: int):
    v = vendor_dao.get_vendor(vendor_id)
    if not v:
        raise NotFoundError("Vendor not found", code="VENDOR_NOT_FOUND")
    return ok(v.to_dict())


@vendor_bp.route("/<int:vendor_id>/performance", methods=["PUT"])
@roles_required(*MANAGER_ROLES)
def vendor_performance(vendor_id: int):
    body = json_body()
    v = vendor_dao.update_vendor_performance(
        vendor_id, body.get("quality_rating"), user_id=current_user.id
    )
    if not v:
        raise NotFoundError("Vendor not found", code="VENDOR_NOT_FOUND")
    return ok(v.to_dict(), "Vendor performance updated")
