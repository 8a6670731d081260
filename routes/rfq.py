# routes/rfq.py
from flask import Blueprint, request
from flask_login import login_required, current_user
from dao import rfq as rfq_dao, quote as quote_dao
from utils.auth import roles_required, MANAGER_ROLES
from utils.errors import NotFoundError
from utils.http import ok, json_body

rfq_bp = Blueprint("rfq_api", __name__, url_prefix="/api")


@rfq_bp.route("/rfqs", methods=["GET"])
@login_required
def rfq_list():
    rfqs = rfq_dao.list_rfqs(status=request.args.get("status"))
    return ok([r.to_dict() for r in rfqs])


@rfq_bp.route("/rfqs", methods=["POST"])
@roles_required(*MANAGER_ROLES)
def rfq_add():
    body = json_body()
    r = rfq_dao.create_rfq(
        body.get("title", ""),
        description=body.get("description"),
        currency=body.get("currency") or "USD",
        delivery_location=body.get("delivery_location"),
        delivery_date=body.get("delivery_date"),
        response_deadline=body.get("response_deadline"),
        user_id=current_user.id,
    )
    return ok(r.to_dict(), "RFQ created", 201)


@rfq_bp.route("/rfqs/<int:rfq_id>", methods=["GET"])
@login_required
def rfq_detail(rfq_id: int):
    return ok(_get_or_404(rfq_id).to_dict())


@rfq_bp.route("/rfqs/<int:rfq_id>/send", methods=["POST"])
@roles_required(*MANAGER_ROLES)
def rfq_send(rfq_id: int):
    _get_or_404(rfq_id)
    r = rfq_dao.send_rfq(rfq_id, user_id=current_user.id)
    return ok(r.to_dict(), "RFQ sent")


@rfq_bp.route("/rfqs/<int:rfq_id>/cancel", methods=["POST"])
@roles_required(*MANAGER_ROLES)
def rfq_cancel(rfq_id: int):
    _get_or_404(rfq_id)
    body = json_body()
    r = rfq_dao.cancel_rfq(rfq_id, body.get("reason", ""), user_id=current_user.id)
    return ok(r.to_dict(), "RFQ cancelled")


# -------- quotes --------
@rfq_bp.route("/rfqs/<int:rfq_id>/quotes", methods=["GET"])
@login_required
def quote_list(rfq_id: int):
    _get_or_404(rfq_id)
    quotes = quote_dao.list_quotes_for_rfq(rfq_id, status=request.args.get("status"))
    return ok([q.to_dict() for q in quotes])


@rfq_bp.route("/rfqs/<int:rfq_id>/quotes", methods=["POST"])
@roles_required(*MANAGER_ROLES)
def quote_add(rfq_id: int):
    _get_or_404(rfq_id)
    body = json_body()
    q = quote_dao.submit_quote(
        rfq_id,
        body.get("vendor_id"),
        total_amount=body.get("total_amount"),
        currency=body.get("currency"),
        delivery_date=body.get("delivery_date"),
        notes=body.get("notes"),
        line_items=body.get("line_items"),
        user_id=current_user.id,
    )
    return ok(q.to_dict(), "Quote submitted", 201)


@rfq_bp.route("/quotes/<int:quote_id>", methods=["GET"])
@login_required
def quote_detail(quote_id: int):
    q = quote_dao.get_quote(quote_id)
    if not q:
        raise NotFoundError("Quote not found", code="QUOTE_NOT_FOUND")
    return ok(q.to_dict())


def _get_or_404(rfq_id: int):
    r = rfq_dao.get_rfq(rfq_id)
    if not r:
        raise NotFoundError("RFQ not found", code="RFQ_NOT_FOUND")
    return r
