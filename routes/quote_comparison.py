# routes/quote_comparison.py
from flask import Blueprint, request
from flask_login import current_user
from dao import quote_comparison as comparison_dao
from utils.auth import roles_required, BUYER_ROLES, REPORT_ROLES, MANAGER_ROLES
from utils.errors import NotFoundError
from utils.http import ok, json_body, id_list

comparison_bp = Blueprint("quote_comparison", __name__, url_prefix="/api/quote-comparison")


@comparison_bp.route("/<int:rfq_id>/score", methods=["POST"])
@roles_required(*BUYER_ROLES)
def score_quotes(rfq_id: int):
    body = json_body()
    report = comparison_dao.score_and_compare_quotes(rfq_id, body.get("scoring_weights"))
    return ok(report.to_dict(), "Quotes scored and compared successfully")


@comparison_bp.route("/<int:rfq_id>/report", methods=["GET"])
@roles_required(*REPORT_ROLES)
def comparison_report(rfq_id: int):
    report = comparison_dao.get_comparison_report(rfq_id)
    if report is None:
        raise NotFoundError(
            "No quote comparison data available for this RFQ", code="NO_COMPARISON_DATA"
        )
    return ok(report.to_dict(), "Quote comparison report retrieved successfully")


@comparison_bp.route("/<int:rfq_id>/recommendation", methods=["GET"])
@roles_required(*BUYER_ROLES)
def vendor_recommendation(rfq_id: int):
    rec = comparison_dao.get_vendor_recommendation(rfq_id)
    return ok(rec.to_dict(), "Vendor recommendation retrieved successfully")


@comparison_bp.route("/<int:rfq_id>/side-by-side", methods=["GET"])
@roles_required(*REPORT_ROLES)
def side_by_side(rfq_id: int):
    report = comparison_dao.get_side_by_side(rfq_id, id_list(request.args.get("quote_ids")))
    data = {
        "rfq_id": report.rfq_id,
        "rfq_title": report.rfq_title,
        "quotes": [r.to_dict() for r in report.scored_quotes],
        "comparison_matrix": report.comparison_matrix,
        "scoring_criteria": report.weights.to_dict(),
    }
    return ok(data, "Side-by-side comparison retrieved successfully")


@comparison_bp.route("/<int:rfq_id>/weights", methods=["PUT"])
@roles_required(*MANAGER_ROLES)
def update_weights(rfq_id: int):
    body = json_body()
    report = comparison_dao.update_scoring_weights(rfq_id, body.get("weights"))
    return ok(report.to_dict(), "Scoring weights updated and quotes re-scored successfully")


@comparison_bp.route("/quotes/<int:quote_id>/approve", methods=["POST"])
@roles_required(*BUYER_ROLES)
def approve_quote(quote_id: int):
    body = json_body()
    quote = comparison_dao.approve_quote(
        quote_id,
        current_user.id,
        body.get("justification"),
        alternative_quotes=body.get("alternative_quotes"),
    )
    return ok(quote.to_dict(), "Quote approved successfully")


@comparison_bp.route("/quotes/<int:quote_id>/scoring-details", methods=["GET"])
@roles_required(*REPORT_ROLES)
def scoring_details(quote_id: int):
    entry, report = comparison_dao.get_quote_scoring_details(quote_id)
    data = {
        "quote": entry.to_dict(),
        "scoring_criteria": report.weights.to_dict(),
        "ranking": f"{entry.ranking} of {report.total_quotes}",
    }
    return ok(data, "Quote scoring details retrieved successfully")
