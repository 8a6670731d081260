# dao/quote_comparison.py
"""Quote comparison for an RFQ: load the submitted quotes, score and rank
them, write the scores back, and award the RFQ to one quote.

Scoring always recomputes from the quotes, vendors and RFQ as stored, so a
comparison interrupted half way is repaired by running it again.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from configs import db
from dao import audit as audit_dao, rfq as rfq_dao
from db.models.audit_log import AuditAction
from db.models.quote import Quote, QuoteStatus
from db.models.rfq import RFQ, RFQStatus
from db.models.vendor import Vendor
from services import scoring
from services.scoring import (
    ComparisonReport,
    ScoringWeights,
    VendorRecommendation,
    VendorScoringResult,
)
from utils.errors import NotFoundError, PreconditionFailedError

logger = logging.getLogger(__name__)


def _load_rfq(rfq_id: int) -> RFQ:
    rfq = rfq_dao.get_rfq(int(rfq_id))
    if not rfq:
        raise NotFoundError("RFQ not found", code="RFQ_NOT_FOUND")
    return rfq


def _load_quote(quote_id: int) -> Quote:
    quote = db.session.get(Quote, int(quote_id))
    if not quote:
        raise NotFoundError("Quote not found", code="QUOTE_NOT_FOUND")
    return quote


def _submitted_quotes(rfq_id: int, scored_only: bool = False) -> List[Quote]:
    q = Quote.query.options(
        selectinload(Quote.vendor).selectinload(Vendor.service_areas),
        selectinload(Quote.vendor).selectinload(Vendor.port_capabilities),
    ).filter(Quote.rfq_id == rfq_id, Quote.status == QuoteStatus.SUBMITTED)
    if scored_only:
        q = q.filter(Quote.total_score.isnot(None))
    return q.order_by(Quote.submitted_at.asc(), Quote.id.asc()).all()


def _resolve_weights(weights: Optional[dict]) -> ScoringWeights:
    try:
        return ScoringWeights.from_overrides(weights)
    except ValueError as e:
        raise PreconditionFailedError(str(e), code="INVALID_WEIGHTS") from e


def score_and_compare_quotes(rfq_id: int, weights: Optional[dict] = None) -> ComparisonReport:
    """Score every submitted quote of the RFQ, rank them and persist the
    five score fields on each quote."""
    rfq = _load_rfq(rfq_id)
    quotes = _submitted_quotes(rfq.id)
    if not quotes:
        raise PreconditionFailedError(
            "No submitted quotes found for this RFQ", code="NO_QUOTES_FOUND"
        )
    scoring_weights = _resolve_weights(weights)

    logger.info(
        "Scoring %d quote(s) for RFQ %s with weights %s",
        len(quotes),
        rfq.rfq_number,
        scoring_weights.to_dict(),
    )
    ranked = scoring.rank_results(scoring.score_quotes(quotes, rfq, scoring_weights))
    _persist_scores(quotes, ranked)

    return ComparisonReport(
        rfq_id=rfq.id,
        rfq_title=rfq.title,
        scored_quotes=ranked,
        comparison_matrix=scoring.build_comparison_matrix(ranked),
        weights=scoring_weights,
    )


def _persist_scores(quotes: List[Quote], ranked: List[VendorScoringResult]):
    by_id = {q.id: q for q in quotes}
    for result in ranked:
        quote = by_id[result.quote_id]
        quote.price_score = result.scores.price_score
        quote.delivery_score = result.scores.delivery_score
        quote.quality_score = result.scores.quality_score
        quote.location_score = result.scores.location_score
        quote.total_score = result.scores.total_score
    _commit()
    logger.info("Persisted scores for %d quote(s)", len(ranked))


def get_comparison_report(rfq_id: int) -> Optional[ComparisonReport]:
    """Report built from the scores stored by the last comparison run, or
    None when no submitted quote of the RFQ has been scored yet."""
    rfq = _load_rfq(rfq_id)
    quotes = _submitted_quotes(rfq.id, scored_only=True)
    if not quotes:
        return None

    ranked = scoring.rank_results(scoring.result_from_persisted(q) for q in quotes)
    return ComparisonReport(
        rfq_id=rfq.id,
        rfq_title=rfq.title,
        scored_quotes=ranked,
        comparison_matrix=scoring.build_comparison_matrix(ranked),
        weights=scoring.DEFAULT_WEIGHTS,
    )


def _require_report(rfq_id: int) -> ComparisonReport:
    report = get_comparison_report(rfq_id)
    if report is None:
        raise NotFoundError(
            "No quote comparison data available", code="NO_COMPARISON_DATA"
        )
    return report


def get_vendor_recommendation(rfq_id: int) -> VendorRecommendation:
    return scoring.recommend(_require_report(rfq_id).scored_quotes)


def get_side_by_side(rfq_id: int, quote_ids: Optional[Iterable[int]] = None) -> ComparisonReport:
    """The persisted report, optionally narrowed to some quotes. Ranks stay
    those of the full comparison; the matrix covers the selected quotes."""
    report = _require_report(rfq_id)
    if quote_ids:
        wanted = {int(x) for x in quote_ids}
        selected = [r for r in report.scored_quotes if r.quote_id in wanted]
        report.scored_quotes = selected
        report.comparison_matrix = scoring.build_comparison_matrix(selected)
    return report


def update_scoring_weights(rfq_id: int, weights: Optional[dict]) -> ComparisonReport:
    if not weights:
        raise PreconditionFailedError("Scoring weights are required", code="MISSING_WEIGHTS")
    return score_and_compare_quotes(rfq_id, weights)


def get_quote_scoring_details(quote_id: int) -> Tuple[VendorScoringResult, ComparisonReport]:
    quote = _load_quote(quote_id)
    report = get_comparison_report(quote.rfq_id)
    entry = None
    if report is not None:
        entry = next((r for r in report.scored_quotes if r.quote_id == quote.id), None)
    if entry is None:
        raise NotFoundError("Quote scoring details not found", code="NO_COMPARISON_DATA")
    return entry, report


def approve_quote(
    quote_id: int,
    approver_id: int,
    justification: str,
    alternative_quotes: Optional[List[dict]] = None,
) -> Quote:
    """Award the RFQ to one quote.

    In one transaction: the quote becomes ACCEPTED, every other SUBMITTED
    quote of the RFQ becomes REJECTED, the RFQ becomes AWARDED and an APPROVE
    audit entry is written. Any failure rolls all of it back.
    """
    if not justification or not str(justification).strip():
        raise PreconditionFailedError(
            "Justification is required for quote approval", code="MISSING_JUSTIFICATION"
        )

    quote = _load_quote(quote_id)
    if quote.status != QuoteStatus.SUBMITTED:
        raise PreconditionFailedError(
            "Only submitted quotes can be approved", code="INVALID_QUOTE_STATUS"
        )

    rfq = (
        db.session.query(RFQ)
        .filter(RFQ.id == quote.rfq_id)
        .with_for_update()
        .populate_existing()
        .one()
    )
    if rfq.status not in rfq_dao.OPEN_STATUSES:
        raise PreconditionFailedError(
            f"RFQ is {rfq.status.value} and cannot be awarded", code="INVALID_RFQ_STATUS"
        )
    _ensure_no_accepted_quote(rfq.id)
    rfq_id = rfq.id

    try:
        quote.status = QuoteStatus.ACCEPTED
        siblings = Quote.query.filter(
            Quote.rfq_id == rfq.id,
            Quote.id != quote.id,
            Quote.status == QuoteStatus.SUBMITTED,
        ).all()
        for sibling in siblings:
            sibling.status = QuoteStatus.REJECTED
        rfq.status = RFQStatus.AWARDED

        audit_dao.log(
            AuditAction.APPROVE,
            "quote",
            quote.id,
            user_id=approver_id,
            new_values={
                "status": QuoteStatus.ACCEPTED.value,
                "approved_by": approver_id,
                "justification": justification,
                "alternative_quotes": alternative_quotes or [],
                "rejected_quote_ids": [s.id for s in siblings],
            },
            metadata={
                "rfq_id": rfq.id,
                "vendor_id": quote.vendor_id,
                "total_amount": str(quote.total_amount),
            },
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Award of RFQ %s to quote %s failed", rfq_id, quote_id)
        raise

    logger.info(
        "Quote %s accepted for RFQ %s by user %s; %d sibling(s) rejected",
        quote.id,
        rfq.rfq_number,
        approver_id,
        len(siblings),
    )
    return quote


def _ensure_no_accepted_quote(rfq_id: int):
    accepted = Quote.query.filter(
        Quote.rfq_id == rfq_id, Quote.status == QuoteStatus.ACCEPTED
    ).first()
    if accepted:
        raise PreconditionFailedError(
            "RFQ already has an accepted quote", code="QUOTE_ALREADY_ACCEPTED"
        )


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Commit failed")
        raise
