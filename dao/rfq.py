# dao/rfq.py
from typing import Optional, List
from datetime import date, datetime
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.audit_log import AuditAction
from db.models.rfq import RFQ, RFQStatus
from dao import audit as audit_dao
from utils.dates import utcnow

# RFQ statuses that still accept quotes
OPEN_STATUSES = (RFQStatus.DRAFT, RFQStatus.SENT)


def _to_rfq_status(value: str | None) -> Optional[RFQStatus]:
    if not value:
        return None
    value = value.strip().upper()
    try:
        return RFQStatus[value]
    except KeyError:
        raise ValueError(f"Unknown RFQ status '{value}'.")


def _parse_date(d) -> Optional[date]:
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date) or d is None:
        return d
    d = str(d).strip()
    if not d:
        return None
    try:
        return datetime.strptime(d, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date '{d}', expected YYYY-MM-DD.")


def _generate_rfq_number() -> str:
    year = utcnow().year
    count = RFQ.query.filter(
        RFQ.created_at >= datetime(year, 1, 1),
        RFQ.created_at < datetime(year + 1, 1, 1),
    ).count()
    return f"RFQ-{year}-{count + 1:04d}"


def list_rfqs(status: str | None = None) -> List[RFQ]:
    q = RFQ.query
    st = _to_rfq_status(status)
    if st:
        q = q.filter(RFQ.status == st)
    return q.order_by(RFQ.id.desc()).all()


def get_rfq(rfq_id: int) -> Optional[RFQ]:
    return db.session.get(RFQ, rfq_id)


def create_rfq(
    title: str,
    *,
    description: str | None = None,
    currency: str = "USD",
    delivery_location: str | None = None,
    delivery_date=None,
    response_deadline=None,
    user_id: int | None = None,
) -> RFQ:
    title = (title or "").strip()
    if not title:
        raise ValueError("RFQ title is required.")

    r = RFQ(
        rfq_number=_generate_rfq_number(),
        title=title,
        description=description,
        currency=(currency or "USD").strip().upper(),
        delivery_location=(delivery_location or "").strip() or None,
        delivery_date=_parse_date(delivery_date),
        response_deadline=_parse_date(response_deadline),
        status=RFQStatus.DRAFT,
        created_by_id=user_id,
    )
    db.session.add(r)
    db.session.flush()  # r.id for the audit entry

    audit_dao.log(
        AuditAction.CREATE,
        "rfq",
        r.id,
        user_id=user_id,
        new_values={"rfq_number": r.rfq_number, "title": r.title},
    )
    _commit()
    return r


def send_rfq(rfq_id: int, user_id: int | None = None) -> Optional[RFQ]:
    """DRAFT -> SENT."""
    r = get_rfq(rfq_id)
    if not r:
        return None
    if r.status != RFQStatus.DRAFT:
        raise ValueError("Only DRAFT RFQs can be sent to vendors.")
    r.status = RFQStatus.SENT
    audit_dao.log(
        AuditAction.UPDATE,
        "rfq",
        r.id,
        user_id=user_id,
        old_values={"status": RFQStatus.DRAFT.value},
        new_values={"status": RFQStatus.SENT.value},
    )
    _commit()
    return r


def cancel_rfq(rfq_id: int, reason: str, user_id: int | None = None) -> Optional[RFQ]:
    r = get_rfq(rfq_id)
    if not r:
        return None
    if r.status == RFQStatus.CANCELLED:
        raise ValueError("RFQ is already cancelled.")
    if r.status == RFQStatus.AWARDED:
        raise ValueError("RFQ has been awarded and cannot be cancelled.")

    old_status = r.status
    r.status = RFQStatus.CANCELLED
    audit_dao.log(
        AuditAction.UPDATE,
        "rfq_cancellation",
        r.id,
        user_id=user_id,
        old_values={"status": old_status.value},
        new_values={"status": RFQStatus.CANCELLED.value, "reason": reason},
    )
    _commit()
    return r


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
