# dao/quote.py
from typing import List, Dict, Optional
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.audit_log import AuditAction
from db.models.quote import Quote, QuoteLineItem, QuoteStatus
from dao import audit as audit_dao, rfq as rfq_dao, vendor as vendor_dao

_FORM_TO_ENUM = {s.value.lower(): s for s in QuoteStatus}


def _to_quote_status(value: Optional[str]) -> Optional[QuoteStatus]:
    if not value:
        return None
    st = _FORM_TO_ENUM.get(value.strip().lower())
    if st is None:
        raise ValueError(f"Unknown quote status '{value}'.")
    return st


def _dec(x, places: str = "0.01") -> Decimal:
    try:
        return Decimal(str(x if x is not None else 0)).quantize(
            Decimal(places), rounding=ROUND_HALF_UP
        )
    except InvalidOperation:
        raise ValueError(f"'{x}' is not a valid number.")


# ======== Queries ========
def list_quotes_for_rfq(rfq_id: int, status: Optional[str] = None) -> List[Quote]:
    q = Quote.query.filter(Quote.rfq_id == int(rfq_id))
    st = _to_quote_status(status)
    if st:
        q = q.filter(Quote.status == st)
    return q.order_by(Quote.submitted_at.asc(), Quote.id.asc()).all()


def get_quote(quote_id: int) -> Optional[Quote]:
    return db.session.get(Quote, quote_id)


# ======== Mutations ========
def submit_quote(
    rfq_id: int,
    vendor_id: int,
    *,
    total_amount=None,
    currency: str | None = None,
    delivery_date=None,
    notes: str | None = None,
    line_items: List[Dict] | None = None,
    user_id: int | None = None,
) -> Quote:
    rfq = rfq_dao.get_rfq(int(rfq_id))
    if not rfq:
        raise ValueError("RFQ does not exist.")
    if rfq.status not in rfq_dao.OPEN_STATUSES:
        raise ValueError(f"RFQ is {rfq.status.value} and no longer accepts quotes.")

    vendor = vendor_dao.get_vendor(int(vendor_id)) if vendor_id else None
    if not vendor or not vendor.is_active:
        raise ValueError("Vendor does not exist or is inactive.")
    _ensure_no_open_quote(rfq.id, vendor.id)

    lines = _normalize_line_items(line_items or [])
    if total_amount is None:
        if not lines:
            raise ValueError("Provide total_amount or at least one line item.")
        amount = sum((ln["line_total"] for ln in lines), Decimal("0.00"))
    else:
        amount = _dec(total_amount)
    if amount < 0:
        raise ValueError("total_amount must not be negative.")

    quote = Quote(
        rfq_id=rfq.id,
        vendor_id=vendor.id,
        total_amount=amount,
        currency=(currency or rfq.currency).strip().upper(),
        delivery_date=rfq_dao._parse_date(delivery_date),
        notes=notes,
        status=QuoteStatus.SUBMITTED,
    )
    db.session.add(quote)
    db.session.flush()

    for ln in lines:
        db.session.add(QuoteLineItem(quote=quote, **ln))

    audit_dao.log(
        AuditAction.CREATE,
        "quote",
        quote.id,
        user_id=user_id,
        new_values={"rfq_id": rfq.id, "vendor_id": vendor.id, "total_amount": str(amount)},
    )
    _commit()
    return quote


def _normalize_line_items(lines: List[Dict]) -> List[Dict]:
    out = []
    for idx, ln in enumerate(lines, 1):
        description = (ln.get("description") or "").strip()
        if not description:
            raise ValueError(f"Line {idx}: description is required.")
        quantity = _dec(ln.get("quantity"), "0.001")
        unit_price = _dec(ln.get("unit_price"))
        if quantity <= 0:
            raise ValueError(f"Line {idx}: quantity must be > 0.")
        if unit_price < 0:
            raise ValueError(f"Line {idx}: unit_price must not be negative.")
        out.append(
            {
                "description": description,
                "quantity": quantity,
                "unit_price": unit_price,
                "line_total": (quantity * unit_price).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                ),
            }
        )
    return out


def _ensure_no_open_quote(rfq_id: int, vendor_id: int):
    exists = Quote.query.filter(
        Quote.rfq_id == rfq_id,
        Quote.vendor_id == vendor_id,
        Quote.status == QuoteStatus.SUBMITTED,
    ).first()
    if exists:
        raise ValueError("Vendor already has a submitted quote for this RFQ.")


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
