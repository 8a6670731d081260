# db/models/quote.py
from configs import db
from utils.dates import utcnow
import enum


class QuoteStatus(enum.Enum):
    SUBMITTED = "SUBMITTED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Quote(db.Model):
    __tablename__ = "quote"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    rfq_id = db.Column(
        db.Integer, db.ForeignKey("rfq.id", ondelete="CASCADE"), nullable=False
    )
    vendor_id = db.Column(db.Integer, db.ForeignKey("vendor.id"), nullable=False)

    total_amount = db.Column(db.Numeric(18, 2), nullable=False)
    currency = db.Column(db.String(3), default="USD", nullable=False)
    delivery_date = db.Column(db.Date)
    notes = db.Column(db.Text)

    status = db.Column(
        db.Enum(QuoteStatus, name="quotestatus"),
        default=QuoteStatus.SUBMITTED,
        nullable=False,
    )
    submitted_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # written by the comparison run, overwritten on every re-run
    price_score = db.Column(db.Float)
    delivery_score = db.Column(db.Float)
    quality_score = db.Column(db.Float)
    location_score = db.Column(db.Float)
    total_score = db.Column(db.Float)

    rfq = db.relationship("RFQ", back_populates="quotes")
    vendor = db.relationship("Vendor")

    def __str__(self):
        return f"Quote #{self.id}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rfq_id": self.rfq_id,
            "vendor_id": self.vendor_id,
            "vendor_name": self.vendor.name if self.vendor else None,
            "total_amount": float(self.total_amount or 0),
            "currency": self.currency,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "notes": self.notes,
            "status": self.status.value if self.status else None,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "scores": {
                "price_score": self.price_score,
                "delivery_score": self.delivery_score,
                "quality_score": self.quality_score,
                "location_score": self.location_score,
                "total_score": self.total_score,
            },
            "line_items": [ln.to_dict() for ln in self.line_items],
        }


class QuoteLineItem(db.Model):
    __tablename__ = "quote_line_item"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    quote_id = db.Column(
        db.Integer,
        db.ForeignKey("quote.id", ondelete="CASCADE"),
        nullable=False,
    )
    description = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Numeric(18, 3), nullable=False)
    unit_price = db.Column(db.Numeric(18, 2), nullable=False)
    line_total = db.Column(db.Numeric(18, 2), nullable=False)

    quote = db.relationship(
        "Quote",
        backref=db.backref(
            "line_items", cascade="all, delete-orphan", lazy="select", passive_deletes=True
        ),
    )

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "quantity": float(self.quantity),
            "unit_price": float(self.unit_price),
            "line_total": float(self.line_total),
        }
