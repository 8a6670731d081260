# db/models/rfq.py
from configs import db
from utils.dates import utcnow
import enum


class RFQStatus(enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    AWARDED = "AWARDED"
    CANCELLED = "CANCELLED"


class RFQ(db.Model):
    __tablename__ = "rfq"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    rfq_number = db.Column(db.String(40), unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    currency = db.Column(db.String(3), default="USD", nullable=False)

    # free text, "<port>, <country>"; the country is what location scoring uses
    delivery_location = db.Column(db.String(255))
    delivery_date = db.Column(db.Date)
    response_deadline = db.Column(db.Date)

    status = db.Column(
        db.Enum(RFQStatus, name="rfqstatus"), default=RFQStatus.DRAFT, nullable=False
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))

    created_by = db.relationship("User")
    quotes = db.relationship(
        "Quote",
        back_populates="rfq",
        cascade="all, delete-orphan",
        lazy="select",
        passive_deletes=True,
    )

    def __str__(self):
        return f"{self.rfq_number} - {self.title}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rfq_number": self.rfq_number,
            "title": self.title,
            "description": self.description,
            "currency": self.currency,
            "delivery_location": self.delivery_location,
            "delivery_date": _iso(self.delivery_date),
            "response_deadline": _iso(self.response_deadline),
            "status": self.status.value if self.status else None,
            "created_at": _iso(self.created_at),
            "quote_count": len(self.quotes),
        }


def _iso(value):
    return value.isoformat() if value else None
