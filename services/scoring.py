"""Vendor quote scoring and ranking.

Every function here is pure: it works on quotes, RFQs and vendors that have
already been loaded, and never touches the session. Loading the quote set and
writing the scores back is done by ``dao.quote_comparison``.

Pipeline for one RFQ::

    score_quotes()  ->  rank_results()  ->  build_comparison_matrix()
                                        ->  recommend()
"""
import enum
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence

from utils.dates import utcnow

MAX_SCORE = 10.0
NEUTRAL_SCORE = 5.0
UNSERVED_LOCATION_SCORE = 3.0

# (max days late, score); anything later than the last step scores LATE_DELIVERY_SCORE
DELIVERY_STEPS = ((0, 10.0), (7, 8.0), (14, 6.0), (30, 4.0))
LATE_DELIVERY_SCORE = 2.0

SERVES_COUNTRY_POINTS = 5.0
PORT_DELIVERY_POINTS = 3.0
LOCAL_PRESENCE_POINTS = 2.0
DELIVERY_CAPABILITY = "delivery"

WEIGHT_SUM_TOLERANCE = 0.01
NARRATIVE_THRESHOLD = 8.0
MAX_ALTERNATIVES = 3


class Recommendation(enum.Enum):
    HIGHLY_RECOMMENDED = "HIGHLY_RECOMMENDED"
    RECOMMENDED = "RECOMMENDED"
    ACCEPTABLE = "ACCEPTABLE"
    NOT_RECOMMENDED = "NOT_RECOMMENDED"


RECOMMENDATION_THRESHOLDS = (
    (8.5, Recommendation.HIGHLY_RECOMMENDED),
    (7.0, Recommendation.RECOMMENDED),
    (5.5, Recommendation.ACCEPTABLE),
)

_WEIGHT_KEYS = ("price", "delivery", "quality", "location")


@dataclass(frozen=True)
class ScoringWeights:
    price: float = 0.4
    delivery: float = 0.3
    quality: float = 0.2
    location: float = 0.1

    @classmethod
    def from_overrides(cls, overrides: Optional[dict] = None) -> "ScoringWeights":
        """Merge a partial ``{price, delivery, quality, location}`` dict over
        the defaults and validate the result.

        Raises ValueError on unknown keys, non-numeric or out-of-range
        weights, or when the four weights do not sum to 1.0.
        """
        if not overrides:
            return cls()
        unknown = set(overrides) - set(_WEIGHT_KEYS)
        if unknown:
            raise ValueError(f"Unknown scoring weight(s): {', '.join(sorted(unknown))}")

        values = {}
        for key in _WEIGHT_KEYS:
            raw = overrides.get(key, getattr(cls, key))
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"Weight '{key}' must be a number")
            if not math.isfinite(raw):
                raise ValueError(f"Weight '{key}' must be a finite number")
            if raw < 0 or raw > 1:
                raise ValueError(f"Weight '{key}' must be between 0 and 1")
            values[key] = float(raw)

        weights = cls(**values)
        if abs(weights.total() - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(
                f"Scoring weights must sum to 1.0 (got {round(weights.total(), 4)})"
            )
        return weights

    def total(self) -> float:
        return self.price + self.delivery + self.quality + self.location

    def to_dict(self) -> dict:
        return {
            "price_weight": self.price,
            "delivery_weight": self.delivery,
            "quality_weight": self.quality,
            "location_weight": self.location,
        }


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ComponentScores:
    price_score: float
    delivery_score: float
    quality_score: float
    location_score: float
    total_score: float

    def to_dict(self) -> dict:
        return {
            "price_score": self.price_score,
            "delivery_score": self.delivery_score,
            "quality_score": self.quality_score,
            "location_score": self.location_score,
            "total_score": self.total_score,
        }


@dataclass
class VendorScoringResult:
    quote_id: int
    vendor_id: int
    vendor_name: str
    scores: ComponentScores
    recommendation: Recommendation
    total_amount: float
    currency: str
    delivery_date: Optional[date] = None
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    ranking: int = 0

    def to_dict(self) -> dict:
        return {
            "quote_id": self.quote_id,
            "vendor_id": self.vendor_id,
            "vendor_name": self.vendor_name,
            "scores": self.scores.to_dict(),
            "ranking": self.ranking,
            "recommendation": self.recommendation.value,
            "total_amount": self.total_amount,
            "currency": self.currency,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "notes": self.notes,
        }


@dataclass
class ComparisonReport:
    rfq_id: int
    rfq_title: str
    scored_quotes: List[VendorScoringResult]
    comparison_matrix: List[dict]
    weights: ScoringWeights
    generated_at: datetime = field(default_factory=utcnow)

    @property
    def total_quotes(self) -> int:
        return len(self.scored_quotes)

    @property
    def recommended_quote(self) -> Optional[VendorScoringResult]:
        return self.scored_quotes[0] if self.scored_quotes else None

    def to_dict(self) -> dict:
        recommended = self.recommended_quote
        return {
            "rfq_id": self.rfq_id,
            "rfq_title": self.rfq_title,
            "total_quotes": self.total_quotes,
            "scored_quotes": [r.to_dict() for r in self.scored_quotes],
            "recommended_quote": recommended.to_dict() if recommended else None,
            "comparison_matrix": self.comparison_matrix,
            "scoring_criteria": self.weights.to_dict(),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class VendorRecommendation:
    recommended_vendor: VendorScoringResult
    alternatives: List[VendorScoringResult]
    reasoning: List[str]

    def to_dict(self) -> dict:
        return {
            "recommended_vendor": self.recommended_vendor.to_dict(),
            "alternatives": [a.to_dict() for a in self.alternatives],
            "reasoning": list(self.reasoning),
        }


def round_score(value: float) -> float:
    """Two decimals, half away from zero."""
    return float(
        Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    )


# -------- calculators --------
def price_score(amount, sibling_amounts: Iterable) -> float:
    """10 for the cheapest sibling, 0 for the dearest, linear in between."""
    prices = [float(a) for a in sibling_amounts]
    if not prices:
        return MAX_SCORE
    low, high = min(prices), max(prices)
    if low == high:
        return MAX_SCORE
    score = MAX_SCORE - ((float(amount) - low) / (high - low)) * MAX_SCORE
    return min(MAX_SCORE, max(0.0, score))


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def delivery_score(quoted, requested) -> float:
    quoted, requested = _as_date(quoted), _as_date(requested)
    if quoted is None or requested is None:
        return NEUTRAL_SCORE

    days_late = (quoted - requested).days
    for max_days, score in DELIVERY_STEPS:
        if days_late <= max_days:
            return score
    return LATE_DELIVERY_SCORE


def quality_score(rating) -> float:
    if rating is None:
        return NEUTRAL_SCORE
    return float(rating)


def delivery_country(delivery_location: Optional[str]) -> Optional[str]:
    """Country part of ``"<port>, <country>"``: whatever follows the last comma."""
    if not delivery_location or not delivery_location.strip():
        return None
    return delivery_location.rsplit(",", 1)[-1].strip()


def location_score(delivery_location, service_areas, port_capabilities) -> float:
    country = delivery_country(delivery_location)
    if country is None:
        return NEUTRAL_SCORE

    wanted = country.lower()
    serving = [
        a for a in (service_areas or []) if (a.country or "").strip().lower() == wanted
    ]
    if not serving:
        # courier or partner delivery is still possible
        return UNSERVED_LOCATION_SCORE

    score = SERVES_COUNTRY_POINTS
    if any(DELIVERY_CAPABILITY in (p.capabilities or []) for p in port_capabilities or []):
        score += PORT_DELIVERY_POINTS
    if any(a.region for a in serving):
        score += LOCAL_PRESENCE_POINTS
    return min(score, MAX_SCORE)


# -------- aggregation --------
def recommendation_for(total: float) -> Recommendation:
    for threshold, tier in RECOMMENDATION_THRESHOLDS:
        if total >= threshold:
            return tier
    return Recommendation.NOT_RECOMMENDED


def aggregate(
    price: float,
    delivery: float,
    quality: float,
    location: float,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ComponentScores:
    total = (
        price * weights.price
        + delivery * weights.delivery
        + quality * weights.quality
        + location * weights.location
    )
    # weights may sum to slightly over 1.0 within the tolerance
    total = min(MAX_SCORE, max(0.0, total))
    return ComponentScores(
        price_score=round_score(price),
        delivery_score=round_score(delivery),
        quality_score=round_score(quality),
        location_score=round_score(location),
        total_score=round_score(total),
    )


def score_quote(quote, rfq, sibling_amounts: Sequence, weights: ScoringWeights) -> VendorScoringResult:
    vendor = quote.vendor
    scores = aggregate(
        price_score(quote.total_amount, sibling_amounts),
        delivery_score(quote.delivery_date, rfq.delivery_date),
        quality_score(vendor.quality_rating),
        location_score(rfq.delivery_location, vendor.service_areas, vendor.port_capabilities),
        weights,
    )
    return VendorScoringResult(
        quote_id=quote.id,
        vendor_id=quote.vendor_id,
        vendor_name=vendor.name,
        scores=scores,
        recommendation=recommendation_for(scores.total_score),
        total_amount=float(quote.total_amount),
        currency=quote.currency,
        delivery_date=_as_date(quote.delivery_date),
        notes=quote.notes,
        submitted_at=quote.submitted_at,
    )


def score_quotes(quotes: Sequence, rfq, weights: ScoringWeights = DEFAULT_WEIGHTS) -> List[VendorScoringResult]:
    """Score every quote against its siblings. Quotes are independent of one
    another apart from the shared price range."""
    amounts = [q.total_amount for q in quotes]
    return [score_quote(q, rfq, amounts, weights) for q in quotes]


def result_from_persisted(quote) -> VendorScoringResult:
    """Rebuild a scoring entry from the score fields stored on a quote."""
    scores = ComponentScores(
        price_score=quote.price_score or 0.0,
        delivery_score=quote.delivery_score or 0.0,
        quality_score=quote.quality_score or 0.0,
        location_score=quote.location_score or 0.0,
        total_score=quote.total_score or 0.0,
    )
    return VendorScoringResult(
        quote_id=quote.id,
        vendor_id=quote.vendor_id,
        vendor_name=quote.vendor.name,
        scores=scores,
        recommendation=recommendation_for(scores.total_score),
        total_amount=float(quote.total_amount),
        currency=quote.currency,
        delivery_date=_as_date(quote.delivery_date),
        notes=quote.notes,
        submitted_at=quote.submitted_at,
    )


# -------- ranking & presentation --------
def _rank_key(result: VendorScoringResult):
    # ties: earlier submission first, then lower quote id
    return (
        -result.scores.total_score,
        result.submitted_at or datetime.max,
        result.quote_id,
    )


def rank_results(results: Iterable[VendorScoringResult]) -> List[VendorScoringResult]:
    ranked = sorted(results, key=_rank_key)
    for position, result in enumerate(ranked, 1):
        result.ranking = position
    return ranked


_MATRIX_SCORE_ROWS = (
    ("price_score", "Price Score"),
    ("delivery_score", "Delivery Score"),
    ("quality_score", "Quality Score"),
    ("location_score", "Location Score"),
    ("total_score", "Total Score"),
)


def _matrix_row(label: str, results, value_of) -> dict:
    row = {"criteria": label}
    for idx, result in enumerate(results):
        row[f"vendor_{idx}"] = value_of(result)
    return row


def build_comparison_matrix(results: Sequence[VendorScoringResult]) -> List[dict]:
    """One row per criterion, one ``vendor_<n>`` column per ranked quote."""
    matrix = [
        _matrix_row("Criteria", results, lambda r: r.vendor_name),
        _matrix_row(
            "Total Amount", results, lambda r: f"{r.currency} {r.total_amount:,.2f}"
        ),
        _matrix_row(
            "Delivery Date",
            results,
            lambda r: r.delivery_date.isoformat() if r.delivery_date else "Not specified",
        ),
    ]
    for key, label in _MATRIX_SCORE_ROWS:
        matrix.append(_matrix_row(label, results, lambda r, k=key: getattr(r.scores, k)))
    matrix.append(_matrix_row("Recommendation", results, lambda r: r.recommendation.value))
    return matrix


def build_reasoning(result: VendorScoringResult) -> List[str]:
    s = result.scores
    reasoning = []
    if s.price_score >= NARRATIVE_THRESHOLD:
        reasoning.append("Highly competitive pricing")
    if s.delivery_score >= NARRATIVE_THRESHOLD:
        reasoning.append("Excellent delivery timeline")
    if s.quality_score >= NARRATIVE_THRESHOLD:
        reasoning.append("High quality rating from past performance")
    if s.location_score >= NARRATIVE_THRESHOLD:
        reasoning.append("Strong local presence and capabilities")
    if s.total_score >= RECOMMENDATION_THRESHOLDS[0][0]:
        reasoning.append("Overall exceptional performance across all criteria")
    return reasoning


def recommend(ranked: Sequence[VendorScoringResult]) -> VendorRecommendation:
    top = ranked[0]
    return VendorRecommendation(
        recommended_vendor=top,
        alternatives=list(ranked[1 : 1 + MAX_ALTERNATIVES]),
        reasoning=build_reasoning(top),
    )
