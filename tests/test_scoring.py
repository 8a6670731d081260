"""Unit tests for the quote scoring core (no database)."""
import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from services import scoring
from services.scoring import (
    ComponentScores,
    Recommendation,
    ScoringWeights,
    VendorScoringResult,
)

REQUESTED = date(2026, 11, 20)
SUBMITTED = datetime(2026, 10, 1, 9, 0)


def area(country, region=None):
    return SimpleNamespace(country=country, region=region)


def port(*capabilities):
    return SimpleNamespace(capabilities=list(capabilities))


def make_vendor(name="Vendor", rating=8.0, areas=None, ports=None):
    return SimpleNamespace(
        name=name,
        quality_rating=rating,
        service_areas=areas if areas is not None else [area("Singapore", "Jurong")],
        port_capabilities=ports if ports is not None else [port("delivery")],
    )


def make_quote(quote_id, amount, vendor=None, delivery=REQUESTED, submitted=SUBMITTED):
    vendor = vendor or make_vendor(f"Vendor {quote_id}")
    return SimpleNamespace(
        id=quote_id,
        vendor_id=quote_id,
        vendor=vendor,
        total_amount=amount,
        currency="USD",
        delivery_date=delivery,
        notes=None,
        submitted_at=submitted,
    )


def make_rfq(location="Pasir Panjang, Singapore", delivery=REQUESTED):
    return SimpleNamespace(delivery_location=location, delivery_date=delivery)


def make_result(quote_id, total, submitted=SUBMITTED, **scores):
    values = dict(
        price_score=5.0, delivery_score=5.0, quality_score=5.0, location_score=5.0
    )
    values.update(scores)
    return VendorScoringResult(
        quote_id=quote_id,
        vendor_id=quote_id,
        vendor_name=f"Vendor {quote_id}",
        scores=ComponentScores(total_score=total, **values),
        recommendation=scoring.recommendation_for(total),
        total_amount=100.0,
        currency="USD",
        submitted_at=submitted,
    )


class TestPriceScore:
    def test_cheapest_scores_ten_dearest_zero(self):
        amounts = [100, 150, 200]
        assert scoring.price_score(100, amounts) == 10
        assert scoring.price_score(150, amounts) == 5
        assert scoring.price_score(200, amounts) == 0

    def test_linear_interpolation(self):
        assert scoring.price_score(125, [100, 200]) == pytest.approx(7.5)

    def test_all_equal_amounts_score_ten(self):
        assert scoring.price_score(420, [420, 420, 420]) == 10

    def test_single_quote_scores_ten(self):
        assert scoring.price_score(999.99, [999.99]) == 10

    def test_decimal_amounts(self):
        amounts = [Decimal("100.00"), Decimal("200.00")]
        assert scoring.price_score(Decimal("200.00"), amounts) == 0

    def test_result_is_clamped(self):
        assert scoring.price_score(300, [100, 200]) == 0
        assert scoring.price_score(50, [100, 200]) == 10


class TestDeliveryScore:
    @pytest.mark.parametrize(
        "days_late, expected",
        [
            (-45, 10),
            (-1, 10),
            (0, 10),
            (1, 8),
            (7, 8),
            (8, 6),
            (14, 6),
            (15, 4),
            (30, 4),
            (31, 2),
            (120, 2),
        ],
    )
    def test_step_function(self, days_late, expected):
        quoted = REQUESTED + timedelta(days=days_late)
        assert scoring.delivery_score(quoted, REQUESTED) == expected

    def test_missing_dates_are_neutral(self):
        assert scoring.delivery_score(None, REQUESTED) == 5
        assert scoring.delivery_score(REQUESTED, None) == 5
        assert scoring.delivery_score(None, None) == 5

    def test_datetimes_compare_by_day(self):
        quoted = datetime(2026, 11, 21, 23, 0)
        requested = datetime(2026, 11, 20, 8, 0)
        assert scoring.delivery_score(quoted, requested) == 8


class TestQualityScore:
    def test_uses_vendor_rating(self):
        assert scoring.quality_score(7.5) == 7.5

    def test_unset_rating_defaults_to_five(self):
        assert scoring.quality_score(None) == 5

    def test_zero_rating_is_kept(self):
        assert scoring.quality_score(0) == 0


class TestLocationScore:
    def test_no_delivery_location_is_neutral(self):
        assert scoring.location_score(None, [area("Singapore")], []) == 5
        assert scoring.location_score("   ", [area("Singapore")], []) == 5

    def test_vendor_not_serving_country(self):
        areas = [area("Malaysia", "Johor")]
        assert scoring.location_score("Jurong Port, Singapore", areas, [port("delivery")]) == 3

    def test_serves_country_only(self):
        assert scoring.location_score("Singapore", [area("Singapore")], [port("storage")]) == 5

    def test_serves_country_with_port_delivery(self):
        assert scoring.location_score("Singapore", [area("Singapore")], [port("delivery")]) == 8

    def test_local_presence_without_port_delivery(self):
        assert scoring.location_score("Singapore", [area("Singapore", "Jurong")], []) == 7

    def test_full_fit_is_capped_at_ten(self):
        areas = [area("Singapore", "Jurong"), area("Singapore", "Tuas")]
        ports = [port("delivery"), port("delivery", "bunkering")]
        assert scoring.location_score("Jurong, Singapore", areas, ports) == 10

    def test_country_is_text_after_last_comma(self):
        areas = [area("Netherlands", "Zuid-Holland")]
        location = "Berth 12, Maasvlakte, Rotterdam,  netherlands "
        assert scoring.location_score(location, areas, [port("delivery")]) == 10

    def test_region_elsewhere_does_not_count_as_local(self):
        areas = [area("Singapore"), area("Malaysia", "Johor")]
        assert scoring.location_score("Singapore", areas, [port("delivery")]) == 8


class TestScoringWeights:
    def test_defaults(self):
        w = ScoringWeights.from_overrides(None)
        assert (w.price, w.delivery, w.quality, w.location) == (0.4, 0.3, 0.2, 0.1)
        assert w == scoring.DEFAULT_WEIGHTS

    def test_full_override(self):
        w = ScoringWeights.from_overrides(
            {"price": 0.25, "delivery": 0.25, "quality": 0.25, "location": 0.25}
        )
        assert w.total() == pytest.approx(1.0)
        assert w.to_dict()["price_weight"] == 0.25

    def test_partial_override_merges_defaults(self):
        w = ScoringWeights.from_overrides({"price": 0.3, "location": 0.2})
        assert (w.price, w.delivery, w.quality, w.location) == (0.3, 0.3, 0.2, 0.2)

    def test_sum_within_tolerance(self):
        w = ScoringWeights.from_overrides(
            {"price": 0.4, "delivery": 0.3, "quality": 0.2, "location": 0.105}
        )
        assert w.location == 0.105

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": 0.9},
            {"price": 0.1, "delivery": 0.1, "quality": 0.1, "location": 0.1},
            {"price": -0.1, "delivery": 0.5, "quality": 0.5, "location": 0.1},
            {"price": 1.5},
            {"price": "0.4"},
            {"price": True},
            {"speed": 0.1},
            {"price": float("nan")},
            {"quality": float("inf")},
            {"location": float("-inf")},
        ],
    )
    def test_invalid_weights_raise(self, overrides):
        with pytest.raises(ValueError):
            ScoringWeights.from_overrides(overrides)


class TestAggregate:
    def test_weighted_total(self):
        s = scoring.aggregate(10, 10, 8, 10)
        assert s.total_score == 9.6

    def test_total_never_exceeds_ten_within_weight_tolerance(self):
        w = ScoringWeights.from_overrides({"price": 0.405})
        assert w.total() > 1.0
        assert scoring.aggregate(10, 10, 10, 10, w).total_score == 10

    def test_custom_weights(self):
        w = ScoringWeights(price=1.0, delivery=0.0, quality=0.0, location=0.0)
        assert scoring.aggregate(7.25, 2, 2, 2, w).total_score == 7.25

    def test_rounds_half_up_to_two_places(self):
        s = scoring.aggregate(3.335, 6.666666, 5, 5)
        assert s.price_score == 3.34
        assert s.delivery_score == 6.67

    @pytest.mark.parametrize(
        "total, tier",
        [
            (10.0, Recommendation.HIGHLY_RECOMMENDED),
            (8.5, Recommendation.HIGHLY_RECOMMENDED),
            (8.49, Recommendation.RECOMMENDED),
            (7.0, Recommendation.RECOMMENDED),
            (6.99, Recommendation.ACCEPTABLE),
            (5.5, Recommendation.ACCEPTABLE),
            (5.49, Recommendation.NOT_RECOMMENDED),
            (0.0, Recommendation.NOT_RECOMMENDED),
        ],
    )
    def test_recommendation_tiers(self, total, tier):
        assert scoring.recommendation_for(total) is tier


class TestRanking:
    def test_sorted_by_total_descending(self):
        ranked = scoring.rank_results(
            [make_result(1, 6.1), make_result(2, 9.0), make_result(3, 7.4)]
        )
        assert [r.quote_id for r in ranked] == [2, 3, 1]
        assert [r.ranking for r in ranked] == [1, 2, 3]

    def test_ties_go_to_earlier_submission(self):
        later = make_result(1, 8.0, submitted=SUBMITTED + timedelta(hours=2))
        earlier = make_result(2, 8.0, submitted=SUBMITTED)
        ranked = scoring.rank_results([later, earlier])
        assert [r.quote_id for r in ranked] == [2, 1]

    def test_ties_with_same_submission_go_to_lower_id(self):
        ranked = scoring.rank_results([make_result(9, 8.0), make_result(4, 8.0)])
        assert [r.quote_id for r in ranked] == [4, 9]

    def test_three_quote_scenario(self):
        quotes = [make_quote(1, 200), make_quote(2, 100), make_quote(3, 150)]
        ranked = scoring.rank_results(scoring.score_quotes(quotes, make_rfq()))

        assert [r.quote_id for r in ranked] == [2, 3, 1]
        assert [r.scores.price_score for r in ranked] == [10, 5, 0]
        assert [r.scores.total_score for r in ranked] == [9.6, 7.6, 5.6]
        assert [r.recommendation for r in ranked] == [
            Recommendation.HIGHLY_RECOMMENDED,
            Recommendation.RECOMMENDED,
            Recommendation.ACCEPTABLE,
        ]

    def test_single_quote_scenario(self):
        vendor = make_vendor(rating=6.0, areas=[area("Singapore")], ports=[])
        quote = make_quote(1, 5000, vendor=vendor, delivery=REQUESTED + timedelta(days=10))
        (result,) = scoring.rank_results(scoring.score_quotes([quote], make_rfq()))

        assert result.ranking == 1
        assert result.scores.price_score == 10
        # 10*.4 + 6*.3 + 6*.2 + 5*.1
        assert result.scores.total_score == 7.5
        assert result.recommendation is Recommendation.RECOMMENDED

    def test_scores_stay_in_range(self):
        rng = random.Random(20261018)
        rfq = make_rfq()
        weight_sets = [
            scoring.DEFAULT_WEIGHTS,
            ScoringWeights.from_overrides({"price": 0.405}),
            ScoringWeights.from_overrides({"location": 0.095}),
            ScoringWeights.from_overrides(
                {"price": 0.0, "delivery": 0.0, "quality": 1.0, "location": 0.005}
            ),
        ]
        for _ in range(80):
            weights = rng.choice(weight_sets)
            quotes = []
            for qid in range(1, rng.randint(1, 8) + 1):
                vendor = make_vendor(
                    rating=rng.choice([None, 0, 3.5, 10]),
                    areas=rng.choice([[], [area("Singapore")], [area("Singapore", "Tuas")]]),
                    ports=rng.choice([[], [port("delivery")]]),
                )
                delivery = rng.choice([None, REQUESTED + timedelta(days=rng.randint(-20, 60))])
                quotes.append(
                    make_quote(qid, round(rng.uniform(1, 100000), 2), vendor, delivery)
                )
            ranked = scoring.rank_results(scoring.score_quotes(quotes, rfq, weights))
            totals = [r.scores.total_score for r in ranked]
            assert totals == sorted(totals, reverse=True)
            for r in ranked:
                for value in r.scores.to_dict().values():
                    assert 0 <= value <= 10

    def test_rescoring_is_idempotent(self):
        quotes = [make_quote(1, 410), make_quote(2, 380), make_quote(3, 455)]
        first = scoring.rank_results(scoring.score_quotes(quotes, make_rfq()))
        second = scoring.rank_results(scoring.score_quotes(quotes, make_rfq()))
        assert [r.to_dict() for r in first] == [r.to_dict() for r in second]


class TestComparisonMatrix:
    def test_rows_and_columns(self):
        quotes = [make_quote(1, 1200.5), make_quote(2, 900, delivery=None)]
        ranked = scoring.rank_results(scoring.score_quotes(quotes, make_rfq()))
        matrix = scoring.build_comparison_matrix(ranked)

        assert [row["criteria"] for row in matrix] == [
            "Criteria",
            "Total Amount",
            "Delivery Date",
            "Price Score",
            "Delivery Score",
            "Quality Score",
            "Location Score",
            "Total Score",
            "Recommendation",
        ]
        header, amount, delivery = matrix[0], matrix[1], matrix[2]
        assert header == {"criteria": "Criteria", "vendor_0": "Vendor 2", "vendor_1": "Vendor 1"}
        assert amount["vendor_1"] == "USD 1,200.50"
        assert delivery["vendor_0"] == "Not specified"
        assert delivery["vendor_1"] == REQUESTED.isoformat()
        assert matrix[3]["vendor_0"] == 10
        assert matrix[-1]["vendor_0"] == ranked[0].recommendation.value

    def test_empty_input(self):
        matrix = scoring.build_comparison_matrix([])
        assert all(set(row) == {"criteria"} for row in matrix)


class TestRecommendationNarrative:
    def test_all_strengths(self):
        result = make_result(
            1, 9.2, price_score=9, delivery_score=10, quality_score=8, location_score=8
        )
        assert scoring.build_reasoning(result) == [
            "Highly competitive pricing",
            "Excellent delivery timeline",
            "High quality rating from past performance",
            "Strong local presence and capabilities",
            "Overall exceptional performance across all criteria",
        ]

    def test_only_components_over_threshold(self):
        result = make_result(1, 6.0, price_score=8.0, delivery_score=7.99)
        assert scoring.build_reasoning(result) == ["Highly competitive pricing"]

    def test_nothing_stands_out(self):
        assert scoring.build_reasoning(make_result(1, 5.0)) == []

    def test_recommend_keeps_three_alternatives(self):
        ranked = scoring.rank_results(make_result(i, 10 - i) for i in range(1, 7))
        rec = scoring.recommend(ranked)
        assert rec.recommended_vendor.quote_id == 1
        assert [a.quote_id for a in rec.alternatives] == [2, 3, 4]
        assert [a.ranking for a in rec.alternatives] == [2, 3, 4]
