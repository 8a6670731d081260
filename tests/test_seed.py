from dao import quote_comparison as comparison_dao
from db.models.user import User
from db.models.vendor import Vendor
from seed import seed_rfq_with_quotes, seed_vendors
from seed_user import USERS, seed_users


def test_seed_users_is_idempotent(app):
    assert seed_users() == len(USERS) == 4
    assert seed_users() == 0
    assert {u.role.value for u in User.query.all()} == {
        "ADMIN",
        "PROCUREMENT_MANAGER",
        "SUPERINTENDENT",
        "FINANCE_TEAM",
    }


def test_seed_vendors_is_idempotent(app):
    assert seed_vendors() == 3
    assert seed_vendors() == 0
    assert Vendor.query.count() == 3


def test_seeded_rfq_can_be_compared(app):
    seed_vendors()
    rfq = seed_rfq_with_quotes()
    assert rfq.rfq_number.startswith("RFQ-")
    assert len(rfq.quotes) == 3

    report = comparison_dao.score_and_compare_quotes(rfq.id)

    # Rotterdam is cheapest but does not serve Singapore and delivers late;
    # Gulf is dearest with no port delivery
    assert [r.vendor_name for r in report.scored_quotes] == [
        "Rotterdam Ship Chandlers",
        "Straits Marine Supply",
        "Gulf Technical Stores",
    ]
    assert [r.scores.total_score for r in report.scored_quotes] == [7.9, 7.17, 4.9]
