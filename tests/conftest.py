"""
Pytest fixtures for the procurement test suite.

Every test gets a fresh app bound to an in-memory SQLite database with the
app context pushed, so DAO functions can be called directly and the test
client shares the same database.
"""
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from configs import db
from dao import quote as quote_dao, rfq as rfq_dao, vendor as vendor_dao
from db.models.user import User, UserRole

PASSWORD = "s3cret-pass"
REQUESTED_DELIVERY = date(2026, 11, 20)


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "LOG_LEVEL": "DEBUG",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_user(app):
    def _make(role: UserRole = UserRole.PROCUREMENT_MANAGER, username: str | None = None):
        user = User(
            username=username or role.value.lower(),
            password_hash=generate_password_hash(PASSWORD),
            full_name=role.value.title(),
            role=role,
            is_active=True,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def login_as(app, make_user):
    """Return a test client logged in with a new user of the given role."""

    def _login(role: UserRole = UserRole.PROCUREMENT_MANAGER):
        user = make_user(role)
        client = app.test_client()
        resp = client.post("/auth/login", json={"username": user.username, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return client

    return _login


@pytest.fixture
def make_vendor(app):
    counter = {"n": 0}

    def _make(
        name: str | None = None,
        *,
        quality_rating: float | None = 8.0,
        country: str = "Singapore",
        region: str | None = "Jurong",
        delivery_port: bool = True,
    ):
        counter["n"] += 1
        n = counter["n"]
        caps = ["delivery"] if delivery_port else ["storage"]
        return vendor_dao.create_vendor(
            f"VND-{n:03d}",
            name or f"Vendor {n}",
            country=country,
            quality_rating=quality_rating,
            service_areas=[{"country": country, "region": region, "ports": ["SGSIN"]}],
            port_capabilities=[
                {"port_code": "SGSIN", "port_name": "Singapore", "capabilities": caps}
            ],
        )

    return _make


@pytest.fixture
def make_rfq(app):
    def _make(
        title: str = "Hydraulic hose assemblies",
        delivery_location: str | None = "Pasir Panjang Terminal, Singapore",
        delivery_date=REQUESTED_DELIVERY,
        send: bool = True,
    ):
        rfq = rfq_dao.create_rfq(
            title, delivery_location=delivery_location, delivery_date=delivery_date
        )
        if send:
            rfq_dao.send_rfq(rfq.id)
        return rfq

    return _make


@pytest.fixture
def make_quote(app):
    def _make(rfq, vendor, amount, delivery_date=REQUESTED_DELIVERY, notes=None):
        return quote_dao.submit_quote(
            rfq.id,
            vendor.id,
            total_amount=amount,
            delivery_date=delivery_date,
            notes=notes,
        )

    return _make


@pytest.fixture
def three_quote_rfq(make_vendor, make_rfq, make_quote):
    """RFQ with quotes priced 100/150/200, everything else identical."""
    rfq = make_rfq()
    quotes = [
        make_quote(rfq, make_vendor(f"Vendor {amount}"), amount)
        for amount in (200, 100, 150)
    ]
    return rfq, {int(q.total_amount): q for q in quotes}
