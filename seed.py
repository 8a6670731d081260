# seed.py
from datetime import date, timedelta
from configs import db
from db.models.vendor import Vendor
from db.models.rfq import RFQ
from dao import vendor as vendor_dao, rfq as rfq_dao, quote as quote_dao


# -------- Vendors --------
VENDORS = [
    {
        "code": "VND-SG-001",
        "name": "Straits Marine Supply",
        "email": "sales@straitsmarine.sg",
        "country": "Singapore",
        "quality_rating": 8.5,
        "service_areas": [
            {"country": "Singapore", "region": "Jurong", "ports": ["SGSIN"]},
            {"country": "Malaysia", "ports": ["MYPKG"]},
        ],
        "port_capabilities": [
            {
                "port_code": "SGSIN",
                "port_name": "Singapore",
                "capabilities": ["delivery", "bonded_store"],
            }
        ],
    },
    {
        "code": "VND-NL-002",
        "name": "Rotterdam Ship Chandlers",
        "email": "orders@rsc.nl",
        "country": "Netherlands",
        "quality_rating": 9.0,
        "service_areas": [
            {"country": "Netherlands", "region": "Zuid-Holland", "ports": ["NLRTM"]},
            {"country": "Belgium", "ports": ["BEANR"]},
        ],
        "port_capabilities": [
            {"port_code": "NLRTM", "port_name": "Rotterdam", "capabilities": ["delivery"]}
        ],
    },
    {
        "code": "VND-AE-003",
        "name": "Gulf Technical Stores",
        "email": "rfq@gulftech.ae",
        "country": "United Arab Emirates",
        "quality_rating": 7.0,
        "service_areas": [
            {"country": "United Arab Emirates", "ports": ["AEJEA"]},
            {"country": "Singapore", "ports": ["SGSIN"]},
        ],
        "port_capabilities": [
            {"port_code": "AEJEA", "port_name": "Jebel Ali", "capabilities": ["storage"]}
        ],
    },
]


def seed_vendors() -> int:
    created = 0
    for row in VENDORS:
        if Vendor.query.filter_by(code=row["code"]).first():
            continue
        fields = dict(row)
        vendor_dao.create_vendor(fields.pop("code"), fields.pop("name"), **fields)
        created += 1
    return created


# -------- RFQ with competing quotes --------
def seed_rfq_with_quotes() -> RFQ:
    """One RFQ for Singapore delivery with a quote from every seeded vendor."""
    requested = date.today() + timedelta(days=21)
    rfq = rfq_dao.create_rfq(
        "Main engine spares - fuel injection valves",
        description="6 x fuel injection valve assemblies with gaskets",
        currency="USD",
        delivery_location="Pasir Panjang Terminal, Singapore",
        delivery_date=requested,
        response_deadline=date.today() + timedelta(days=7),
    )
    rfq_dao.send_rfq(rfq.id)

    offers = [
        ("VND-SG-001", "4850.00", requested),
        ("VND-NL-002", "4420.00", requested + timedelta(days=10)),
        ("VND-AE-003", "5100.00", requested - timedelta(days=2)),
    ]
    for code, amount, delivery in offers:
        vendor = Vendor.query.filter_by(code=code).first()
        quote_dao.submit_quote(
            rfq.id,
            vendor.id,
            total_amount=amount,
            delivery_date=delivery,
            line_items=[
                {
                    "description": "Fuel injection valve assembly",
                    "quantity": 6,
                    "unit_price": str(round(float(amount) / 6, 2)),
                }
            ],
        )
    return rfq


if __name__ == "__main__":
    from app import app

    with app.app_context():
        db.create_all()
        print(f"Seeded {seed_vendors()} vendor(s)")
        rfq = seed_rfq_with_quotes()
        print(f"Seeded {rfq.rfq_number} with {len(rfq.quotes)} quote(s)")
