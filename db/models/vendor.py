# db/models/vendor.py
from configs import db


class Vendor(db.Model):
    __tablename__ = "vendor"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)

    phone = db.Column(db.String(30))
    email = db.Column(db.String(255))
    country = db.Column(db.String(100))

    # 0-10, maintained by vendor performance reviews
    quality_rating = db.Column(db.Float)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    service_areas = db.relationship(
        "VendorServiceArea",
        back_populates="vendor",
        cascade="all, delete-orphan",
        lazy="select",
        passive_deletes=True,
    )
    port_capabilities = db.relationship(
        "VendorPortCapability",
        back_populates="vendor",
        cascade="all, delete-orphan",
        lazy="select",
        passive_deletes=True,
    )

    def __str__(self):
        return f"{self.code} - {self.name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "country": self.country,
            "quality_rating": self.quality_rating,
            "is_active": self.is_active,
            "service_areas": [a.to_dict() for a in self.service_areas],
            "port_capabilities": [p.to_dict() for p in self.port_capabilities],
        }


class VendorServiceArea(db.Model):
    __tablename__ = "vendor_service_area"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendor.id", ondelete="CASCADE"), nullable=False
    )
    country = db.Column(db.String(100), nullable=False)
    region = db.Column(db.String(100))  # set when the vendor has local presence
    ports = db.Column(db.JSON, default=list)

    vendor = db.relationship("Vendor", back_populates="service_areas")

    def to_dict(self) -> dict:
        return {
            "country": self.country,
            "region": self.region,
            "ports": list(self.ports or []),
        }


class VendorPortCapability(db.Model):
    __tablename__ = "vendor_port_capability"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendor.id", ondelete="CASCADE"), nullable=False
    )
    port_code = db.Column(db.String(20), nullable=False)
    port_name = db.Column(db.String(255), nullable=False)
    capabilities = db.Column(db.JSON, default=list)  # e.g. ["delivery", "bunkering"]

    vendor = db.relationship("Vendor", back_populates="port_capabilities")

    def to_dict(self) -> dict:
        return {
            "port_code": self.port_code,
            "port_name": self.port_name,
            "capabilities": list(self.capabilities or []),
        }
