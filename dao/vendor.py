# dao/vendor.py
import math
from typing import Optional, List, Dict
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.audit_log import AuditAction
from db.models.vendor import Vendor, VendorServiceArea, VendorPortCapability
from dao import audit as audit_dao


def list_vendors(active_only: bool = True) -> List[Vendor]:
    q = Vendor.query
    if active_only:
        q = q.filter_by(is_active=True)
    return q.order_by(Vendor.name.asc()).all()


def get_vendor(vendor_id: int) -> Optional[Vendor]:
    return db.session.get(Vendor, vendor_id)


def create_vendor(
    code: str,
    name: str,
    *,
    email: str | None = None,
    phone: str | None = None,
    country: str | None = None,
    quality_rating: float | None = None,
    service_areas: List[Dict] | None = None,
    port_capabilities: List[Dict] | None = None,
    user_id: int | None = None,
) -> Vendor:
    code = (code or "").strip()
    name = (name or "").strip()
    if not code or not name:
        raise ValueError("Vendor code and name are required.")
    if Vendor.query.filter_by(code=code).first():
        raise ValueError(f"Vendor code '{code}' already exists.")

    v = Vendor(
        code=code,
        name=name,
        email=email,
        phone=phone,
        country=country,
        quality_rating=_check_rating(quality_rating),
        is_active=True,
    )
    for area in _normalize_service_areas(service_areas or []):
        v.service_areas.append(VendorServiceArea(**area))
    for cap in _normalize_port_capabilities(port_capabilities or []):
        v.port_capabilities.append(VendorPortCapability(**cap))
    db.session.add(v)
    db.session.flush()

    audit_dao.log(
        AuditAction.CREATE,
        "vendor",
        v.id,
        user_id=user_id,
        new_values={"code": v.code, "name": v.name},
    )
    _commit()
    return v


def update_vendor_performance(
    vendor_id: int, quality_rating: float | None, user_id: int | None = None
) -> Optional[Vendor]:
    v = get_vendor(vendor_id)
    if not v:
        return None
    old = v.quality_rating
    v.quality_rating = _check_rating(quality_rating)
    audit_dao.log(
        AuditAction.UPDATE,
        "vendor_performance",
        v.id,
        user_id=user_id,
        old_values={"quality_rating": old},
        new_values={"quality_rating": v.quality_rating},
    )
    _commit()
    return v


def _check_rating(value) -> float | None:
    if value is None:
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise ValueError("quality_rating must be a number.")
    if not math.isfinite(rating):
        raise ValueError("quality_rating must be a finite number.")
    if rating < 0 or rating > 10:
        raise ValueError("quality_rating must be between 0 and 10.")
    return rating


def _normalize_service_areas(areas: List[Dict]) -> List[Dict]:
    out = []
    for idx, a in enumerate(areas, 1):
        country = (a.get("country") or "").strip()
        if not country:
            raise ValueError(f"Service area {idx}: country is required.")
        out.append(
            {
                "country": country,
                "region": (a.get("region") or "").strip() or None,
                "ports": list(a.get("ports") or []),
            }
        )
    return out


def _normalize_port_capabilities(caps: List[Dict]) -> List[Dict]:
    out = []
    for idx, c in enumerate(caps, 1):
        port_code = (c.get("port_code") or "").strip()
        port_name = (c.get("port_name") or "").strip()
        if not port_code or not port_name:
            raise ValueError(f"Port capability {idx}: port_code and port_name are required.")
        out.append(
            {
                "port_code": port_code,
                "port_name": port_name,
                "capabilities": [str(x).strip().lower() for x in c.get("capabilities") or []],
            }
        )
    return out


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
