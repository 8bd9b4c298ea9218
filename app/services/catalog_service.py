# app/services/catalog_service.py
"""
Vendor catalog: vendor profiles, service listings, service areas and postal-code search.
Vendor-side writes are scoped by vendor_id == caller's identity id.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from app.config import settings
from app.exceptions import NotFoundError, ValidationError
from app.models.booking import BookingStatus
from app.models.service_listing import ServiceType
from app.services.booking_service import list_vendor_bookings, with_parties
from app.services.gateway import DataGateway
from app.services.identity_provider import VENDOR, SessionContext, ensure_authenticated
from app.services.profile_service import ensure_profile
from app.utils.logger import get_logger

logger = get_logger(__name__)

SERVICE_REQUIRED_FIELDS = ("name", "description", "service_type", "price", "duration")
VENDOR_EDITABLE_FIELDS = ("business_name", "business_description", "is_mobile", "service_radius", "logo_url")
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_vendor(gateway: DataGateway, session: Optional[SessionContext]) -> SessionContext:
    session = ensure_authenticated(session)
    if not gateway.select("vendor_profiles", {"id": session.identity_id}, limit=1):
        raise NotFoundError("Vendor profile not found")
    return session


# ── Vendor profiles ──────────────────────────────────────────────────────────

def create_vendor_profile(gateway: DataGateway, session: Optional[SessionContext],
                          business_name: Optional[str] = None, business_description: str = "",
                          is_mobile: bool = True, service_radius: Optional[int] = None,
                          logo_url: Optional[str] = None):
    """Vendor sign-up. Calling it again returns the existing vendor profile unchanged."""
    session = ensure_authenticated(session)
    if service_radius is not None and service_radius < 0:
        raise ValidationError("Service radius cannot be negative.")

    existing = gateway.select("profiles", {"id": session.identity_id}, limit=1)
    if _is_blank(business_name):
        full_name = existing[0].full_name if existing else ""
        owner = full_name or (session.email or "").split("@")[0] or "Your"
        business_name = f"{owner}'s Car Wash Service"

    profile = ensure_profile(gateway, session.identity_id, email=session.email, role=VENDOR)
    if profile.role != VENDOR:
        gateway.update("profiles", {"role": VENDOR, "updated_at": datetime.utcnow()},
                       {"id": session.identity_id})

    now = datetime.utcnow()
    vendor = gateway.upsert(
        "vendor_profiles",
        {
            "id": session.identity_id,
            "business_name": business_name.strip(),
            "business_description": business_description or "",
            "is_mobile": is_mobile,
            "service_radius": service_radius,
            "logo_url": logo_url,
            "created_at": now,
            "updated_at": now,
        },
        conflict_key="id",
        ignore_duplicates=True,
    )
    logger.info(f"[Vendor] Vendor profile ready for {session.identity_id}: {vendor.business_name}")
    return vendor


def get_vendor_profile(gateway: DataGateway, vendor_id: str):
    rows = gateway.select("vendor_profiles", {"id": vendor_id}, limit=1)
    if not rows:
        raise NotFoundError("Vendor not found")
    return rows[0]


def update_vendor_profile(gateway: DataGateway, session: Optional[SessionContext], changes: dict):
    session = _require_vendor(gateway, session)
    patch = {k: v for k, v in changes.items() if k in VENDOR_EDITABLE_FIELDS and v is not None}
    if "business_name" in patch and _is_blank(patch["business_name"]):
        raise ValidationError("Business name cannot be empty.")
    if patch.get("service_radius") is not None and patch["service_radius"] < 0:
        raise ValidationError("Service radius cannot be negative.")
    if patch:
        patch["updated_at"] = datetime.utcnow()
        gateway.update("vendor_profiles", patch, {"id": session.identity_id})
    return get_vendor_profile(gateway, session.identity_id)


# ── Service listings ─────────────────────────────────────────────────────────

def validate_service(data: dict) -> dict:
    if any(_is_blank(data.get(field)) for field in SERVICE_REQUIRED_FIELDS):
        raise ValidationError("Please fill in all required fields.")

    try:
        price = Decimal(str(data["price"])).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValidationError("Please enter a valid price.") from None
    if not price.is_finite() or price <= 0:
        raise ValidationError("Please enter a valid price.")

    try:
        duration = int(data["duration"])
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid duration in minutes.") from None
    if duration <= 0:
        raise ValidationError("Please enter a valid duration in minutes.")

    service_type = data["service_type"]
    if service_type not in {t.value for t in ServiceType}:
        raise ValidationError(f"Unknown service type '{service_type}'.")

    return {
        "name": data["name"].strip(),
        "description": data["description"].strip(),
        "service_type": service_type,
        "price": price,
        "duration": duration,
    }


def create_service(gateway: DataGateway, session: Optional[SessionContext], data: dict):
    session = _require_vendor(gateway, session)
    record = validate_service(data)
    now = datetime.utcnow()
    record.update(
        vendor_id=session.identity_id,
        is_active=data.get("is_active") is not False,
        created_at=now,
        updated_at=now,
    )
    service = gateway.insert("services", record)
    logger.info(f"[Catalog] {session.identity_id} listed '{service.name}' at {service.price}")
    return service


def get_service(gateway: DataGateway, service_id: str):
    rows = gateway.select("services", {"id": service_id}, limit=1)
    if not rows:
        raise NotFoundError("Service not found")
    return rows[0]


def update_service(gateway: DataGateway, session: Optional[SessionContext], service_id: str,
                   data: dict) -> int:
    """Existing bookings keep the price and end time they were created with."""
    session = _require_vendor(gateway, session)
    patch = validate_service(data)
    if data.get("is_active") is not None:
        patch["is_active"] = bool(data["is_active"])
    patch["updated_at"] = datetime.utcnow()
    return gateway.update("services", patch, {"id": service_id, "vendor_id": session.identity_id})


def list_vendor_services(gateway: DataGateway, session: Optional[SessionContext]) -> list:
    session = _require_vendor(gateway, session)
    return gateway.select("services", {"vendor_id": session.identity_id},
                          order_by="created_at", descending=True)


def set_service_active(gateway: DataGateway, session: Optional[SessionContext], service_id: str,
                       is_active: bool) -> int:
    session = _require_vendor(gateway, session)
    affected = gateway.update("services", {"is_active": is_active, "updated_at": datetime.utcnow()},
                              {"id": service_id, "vendor_id": session.identity_id})
    logger.info(f"[Catalog] Service {service_id} active={is_active} ({affected} row)")
    return affected


def delete_service(gateway: DataGateway, session: Optional[SessionContext], service_id: str,
                   confirm: bool = False) -> int:
    """Two-step delete. Listings with pending or confirmed bookings are kept."""
    session = _require_vendor(gateway, session)
    if not confirm:
        raise ValidationError("Please confirm that you want to delete this service.")

    owned = {"id": service_id, "vendor_id": session.identity_id}
    if not gateway.select("services", owned, limit=1):
        return 0
    if gateway.select("bookings", {"service_id": service_id, "status": ACTIVE_BOOKING_STATUSES}, limit=1):
        raise ValidationError("This service has upcoming bookings. Deactivate it instead of deleting it.")

    return gateway.delete("services", owned)


# ── Service areas ────────────────────────────────────────────────────────────

def _normalise_zip(zip_code: Optional[str]) -> str:
    return (zip_code or "").strip().upper()


def add_service_area(gateway: DataGateway, session: Optional[SessionContext], zip_code: str):
    session = _require_vendor(gateway, session)
    zip_code = _normalise_zip(zip_code)
    if not zip_code:
        raise ValidationError("Please enter a ZIP code.")
    return gateway.upsert(
        "vendor_service_areas",
        {"vendor_id": session.identity_id, "zip_code": zip_code},
        conflict_key=("vendor_id", "zip_code"),
        ignore_duplicates=True,
    )


def remove_service_area(gateway: DataGateway, session: Optional[SessionContext], zip_code: str) -> int:
    session = _require_vendor(gateway, session)
    return gateway.delete("vendor_service_areas",
                          {"vendor_id": session.identity_id, "zip_code": _normalise_zip(zip_code)})


def list_service_areas(gateway: DataGateway, session: Optional[SessionContext]) -> list:
    session = _require_vendor(gateway, session)
    return gateway.select("vendor_service_areas", {"vendor_id": session.identity_id}, order_by="zip_code")


# ── Search & vendor pages ────────────────────────────────────────────────────

def search_by_postal_code(gateway: DataGateway, postal_code: str,
                          service_type: Optional[str] = None) -> list[dict]:
    """
    Vendors serving `postal_code` together with their active listings
    (optionally of one service type). Vendors with no matching listing are left out.
    """
    postal_code = _normalise_zip(postal_code)
    if not postal_code:
        raise ValidationError("Please enter a ZIP code to search.")
    if service_type and service_type not in {t.value for t in ServiceType}:
        raise ValidationError(f"Unknown service type '{service_type}'.")

    areas = gateway.select("vendor_service_areas", {"zip_code": postal_code})
    vendor_ids = list(dict.fromkeys(area.vendor_id for area in areas))
    if not vendor_ids:
        return []

    filters = {"vendor_id": vendor_ids, "is_active": True}
    if service_type:
        filters["service_type"] = service_type
    services_by_vendor = defaultdict(list)
    for service in gateway.select("services", filters):
        services_by_vendor[service.vendor_id].append(service)
    if not services_by_vendor:
        return []

    vendors = {v.id: v for v in gateway.select("vendor_profiles", {"id": list(services_by_vendor)})}
    results = [
        {"vendor": vendors[vendor_id], "services": services_by_vendor[vendor_id]}
        for vendor_id in vendor_ids
        if vendor_id in services_by_vendor and vendor_id in vendors
    ]
    logger.info(f"[Search] zip={postal_code} type={service_type or '*'} → {len(results)} vendors")
    return results


def get_vendor_detail(gateway: DataGateway, vendor_id: str) -> dict:
    """
    Public vendor page: profile, owner contact details, active listings cheapest
    first, latest reviews with the reviewer's name.
    """
    vendor = get_vendor_profile(gateway, vendor_id)
    owner = gateway.select("profiles", {"id": vendor_id}, limit=1)
    contact = None
    if owner:
        contact = {"full_name": owner[0].full_name, "email": owner[0].email,
                   "phone_number": owner[0].phone_number}

    reviews = gateway.select("reviews", {"vendor_id": vendor_id}, order_by="created_at",
                             descending=True, limit=settings.VENDOR_DETAIL_REVIEWS)
    reviewers = {}
    if reviews:
        reviewers = {p.id: p.full_name for p in gateway.select("profiles", {"id": {r.user_id for r in reviews}})}

    return {
        "vendor": vendor,
        "contact": contact,
        "services": gateway.select("services", {"vendor_id": vendor_id, "is_active": True}, order_by="price"),
        "reviews": [
            {"id": r.id, "user_id": r.user_id, "rating": r.rating, "comment": r.comment,
             "created_at": r.created_at, "reviewer_name": reviewers.get(r.user_id)}
            for r in reviews
        ],
    }


def get_vendor_dashboard(gateway: DataGateway, session: Optional[SessionContext]) -> dict:
    session = _require_vendor(gateway, session)
    bookings = list_vendor_bookings(gateway, session, limit=settings.VENDOR_DASHBOARD_BOOKINGS)
    return {
        "vendor": get_vendor_profile(gateway, session.identity_id),
        "services": gateway.select("services", {"vendor_id": session.identity_id},
                                   order_by="created_at", descending=True),
        "bookings": with_parties(gateway, bookings),
    }
