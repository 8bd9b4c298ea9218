# app/services/vehicle_service.py
"""
Vehicle registry: ownership-scoped CRUD for customer vehicles.
Every read and write filters on (id, user_id), so a foreign vehicle id simply matches nothing.
"""

from datetime import date, datetime
from typing import Optional

from app.exceptions import NotFoundError, ValidationError
from app.models.booking import BookingStatus
from app.models.vehicle import VehicleType
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext, ensure_authenticated
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("make", "model", "year", "color", "license_plate")
MIN_YEAR = 1900
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def max_vehicle_year() -> int:
    """Next year's models are already on the road."""
    return date.today().year + 1


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_vehicle(data: dict) -> dict:
    """Check a create/update form and return the cleaned record."""
    if any(_is_blank(data.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError("Please fill in all required fields.")

    try:
        year = int(data["year"])
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid year.") from None
    if year < MIN_YEAR or year > max_vehicle_year():
        raise ValidationError("Please enter a valid year.")

    vehicle_type = data.get("vehicle_type") or VehicleType.SEDAN.value
    if vehicle_type not in {t.value for t in VehicleType}:
        raise ValidationError(f"Unknown vehicle type '{vehicle_type}'.")

    return {
        "make": data["make"].strip(),
        "model": data["model"].strip(),
        "year": year,
        "color": data["color"].strip(),
        "license_plate": data["license_plate"].strip().upper(),
        "vehicle_type": vehicle_type,
    }


def create_vehicle(gateway: DataGateway, session: Optional[SessionContext], data: dict):
    session = ensure_authenticated(session)
    record = validate_vehicle(data)
    now = datetime.utcnow()
    record.update(user_id=session.identity_id, created_at=now, updated_at=now)
    vehicle = gateway.insert("vehicles", record)
    logger.info(f"[Vehicle] {session.identity_id} added {vehicle.year} {vehicle.make} {vehicle.model}")
    return vehicle


def list_vehicles(gateway: DataGateway, session: Optional[SessionContext]) -> list:
    """The caller's vehicles, most recently added first."""
    session = ensure_authenticated(session)
    return gateway.select("vehicles", {"user_id": session.identity_id},
                          order_by="created_at", descending=True)


def get_vehicle(gateway: DataGateway, session: Optional[SessionContext], vehicle_id: str):
    session = ensure_authenticated(session)
    rows = gateway.select("vehicles", {"id": vehicle_id, "user_id": session.identity_id}, limit=1)
    if not rows:
        raise NotFoundError("Vehicle not found")
    return rows[0]


def update_vehicle(gateway: DataGateway, session: Optional[SessionContext], vehicle_id: str,
                   data: dict) -> int:
    """Returns the number of rows changed: 0 when the vehicle is not the caller's."""
    session = ensure_authenticated(session)
    patch = validate_vehicle(data)
    patch["updated_at"] = datetime.utcnow()
    affected = gateway.update("vehicles", patch, {"id": vehicle_id, "user_id": session.identity_id})
    if not affected:
        logger.warning(f"[Vehicle] Update of {vehicle_id} by {session.identity_id} matched no row")
    return affected


def delete_vehicle(gateway: DataGateway, session: Optional[SessionContext], vehicle_id: str,
                   confirm: bool = False) -> int:
    """
    Two-step delete: nothing happens unless `confirm` is set.
    Vehicles with pending or confirmed bookings are kept.
    """
    session = ensure_authenticated(session)
    if not confirm:
        raise ValidationError("Please confirm that you want to delete this vehicle.")

    owned = {"id": vehicle_id, "user_id": session.identity_id}
    if not gateway.select("vehicles", owned, limit=1):
        return 0

    upcoming = gateway.select("bookings", {"vehicle_id": vehicle_id, "status": ACTIVE_BOOKING_STATUSES},
                              limit=1)
    if upcoming:
        raise ValidationError("This vehicle has upcoming bookings and cannot be deleted.")

    affected = gateway.delete("vehicles", owned)
    logger.info(f"[Vehicle] {session.identity_id} deleted {vehicle_id}")
    return affected
