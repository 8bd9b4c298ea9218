# app/services/booking_service.py
"""
Booking orchestrator.

create_booking turns a customer's selection (service, vehicle, date, start time) into a
`pending` booking. The service listing is the one the caller already loaded: its duration
gives end_time and its price is copied into total_price. Neither is ever recomputed.

Overlapping bookings for the same vendor are accepted; there is no slot check.
Status changes after creation are made by the vendor through update_booking_status.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models.booking import BookingStatus
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext, ensure_authenticated
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields."
_TIME_FORMATS = ("%H:%M", "%H:%M:%S")

STATUS_TRANSITIONS = {
    BookingStatus.PENDING.value: {BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value},
    BookingStatus.CONFIRMED.value: {BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value},
}


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_start_time(value: Union[str, time]) -> time:
    """24-hour HH:MM (seconds tolerated)."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time().replace(second=0)
        except ValueError:
            continue
    raise ValidationError("Please enter a valid start time (HH:MM).")


def parse_booking_date(value: Union[str, date]) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Please enter a valid booking date (YYYY-MM-DD).") from None


def compute_end_time(start_time: Union[str, time], duration_minutes: int) -> str:
    """
    start + duration as HH:MM. Crossing midnight wraps the clock
    (23:00 + 90 → 00:30); the booking date is not moved.
    """
    start = parse_start_time(start_time)
    end = datetime.combine(date.today(), start) + timedelta(minutes=int(duration_minutes))
    return end.strftime("%H:%M")


def create_booking(gateway: DataGateway, session: Optional[SessionContext], vendor_id: str, service,
                   vehicle_id: str, booking_date: Union[str, date], start_time: Union[str, time],
                   notes: Optional[str] = None):
    """
    Persist a booking request in `pending` status. `service` is the loaded listing
    (anything with id, duration and price).
    """
    session = ensure_authenticated(session)

    if service is None or _is_blank(getattr(service, "id", None)) \
            or any(_is_blank(v) for v in (vehicle_id, vendor_id, booking_date, start_time)):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    listing_vendor = getattr(service, "vendor_id", None)
    if listing_vendor is not None and listing_vendor != vendor_id:
        raise ValidationError("The selected service is not offered by this vendor.")
    if not service.duration or int(service.duration) <= 0:
        raise ValidationError("The selected service has no valid duration.")

    start = parse_start_time(start_time)
    record = {
        "user_id": session.identity_id,
        "vendor_id": vendor_id,
        "service_id": service.id,
        "vehicle_id": vehicle_id,
        "booking_date": parse_booking_date(booking_date),
        "start_time": start.strftime("%H:%M"),
        "end_time": compute_end_time(start, service.duration),
        "status": BookingStatus.PENDING.value,
        "notes": notes or "",
        "total_price": service.price,
    }

    try:
        booking = gateway.insert("bookings", record)
    except PersistenceError as e:
        logger.error(f"[Booking] Insert failed for {session.identity_id} → vendor {vendor_id}: {e.detail}")
        raise

    logger.info(
        f"[Booking] {booking.id} | customer={session.identity_id} vendor={vendor_id} "
        f"{record['booking_date']} {record['start_time']}-{record['end_time']} price={record['total_price']}"
    )
    return booking


def list_customer_bookings(gateway: DataGateway, session: Optional[SessionContext]) -> list:
    session = ensure_authenticated(session)
    return gateway.select("bookings", {"user_id": session.identity_id},
                          order_by="booking_date", descending=True)


def list_vendor_bookings(gateway: DataGateway, session: Optional[SessionContext],
                         limit: Optional[int] = None) -> list:
    session = ensure_authenticated(session)
    return gateway.select("bookings", {"vendor_id": session.identity_id},
                          order_by="booking_date", descending=True, limit=limit)


def update_booking_status(gateway: DataGateway, session: Optional[SessionContext], booking_id: str,
                          status: str):
    """Vendor-side transition: pending → confirmed|cancelled, confirmed → completed|cancelled."""
    session = ensure_authenticated(session)
    try:
        new_status = BookingStatus(status).value
    except ValueError:
        raise ValidationError(f"Unknown booking status '{status}'.") from None

    rows = gateway.select("bookings", {"id": booking_id, "vendor_id": session.identity_id}, limit=1)
    if not rows:
        raise NotFoundError("Booking not found")
    current = rows[0].status

    if new_status not in STATUS_TRANSITIONS.get(current, set()):
        raise ValidationError(f"A {current} booking cannot be changed to {new_status}.")

    # Matching on the old status as well keeps two racing vendors from both succeeding
    affected = gateway.update(
        "bookings",
        {"status": new_status, "updated_at": datetime.utcnow()},
        {"id": booking_id, "vendor_id": session.identity_id, "status": current},
    )
    if not affected:
        raise ValidationError("The booking was changed by someone else. Please reload and try again.")

    logger.info(f"[Booking] {booking_id}: {current} → {new_status}")
    return gateway.select_one("bookings", {"id": booking_id})


def _columns(row) -> dict:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def with_parties(gateway: DataGateway, bookings: list) -> list[dict]:
    """
    Booking rows as dicts carrying the customer's name/email and the booked
    service's name/price, as the vendor's booking list shows them.
    """
    if not bookings:
        return []
    customers = {p.id: p for p in gateway.select("profiles", {"id": {b.user_id for b in bookings}})}
    services = {s.id: s for s in gateway.select("services", {"id": {b.service_id for b in bookings}})}

    described = []
    for booking in bookings:
        row = _columns(booking)
        customer = customers.get(booking.user_id)
        service = services.get(booking.service_id)
        row["customer"] = {"full_name": customer.full_name, "email": customer.email} if customer else None
        row["service"] = {"name": service.name, "price": service.price} if service else None
        described.append(row)
    return described
