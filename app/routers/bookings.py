# app/routers/bookings.py
"""Customer booking requests and vendor booking management."""

from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_gateway, get_session_context
from app.exceptions import ValidationError
from app.schemas.booking import BookingCreate, BookingOut, BookingStatusUpdate, VendorBookingOut
from app.services import booking_service, catalog_service, vehicle_service
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext, ensure_authenticated

router = APIRouter()


@router.post("/bookings", response_model=BookingOut, status_code=201, summary="Request a booking")
def create_booking(body: BookingCreate, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    session = ensure_authenticated(session)
    if not body.service_id:
        raise ValidationError(booking_service.REQUIRED_FIELDS_MESSAGE)

    # Load what the booking form shows: the listing (duration, price) and the caller's own vehicle
    service = catalog_service.get_service(gateway, body.service_id)
    if not service.is_active:
        raise ValidationError("This service is no longer available.")
    if body.vehicle_id:
        vehicle_service.get_vehicle(gateway, session, body.vehicle_id)

    return booking_service.create_booking(
        gateway, session,
        vendor_id=body.vendor_id,
        service=service,
        vehicle_id=body.vehicle_id,
        booking_date=body.booking_date,
        start_time=body.start_time,
        notes=body.notes,
    )


@router.get("/bookings", response_model=list[BookingOut], summary="My bookings")
def list_my_bookings(gateway: DataGateway = Depends(get_gateway),
                     session: Optional[SessionContext] = Depends(get_session_context)):
    return booking_service.list_customer_bookings(gateway, session)


@router.get("/vendor/bookings", response_model=list[VendorBookingOut], summary="Bookings for my services")
def list_vendor_bookings(limit: Optional[int] = None, gateway: DataGateway = Depends(get_gateway),
                         session: Optional[SessionContext] = Depends(get_session_context)):
    bookings = booking_service.list_vendor_bookings(gateway, session, limit=limit)
    return booking_service.with_parties(gateway, bookings)


@router.patch("/vendor/bookings/{booking_id}/status", response_model=BookingOut,
              summary="Confirm, complete or cancel a booking")
def update_booking_status(booking_id: str, body: BookingStatusUpdate, gateway: DataGateway = Depends(get_gateway),
                          session: Optional[SessionContext] = Depends(get_session_context)):
    return booking_service.update_booking_status(gateway, session, booking_id, body.status)
