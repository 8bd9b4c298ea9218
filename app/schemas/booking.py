# app/schemas/booking.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional


class BookingCreate(BaseModel):
    vendor_id: Optional[str] = None
    service_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    booking_date: Optional[str] = None     # YYYY-MM-DD
    start_time: Optional[str] = None       # HH:MM, 24-hour
    notes: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: str                            # confirmed | completed | cancelled


class BookingOut(BaseModel):
    id: str
    user_id: str
    vendor_id: str
    service_id: str
    vehicle_id: str
    booking_date: date
    start_time: str
    end_time: str
    status: str
    notes: Optional[str]
    total_price: float
    created_at: datetime

    class Config:
        from_attributes = True


class BookingCustomer(BaseModel):
    full_name: str
    email: Optional[str] = None


class BookingServiceSummary(BaseModel):
    name: str
    price: float


class VendorBookingOut(BookingOut):
    """A booking as the vendor sees it: who booked and what."""
    customer: Optional[BookingCustomer] = None
    service: Optional[BookingServiceSummary] = None
