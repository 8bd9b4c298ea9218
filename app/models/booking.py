# app/models/booking.py
"""
Bookings: a customer's reservation of a service listing for one vehicle, date and time window.
end_time and total_price are fixed at creation; only status (and updated_at) change afterwards.
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Text, Numeric
from app.database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)      # customer identity id
    vendor_id = Column(String(36), nullable=False, index=True)
    service_id = Column(String(36), nullable=False)
    vehicle_id = Column(String(36), nullable=False, index=True)
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)                # HH:MM
    end_time = Column(String(5), nullable=False)                  # HH:MM
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False)
    notes = Column(Text, default="")
    total_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return (f"<Booking {self.id} vendor={self.vendor_id} {self.booking_date} "
                f"{self.start_time}-{self.end_time} status={self.status}>")
