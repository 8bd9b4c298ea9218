# app/models/service_listing.py
"""
Bookable offerings owned by a vendor. Only active listings show up in search.
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, Numeric
from app.database import Base


class ServiceType(str, enum.Enum):
    BASIC_WASH = "basic_wash"
    PREMIUM_WASH = "premium_wash"
    INTERIOR_CLEANING = "interior_cleaning"
    FULL_DETAIL = "full_detail"
    CUSTOM = "custom"


class ServiceListing(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vendor_id = Column(String(36), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    service_type = Column(String(30), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)           # minutes
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ServiceListing {self.id} vendor={self.vendor_id} name={self.name} active={self.is_active}>"
