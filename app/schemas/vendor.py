# app/schemas/vendor.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from app.schemas.booking import VendorBookingOut
from app.schemas.service_listing import ServiceOut


class VendorProfileIn(BaseModel):
    business_name: Optional[str] = None
    business_description: Optional[str] = None
    is_mobile: Optional[bool] = None
    service_radius: Optional[int] = None   # miles
    logo_url: Optional[str] = None


class VendorProfileOut(BaseModel):
    id: str
    business_name: str
    business_description: Optional[str]
    is_mobile: bool
    service_radius: Optional[int]
    average_rating: Optional[float]
    logo_url: Optional[str]

    class Config:
        from_attributes = True


class ServiceAreaIn(BaseModel):
    zip_code: str


class ServiceAreaOut(BaseModel):
    vendor_id: str
    zip_code: str

    class Config:
        from_attributes = True


class ReviewOut(BaseModel):
    id: str
    user_id: str
    rating: int
    comment: Optional[str]
    created_at: datetime
    reviewer_name: Optional[str] = None

    class Config:
        from_attributes = True


class VendorSearchResult(BaseModel):
    vendor: VendorProfileOut
    services: list[ServiceOut]


class VendorContactOut(BaseModel):
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None


class VendorDetailOut(BaseModel):
    vendor: VendorProfileOut
    contact: Optional[VendorContactOut] = None
    services: list[ServiceOut]
    reviews: list[ReviewOut]


class VendorDashboardOut(BaseModel):
    vendor: VendorProfileOut
    services: list[ServiceOut]
    bookings: list[VendorBookingOut]
