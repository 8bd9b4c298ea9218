# app/schemas/service_listing.py
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ServiceIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    service_type: Optional[str] = None     # basic_wash | premium_wash | interior_cleaning | full_detail | custom
    price: Optional[Decimal] = None
    duration: Optional[int] = None         # minutes
    is_active: Optional[bool] = None       # omitted on edit keeps the current state


class ServiceActiveUpdate(BaseModel):
    is_active: bool


class ServiceOut(BaseModel):
    id: str
    vendor_id: str
    name: str
    description: Optional[str]
    service_type: str
    price: float
    duration: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
