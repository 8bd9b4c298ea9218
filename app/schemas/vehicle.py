# app/schemas/vehicle.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class VehicleIn(BaseModel):
    """Create/update form. Required-field checks happen in vehicle_service so the message matches the UI."""
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vehicle_type: Optional[str] = None     # sedan | suv | truck | van | coupe | convertible | hatchback | wagon | other


class VehicleOut(BaseModel):
    id: str
    user_id: str
    make: str
    model: str
    year: int
    color: str
    license_plate: str
    vehicle_type: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
