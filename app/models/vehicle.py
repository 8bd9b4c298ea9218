# app/models/vehicle.py
"""
Customer vehicles. Each row belongs to exactly one identity (user_id);
every read and write is filtered by that owner.
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class VehicleType(str, enum.Enum):
    SEDAN = "sedan"
    SUV = "suv"
    TRUCK = "truck"
    VAN = "van"
    COUPE = "coupe"
    CONVERTIBLE = "convertible"
    HATCHBACK = "hatchback"
    WAGON = "wagon"
    OTHER = "other"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(50), nullable=False)
    license_plate = Column(String(20), nullable=False)
    vehicle_type = Column(String(20), default=VehicleType.SEDAN.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Vehicle {self.id} {self.year} {self.make} {self.model} plate={self.license_plate}>"
