# app/models/vendor_profile.py
"""
Vendor profiles: business details for identities operating under the vendor role.
Created at vendor sign-up. average_rating is denormalised from reviews and read-only here.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Boolean, Integer, Float
from app.database import Base


class VendorProfile(Base):
    __tablename__ = "vendor_profiles"

    id = Column(String(36), primary_key=True)            # identity id of the vendor
    business_name = Column(String(200), nullable=False)
    business_description = Column(Text, default="")
    is_mobile = Column(Boolean, default=True, nullable=False)
    service_radius = Column(Integer)                      # miles
    average_rating = Column(Float)
    logo_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<VendorProfile {self.id} name={self.business_name}>"
