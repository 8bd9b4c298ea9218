# app/models/vendor_service_area.py
"""Postal codes a vendor serves. Used only to filter search results."""

import uuid
from sqlalchemy import Column, String, UniqueConstraint
from app.database import Base


class VendorServiceArea(Base):
    __tablename__ = "vendor_service_areas"
    __table_args__ = (UniqueConstraint("vendor_id", "zip_code", name="uq_vendor_zip"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vendor_id = Column(String(36), nullable=False, index=True)
    zip_code = Column(String(20), nullable=False, index=True)

    def __repr__(self):
        return f"<VendorServiceArea vendor={self.vendor_id} zip={self.zip_code}>"
