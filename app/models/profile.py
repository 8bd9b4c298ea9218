# app/models/profile.py
"""
Profiles table: one row per identity issued by the identity provider.
The primary key IS the identity id, so the store itself forbids duplicates.
Created by the new-user webhook or, as a fallback, by profile_service.ensure_profile.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime
from app.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)           # identity id
    full_name = Column(String(200), default="", nullable=False)
    avatar_url = Column(String(500), default="", nullable=False)
    email = Column(String(320))
    phone_number = Column(String(50))
    address = Column(String(500))
    postal_code = Column(String(20))
    role = Column(String(20), default="customer", nullable=False)  # customer | vendor
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Profile {self.id} role={self.role}>"
