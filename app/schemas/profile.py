# app/schemas/profile.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None


class ProfileOut(BaseModel):
    id: str
    full_name: str
    avatar_url: str
    email: Optional[str]
    phone_number: Optional[str]
    address: Optional[str]
    postal_code: Optional[str]
    role: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
