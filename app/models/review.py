# app/models/review.py
"""Customer reviews of vendors. Read-only from this service."""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, CheckConstraint
from app.database import Base


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vendor_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Review {self.id} vendor={self.vendor_id} rating={self.rating}>"
