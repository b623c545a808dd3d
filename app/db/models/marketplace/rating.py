# app/db/models/marketplace/rating.py
from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Rating(SQLModel, table=True):
    __tablename__ = "ratings"
    __table_args__ = (UniqueConstraint("technician_id", "user_id", name="uq_rating_technician_user"),)
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    technician_id: str = Field(index=True)
    user_id: str
    appointment_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
