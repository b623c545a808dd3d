# app/db/models/marketplace/technician.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Technician(SQLModel, table=True):
    __tablename__ = "technicians"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    username: str = Field(max_length=100)
    phone: Optional[str] = Field(max_length=20, default=None)
    email: Optional[str] = Field(max_length=100, default=None)
    type: Optional[str] = Field(default=None)  # freelance | shop
    shop_name: Optional[str] = None
    categories: str = Field(default="[]")  # JSON list of appliance categories
    status: str = Field(default="non-registered", index=True)
    availability: bool = Field(default=True)
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    profile_image_url: Optional[str] = Field(max_length=500, default=None)
    average_rating: float = Field(default=0.0)
    total_ratings: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
