# app/db/models/marketplace/appointment.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, date
import uuid

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    technician_id: str = Field(index=True)
    status: str = Field(default="Scheduled", index=True)
    service_type: str = Field(default="walk-in")

    # Diagnosis snapshot taken at booking time
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    issue: str
    diagnosis: str
    estimated_cost: int = Field(default=0)
    is_custom_issue: bool = Field(default=False)
    diagnosis_id: Optional[str] = None

    # Customer location for home service
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    scheduled_date: datetime
    cancel_deadline: Optional[datetime] = None
    estimated_completion: Optional[date] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    accepted_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    repair_started_at: Optional[datetime] = None
    testing_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    rejection_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None

    rated: bool = Field(default=False)
    user_rating: Optional[int] = None
    rated_at: Optional[datetime] = None
