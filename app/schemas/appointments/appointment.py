# app/schemas/appointments/appointment.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, date

from ...application.lifecycle import customer_message_for, parse_state, technician_message_for
from ...application.ports.appointments_repo import AppointmentDto

class AppointmentCreate(BaseModel):
    technician_id: str
    service_type: str = Field(description="home-service | walk-in")
    category: str
    issue: str = Field(min_length=1)
    diagnosis: str
    estimated_cost: int = Field(ge=0)
    scheduled_date: datetime
    brand: Optional[str] = None
    model: Optional[str] = None
    is_custom_issue: bool = False
    diagnosis_id: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

class ReasonRequest(BaseModel):
    reason: str
    custom_reason: Optional[str] = None

class StartRepairRequest(BaseModel):
    estimated_completion: date

class RatingRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)

class AppointmentStatus(BaseModel):
    """Status as seen by each party. The views are derived from ``global``."""
    global_: str = Field(alias="global")
    userView: str
    technicianView: str
    rated: bool

    model_config = {"populate_by_name": True}

class AppointmentResponse(BaseModel):
    id: str
    user_id: str
    technician_id: str
    service_type: str
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    issue: str
    diagnosis: str
    estimated_cost: int
    is_custom_issue: bool
    diagnosis_id: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    scheduled_date: datetime
    cancel_deadline: Optional[datetime] = None
    estimated_completion: Optional[date] = None
    status: AppointmentStatus
    created_at: datetime
    accepted_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    repair_started_at: Optional[datetime] = None
    testing_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    user_rating: Optional[int] = None
    rated_at: Optional[datetime] = None

    @classmethod
    def from_dto(cls, appt: AppointmentDto) -> "AppointmentResponse":
        state = parse_state(appt.status)
        fields = {k: v for k, v in vars(appt).items() if k in cls.model_fields}
        fields["status"] = AppointmentStatus(
            global_=state.value,
            userView=customer_message_for(state, appt.arrived),
            technicianView=technician_message_for(state, appt.arrived),
            rated=appt.rated,
        )
        return cls(**fields)

class AppointmentListResponse(BaseModel):
    items: List[AppointmentResponse]
    total: int
