# app/schemas/technicians/technician.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ...application.ports.technician_repo import TechnicianDto

class AvailabilityRequest(BaseModel):
    available: bool

class RegistrationReviewRequest(BaseModel):
    approved: bool
    reason: Optional[str] = None

class TechnicianResponse(BaseModel):
    id: str
    username: str
    display_name: str
    status: str
    availability: bool
    type: Optional[str] = None
    shop_name: Optional[str] = None
    categories: List[str] = []
    average_rating: float = 0.0
    total_ratings: int = 0
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dto(cls, t: TechnicianDto) -> "TechnicianResponse":
        return cls(
            id=t.id,
            username=t.username,
            display_name=t.display_name,
            status=t.status,
            availability=t.availability,
            type=t.type,
            shop_name=t.shop_name,
            categories=list(t.categories or []),
            average_rating=t.average_rating,
            total_ratings=t.total_ratings,
            profile_image_url=t.profile_image_url,
            created_at=t.created_at,
        )
