from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from datetime import datetime

from .geocoder import SelectedLocation

TECHNICIAN_STATUSES = ("non-registered", "pending", "approved", "rejected")
TECHNICIAN_TYPES = ("freelance", "shop")


@dataclass
class TechnicianDto:
    id: str
    username: str
    status: str
    availability: bool
    type: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    shop_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    average_rating: float = 0.0
    total_ratings: int = 0
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.shop_name or self.username


class TechnicianRepository:
    def get_by_id(self, technician_id: str) -> Optional[TechnicianDto]:
        ...

    def set_available(self, technician_id: str) -> None:
        ...

    def set_unavailable_if_idle(self, technician_id: str, blocking: Sequence[str]) -> bool:
        """Turn availability off only while no appointment of the technician is in ``blocking``."""
        ...

    def set_status(self, technician_id: str, status: str) -> None:
        ...

    def update_rating(self, technician_id: str, average: float, total: int) -> None:
        ...

    def save_location(self, technician_id: str, location: SelectedLocation) -> None:
        ...

    def get_location(self, technician_id: str) -> Optional[SelectedLocation]:
        ...

    def set_profile_image(self, technician_id: str, url: Optional[str]) -> None:
        ...
