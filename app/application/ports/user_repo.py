from dataclasses import dataclass
from typing import Optional
from datetime import datetime

from .geocoder import SelectedLocation


@dataclass
class UserDto:
    id: str
    username: str
    phone: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class UserRepository:
    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        ...

    def save_location(self, user_id: str, location: SelectedLocation) -> None:
        ...

    def get_location(self, user_id: str) -> Optional[SelectedLocation]:
        ...

    def set_profile_image(self, user_id: str, url: Optional[str]) -> None:
        ...
