from typing import Optional
from datetime import datetime
from sqlmodel import Session, select

from .....db.models import User
from .....application.ports.geocoder import SelectedLocation
from .....application.ports.user_repo import UserRepository, UserDto


class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _get(self, user_id: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.id == user_id)).first()

    def _save(self, u: User) -> None:
        u.updated_at = datetime.utcnow()
        try:
            self.session.add(u)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        u = self._get(user_id)
        if not u:
            return None
        return UserDto(
            id=u.id,
            username=u.username,
            phone=u.phone,
            email=u.email,
            profile_image_url=u.profile_image_url,
            created_at=u.created_at,
        )

    def save_location(self, user_id: str, location: SelectedLocation) -> None:
        u = self._get(user_id)
        if not u:
            return
        u.latitude = location.latitude
        u.longitude = location.longitude
        u.address = location.address
        self._save(u)

    def get_location(self, user_id: str) -> Optional[SelectedLocation]:
        u = self._get(user_id)
        if not u or u.latitude is None or u.longitude is None or not u.address:
            return None
        return SelectedLocation(latitude=u.latitude, longitude=u.longitude, address=u.address)

    def set_profile_image(self, user_id: str, url: Optional[str]) -> None:
        u = self._get(user_id)
        if not u:
            return
        u.profile_image_url = url
        self._save(u)
