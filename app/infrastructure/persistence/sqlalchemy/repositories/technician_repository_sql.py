import json
from typing import Optional, Sequence
from datetime import datetime
from sqlalchemy import update
from sqlmodel import Session, select

from .....db.models import Appointment, Technician
from .....application.ports.geocoder import SelectedLocation
from .....application.ports.technician_repo import TechnicianRepository, TechnicianDto


class SqlTechnicianRepository(TechnicianRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, t: Technician) -> TechnicianDto:
        try:
            categories = json.loads(t.categories or "[]")
        except json.JSONDecodeError:
            categories = []
        return TechnicianDto(
            id=t.id,
            username=t.username,
            status=t.status,
            availability=bool(t.availability),
            type=t.type,
            categories=categories,
            shop_name=t.shop_name,
            phone=t.phone,
            email=t.email,
            average_rating=t.average_rating or 0.0,
            total_ratings=t.total_ratings or 0,
            profile_image_url=t.profile_image_url,
            created_at=t.created_at,
        )

    def _get(self, technician_id: str) -> Optional[Technician]:
        return self.session.exec(select(Technician).where(Technician.id == technician_id)).first()

    def _save(self, t: Technician) -> None:
        t.updated_at = datetime.utcnow()
        try:
            self.session.add(t)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def get_by_id(self, technician_id: str) -> Optional[TechnicianDto]:
        t = self._get(technician_id)
        return self._to_dto(t) if t else None

    def set_available(self, technician_id: str) -> None:
        t = self._get(technician_id)
        if not t:
            return
        t.availability = True
        self._save(t)

    def set_unavailable_if_idle(self, technician_id: str, blocking: Sequence[str]) -> bool:
        open_work = (
            select(Appointment.id)
            .where(Appointment.technician_id == technician_id)
            .where(Appointment.status.in_(list(blocking)))
            .exists()
        )
        stmt = (
            update(Technician)
            .where(Technician.id == technician_id)
            .where(~open_work)
            .values(availability=False, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        try:
            self.session.exec(select(Technician.id).where(Technician.id == technician_id).with_for_update()).first()
            result = self.session.execute(stmt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount > 0

    def set_status(self, technician_id: str, status: str) -> None:
        t = self._get(technician_id)
        if not t:
            return
        t.status = status
        self._save(t)

    def update_rating(self, technician_id: str, average: float, total: int) -> None:
        t = self._get(technician_id)
        if not t:
            return
        t.average_rating = average
        t.total_ratings = total
        self._save(t)

    def save_location(self, technician_id: str, location: SelectedLocation) -> None:
        t = self._get(technician_id)
        if not t:
            return
        t.latitude = location.latitude
        t.longitude = location.longitude
        t.address = location.address
        self._save(t)

    def get_location(self, technician_id: str) -> Optional[SelectedLocation]:
        t = self._get(technician_id)
        if not t or t.latitude is None or t.longitude is None or not t.address:
            return None
        return SelectedLocation(latitude=t.latitude, longitude=t.longitude, address=t.address)

    def set_profile_image(self, technician_id: str, url: Optional[str]) -> None:
        t = self._get(technician_id)
        if not t:
            return
        t.profile_image_url = url
        self._save(t)
