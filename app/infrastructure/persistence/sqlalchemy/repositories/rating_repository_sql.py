from typing import List, Optional
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Rating
from .....application.ports.rating_repo import RatingRepository


class SqlRatingRepository(RatingRepository):
    def __init__(self, session: Session):
        self.session = session

    def _existing(self, technician_id: str, user_id: str) -> Optional[Rating]:
        return self.session.exec(
            select(Rating)
            .where(Rating.technician_id == technician_id)
            .where(Rating.user_id == user_id)
        ).first()

    def upsert(self, technician_id: str, user_id: str, appointment_id: str, rating: int, comment: Optional[str] = None) -> None:
        for _ in range(2):
            row = self._existing(technician_id, user_id)
            if row:
                row.rating = rating
                row.comment = comment
                row.appointment_id = appointment_id
                row.updated_at = datetime.utcnow()
            else:
                row = Rating(technician_id=technician_id, user_id=user_id, appointment_id=appointment_id, rating=rating, comment=comment)
            try:
                self.session.add(row)
                self.session.commit()
                return
            except IntegrityError:
                # A concurrent first rating won the insert; retry as an update
                self.session.rollback()
            except Exception:
                self.session.rollback()
                raise
        raise RuntimeError(f"Could not store rating for technician {technician_id}")

    def ratings_for_technician(self, technician_id: str) -> List[int]:
        return list(self.session.exec(select(Rating.rating).where(Rating.technician_id == technician_id)).all())
