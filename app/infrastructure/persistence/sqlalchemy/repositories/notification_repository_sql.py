from typing import List, Optional
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Notification
from .....application.ports.notification_repo import NotificationRepository, NotificationDto


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, n: Notification) -> NotificationDto:
        return NotificationDto(
            id=n.id,
            user_id=n.user_id,
            type=n.type,
            message=n.message,
            read=bool(n.read),
            created_at=n.created_at,
        )

    def _get_owned(self, notification_id: str, user_id: str) -> Optional[Notification]:
        return self.session.exec(
            select(Notification)
            .where(Notification.id == notification_id)
            .where(Notification.user_id == user_id)
        ).first()

    def add(self, user_id: str, type: str, message: str) -> NotificationDto:
        n = Notification(user_id=user_id, type=type, message=message)
        try:
            self.session.add(n)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(n)
        return self._to_dto(n)

    def add_if_absent(self, user_id: str, type: str, message: str, dedupe_key: str) -> bool:
        n = Notification(user_id=user_id, type=type, message=message, dedupe_key=dedupe_key)
        try:
            self.session.add(n)
            self.session.commit()
        except IntegrityError:
            # Unique dedupe_key: someone already inserted this one-time notification
            self.session.rollback()
            return False
        except Exception:
            self.session.rollback()
            raise
        return True

    def list_for_user(self, user_id: str, type: Optional[str] = None, read: Optional[bool] = None, limit: int = 50, offset: int = 0) -> List[NotificationDto]:
        query = select(Notification).where(Notification.user_id == user_id)
        if type:
            query = query.where(Notification.type == type)
        if read is not None:
            query = query.where(Notification.read == read)
        rows = self.session.exec(
            query.order_by(Notification.created_at.desc()).offset(offset).limit(limit)
        ).all()
        return [self._to_dto(n) for n in rows]

    def mark_read(self, notification_id: str, user_id: str) -> bool:
        n = self._get_owned(notification_id, user_id)
        if not n:
            return False
        n.read = True
        try:
            self.session.add(n)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read == False)  # noqa: E712
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount

    def delete(self, notification_id: str, user_id: str) -> bool:
        n = self._get_owned(notification_id, user_id)
        if not n:
            return False
        try:
            self.session.delete(n)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    def unread_count(self, user_id: str) -> int:
        return self.session.exec(
            select(func.count(Notification.id))
            .where(Notification.user_id == user_id)
            .where(Notification.read == False)  # noqa: E712
        ).one()
