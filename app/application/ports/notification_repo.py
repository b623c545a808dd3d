from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime

NOTIFICATION_TYPES = (
    "welcome",
    "location",
    "appointment",
    "diagnosis",
    "profile",
    "system",
    "registration",
    "payment",
    "rating",
)


@dataclass
class NotificationDto:
    id: str
    user_id: str
    type: str
    message: str
    read: bool
    created_at: datetime


class NotificationRepository:
    def add(self, user_id: str, type: str, message: str) -> NotificationDto:
        ...

    def add_if_absent(self, user_id: str, type: str, message: str, dedupe_key: str) -> bool:
        """Insert unless a notification with ``dedupe_key`` exists. Returns whether it inserted."""
        ...

    def list_for_user(self, user_id: str, type: Optional[str] = None, read: Optional[bool] = None, limit: int = 50, offset: int = 0) -> List[NotificationDto]:
        ...

    def mark_read(self, notification_id: str, user_id: str) -> bool:
        ...

    def mark_all_read(self, user_id: str) -> int:
        ...

    def delete(self, notification_id: str, user_id: str) -> bool:
        ...

    def unread_count(self, user_id: str) -> int:
        ...
