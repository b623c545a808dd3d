# app/schemas/notifications/notification.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class NotificationResponse(BaseModel):
    id: str
    type: str
    message: str
    read: bool
    created_at: datetime

class NotificationFilters(BaseModel):
    type: Optional[str] = None
    read: Optional[bool] = None
    limit: Optional[int] = 50
    offset: Optional[int] = 0

class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    unread_count: int
