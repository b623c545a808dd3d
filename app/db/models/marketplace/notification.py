# app/db/models/marketplace/notification.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Notification(SQLModel, table=True):
    __tablename__ = "notifications"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    type: str
    message: str
    read: bool = Field(default=False)
    # Set only for one-time notifications, e.g. "<user_id>:welcome"
    dedupe_key: Optional[str] = Field(default=None, unique=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
