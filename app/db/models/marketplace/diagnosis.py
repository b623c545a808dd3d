# app/db/models/marketplace/diagnosis.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Diagnosis(SQLModel, table=True):
    __tablename__ = "diagnoses"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    issue_description: str
    diagnosis: str
    estimated_cost: int
    source: str  # static | ai | heuristic
    provider: Optional[str] = None
    is_custom_issue: bool = Field(default=False)
    status: str = Field(default="completed")
    created_at: datetime = Field(default_factory=datetime.utcnow)
