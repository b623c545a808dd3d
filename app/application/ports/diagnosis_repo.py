from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime


@dataclass
class DiagnosisRecord:
    id: str
    user_id: str
    category: str
    issue_description: str
    diagnosis: str
    estimated_cost: int
    source: str
    is_custom_issue: bool
    created_at: datetime
    brand: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    status: str = "completed"


class DiagnosisRepository:
    def create(self, user_id: str, category: str, issue_description: str, diagnosis: str, estimated_cost: int, source: str, is_custom_issue: bool, brand: Optional[str] = None, model: Optional[str] = None, provider: Optional[str] = None) -> DiagnosisRecord:
        ...

    def list_for_user(self, user_id: str) -> List[DiagnosisRecord]:
        ...
