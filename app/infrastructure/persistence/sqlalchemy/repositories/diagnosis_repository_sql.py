from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import Diagnosis
from .....application.ports.diagnosis_repo import DiagnosisRepository, DiagnosisRecord


class SqlDiagnosisRepository(DiagnosisRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_record(self, d: Diagnosis) -> DiagnosisRecord:
        return DiagnosisRecord(
            id=d.id,
            user_id=d.user_id,
            category=d.category,
            issue_description=d.issue_description,
            diagnosis=d.diagnosis,
            estimated_cost=d.estimated_cost,
            source=d.source,
            is_custom_issue=d.is_custom_issue,
            created_at=d.created_at,
            brand=d.brand,
            model=d.model,
            provider=d.provider,
            status=d.status,
        )

    def create(self, user_id: str, category: str, issue_description: str, diagnosis: str, estimated_cost: int, source: str, is_custom_issue: bool, brand: Optional[str] = None, model: Optional[str] = None, provider: Optional[str] = None) -> DiagnosisRecord:
        d = Diagnosis(
            user_id=user_id,
            category=category,
            brand=brand,
            model=model,
            issue_description=issue_description,
            diagnosis=diagnosis,
            estimated_cost=estimated_cost,
            source=source,
            provider=provider,
            is_custom_issue=is_custom_issue,
        )
        try:
            self.session.add(d)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(d)
        return self._to_record(d)

    def list_for_user(self, user_id: str) -> List[DiagnosisRecord]:
        rows = self.session.exec(
            select(Diagnosis).where(Diagnosis.user_id == user_id).order_by(Diagnosis.created_at.desc())
        ).all()
        return [self._to_record(d) for d in rows]
