from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from .....db.models import Appointment, Technician
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    BookingRequest,
)


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            user_id=a.user_id,
            technician_id=a.technician_id,
            status=a.status,
            service_type=a.service_type,
            category=a.category,
            issue=a.issue,
            diagnosis=a.diagnosis,
            estimated_cost=a.estimated_cost,
            scheduled_date=a.scheduled_date,
            created_at=a.created_at,
            brand=a.brand,
            model=a.model,
            is_custom_issue=a.is_custom_issue,
            diagnosis_id=a.diagnosis_id,
            address=a.address,
            latitude=a.latitude,
            longitude=a.longitude,
            cancel_deadline=a.cancel_deadline,
            estimated_completion=a.estimated_completion,
            accepted_at=a.accepted_at,
            arrived_at=a.arrived_at,
            repair_started_at=a.repair_started_at,
            testing_started_at=a.testing_started_at,
            completed_at=a.completed_at,
            rejected_at=a.rejected_at,
            cancelled_at=a.cancelled_at,
            rejection_reason=a.rejection_reason,
            cancellation_reason=a.cancellation_reason,
            rated=bool(a.rated),
            user_rating=a.user_rating,
            rated_at=a.rated_at,
        )

    def create(self, user_id: str, request: BookingRequest, status: str, created_at: datetime, cancel_deadline: datetime) -> AppointmentDto:
        appt = Appointment(
            user_id=user_id,
            technician_id=request.technician_id,
            status=status,
            service_type=request.service_type,
            category=request.category,
            brand=request.brand,
            model=request.model,
            issue=request.issue,
            diagnosis=request.diagnosis,
            estimated_cost=request.estimated_cost,
            is_custom_issue=request.is_custom_issue,
            diagnosis_id=request.diagnosis_id,
            address=request.address,
            latitude=request.latitude,
            longitude=request.longitude,
            scheduled_date=request.scheduled_date,
            cancel_deadline=cancel_deadline,
            created_at=created_at,
        )
        try:
            self.session.add(appt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(appt)
        return self._appt_to_dto(appt)

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        return self._appt_to_dto(a) if a else None

    def list_for_user(self, user_id: str) -> List[AppointmentDto]:
        rows = self.session.exec(
            select(Appointment)
            .where(Appointment.user_id == user_id)
            .order_by(Appointment.created_at.desc())
        ).all()
        return [self._appt_to_dto(r) for r in rows]

    def list_for_technician(self, technician_id: str, statuses: Optional[Sequence[str]] = None) -> List[AppointmentDto]:
        query = select(Appointment).where(Appointment.technician_id == technician_id)
        if statuses:
            query = query.where(Appointment.status.in_(list(statuses)))
        rows = self.session.exec(query.order_by(Appointment.scheduled_date.asc())).all()
        return [self._appt_to_dto(r) for r in rows]

    def transition(self, appointment_id: str, expected: Sequence[str], changes: Dict[str, Any], arrived: Optional[bool] = None) -> bool:
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.status.in_(list(expected)))
        )
        if arrived is True:
            stmt = stmt.where(Appointment.arrived_at.is_not(None))
        elif arrived is False:
            stmt = stmt.where(Appointment.arrived_at.is_(None))
        return self._execute(stmt.values(**changes))

    def start_repair(self, appointment_id: str, technician_id: str, expected: Sequence[str], busy: Sequence[str], changes: Dict[str, Any]) -> bool:
        other = aliased(Appointment)
        another_job = (
            select(other.id)
            .where(other.technician_id == technician_id)
            .where(other.status.in_(list(busy)))
            .where(other.id != appointment_id)
            .exists()
        )
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.technician_id == technician_id)
            .where(Appointment.status.in_(list(expected)))
            .where(~another_job)
            .values(**changes)
        )
        return self._execute(stmt, lock_technician=technician_id)

    def mark_rated(self, appointment_id: str, user_id: str, completed: Sequence[str], rating: int, rated_at: datetime) -> bool:
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.user_id == user_id)
            .where(Appointment.status.in_(list(completed)))
            .where(Appointment.rated == False)  # noqa: E712
            .values(rated=True, user_rating=rating, rated_at=rated_at)
        )
        return self._execute(stmt)

    def unmark_rated(self, appointment_id: str, user_id: str) -> bool:
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.user_id == user_id)
            .where(Appointment.rated == True)  # noqa: E712
            .values(rated=False, user_rating=None, rated_at=None)
        )
        return self._execute(stmt)

    def _execute(self, stmt, lock_technician: Optional[str] = None) -> bool:
        try:
            if lock_technician:
                # Serialises per-technician gate checks on databases with row locks
                self.session.exec(select(Technician.id).where(Technician.id == lock_technician).with_for_update()).first()
            result = self.session.execute(stmt.execution_options(synchronize_session=False))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount > 0
