from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime, date


@dataclass
class BookingRequest:
    technician_id: str
    service_type: str
    category: str
    issue: str
    diagnosis: str
    estimated_cost: int
    scheduled_date: datetime
    brand: Optional[str] = None
    model: Optional[str] = None
    is_custom_issue: bool = False
    diagnosis_id: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass
class AppointmentDto:
    id: str
    user_id: str
    technician_id: str
    status: str
    service_type: str
    category: str
    issue: str
    diagnosis: str
    estimated_cost: int
    scheduled_date: datetime
    created_at: datetime
    brand: Optional[str] = None
    model: Optional[str] = None
    is_custom_issue: bool = False
    diagnosis_id: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    cancel_deadline: Optional[datetime] = None
    estimated_completion: Optional[date] = None
    accepted_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    repair_started_at: Optional[datetime] = None
    testing_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    rated: bool = False
    user_rating: Optional[int] = None
    rated_at: Optional[datetime] = None

    @property
    def arrived(self) -> bool:
        return self.arrived_at is not None


class AppointmentsRepository:
    def create(self, user_id: str, request: BookingRequest, status: str, created_at: datetime, cancel_deadline: datetime) -> AppointmentDto:
        ...

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def list_for_user(self, user_id: str) -> List[AppointmentDto]:
        ...

    def list_for_technician(self, technician_id: str, statuses: Optional[Sequence[str]] = None) -> List[AppointmentDto]:
        ...

    def transition(self, appointment_id: str, expected: Sequence[str], changes: Dict[str, Any], arrived: Optional[bool] = None) -> bool:
        """Apply ``changes`` only while the stored status is one of ``expected``.

        ``arrived`` additionally requires arrival to be confirmed (True) or not
        yet confirmed (False). Returns whether a row was updated.
        """
        ...

    def start_repair(self, appointment_id: str, technician_id: str, expected: Sequence[str], busy: Sequence[str], changes: Dict[str, Any]) -> bool:
        """Move to repairing only if no other appointment of the technician is in ``busy``."""
        ...

    def mark_rated(self, appointment_id: str, user_id: str, completed: Sequence[str], rating: int, rated_at: datetime) -> bool:
        ...

    def unmark_rated(self, appointment_id: str, user_id: str) -> bool:
        """Release a claimed rating whose rating row could not be written."""
        ...
