from dataclasses import dataclass
from typing import Optional
import logging

from ..lifecycle import ACTIVE_STATES, IN_PROGRESS_STATES, AppointmentState, parse_state
from ..ports.appointments_repo import AppointmentsRepository
from ..ports.technician_repo import TechnicianRepository, TechnicianDto
from . import notification_service as messages
from .notification_service import NotificationService
from ...exceptions import (
    AvailabilityBlockedError,
    NotFoundError,
    PersistenceError,
    RegistrationStateError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

ONGOING_REPAIRS_MESSAGE = "You have ongoing repairs/testing. You cannot turn off availability until all repairs are completed."
PENDING_REQUESTS_MESSAGE = "You have pending appointment requests. You cannot turn off availability until you accept or reject them."
ACCEPTED_APPOINTMENTS_MESSAGE = "You have accepted appointments. You cannot turn off availability until they are completed."


@dataclass
class TechniciansService:
    technician_repo: TechnicianRepository
    appointments_repo: AppointmentsRepository
    notifier: NotificationService

    def get(self, technician_id: str) -> TechnicianDto:
        technician = self.technician_repo.get_by_id(technician_id)
        if not technician:
            raise NotFoundError("Technician not found")
        return technician

    def set_availability(self, technician_id: str, available: bool) -> TechnicianDto:
        self.get(technician_id)

        if available:
            try:
                self.technician_repo.set_available(technician_id)
            except Exception as e:
                logger.error(f"Error enabling availability for {technician_id}: {e}")
                raise PersistenceError("Updating availability")
            return self.get(technician_id)

        blocking = [s.value for s in ACTIVE_STATES]
        try:
            switched_off = self.technician_repo.set_unavailable_if_idle(technician_id, blocking)
        except Exception as e:
            logger.error(f"Error disabling availability for {technician_id}: {e}")
            raise PersistenceError("Updating availability")

        if not switched_off:
            reason = self._blocked_reason(technician_id)
            logger.info(f"Availability change blocked for {technician_id}: {reason}")
            raise AvailabilityBlockedError(reason)
        return self.get(technician_id)

    def _blocked_reason(self, technician_id: str) -> str:
        open_work = self.appointments_repo.list_for_technician(technician_id, [s.value for s in ACTIVE_STATES])
        states = {parse_state(a.status) for a in open_work}
        if states.intersection(IN_PROGRESS_STATES):
            return ONGOING_REPAIRS_MESSAGE
        if AppointmentState.SCHEDULED in states:
            return PENDING_REQUESTS_MESSAGE
        if AppointmentState.ACCEPTED in states:
            return ACCEPTED_APPOINTMENTS_MESSAGE
        # Open work was resolved between the update and this read
        return "Your appointments changed while updating availability. Please try again."

    def review_registration(self, technician_id: str, approved: bool, reason: Optional[str] = None) -> TechnicianDto:
        technician = self.get(technician_id)
        if technician.status != "pending":
            raise RegistrationStateError(f"Registration is {technician.status}, only pending registrations can be reviewed")

        if approved:
            self.technician_repo.set_status(technician_id, "approved")
            self.notifier.emit(technician_id, "registration", messages.registration_approved())
        else:
            if not (reason or "").strip():
                raise ValidationFailedError("A reason is required when rejecting a registration")
            self.technician_repo.set_status(technician_id, "rejected")
            self.notifier.emit(technician_id, "registration", messages.registration_rejected(reason.strip()))
        logger.info(f"Technician {technician_id} registration {'approved' if approved else 'rejected'}")
        return self.get(technician_id)

    def onboard(self, technician_id: str) -> None:
        technician = self.get(technician_id)
        self.notifier.emit_once(technician_id, "welcome", messages.technician_welcome())
        if technician.status == "non-registered":
            self.notifier.emit_once(technician_id, "registration", messages.registration_reminder())
