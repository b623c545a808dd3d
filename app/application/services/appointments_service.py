from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence
from datetime import datetime, date
import logging

from ..lifecycle import (
    Action,
    Actor,
    AppointmentState,
    CANCEL_DEADLINE_OFFSET,
    CANCELLATION_REASONS,
    HOME_SERVICE,
    IN_PROGRESS_STATES,
    REJECTION_REASONS,
    SERVICE_TYPES,
    TERMINAL_STATES,
    Transition,
    parse_state,
    plan_transition,
    resolve_reason,
    to_naive_utc,
)
from ..pricing import CATEGORIES
from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto, BookingRequest
from ..ports.technician_repo import TechnicianRepository, TechnicianDto
from ..ports.user_repo import UserRepository
from ..ports.rating_repo import RatingRepository
from . import notification_service as messages
from .notification_service import NotificationService
from ...exceptions import (
    APIException,
    AlreadyRatedError,
    BookingBlockedError,
    BookingRejectedError,
    ForbiddenActionError,
    InvalidTransitionError,
    NotFoundError,
    OngoingRepairError,
    PersistenceError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    technician_repo: TechnicianRepository
    user_repo: UserRepository
    rating_repo: RatingRepository
    notifier: NotificationService
    clock: Callable[[], datetime] = datetime.utcnow

    # ------------------------
    # Customer actions
    # ------------------------
    def book(self, user_id: str, request: BookingRequest) -> AppointmentDto:
        plan_transition(None, Actor.CUSTOMER, Action.BOOK)

        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if request.service_type not in SERVICE_TYPES:
            raise ValidationFailedError(f"Invalid service type. Must be one of: {list(SERVICE_TYPES)}")
        if request.category not in CATEGORIES:
            raise ValidationFailedError(f"Invalid category. Must be one of: {CATEGORIES}")
        if not (request.issue or "").strip():
            raise ValidationFailedError("Issue description is required")
        if request.estimated_cost < 0:
            raise ValidationFailedError("Estimated cost cannot be negative")
        if request.service_type == HOME_SERVICE and not request.address:
            raise ValidationFailedError("A service address is required for home-service appointments")

        now = self.clock()
        scheduled = to_naive_utc(request.scheduled_date)
        if scheduled <= now:
            raise ValidationFailedError("Scheduled date must be in the future")

        technician = self.technician_repo.get_by_id(request.technician_id)
        if not technician:
            raise NotFoundError("Technician not found")
        if technician.status != "approved":
            raise BookingRejectedError("Technician is not accepting appointments")
        if not technician.availability:
            raise BookingRejectedError("Technician is not available")
        if technician.categories and request.category not in technician.categories:
            raise BookingRejectedError(f"Technician does not service {request.category}")

        self._ensure_can_book(user_id)

        request = replace(request, scheduled_date=scheduled)
        appt = self._write(
            "Booking",
            lambda: self.repo.create(
                user_id,
                request,
                status=AppointmentState.SCHEDULED.value,
                created_at=now,
                cancel_deadline=scheduled - CANCEL_DEADLINE_OFFSET,
            ),
        )
        logger.info(f"Appointment {appt.id} booked by {user_id} with technician {technician.id}")

        self.notifier.emit(user_id, "appointment", messages.appointment_confirmation(technician.display_name, scheduled))
        self.notifier.emit(
            technician.id,
            "appointment",
            messages.appointment_request(user.username or "A customer", request.service_type, scheduled),
        )
        return appt

    def cancel(self, user_id: str, appointment_id: str, reason: Optional[str], custom_reason: Optional[str] = None) -> AppointmentDto:
        appt = self._customer_appointment(user_id, appointment_id)
        transition = self._plan(appt, Actor.CUSTOMER, Action.CANCEL)
        reason_text = resolve_reason(reason, custom_reason, CANCELLATION_REASONS)

        updated = self._commit(appt, transition, Actor.CUSTOMER, Action.CANCEL, {"cancellation_reason": reason_text})
        customer = self.user_repo.get_by_id(user_id)
        self.notifier.emit(
            appt.technician_id,
            "appointment",
            messages.appointment_cancelled(customer.username if customer else "The customer", appt.scheduled_date, reason_text),
        )
        return updated

    def rate(self, user_id: str, appointment_id: str, rating: int, comment: Optional[str] = None) -> AppointmentDto:
        if isinstance(rating, bool) or not isinstance(rating, int) or rating < 1 or rating > 5:
            raise ValidationFailedError("Rating must be a whole number between 1 and 5")

        appt = self._customer_appointment(user_id, appointment_id)
        state = parse_state(appt.status)
        if state != AppointmentState.COMPLETED:
            raise InvalidTransitionError(state.value, Actor.CUSTOMER.value, "rate", "Only completed repairs can be rated")
        if appt.rated:
            raise AlreadyRatedError()

        # Claiming the appointment first keeps a double submit from writing two ratings
        marked = self._write(
            "Rating",
            lambda: self.repo.mark_rated(appt.id, user_id, [AppointmentState.COMPLETED.value], rating, self.clock()),
        )
        if not marked:
            raise AlreadyRatedError()

        try:
            self.rating_repo.upsert(appt.technician_id, user_id, appt.id, rating, comment)
        except Exception as e:
            logger.error(f"Saving rating for appointment {appt.id} failed, releasing it: {e}")
            self._write("Rating", lambda: self.repo.unmark_rated(appt.id, user_id))
            raise PersistenceError("Rating")

        self._refresh_technician_rating(appt.technician_id)

        customer = self.user_repo.get_by_id(user_id)
        self.notifier.emit(appt.technician_id, "rating", messages.rating_received(rating, customer.username if customer else "a customer"))
        return self.repo.get_by_id(appt.id)

    # ------------------------
    # Technician actions
    # ------------------------
    def accept(self, technician_id: str, appointment_id: str) -> AppointmentDto:
        technician, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.ACCEPT)
        updated = self._commit(appt, transition, Actor.TECHNICIAN, Action.ACCEPT, {})
        self.notifier.emit(appt.user_id, "appointment", messages.appointment_accepted(technician.display_name))
        return updated

    def reject(self, technician_id: str, appointment_id: str, reason: Optional[str], custom_reason: Optional[str] = None) -> AppointmentDto:
        technician, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.REJECT)
        reason_text = resolve_reason(reason, custom_reason, REJECTION_REASONS)
        updated = self._commit(appt, transition, Actor.TECHNICIAN, Action.REJECT, {"rejection_reason": reason_text})
        self.notifier.emit(
            appt.user_id,
            "appointment",
            messages.appointment_rejected(technician.display_name, appt.scheduled_date, reason_text),
        )
        return updated

    def mark_arrived(self, technician_id: str, appointment_id: str) -> AppointmentDto:
        technician, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.MARK_ARRIVED)
        updated = self._commit(appt, transition, Actor.TECHNICIAN, Action.MARK_ARRIVED, {}, arrived=False)
        self.notifier.emit(appt.user_id, "appointment", messages.technician_arrived(technician.display_name))
        return updated

    def start_repair(self, technician_id: str, appointment_id: str, estimated_completion: Optional[date]) -> AppointmentDto:
        technician, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.START_REPAIR)

        if estimated_completion is None:
            raise ValidationFailedError("Estimated completion date is required")
        now = self.clock()
        if estimated_completion < now.date():
            raise ValidationFailedError("Estimated completion date cannot be in the past")

        changes = {
            "status": transition.target.value,
            transition.timestamp_field: now,
            "estimated_completion": estimated_completion,
        }
        busy = [s.value for s in IN_PROGRESS_STATES]
        started = self._write(
            "Starting repair",
            lambda: self.repo.start_repair(appt.id, technician.id, [transition.source.value], busy, changes),
        )
        if not started:
            current = self.repo.get_by_id(appt.id)
            if current is None:
                raise NotFoundError("Appointment not found")
            if parse_state(current.status) == AppointmentState.ACCEPTED:
                logger.warning(f"Technician {technician.id} tried to start {appt.id} while another repair is in progress")
                raise OngoingRepairError()
            raise InvalidTransitionError(parse_state(current.status).value, Actor.TECHNICIAN.value, Action.START_REPAIR.value)

        logger.info(f"Repair started on appointment {appt.id}")
        self.notifier.emit(appt.user_id, "appointment", messages.repair_started(estimated_completion.strftime("%B %d, %Y")))
        return self.repo.get_by_id(appt.id)

    def start_testing(self, technician_id: str, appointment_id: str) -> AppointmentDto:
        _, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.START_TESTING)
        updated = self._commit(appt, transition, Actor.TECHNICIAN, Action.START_TESTING, {})
        self.notifier.emit(appt.user_id, "appointment", messages.testing_started())
        return updated

    def complete(self, technician_id: str, appointment_id: str) -> AppointmentDto:
        _, appt = self._technician_appointment(technician_id, appointment_id)
        transition = self._plan(appt, Actor.TECHNICIAN, Action.COMPLETE)
        updated = self._commit(appt, transition, Actor.TECHNICIAN, Action.COMPLETE, {})
        self.notifier.emit(appt.user_id, "appointment", messages.repair_completed(appt.category))
        return updated

    # ------------------------
    # Reads
    # ------------------------
    def list_for_customer(self, user_id: str) -> List[AppointmentDto]:
        return self.repo.list_for_user(user_id)

    def list_for_technician(self, technician_id: str, statuses: Optional[Sequence[str]] = None) -> List[AppointmentDto]:
        wanted = None
        if statuses:
            try:
                wanted = [parse_state(s).value for s in statuses]
            except ValueError as e:
                raise ValidationFailedError(str(e))
        return self.repo.list_for_technician(technician_id, wanted)

    def get_for_actor(self, actor_id: str, role: str, appointment_id: str) -> AppointmentDto:
        appt = self.repo.get_by_id(appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        owner = appt.technician_id if role == Actor.TECHNICIAN.value else appt.user_id
        if owner != actor_id:
            raise NotFoundError("Appointment not found")
        return appt

    # ------------------------
    # Helpers
    # ------------------------
    def _ensure_can_book(self, user_id: str) -> None:
        existing = self.repo.list_for_user(user_id)
        states = [(a, parse_state(a.status)) for a in existing]
        if any(state not in TERMINAL_STATES for _, state in states):
            raise BookingBlockedError(
                "Appointment Already Exists",
                "You already have an active appointment. Please wait for it to be completed before booking a new one.",
            )
        if any(state == AppointmentState.COMPLETED and not a.rated for a, state in states):
            raise BookingBlockedError(
                "Complete Your Feedback",
                "Please complete your service feedback for the previous repair before booking a new one. Your feedback helps us maintain quality service.",
            )

    def _customer_appointment(self, user_id: str, appointment_id: str) -> AppointmentDto:
        appt = self.repo.get_by_id(appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        if appt.user_id != user_id:
            raise ForbiddenActionError("This appointment does not belong to you")
        return appt

    def _technician_appointment(self, technician_id: str, appointment_id: str):
        technician = self._approved_technician(technician_id)
        appt = self.repo.get_by_id(appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        if appt.technician_id != technician_id:
            raise ForbiddenActionError("This appointment is not assigned to you")
        return technician, appt

    def _refresh_technician_rating(self, technician_id: str) -> None:
        """Recompute the average from every stored rating; the next rating repairs a failed refresh."""
        try:
            scores = self.rating_repo.ratings_for_technician(technician_id)
            if scores:
                average = round(sum(scores) / len(scores), 1)
                self.technician_repo.update_rating(technician_id, average, len(scores))
        except Exception as e:
            logger.error(f"Updating average rating for technician {technician_id} failed: {e}")

    def _approved_technician(self, technician_id: str) -> TechnicianDto:
        technician = self.technician_repo.get_by_id(technician_id)
        if not technician:
            raise NotFoundError("Technician not found")
        if technician.status != "approved":
            raise ForbiddenActionError("Your technician registration has not been approved yet")
        return technician

    def _plan(self, appt: AppointmentDto, actor: Actor, action: Action) -> Transition:
        return plan_transition(appt.status, actor, action, service_type=appt.service_type, arrived=appt.arrived)

    def _commit(
        self,
        appt: AppointmentDto,
        transition: Transition,
        actor: Actor,
        action: Action,
        extra: Dict[str, Any],
        arrived: Optional[bool] = None,
    ) -> AppointmentDto:
        changes = {"status": transition.target.value, transition.timestamp_field: self.clock(), **extra}
        label = action.value.replace("_", " ").capitalize()
        updated = self._write(label, lambda: self.repo.transition(appt.id, [transition.source.value], changes, arrived=arrived))
        if not updated:
            current = self.repo.get_by_id(appt.id)
            if current is None:
                raise NotFoundError("Appointment not found")
            logger.warning(f"Concurrent update on appointment {appt.id}: {action.value} lost against {current.status}")
            raise InvalidTransitionError(parse_state(current.status).value, actor.value, action.value)
        logger.info(f"Appointment {appt.id}: {transition.source.value} -> {transition.target.value} ({action.value} by {actor.value})")
        return self.repo.get_by_id(appt.id)

    def _write(self, action: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"{action} failed to persist: {e}")
            raise PersistenceError(action)
