"""Appointment lifecycle: states, who may move an appointment where, and the
status text each party sees.

The customer and technician status messages are derived from the canonical
state on every read instead of being stored next to it.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..exceptions import InvalidTransitionError, ValidationFailedError


class AppointmentState(str, Enum):
    SCHEDULED = "Scheduled"
    ACCEPTED = "Accepted"
    REPAIRING = "Repairing"
    TESTING = "Testing"
    COMPLETED = "Completed"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class Actor(str, Enum):
    CUSTOMER = "customer"
    TECHNICIAN = "technician"


class Action(str, Enum):
    BOOK = "book"
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    MARK_ARRIVED = "mark_arrived"
    START_REPAIR = "start_repair"
    START_TESTING = "start_testing"
    COMPLETE = "complete"


HOME_SERVICE = "home-service"
WALK_IN = "walk-in"
SERVICE_TYPES = (HOME_SERVICE, WALK_IN)

TERMINAL_STATES: FrozenSet[AppointmentState] = frozenset({
    AppointmentState.COMPLETED,
    AppointmentState.REJECTED,
    AppointmentState.CANCELLED,
})

# States in which a technician still owes work on an appointment
ACTIVE_STATES: Tuple[AppointmentState, ...] = (
    AppointmentState.SCHEDULED,
    AppointmentState.ACCEPTED,
    AppointmentState.REPAIRING,
    AppointmentState.TESTING,
)

IN_PROGRESS_STATES: Tuple[AppointmentState, ...] = (
    AppointmentState.REPAIRING,
    AppointmentState.TESTING,
)

# Cancellation cutoff stored on each booking, relative to the scheduled time
CANCEL_DEADLINE_OFFSET = timedelta(hours=2, minutes=25)

OTHERS = "Others"

REJECTION_REASONS: List[str] = [
    "Not available at that time",
    "Outside my service area",
    "Personal emergency",
    "Schedule conflict",
    OTHERS,
]

CANCELLATION_REASONS: List[str] = [
    "Device is already fixed",
    "Schedule conflict",
    "Found a better technician",
    "Changed my mind",
    OTHERS,
]

# Older records were written with the American spelling
_STATE_ALIASES: Dict[str, AppointmentState] = {
    "canceled": AppointmentState.CANCELLED,
}


@dataclass(frozen=True)
class Transition:
    source: Optional[AppointmentState]
    target: AppointmentState
    timestamp_field: str
    requires_reason: bool = False


# (from, actor, action) -> (to, timestamp field, needs reason)
_RULES: Dict[Tuple[Optional[AppointmentState], Actor, Action], Tuple[AppointmentState, str, bool]] = {
    (None, Actor.CUSTOMER, Action.BOOK): (AppointmentState.SCHEDULED, "created_at", False),
    (AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.ACCEPT): (AppointmentState.ACCEPTED, "accepted_at", False),
    (AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.REJECT): (AppointmentState.REJECTED, "rejected_at", True),
    (AppointmentState.SCHEDULED, Actor.CUSTOMER, Action.CANCEL): (AppointmentState.CANCELLED, "cancelled_at", True),
    (AppointmentState.ACCEPTED, Actor.CUSTOMER, Action.CANCEL): (AppointmentState.CANCELLED, "cancelled_at", True),
    (AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.MARK_ARRIVED): (AppointmentState.ACCEPTED, "arrived_at", False),
    (AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.START_REPAIR): (AppointmentState.REPAIRING, "repair_started_at", False),
    (AppointmentState.REPAIRING, Actor.TECHNICIAN, Action.START_TESTING): (AppointmentState.TESTING, "testing_started_at", False),
    (AppointmentState.TESTING, Actor.TECHNICIAN, Action.COMPLETE): (AppointmentState.COMPLETED, "completed_at", False),
}


def parse_state(raw: str) -> AppointmentState:
    if isinstance(raw, AppointmentState):
        return raw
    value = (raw or "").strip()
    alias = _STATE_ALIASES.get(value.lower())
    if alias is not None:
        return alias
    for state in AppointmentState:
        if state.value.lower() == value.lower():
            return state
    raise ValueError(f"Unknown appointment status: {raw!r}")


def is_terminal(state: AppointmentState) -> bool:
    return parse_state(state) in TERMINAL_STATES


def sources_for(actor: Actor, action: Action) -> List[AppointmentState]:
    """States from which ``actor`` may perform ``action``."""
    return [src for (src, a, act) in _RULES if src is not None and a == actor and act == action]


def plan_transition(
    current: Optional[AppointmentState],
    actor: Actor,
    action: Action,
    *,
    service_type: str = WALK_IN,
    arrived: bool = False,
) -> Transition:
    state = parse_state(current) if current is not None else None
    label = state.value if state is not None else "not booked"

    if state is not None and state in TERMINAL_STATES:
        raise InvalidTransitionError(label, actor.value, action.value)

    rule = _RULES.get((state, actor, action))
    if rule is None:
        raise InvalidTransitionError(label, actor.value, action.value)

    if action == Action.MARK_ARRIVED:
        if service_type != HOME_SERVICE:
            raise InvalidTransitionError(label, actor.value, action.value, "Arrival is only tracked for home-service appointments")
        if arrived:
            raise InvalidTransitionError(label, actor.value, action.value, "Arrival has already been confirmed for this appointment")

    if action == Action.START_REPAIR and service_type == HOME_SERVICE and not arrived:
        raise InvalidTransitionError(label, actor.value, action.value, "Confirm arrival at the customer location before starting the repair")

    target, stamp, needs_reason = rule
    return Transition(source=state, target=target, timestamp_field=stamp, requires_reason=needs_reason)


_CUSTOMER_MESSAGES: Dict[AppointmentState, str] = {
    AppointmentState.SCHEDULED: "Waiting for technician to accept",
    AppointmentState.ACCEPTED: "Waiting for repair to start",
    AppointmentState.REPAIRING: "Technician is working on your device",
    AppointmentState.TESTING: "Testing in progress - Quality check in progress",
    AppointmentState.COMPLETED: "Repair completed! Your appliance is ready.",
    AppointmentState.REJECTED: "Technician declined your appointment",
    AppointmentState.CANCELLED: "Appointment cancelled",
}

_TECHNICIAN_MESSAGES: Dict[AppointmentState, str] = {
    AppointmentState.SCHEDULED: "Request pending",
    AppointmentState.ACCEPTED: "Appointment accepted - ready to start repair",
    AppointmentState.REPAIRING: "Repair in progress",
    AppointmentState.TESTING: "Testing phase - Quality assurance",
    AppointmentState.COMPLETED: "Repair completed",
    AppointmentState.REJECTED: "Appointment declined",
    AppointmentState.CANCELLED: "Appointment cancelled by user",
}


def customer_message_for(state: AppointmentState, arrived: bool = False) -> str:
    state = parse_state(state)
    if state == AppointmentState.ACCEPTED and arrived:
        return "Technician has arrived at your location"
    return _CUSTOMER_MESSAGES[state]


def technician_message_for(state: AppointmentState, arrived: bool = False) -> str:
    state = parse_state(state)
    if state == AppointmentState.ACCEPTED and arrived:
        return "Arrived at customer location"
    return _TECHNICIAN_MESSAGES[state]


def resolve_reason(selected: Optional[str], custom: Optional[str], allowed: List[str]) -> str:
    """Pick the stored reason text; "Others" needs the free-text explanation."""
    choice = (selected or "").strip()
    if not choice:
        raise ValidationFailedError("Please select a reason")
    if choice not in allowed:
        raise ValidationFailedError(f"Invalid reason. Must be one of: {allowed}")
    if choice == OTHERS:
        text = (custom or "").strip()
        if not text:
            raise ValidationFailedError("Please describe your reason")
        return text
    return choice


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
