import pytest

from app.application.lifecycle import (
    Action,
    Actor,
    AppointmentState,
    CANCELLATION_REASONS,
    HOME_SERVICE,
    TERMINAL_STATES,
    WALK_IN,
    customer_message_for,
    parse_state,
    plan_transition,
    resolve_reason,
    sources_for,
    technician_message_for,
)
from app.exceptions import InvalidTransitionError, ValidationFailedError


@pytest.mark.parametrize("state", sorted(TERMINAL_STATES, key=lambda s: s.value))
@pytest.mark.parametrize("actor", list(Actor))
@pytest.mark.parametrize("action", list(Action))
def test_terminal_states_reject_every_action(state, actor, action):
    with pytest.raises(InvalidTransitionError) as exc:
        plan_transition(state, actor, action, service_type=HOME_SERVICE, arrived=True)
    assert exc.value.status_code == 409


def test_walk_in_happy_path():
    steps = [
        (None, Actor.CUSTOMER, Action.BOOK, AppointmentState.SCHEDULED),
        (AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.ACCEPT, AppointmentState.ACCEPTED),
        (AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.START_REPAIR, AppointmentState.REPAIRING),
        (AppointmentState.REPAIRING, Actor.TECHNICIAN, Action.START_TESTING, AppointmentState.TESTING),
        (AppointmentState.TESTING, Actor.TECHNICIAN, Action.COMPLETE, AppointmentState.COMPLETED),
    ]
    for current, actor, action, expected in steps:
        assert plan_transition(current, actor, action, service_type=WALK_IN).target == expected


def test_customer_cannot_accept_and_technician_cannot_cancel():
    with pytest.raises(InvalidTransitionError):
        plan_transition(AppointmentState.SCHEDULED, Actor.CUSTOMER, Action.ACCEPT)
    with pytest.raises(InvalidTransitionError):
        plan_transition(AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.CANCEL)


def test_cancel_only_before_repair_starts():
    assert sorted(s.value for s in sources_for(Actor.CUSTOMER, Action.CANCEL)) == ["Accepted", "Scheduled"]
    for state in (AppointmentState.REPAIRING, AppointmentState.TESTING):
        with pytest.raises(InvalidTransitionError):
            plan_transition(state, Actor.CUSTOMER, Action.CANCEL)


def test_reject_needs_reason_flag():
    assert plan_transition(AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.REJECT).requires_reason is True
    assert plan_transition(AppointmentState.SCHEDULED, Actor.TECHNICIAN, Action.ACCEPT).requires_reason is False


def test_home_service_needs_arrival_before_repair():
    with pytest.raises(InvalidTransitionError) as exc:
        plan_transition(AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.START_REPAIR, service_type=HOME_SERVICE, arrived=False)
    assert "arrival" in exc.value.detail.lower()

    t = plan_transition(AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.START_REPAIR, service_type=HOME_SERVICE, arrived=True)
    assert t.target == AppointmentState.REPAIRING


def test_mark_arrived_rules():
    t = plan_transition(AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.MARK_ARRIVED, service_type=HOME_SERVICE)
    assert t.target == AppointmentState.ACCEPTED
    assert t.timestamp_field == "arrived_at"

    with pytest.raises(InvalidTransitionError):
        plan_transition(AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.MARK_ARRIVED, service_type=WALK_IN)
    with pytest.raises(InvalidTransitionError):
        plan_transition(AppointmentState.ACCEPTED, Actor.TECHNICIAN, Action.MARK_ARRIVED, service_type=HOME_SERVICE, arrived=True)


def test_parse_state_accepts_both_spellings():
    assert parse_state("Canceled") == AppointmentState.CANCELLED
    assert parse_state("cancelled") == AppointmentState.CANCELLED
    assert parse_state("repairing") == AppointmentState.REPAIRING
    with pytest.raises(ValueError):
        parse_state("Lost")


def test_status_views_are_derived_from_state():
    assert customer_message_for(AppointmentState.SCHEDULED) == "Waiting for technician to accept"
    assert technician_message_for(AppointmentState.SCHEDULED) == "Request pending"
    assert customer_message_for(AppointmentState.ACCEPTED, arrived=True) == "Technician has arrived at your location"
    assert technician_message_for(AppointmentState.ACCEPTED, arrived=True) == "Arrived at customer location"
    assert technician_message_for("Canceled") == "Appointment cancelled by user"
    for state in AppointmentState:
        assert customer_message_for(state)
        assert technician_message_for(state)


def test_resolve_reason():
    assert resolve_reason("Changed my mind", None, CANCELLATION_REASONS) == "Changed my mind"
    assert resolve_reason("Others", "  Moving abroad ", CANCELLATION_REASONS) == "Moving abroad"
    with pytest.raises(ValidationFailedError):
        resolve_reason("", None, CANCELLATION_REASONS)
    with pytest.raises(ValidationFailedError):
        resolve_reason("Others", "   ", CANCELLATION_REASONS)
    with pytest.raises(ValidationFailedError):
        resolve_reason("Bored", None, CANCELLATION_REASONS)
