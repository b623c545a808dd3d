from datetime import datetime, date, timedelta

import pytest

from app.application.ports.appointments_repo import BookingRequest
from app.application.services.appointments_service import AppointmentsService
from app.application.services.notification_service import NotificationService
from app.exceptions import (
    AlreadyRatedError,
    BookingBlockedError,
    BookingRejectedError,
    ForbiddenActionError,
    InvalidTransitionError,
    OngoingRepairError,
    PersistenceError,
    ValidationFailedError,
)
from fastapi import HTTPException

from tests.fakes import (
    FakeAppointmentsRepo,
    FakeNotificationRepo,
    FakeRatingRepo,
    FakeTechnicianRepo,
    FakeUserRepo,
)

NOW = datetime(2030, 1, 1, 9, 0)
TOMORROW = NOW + timedelta(days=1)


def make_service(ratings=None):
    appts = FakeAppointmentsRepo()
    techs = FakeTechnicianRepo(appts)
    users = FakeUserRepo()
    notes = FakeNotificationRepo()
    users.add("u1", "Carla")
    users.add("u2", "Dan")
    techs.add("t1", username="Tom", shop_name="Tom's Repairs")
    svc = AppointmentsService(
        repo=appts,
        technician_repo=techs,
        user_repo=users,
        rating_repo=ratings or FakeRatingRepo(),
        notifier=NotificationService(repo=notes),
        clock=lambda: NOW,
    )
    return svc, appts, techs, notes


def booking(**overrides):
    fields = dict(
        technician_id="t1",
        service_type="walk-in",
        category="Television",
        issue="No sound",
        diagnosis="Speaker or audio board fault",
        estimated_cost=2200,
        scheduled_date=TOMORROW,
    )
    fields.update(overrides)
    return BookingRequest(**fields)


def test_book_success():
    svc, appts, _, notes = make_service()
    out = svc.book("u1", booking())
    assert out.status == "Scheduled"
    assert out.cancel_deadline == TOMORROW - timedelta(hours=2, minutes=25)
    assert [n.type for n in notes.for_user("u1")] == ["appointment"]
    assert "Tom's Repairs" in notes.for_user("u1")[0].message
    assert len(notes.for_user("t1")) == 1


def test_book_rejects_past_date_and_unavailable_technician():
    svc, _, techs, _ = make_service()
    with pytest.raises(ValidationFailedError) as exc:
        svc.book("u1", booking(scheduled_date=NOW - timedelta(hours=1)))
    assert exc.value.status_code == 422

    techs.rows["t1"].availability = False
    with pytest.raises(BookingRejectedError) as exc:
        svc.book("u1", booking())
    assert exc.value.status_code == 400
    assert exc.value.detail == "Technician is not available"


def test_book_validates_input():
    svc, _, techs, _ = make_service()
    with pytest.raises(ValidationFailedError):
        svc.book("u1", booking(service_type="drive-thru"))
    with pytest.raises(ValidationFailedError):
        svc.book("u1", booking(category="Toaster"))
    with pytest.raises(ValidationFailedError):
        svc.book("u1", booking(service_type="home-service", address=None))

    techs.rows["t1"].categories = ["Refrigerator"]
    with pytest.raises(BookingRejectedError) as exc:
        svc.book("u1", booking())
    assert exc.value.detail == "Technician does not service Television"


def test_book_blocked_by_active_appointment():
    svc, appts, _, _ = make_service()
    appts.add(user_id="u1", status="Accepted")
    with pytest.raises(BookingBlockedError) as exc:
        svc.book("u1", booking())
    assert exc.value.title == "Appointment Already Exists"
    assert exc.value.status_code == 409


def test_book_blocked_until_completed_repair_is_rated():
    svc, appts, _, _ = make_service()
    done = appts.add(user_id="u1", status="Completed")
    with pytest.raises(BookingBlockedError) as exc:
        svc.book("u1", booking())
    assert exc.value.title == "Complete Your Feedback"

    appts.rows[done.id].rated = True
    assert svc.book("u1", booking()).status == "Scheduled"


def test_rejected_and_cancelled_do_not_block_booking():
    svc, appts, _, _ = make_service()
    appts.add(user_id="u1", status="Rejected")
    appts.add(user_id="u1", status="Canceled")
    assert svc.book("u1", booking()).status == "Scheduled"


def test_walk_in_lifecycle_notifies_customer():
    svc, _, _, notes = make_service()
    appt = svc.book("u1", booking())
    assert svc.accept("t1", appt.id).status == "Accepted"
    repairing = svc.start_repair("t1", appt.id, date(2030, 1, 3))
    assert repairing.status == "Repairing"
    assert repairing.estimated_completion == date(2030, 1, 3)
    assert repairing.repair_started_at == NOW
    assert svc.start_testing("t1", appt.id).status == "Testing"
    done = svc.complete("t1", appt.id)
    assert done.status == "Completed"
    assert done.completed_at == NOW
    # confirmation + accepted + repair started + testing + completed
    assert len(notes.for_user("u1")) == 5


def test_home_service_requires_arrival_once():
    svc, _, _, notes = make_service()
    appt = svc.book("u1", booking(service_type="home-service", address="Poblacion, Tanauan, Batangas"))
    svc.accept("t1", appt.id)

    with pytest.raises(InvalidTransitionError):
        svc.start_repair("t1", appt.id, date(2030, 1, 3))

    arrived = svc.mark_arrived("t1", appt.id)
    assert arrived.status == "Accepted"
    assert arrived.arrived_at == NOW
    with pytest.raises(InvalidTransitionError):
        svc.mark_arrived("t1", appt.id)

    assert svc.start_repair("t1", appt.id, date(2030, 1, 3)).status == "Repairing"
    assert any("arrived" in n.message for n in notes.for_user("u1"))


def test_start_repair_blocked_by_another_repair():
    svc, appts, _, _ = make_service()
    appts.add(user_id="u2", technician_id="t1", status="Repairing")
    target = appts.add(user_id="u1", technician_id="t1", status="Accepted")

    with pytest.raises(OngoingRepairError) as exc:
        svc.start_repair("t1", target.id, date(2030, 1, 3))
    assert exc.value.status_code == 409
    assert appts.get_by_id(target.id).status == "Accepted"


def test_start_repair_needs_valid_completion_date():
    svc, appts, _, _ = make_service()
    target = appts.add(status="Accepted")
    with pytest.raises(ValidationFailedError):
        svc.start_repair("t1", target.id, None)
    with pytest.raises(ValidationFailedError):
        svc.start_repair("t1", target.id, date(2029, 12, 31))


def test_reject_stores_reason_and_notifies():
    svc, _, _, notes = make_service()
    appt = svc.book("u1", booking())
    out = svc.reject("t1", appt.id, "Others", "Parts unavailable")
    assert out.status == "Rejected"
    assert out.rejection_reason == "Parts unavailable"
    assert "Reason: Parts unavailable" in notes.for_user("u1")[-1].message


def test_cancel_rules():
    svc, appts, _, notes = make_service()
    appt = svc.book("u1", booking())

    with pytest.raises(ForbiddenActionError):
        svc.cancel("u2", appt.id, "Changed my mind")
    with pytest.raises(ValidationFailedError):
        svc.cancel("u1", appt.id, None)

    out = svc.cancel("u1", appt.id, "Changed my mind")
    assert out.status == "Cancelled"
    assert out.cancellation_reason == "Changed my mind"
    assert "Reason: Changed my mind" in notes.for_user("t1")[-1].message

    repairing = appts.add(user_id="u2", status="Repairing")
    with pytest.raises(InvalidTransitionError):
        svc.cancel("u2", repairing.id, "Changed my mind")


def test_technician_must_own_appointment_and_be_approved():
    svc, appts, techs, _ = make_service()
    techs.add("t2", username="Other")
    appt = appts.add(technician_id="t1")
    with pytest.raises(ForbiddenActionError):
        svc.accept("t2", appt.id)

    techs.rows["t1"].status = "pending"
    with pytest.raises(ForbiddenActionError):
        svc.accept("t1", appt.id)


def test_lost_race_reports_current_state():
    svc, appts, _, _ = make_service()
    appt = appts.add(status="Scheduled")

    def customer_cancels_first():
        appts.rows[appt.id].status = "Cancelled"

    appts.before_write = customer_cancels_first
    with pytest.raises(InvalidTransitionError) as exc:
        svc.accept("t1", appt.id)
    assert exc.value.current == "Cancelled"
    assert appts.get_by_id(appt.id).status == "Cancelled"


def test_rating_updates_technician_average_once():
    svc, appts, techs, notes = make_service()
    first = appts.add(user_id="u1", status="Completed")
    second = appts.add(user_id="u2", status="Completed")

    out = svc.rate("u1", first.id, 5)
    assert out.rated is True
    assert out.user_rating == 5
    svc.rate("u2", second.id, 4)
    assert techs.rows["t1"].average_rating == 4.5
    assert techs.rows["t1"].total_ratings == 2
    assert notes.for_user("t1")[-1].type == "rating"

    with pytest.raises(AlreadyRatedError) as exc:
        svc.rate("u1", first.id, 3)
    assert exc.value.status_code == 409


def test_failed_rating_write_leaves_repair_open_for_retry():
    ratings = FakeRatingRepo(fail=True)
    svc, appts, techs, notes = make_service(ratings)
    done = appts.add(user_id="u1", status="Completed")

    with pytest.raises(PersistenceError):
        svc.rate("u1", done.id, 5)
    assert appts.rows[done.id].rated is False
    assert appts.rows[done.id].user_rating is None
    assert techs.rows["t1"].total_ratings == 0
    assert notes.for_user("t1") == []

    ratings.fail = False
    out = svc.rate("u1", done.id, 5)
    assert out.rated is True
    assert techs.rows["t1"].average_rating == 5.0
    assert techs.rows["t1"].total_ratings == 1


def test_rating_rejects_bad_values_and_unfinished_repairs():
    svc, appts, _, _ = make_service()
    pending = appts.add(user_id="u1", status="Testing")
    with pytest.raises(ValidationFailedError):
        svc.rate("u1", pending.id, 6)
    with pytest.raises(InvalidTransitionError):
        svc.rate("u1", pending.id, 4)


def test_list_and_get_scoped_to_actor():
    svc, appts, _, _ = make_service()
    mine = appts.add(user_id="u1", status="Scheduled")
    appts.add(user_id="u2", status="Completed")

    assert [a.id for a in svc.list_for_customer("u1")] == [mine.id]
    assert len(svc.list_for_technician("t1")) == 2
    assert len(svc.list_for_technician("t1", ["completed"])) == 1
    assert svc.get_for_actor("t1", "technician", mine.id).id == mine.id
    with pytest.raises(HTTPException) as exc:
        svc.get_for_actor("u2", "customer", mine.id)
    assert exc.value.status_code == 404
