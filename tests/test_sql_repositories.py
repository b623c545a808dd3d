from datetime import datetime, date

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.application.ports.appointments_repo import BookingRequest
from app.application.ports.geocoder import SelectedLocation
from app.db.models import Appointment, Technician, User
from app.infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from app.infrastructure.persistence.sqlalchemy.repositories.notification_repository_sql import SqlNotificationRepository
from app.infrastructure.persistence.sqlalchemy.repositories.rating_repository_sql import SqlRatingRepository
from app.infrastructure.persistence.sqlalchemy.repositories.technician_repository_sql import SqlTechnicianRepository
from app.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository

BUSY = ["Repairing", "Testing"]
OPEN = ["Scheduled", "Accepted", "Repairing", "Testing"]


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        s.add(Technician(id="t1", username="Tom", status="approved", categories='["Television"]'))
        s.add(User(id="u1", username="Carla"))
        s.commit()
        yield s


def add_appointment(session, status, technician_id="t1", user_id="u1", **fields):
    appt = Appointment(
        user_id=user_id,
        technician_id=technician_id,
        status=status,
        category="Television",
        issue="No sound",
        diagnosis="Speaker fault",
        estimated_cost=2200,
        scheduled_date=datetime(2030, 1, 2, 10, 0),
        **fields,
    )
    session.add(appt)
    session.commit()
    return appt.id


def test_create_and_read_appointment(session):
    repo = SqlAppointmentsRepository(session)
    request = BookingRequest(
        technician_id="t1",
        service_type="home-service",
        category="Television",
        issue="No sound",
        diagnosis="Speaker fault",
        estimated_cost=2200,
        scheduled_date=datetime(2030, 1, 2, 10, 0),
        address="Poblacion, Tanauan, Batangas",
    )
    created = repo.create("u1", request, "Scheduled", datetime(2030, 1, 1, 9, 0), datetime(2030, 1, 2, 7, 35))
    fetched = repo.get_by_id(created.id)
    assert fetched.status == "Scheduled"
    assert fetched.address == "Poblacion, Tanauan, Batangas"
    assert fetched.arrived is False
    assert [a.id for a in repo.list_for_user("u1")] == [created.id]
    assert repo.list_for_technician("t1", ["Completed"]) == []


def test_transition_only_from_expected_status(session):
    repo = SqlAppointmentsRepository(session)
    appt_id = add_appointment(session, "Scheduled")

    assert repo.transition(appt_id, ["Accepted"], {"status": "Repairing"}) is False
    assert repo.transition(appt_id, ["Scheduled"], {"status": "Accepted", "accepted_at": datetime(2030, 1, 1, 9, 5)}) is True
    assert repo.get_by_id(appt_id).status == "Accepted"
    # A second accept loses the race
    assert repo.transition(appt_id, ["Scheduled"], {"status": "Accepted"}) is False


def test_arrival_guard(session):
    repo = SqlAppointmentsRepository(session)
    appt_id = add_appointment(session, "Accepted", service_type="home-service")
    now = datetime(2030, 1, 1, 9, 0)

    assert repo.transition(appt_id, ["Accepted"], {"arrived_at": now}, arrived=False) is True
    assert repo.transition(appt_id, ["Accepted"], {"arrived_at": now}, arrived=False) is False
    assert repo.get_by_id(appt_id).arrived is True


def test_start_repair_blocked_while_another_job_is_busy(session):
    repo = SqlAppointmentsRepository(session)
    busy_id = add_appointment(session, "Testing", user_id="u2")
    target_id = add_appointment(session, "Accepted")
    changes = {"status": "Repairing", "estimated_completion": date(2030, 1, 3)}

    assert repo.start_repair(target_id, "t1", ["Accepted"], BUSY, changes) is False
    assert repo.get_by_id(target_id).status == "Accepted"

    assert repo.transition(busy_id, ["Testing"], {"status": "Completed"}) is True
    assert repo.start_repair(target_id, "t1", ["Accepted"], BUSY, changes) is True
    started = repo.get_by_id(target_id)
    assert started.status == "Repairing"
    assert started.estimated_completion == date(2030, 1, 3)


def test_start_repair_ignores_other_technicians(session):
    repo = SqlAppointmentsRepository(session)
    add_appointment(session, "Repairing", technician_id="t2")
    target_id = add_appointment(session, "Accepted")
    assert repo.start_repair(target_id, "t1", ["Accepted"], BUSY, {"status": "Repairing"}) is True


def test_mark_rated_once(session):
    repo = SqlAppointmentsRepository(session)
    appt_id = add_appointment(session, "Completed")
    when = datetime(2030, 1, 5, 12, 0)
    assert repo.mark_rated(appt_id, "u2", ["Completed"], 5, when) is False
    assert repo.mark_rated(appt_id, "u1", ["Completed"], 5, when) is True
    assert repo.mark_rated(appt_id, "u1", ["Completed"], 3, when) is False
    assert repo.get_by_id(appt_id).user_rating == 5


def test_unmark_rated_reopens_rating(session):
    repo = SqlAppointmentsRepository(session)
    appt_id = add_appointment(session, "Completed")
    when = datetime(2030, 1, 5, 12, 0)
    assert repo.unmark_rated(appt_id, "u1") is False
    assert repo.mark_rated(appt_id, "u1", ["Completed"], 4, when) is True
    assert repo.unmark_rated(appt_id, "u2") is False
    assert repo.unmark_rated(appt_id, "u1") is True

    appt = repo.get_by_id(appt_id)
    assert appt.rated is False
    assert appt.user_rating is None
    assert repo.mark_rated(appt_id, "u1", ["Completed"], 5, when) is True


def test_set_unavailable_only_when_idle(session):
    repo = SqlTechnicianRepository(session)
    appt_id = add_appointment(session, "Accepted")

    assert repo.set_unavailable_if_idle("t1", OPEN) is False
    assert repo.get_by_id("t1").availability is True

    session.get(Appointment, appt_id).status = "Cancelled"
    session.commit()
    assert repo.set_unavailable_if_idle("t1", OPEN) is True
    assert repo.get_by_id("t1").availability is False

    repo.set_available("t1")
    assert repo.get_by_id("t1").availability is True


def test_technician_and_user_locations(session):
    techs = SqlTechnicianRepository(session)
    users = SqlUserRepository(session)
    assert techs.get_by_id("t1").categories == ["Television"]
    assert techs.get_location("t1") is None

    techs.save_location("t1", SelectedLocation(14.1, 121.1, "Darasa, Tanauan, Batangas"))
    users.save_location("u1", SelectedLocation(14.0833, 121.15, "Poblacion, Tanauan, Batangas"))
    assert techs.get_location("t1") == SelectedLocation(14.1, 121.1, "Darasa, Tanauan, Batangas")
    assert users.get_location("u1").address == "Poblacion, Tanauan, Batangas"

    users.set_profile_image("u1", "https://img.example/u1.jpg")
    assert users.get_by_id("u1").profile_image_url == "https://img.example/u1.jpg"


def test_one_time_notifications_are_deduplicated(session):
    repo = SqlNotificationRepository(session)
    assert repo.add_if_absent("u1", "welcome", "Welcome!", "u1:welcome") is True
    assert repo.add_if_absent("u1", "welcome", "Welcome!", "u1:welcome") is False
    # The session stays usable after the rejected insert
    repo.add("u1", "appointment", "Booked")
    assert repo.unread_count("u1") == 2


def test_notification_ownership(session):
    repo = SqlNotificationRepository(session)
    mine = repo.add("u1", "appointment", "Booked")
    theirs = repo.add("u2", "appointment", "Booked")

    assert repo.mark_read(theirs.id, "u1") is False
    assert repo.mark_read(mine.id, "u1") is True
    assert [n.id for n in repo.list_for_user("u1", read=True)] == [mine.id]
    assert repo.mark_all_read("u2") == 1
    assert repo.delete(theirs.id, "u1") is False
    assert repo.delete(mine.id, "u1") is True
    assert repo.list_for_user("u1") == []


def test_rating_upsert_keeps_one_row_per_customer(session):
    repo = SqlRatingRepository(session)
    repo.upsert("t1", "u1", "a1", 3)
    repo.upsert("t1", "u1", "a2", 5, "Much better this time")
    repo.upsert("t1", "u2", "a3", 4)
    assert sorted(repo.ratings_for_technician("t1")) == [4, 5]
