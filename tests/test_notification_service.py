from datetime import datetime

from app.application.services import notification_service as messages
from app.application.services.notification_service import NotificationService

from tests.fakes import FakeNotificationRepo


def test_emit_stores_notification():
    repo = FakeNotificationRepo()
    svc = NotificationService(repo=repo)
    out = svc.emit("u1", "appointment", "Booked")
    assert out.type == "appointment"
    assert out.read is False
    assert repo.for_user("u1")[0].message == "Booked"


def test_emit_never_raises():
    svc = NotificationService(repo=FakeNotificationRepo(fail=True))
    assert svc.emit("u1", "appointment", "Booked") is None
    assert svc.emit("", "appointment", "Booked") is None


def test_unknown_type_is_stored_as_system():
    repo = FakeNotificationRepo()
    NotificationService(repo=repo).emit("u1", "party", "Hello")
    assert repo.for_user("u1")[0].type == "system"


def test_emit_once_skips_duplicates():
    repo = FakeNotificationRepo()
    svc = NotificationService(repo=repo)
    assert svc.emit_once("u1", "welcome", messages.customer_welcome()) is True
    assert svc.emit_once("u1", "welcome", messages.customer_welcome()) is False
    assert svc.emit_once("u2", "welcome", messages.customer_welcome()) is True
    assert len(repo.for_user("u1")) == 1


def test_read_and_delete_are_scoped_to_owner():
    repo = FakeNotificationRepo()
    svc = NotificationService(repo=repo)
    first = svc.emit("u1", "appointment", "one")
    svc.emit("u1", "rating", "two")
    other = svc.emit("u2", "appointment", "three")

    assert svc.unread_count("u1") == 2
    assert svc.mark_read("u1", other.id) is False
    assert svc.mark_read("u1", first.id) is True
    assert svc.unread_count("u1") == 1
    assert [n.message for n in svc.list_for_user("u1", read=False)] == ["two"]
    assert [n.message for n in svc.list_for_user("u1", type="appointment")] == ["one"]

    assert svc.mark_all_read("u1") == 1
    assert svc.unread_count("u1") == 0
    assert svc.unread_count("u2") == 1

    assert svc.delete("u1", other.id) is False
    assert svc.delete("u1", first.id) is True
    assert len(svc.list_for_user("u1")) == 1


def test_message_texts():
    when = datetime(2030, 1, 2, 10, 0)
    assert "January 02, 2030 10:00 AM" in messages.appointment_confirmation("Tom", when)
    assert messages.appointment_rejected("Tom", when, None).endswith("declined your repair request.")
    assert messages.appointment_cancelled("Carla", when, "Moving").endswith("\n\nReason: Moving")
    assert "₱2,500" in messages.diagnosis_complete("Television", 2500)
    assert "price estimate" in messages.diagnosis_complete("Television", 0)
    assert "⭐⭐⭐" in messages.rating_received(3, "Carla")
