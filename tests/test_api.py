import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import dependencies
from app.database import get_session
from app.db.models import Technician, User
from app.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from app.main import app
from app.utils import create_jwt_token


def auth(actor_id, role):
    return {"Authorization": f"Bearer {create_jwt_token({'sub': actor_id, 'role': role})}"}


CUSTOMER = auth("u1", "customer")
TECHNICIAN = auth("t1", "technician")
ADMIN = auth("admin1", "admin")


@pytest.fixture
def client(monkeypatch):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        s.add(User(id="u1", username="Carla"))
        s.add(Technician(id="t1", username="Tom", status="approved", categories='["Television"]'))
        s.add(Technician(id="t2", username="Nina", status="pending"))
        s.commit()

    def override_session():
        with Session(engine) as session:
            yield session

    monkeypatch.setattr(dependencies, "_rate_limiter", InMemoryRateLimiter())
    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def book(client):
    body = {
        "technician_id": "t1",
        "service_type": "walk-in",
        "category": "Television",
        "issue": "No sound",
        "diagnosis": "Speaker or audio board fault",
        "estimated_cost": 2200,
        "scheduled_date": "2030-01-02T10:00:00",
    }
    return client.post("/appointments", json=body, headers=CUSTOMER)


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_requests_without_token_get_401_envelope(client):
    res = client.get("/appointments")
    assert res.status_code == 401
    assert res.json()["success"] is False
    assert res.json()["data"] is None

    res = client.get("/appointments", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_catalog(client):
    res = client.get("/diagnoses/catalog")
    assert res.status_code == 200
    body = res.json()
    assert "Television" in body["categories"]
    assert body["issues"]["Television"][-1] == body["custom_issue"]
    assert body["issues"]["Television"].count(body["custom_issue"]) == 1


def test_static_estimate(client):
    res = client.post("/diagnoses/estimate", json={"category": "Refrigerator", "issue": "Not cooling", "brand": "Samsung"}, headers=CUSTOMER)
    assert res.status_code == 200
    body = res.json()
    assert body["source"] == "static"
    assert body["currency"] == "PHP"
    assert 5185 <= body["estimated_cost"] <= 5735

    res = client.post("/diagnoses/estimate", json={"category": "Refrigerator", "issue": "Not cooling"}, headers=TECHNICIAN)
    assert res.status_code == 403


def test_walk_in_flow(client):
    res = book(client)
    assert res.status_code == 201
    appt = res.json()
    assert appt["status"]["global"] == "Scheduled"
    assert appt["status"]["technicianView"] == "Request pending"
    appt_id = appt["id"]

    assert book(client).status_code == 409

    res = client.put(f"/appointments/{appt_id}/accept", headers=CUSTOMER)
    assert res.status_code == 403

    assert client.put(f"/appointments/{appt_id}/accept", headers=TECHNICIAN).json()["status"]["global"] == "Accepted"

    res = client.put("/technicians/me/availability", json={"available": False}, headers=TECHNICIAN)
    assert res.status_code == 409
    assert res.json()["success"] is False

    res = client.put(f"/appointments/{appt_id}/start-repair", json={"estimated_completion": "2099-01-03"}, headers=TECHNICIAN)
    assert res.json()["status"]["global"] == "Repairing"
    assert client.put(f"/appointments/{appt_id}/cancel", json={"reason": "Changed my mind"}, headers=CUSTOMER).status_code == 409
    assert client.put(f"/appointments/{appt_id}/start-testing", headers=TECHNICIAN).status_code == 200
    done = client.put(f"/appointments/{appt_id}/complete", headers=TECHNICIAN).json()
    assert done["status"]["global"] == "Completed"
    assert done["status"]["rated"] is False

    res = client.post(f"/appointments/{appt_id}/rating", json={"rating": 5}, headers=CUSTOMER)
    assert res.status_code == 200
    assert res.json()["status"]["rated"] is True

    me = client.get("/technicians/me", headers=TECHNICIAN).json()
    assert me["average_rating"] == 5.0
    assert me["total_ratings"] == 1

    assert client.put("/technicians/me/availability", json={"available": False}, headers=TECHNICIAN).json()["availability"] is False

    notes = client.get("/notifications", headers=CUSTOMER).json()
    assert notes["unread_count"] == len(notes["items"]) == 5
    assert client.put("/notifications/read-all", headers=CUSTOMER).json()["count"] == 5
    assert client.get("/notifications/unread-count", headers=CUSTOMER).json()["count"] == 0


def test_customer_cancels_with_reason(client):
    appt_id = book(client).json()["id"]
    res = client.put(f"/appointments/{appt_id}/cancel", json={"reason": "Others", "custom_reason": "Fixed it myself"}, headers=CUSTOMER)
    assert res.status_code == 200
    assert res.json()["cancellation_reason"] == "Fixed it myself"
    assert res.json()["status"]["technicianView"] == "Appointment cancelled by user"

    tech_notes = client.get("/notifications", headers=TECHNICIAN).json()["items"]
    assert any("Reason: Fixed it myself" in n["message"] for n in tech_notes)


def test_registration_review_is_admin_only(client):
    body = {"approved": True}
    assert client.put("/technicians/t2/registration", json=body, headers=TECHNICIAN).status_code == 403
    res = client.put("/technicians/t2/registration", json=body, headers=ADMIN)
    assert res.status_code == 200
    assert res.json()["status"] == "approved"


def test_locations(client):
    assert client.get("/users/me/location", headers=CUSTOMER).status_code == 404
    body = {"latitude": 14.0833, "longitude": 121.15, "address": "Poblacion, Tanauan, Batangas"}
    assert client.put("/users/me/location", json=body, headers=CUSTOMER).status_code == 200
    assert client.get("/users/me/location", headers=CUSTOMER).json() == body

    bad = dict(body, latitude=120)
    res = client.put("/users/me/location", json=bad, headers=CUSTOMER)
    assert res.status_code == 422
    assert res.json()["success"] is False


def test_notification_delete_is_scoped(client):
    book(client)
    note_id = client.get("/notifications", headers=CUSTOMER).json()["items"][0]["id"]
    assert client.delete(f"/notifications/{note_id}", headers=TECHNICIAN).status_code == 404
    assert client.put(f"/notifications/{note_id}/read", headers=CUSTOMER).status_code == 200
    assert client.delete(f"/notifications/{note_id}", headers=CUSTOMER).status_code == 200


def test_map_page(client):
    res = client.get("/map?lat=14.1&lon=121.2")
    assert res.status_code == 200
    assert "leaflet" in res.text.lower()
    assert "ReactNativeWebView" in res.text
    assert "X-Frame-Options" not in res.headers
