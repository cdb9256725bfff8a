from datetime import datetime, timedelta, timezone
import pytest

from coachhub.db import SessionLocal
from coachhub.errors import CapacityError, InvalidStateError
from coachhub.models import RegistrationStatus, UserRole
from coachhub.repositories.event_repo import EventRepository
from coachhub.services import registration


def in_days(days, hours=0):
    return (datetime.now(timezone.utc) + timedelta(days=days, hours=hours)).isoformat()


@pytest.fixture
def make_event(client, instructor):
    def factory(**fields):
        body = {"title": "Bootcamp", "start_date": in_days(7), **fields}
        r = client.post("/api/events", headers=instructor.headers, json=body)
        assert r.status_code == 201, r.text
        return r.json()
    return factory


@pytest.fixture
def people(make_user):
    return [make_user(UserRole.client, name=f"P{i}") for i in range(5)]


def register(client, event, user):
    return client.post(f"/api/events/{event['id']}/register", headers=user.headers)


def test_unlimited_event_registers_everyone(client, make_event, people):
    event = make_event()
    for p in people:
        r = register(client, event, p)
        assert r.status_code == 201
        assert r.json()["status"] == "registered"
    body = client.get(f"/api/events/{event['id']}", headers=people[0].headers).json()
    assert body["registered_count"] == 5
    assert body["my_status"] == "registered"


def test_full_event_without_waitlist_rejects(client, make_event, people):
    event = make_event(max_attendees=1)
    assert register(client, event, people[0]).status_code == 201
    r = register(client, event, people[1])
    assert r.status_code == 400
    assert r.json()["code"] == "event_full"


def test_waitlist_positions_increase(client, make_event, people):
    event = make_event(max_attendees=2, allow_waitlist=True)
    statuses = [register(client, event, p).json() for p in people]
    assert [s["status"] for s in statuses] == ["registered", "registered", "waitlisted", "waitlisted", "waitlisted"]
    assert [s["waitlist_position"] for s in statuses[2:]] == [1, 2, 3]

    mine = client.get(f"/api/events/{event['id']}", headers=people[4].headers).json()
    assert mine["my_status"] == "waitlisted"
    assert mine["my_waitlist_position"] == 3
    assert mine["waitlist_count"] == 3


def test_already_registered(client, make_event, people):
    event = make_event(max_attendees=1, allow_waitlist=True)
    register(client, event, people[0])
    register(client, event, people[1])
    for p in people[:2]:
        r = register(client, event, p)
        assert r.status_code == 400
        assert r.json()["code"] == "already_registered"


def test_unregister_promotes_earliest_waitlisted(client, make_event, people):
    event = make_event(max_attendees=2, allow_waitlist=True)
    for p in people:
        register(client, event, p)

    r = client.delete(f"/api/events/{event['id']}/register", headers=people[0].headers)
    assert r.status_code == 200
    assert r.json()["promoted_user_ids"] == [people[2].id]

    body = client.get(f"/api/events/{event['id']}", headers=people[3].headers).json()
    assert body["registered_count"] == 2
    assert body["waitlist_count"] == 2
    assert body["my_waitlist_position"] == 1

    promoted = client.get("/api/notifications", headers=people[2].headers).json()["notifications"]
    assert promoted[0]["type"] == "event_promoted"


def test_unregister_waitlisted_promotes_nobody(client, make_event, people):
    event = make_event(max_attendees=1, allow_waitlist=True)
    for p in people[:3]:
        register(client, event, p)
    r = client.delete(f"/api/events/{event['id']}/register", headers=people[1].headers)
    assert r.json()["promoted_user_ids"] == []
    me = client.get(f"/api/events/{event['id']}", headers=people[2].headers).json()
    assert me["my_waitlist_position"] == 1


def test_reregistering_rejoins_back_of_queue(client, make_event, people):
    event = make_event(max_attendees=1, allow_waitlist=True)
    for p in people[:3]:
        register(client, event, p)
    client.delete(f"/api/events/{event['id']}/register", headers=people[1].headers)
    r = register(client, event, people[1])
    assert r.status_code == 201
    assert r.json()["status"] == "waitlisted"
    assert r.json()["waitlist_position"] == 2


def test_unregister_when_not_registered(client, make_event, people):
    event = make_event()
    r = client.delete(f"/api/events/{event['id']}/register", headers=people[0].headers)
    assert r.status_code == 404
    assert r.json()["code"] == "not_registered"


def test_registration_deadline(client, make_event, people):
    event = make_event(start_date=in_days(0, hours=5), registration_deadline_hours=24)
    r = register(client, event, people[0])
    assert r.status_code == 400
    assert r.json()["code"] == "registration_closed"


def test_raising_capacity_promotes(client, instructor, make_event, people):
    event = make_event(max_attendees=1, allow_waitlist=True)
    for p in people[:4]:
        register(client, event, p)
    r = client.patch(f"/api/events/{event['id']}", headers=instructor.headers, json={"max_attendees": 3})
    assert r.status_code == 200, r.text
    assert r.json()["registered_count"] == 3
    assert r.json()["waitlist_count"] == 1

    regs = client.get(f"/api/events/{event['id']}/registrations", headers=instructor.headers).json()
    by_user = {reg["user_id"]: reg for reg in regs}
    assert by_user[people[1].id]["status"] == "registered"
    assert by_user[people[2].id]["status"] == "registered"
    assert by_user[people[3].id]["waitlist_position"] == 1


def test_registrations_only_for_creator(client, make_user, make_event, people):
    event = make_event()
    other = make_user(UserRole.instructor)
    assert client.get(f"/api/events/{event['id']}/registrations", headers=other.headers).status_code == 403
    assert client.get(f"/api/events/{event['id']}/registrations", headers=people[0].headers).status_code == 403


def test_list_upcoming_only(client, make_event, people):
    upcoming = make_event(title="Soon")
    past = make_event(title="Over", start_date=in_days(-2))
    ids = [e["id"] for e in client.get("/api/events", headers=people[0].headers).json()]
    assert upcoming["id"] in ids
    assert past["id"] not in ids


def test_event_validation(client, instructor, trainee):
    r = client.post("/api/events", headers=instructor.headers,
                    json={"title": "Backwards", "start_date": in_days(3), "end_date": in_days(2)})
    assert r.status_code == 422
    r = client.post("/api/events", headers=trainee.headers, json={"title": "Mine", "start_date": in_days(3)})
    assert r.status_code == 403


def test_delete_event(client, instructor, make_event):
    event = make_event()
    assert client.delete(f"/api/events/{event['id']}", headers=instructor.headers).status_code == 204
    assert client.get(f"/api/events/{event['id']}", headers=instructor.headers).status_code == 404


def test_service_level_state_machine(make_event, people):
    event_id = make_event(max_attendees=1)["id"]
    db = SessionLocal()
    event = EventRepository(db).get(event_id)

    reg = registration.register(db, event, people[0].id)
    assert reg.status == RegistrationStatus.registered
    with pytest.raises(CapacityError):
        registration.register(db, event, people[1].id)

    late = datetime.now(timezone.utc) + timedelta(days=30)
    with pytest.raises(InvalidStateError):
        registration.register(db, event, people[2].id, now=late)
    db.close()
