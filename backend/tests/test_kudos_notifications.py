import pytest

from coachhub.models import UserRole
from coachhub.settings import get_settings


@pytest.fixture
def finished_session(client, instructor, trainee, make_exercise, make_program, assign):
    ex = make_exercise(instructor)
    cp = assign(instructor, trainee, make_program(instructor, [{"exercise_id": ex["id"]}])["id"])
    sid = client.post("/api/sessions", headers=trainee.headers, json={"client_program_id": cp["id"]}).json()["id"]
    client.post(f"/api/sessions/{sid}/finish", headers=trainee.headers)
    return sid


def notifications(client, user):
    r = client.get("/api/notifications", headers=user.headers)
    assert r.status_code == 200
    return r.json()


def test_kudos_upsert_one_per_instructor(client, instructor, trainee, finished_session):
    r = client.post("/api/kudos", headers=instructor.headers, json={"session_id": finished_session})
    assert r.status_code == 200, r.text
    first = r.json()
    assert first["emoji"] == get_settings().DEFAULT_KUDOS_EMOJI

    r = client.post("/api/kudos", headers=instructor.headers,
                    json={"session_id": finished_session, "emoji": "\U0001F525", "message": "On fire"})
    assert r.json()["id"] == first["id"]
    assert r.json()["message"] == "On fire"

    sess = client.get(f"/api/sessions/{finished_session}", headers=trainee.headers).json()
    assert len(sess["kudos"]) == 1

    kinds = [n["type"] for n in notifications(client, trainee)["notifications"]]
    assert kinds.count("kudos_received") == 2

    assert client.delete(f"/api/kudos/{finished_session}", headers=instructor.headers).status_code == 204
    assert client.delete(f"/api/kudos/{finished_session}", headers=instructor.headers).status_code == 404


def test_kudos_only_from_clients_instructor(client, make_user, finished_session):
    stranger = make_user(UserRole.instructor)
    r = client.post("/api/kudos", headers=stranger.headers, json={"session_id": finished_session})
    assert r.status_code == 403


def test_nudge_and_read_flow(client, make_user, instructor, trainee):
    r = client.post("/api/notifications/nudge", headers=instructor.headers, json={"client_id": trainee.id})
    assert r.status_code == 201
    assert r.json()["type"] == "instructor_nudge"
    assert "Coach" in r.json()["message"]
    client.post("/api/notifications/nudge", headers=instructor.headers,
                json={"client_id": trainee.id, "message": "Ready for Thursday?"})

    body = notifications(client, trainee)
    assert body["unread_count"] == 2
    newest = body["notifications"][0]
    assert newest["message"] == "Ready for Thursday?"

    r = client.post("/api/notifications/read", headers=trainee.headers, json={"notification_id": newest["id"]})
    assert r.json() == {"updated": 1}
    assert notifications(client, trainee)["unread_count"] == 1

    r = client.post("/api/notifications/read", headers=trainee.headers, json={"mark_all_read": True})
    assert r.json() == {"updated": 1}
    assert notifications(client, trainee)["unread_count"] == 0

    # someone else's notification is invisible
    other = make_user(UserRole.client)
    r = client.post("/api/notifications/read", headers=other.headers, json={"notification_id": newest["id"]})
    assert r.status_code == 404


def test_mark_read_needs_a_target(client, trainee):
    assert client.post("/api/notifications/read", headers=trainee.headers, json={}).status_code == 422


def test_nudge_only_own_clients(client, make_user, instructor):
    stranger = make_user(UserRole.client)
    r = client.post("/api/notifications/nudge", headers=instructor.headers, json={"client_id": stranger.id})
    assert r.status_code == 403


def test_list_is_capped(client, instructor, trainee):
    for _ in range(3):
        client.post("/api/notifications/nudge", headers=instructor.headers, json={"client_id": trainee.id})
    assert len(client.get("/api/notifications?limit=2", headers=trainee.headers).json()["notifications"]) == 2
