from datetime import timedelta
import pytest

from coachhub.models import UserRole
from coachhub.timeutils import today


@pytest.fixture
def setup(client, instructor, trainee, make_exercise, make_program, assign):
    a, b = make_exercise(instructor, "Squat"), make_exercise(instructor, "Row")
    cp = assign(instructor, trainee, make_program(instructor, [{"exercise_id": a["id"]}, {"exercise_id": b["id"]}])["id"])
    return cp, a, b


def test_start_record_finish(client, trainee, setup):
    cp, a, b = setup
    H = trainee.headers

    r = client.post("/api/sessions", headers=H, json={"client_program_id": cp["id"], "notes": "  morning  "})
    assert r.status_code == 201, r.text
    sess = r.json()
    assert sess["status"] == "in_progress"
    assert sess["notes"] == "morning"

    # starting again hands back the same session
    r = client.post("/api/sessions", headers=H, json={"client_program_id": cp["id"]})
    assert r.status_code == 200
    assert r.json()["id"] == sess["id"]

    r = client.post(f"/api/sessions/{sess['id']}/items", headers=H, json={"exercise_id": a["id"]})
    assert r.status_code == 200
    assert r.json()["completed"] is True
    r = client.post(f"/api/sessions/{sess['id']}/items", headers=H, json={"exercise_id": b["id"], "skipped": True})
    assert r.json()["skipped"] is True
    # recording again updates in place
    r = client.post(f"/api/sessions/{sess['id']}/items", headers=H, json={"exercise_id": b["id"]})
    assert r.json()["skipped"] is False

    r = client.post(f"/api/sessions/{sess['id']}/finish", headers=H, json={"notes": "felt strong"})
    assert r.status_code == 200
    done = r.json()
    assert done["status"] == "completed"
    assert done["finished_at"] is not None
    assert len(done["items"]) == 2

    listed = client.get("/api/sessions", headers=H).json()
    assert listed[0]["id"] == sess["id"]


def test_finished_session_is_immutable(client, trainee, setup):
    cp, a, _ = setup
    H = trainee.headers
    sid = client.post("/api/sessions", headers=H, json={"client_program_id": cp["id"]}).json()["id"]
    assert client.post(f"/api/sessions/{sid}/cancel", headers=H).json()["status"] == "cancelled"

    for path, body in [("items", {"exercise_id": a["id"]}), ("finish", {}), ("cancel", None)]:
        r = client.post(f"/api/sessions/{sid}/{path}", headers=H, json=body)
        assert r.status_code == 400, path
        assert r.json()["code"] == "session_finished"

    # a new session can start once the old one is closed
    r = client.post("/api/sessions", headers=H, json={"client_program_id": cp["id"]})
    assert r.status_code == 201
    assert r.json()["id"] != sid


def test_finish_marks_todays_schedule_done(client, instructor, trainee, setup):
    cp, _, _ = setup
    r = client.post("/api/scheduled-programs", headers=instructor.headers, json={
        "client_id": trainee.id, "client_program_id": cp["id"],
        "dates": [today().isoformat(), (today() + timedelta(days=1)).isoformat()],
    })
    assert r.status_code == 201

    sid = client.post("/api/sessions", headers=trainee.headers, json={"client_program_id": cp["id"]}).json()["id"]
    client.post(f"/api/sessions/{sid}/finish", headers=trainee.headers)

    rows = client.get("/api/scheduled-programs", headers=trainee.headers).json()
    assert [r["status"] for r in rows] == ["completed", "planned"]


def test_session_visibility(client, make_user, instructor, trainee, setup):
    cp, _, _ = setup
    sid = client.post("/api/sessions", headers=trainee.headers, json={"client_program_id": cp["id"]}).json()["id"]
    assert client.get(f"/api/sessions/{sid}", headers=instructor.headers).status_code == 200
    assert client.get(f"/api/sessions?client_id={trainee.id}", headers=instructor.headers).json()[0]["id"] == sid

    stranger = make_user(UserRole.instructor)
    assert client.get(f"/api/sessions/{sid}", headers=stranger.headers).status_code == 403
    # only the client changes their own session
    assert client.post(f"/api/sessions/{sid}/cancel", headers=instructor.headers).status_code == 403


def test_instructor_cannot_start_for_client(client, instructor, setup):
    cp, _, _ = setup
    r = client.post("/api/sessions", headers=instructor.headers, json={"client_program_id": cp["id"]})
    assert r.status_code == 403


def test_missing_session_404(client, trainee):
    assert client.get("/api/sessions/999999", headers=trainee.headers).status_code == 404
    assert client.post("/api/sessions/999999/items", headers=trainee.headers, json={"exercise_id": 1}).status_code == 404


def test_unknown_exercise_rejected(client, trainee, setup):
    cp, _, _ = setup
    sess = client.post("/api/sessions", headers=trainee.headers, json={"client_program_id": cp["id"]}).json()
    r = client.post(f"/api/sessions/{sess['id']}/items", headers=trainee.headers, json={"exercise_id": 999999})
    assert r.status_code == 400
    assert r.json()["code"] == "unknown_exercise"
