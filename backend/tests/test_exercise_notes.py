import pytest

from coachhub.models import UserRole

URL = "/api/client-exercise-notes"


@pytest.fixture
def plan(instructor, trainee, make_exercise, make_program, assign):
    squat, row = make_exercise(instructor, "Squat"), make_exercise(instructor, "Row")
    program = make_program(instructor, [{"exercise_id": squat["id"]}, {"exercise_id": row["id"]}])
    return assign(instructor, trainee, program["id"]), squat, row


def test_instructor_writes_client_reads(client, instructor, trainee, plan):
    cp, squat, row = plan
    r = client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"],
        "notes": [
            {"exercise_id": squat["id"], "note": "  knees out  "},
            {"exercise_id": row["id"], "note": "pause at the top"},
        ],
    })
    assert r.status_code == 200, r.text
    assert [(n["exercise_name"], n["note"]) for n in r.json()] == [("Squat", "knees out"), ("Row", "pause at the top")]

    r = client.get(f"{URL}?client_program_id={cp['id']}", headers=trainee.headers)
    assert r.status_code == 200
    assert [n["exercise_id"] for n in r.json()] == [squat["id"], row["id"]]


def test_post_replaces_every_note(client, instructor, plan):
    cp, squat, row = plan
    client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": squat["id"], "note": "old"}],
    })
    r = client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": row["id"], "note": "new"}],
    })
    assert [(n["exercise_id"], n["note"]) for n in r.json()] == [(row["id"], "new")]

    r = client.post(URL, headers=instructor.headers, json={"client_program_id": cp["id"], "notes": []})
    assert r.status_code == 200
    assert r.json() == []


def test_client_cannot_write_notes(client, trainee, plan):
    cp, squat, _ = plan
    r = client.post(URL, headers=trainee.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": squat["id"], "note": "mine"}],
    })
    assert r.status_code == 403


def test_other_instructor_is_refused(client, make_user, plan):
    cp, squat, _ = plan
    other = make_user(UserRole.instructor)
    r = client.post(URL, headers=other.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": squat["id"], "note": "x"}],
    })
    assert r.status_code == 403
    assert client.get(f"{URL}?client_program_id={cp['id']}", headers=other.headers).status_code == 403


def test_notes_must_target_program_exercises(client, instructor, make_exercise, plan):
    cp, squat, _ = plan
    outsider = make_exercise(instructor, "Curl")
    r = client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": outsider["id"], "note": "x"}],
    })
    assert r.status_code == 400
    assert r.json()["code"] == "not_in_program"

    r = client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"],
        "notes": [{"exercise_id": squat["id"], "note": "a"}, {"exercise_id": squat["id"], "note": "b"}],
    })
    assert r.status_code == 400
    assert r.json()["code"] == "duplicate_exercise"


def test_added_exercise_can_carry_a_note(client, instructor, make_exercise, plan):
    cp, _, _ = plan
    extra = make_exercise(instructor, "Farmer carry")
    r = client.put(f"/api/client-program-items/{cp['id']}/{extra['id']}", headers=instructor.headers,
                   json={"is_added": True})
    assert r.status_code == 200, r.text
    r = client.post(URL, headers=instructor.headers, json={
        "client_program_id": cp["id"], "notes": [{"exercise_id": extra["id"], "note": "heavy"}],
    })
    assert r.status_code == 200
    assert r.json()[0]["exercise_name"] == "Farmer carry"
