from coachhub.models import UserRole

def test_create_program_with_ordered_items(client, instructor, make_exercise, make_program):
    a = make_exercise(instructor, "A", sets=3)
    b = make_exercise(instructor, "B")
    p = make_program(instructor, [
        {"exercise_id": a["id"], "section": "WARMUP"},
        {"exercise_id": b["id"], "reps": 8, "weight_per_set": [20, 22.5]},
    ], difficulty="intermediate", location="HOME")
    assert [i["exercise_name"] for i in p["items"]] == ["A", "B"]
    assert [i["order"] for i in p["items"]] == [0, 1]
    assert p["items"][0]["section"] == "WARMUP"
    assert p["items"][1]["section"] == "CORE"
    assert p["items"][1]["weight_per_set"] == [20, 22.5]
    assert p["difficulty"] == "intermediate"
    assert p["location"] == "HOME"

def test_duplicate_exercise_rejected(client, instructor, make_exercise):
    a = make_exercise(instructor)
    r = client.post("/api/programs", headers=instructor.headers,
                    json={"name": "Dup", "items": [{"exercise_id": a["id"]}, {"exercise_id": a["id"]}]})
    assert r.status_code == 400
    assert r.json()["code"] == "duplicate_exercise"

def test_unknown_exercise_rejected(client, instructor):
    r = client.post("/api/programs", headers=instructor.headers,
                    json={"name": "Ghost", "items": [{"exercise_id": 999999}]})
    assert r.status_code == 400
    assert r.json()["code"] == "unknown_exercise"

def test_replace_items(client, instructor, make_exercise, make_program):
    a, b = make_exercise(instructor), make_exercise(instructor)
    p = make_program(instructor, [{"exercise_id": a["id"]}, {"exercise_id": b["id"]}])
    r = client.put(f"/api/programs/{p['id']}", headers=instructor.headers,
                   json={"name": "Renamed", "items": [{"exercise_id": b["id"], "sets": 5}]})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["name"] == "Renamed"
    assert [(i["exercise_id"], i["sets"]) for i in body["items"]] == [(b["id"], 5)]

def test_get_access_rules(client, make_user, instructor, trainee, make_exercise, make_program, assign):
    ex = make_exercise(instructor)
    private = make_program(instructor, [{"exercise_id": ex["id"]}])
    stranger = make_user(UserRole.client)
    assert client.get(f"/api/programs/{private['id']}", headers=stranger.headers).status_code == 403
    assign(instructor, trainee, private["id"])
    assert client.get(f"/api/programs/{private['id']}", headers=trainee.headers).status_code == 200

    public = make_program(instructor, [{"exercise_id": ex["id"]}], is_public=True)
    assert client.get(f"/api/programs/{public['id']}", headers=stranger.headers).status_code == 200

def test_delete_assigned_program_archives(client, instructor, trainee, make_exercise, make_program, assign):
    ex = make_exercise(instructor)
    kept = make_program(instructor, [{"exercise_id": ex["id"]}])
    assign(instructor, trainee, kept["id"])
    gone = make_program(instructor, [{"exercise_id": ex["id"]}])

    assert client.delete(f"/api/programs/{kept['id']}", headers=instructor.headers).json()["archived"] is True
    assert client.delete(f"/api/programs/{gone['id']}", headers=instructor.headers).json()["archived"] is False
    assert client.get(f"/api/programs/{gone['id']}", headers=instructor.headers).status_code == 404
    assert [p["id"] for p in client.get("/api/programs", headers=instructor.headers).json()] == []

def test_library_lists_and_adds_public_programs(client, make_user, instructor, make_exercise, make_program):
    ex = make_exercise(instructor)
    make_program(instructor, [{"exercise_id": ex["id"]}], name="Secret")
    yoga = make_program(instructor, [{"exercise_id": ex["id"]}], name="Morning Yoga Flow",
                        is_public=True, difficulty="beginner", location="HOME")
    make_program(instructor, [{"exercise_id": ex["id"]}], name="Barbell Basics",
                 is_public=True, difficulty="advanced", location="GYM")
    me = make_user(UserRole.client)

    def names(query=""):
        r = client.get(f"/api/library/programs{query}", headers=me.headers)
        assert r.status_code == 200
        return {p["name"] for p in r.json()}

    assert {"Morning Yoga Flow", "Barbell Basics"} <= names()
    assert "Secret" not in names()
    assert "Morning Yoga Flow" in names("?difficulty=beginner&location=HOME&search=yoga")
    assert "Barbell Basics" not in names("?difficulty=beginner&location=HOME&search=yoga")

    r = client.post("/api/library/programs", headers=me.headers, json={"program_id": yoga["id"]})
    assert r.status_code == 201, r.text
    assert r.json()["assigned_by"] == "library"
    assert r.json()["client_id"] == me.id

    r = client.post("/api/library/programs", headers=me.headers, json={"program_id": yoga["id"]})
    assert r.status_code == 400
