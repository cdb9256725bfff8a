from coachhub.models import UserRole

def test_create_defaults_and_get(client, instructor, trainee, make_exercise):
    ex = make_exercise(instructor, "  Plank  ", hold_seconds=30)
    assert ex["name"] == "Plank"
    assert ex["locations"] == ["GYM"]
    assert ex["is_archived"] is False
    # any authenticated user may read an exercise
    r = client.get(f"/api/exercises/{ex['id']}", headers=trainee.headers)
    assert r.status_code == 200
    assert r.json()["hold_seconds"] == 30

def test_blank_name_rejected(client, instructor):
    r = client.post("/api/exercises", headers=instructor.headers, json={"name": "   "})
    assert r.status_code == 422

def test_list_filters(client, make_user, make_exercise):
    coach = make_user(UserRole.instructor)
    make_exercise(coach, "Push-ups", locations=["HOME", "GYM"])
    make_exercise(coach, "Deadlift", locations=["GYM"])
    make_exercise(coach, "Trail run", locations=["OUTDOOR"])

    names = lambda r: sorted(e["name"] for e in r.json())
    assert names(client.get("/api/exercises", headers=coach.headers)) == ["Deadlift", "Push-ups", "Trail run"]
    assert names(client.get("/api/exercises?location=HOME", headers=coach.headers)) == ["Push-ups"]
    assert names(client.get("/api/exercises?q=LIFT", headers=coach.headers)) == ["Deadlift"]

def test_update_owner_only(client, make_user, instructor, make_exercise):
    ex = make_exercise(instructor, "Squat")
    other = make_user(UserRole.instructor)
    r = client.put(f"/api/exercises/{ex['id']}", headers=other.headers, json={"name": "Mine"})
    assert r.status_code == 403
    r = client.put(f"/api/exercises/{ex['id']}", headers=instructor.headers, json={"name": "Goblet squat", "reps": 12})
    assert r.status_code == 200
    assert r.json()["name"] == "Goblet squat"
    assert r.json()["reps"] == 12

def test_equipment_links(client, instructor, make_exercise):
    bench = client.post("/api/equipment", headers=instructor.headers, json={"name": "Bench"}).json()
    chair = client.post("/api/equipment", headers=instructor.headers, json={"name": "Chair"}).json()
    ex = make_exercise(instructor, "Dips", requires_equipment=True, equipment_links=[
        {"equipment_id": bench["id"], "alternative_equipment_id": chair["id"]},
    ])
    assert ex["equipment_links"][0]["equipment_id"] == bench["id"]
    assert ex["equipment_links"][0]["alternative_equipment_id"] == chair["id"]

    r = client.post("/api/exercises", headers=instructor.headers,
                    json={"name": "Bad", "equipment_links": [{"equipment_id": 999999}]})
    assert r.status_code == 400
    assert r.json()["code"] == "unknown_equipment"

    # deleting equipment drops its links
    assert client.delete(f"/api/equipment/{bench['id']}", headers=instructor.headers).status_code == 204
    assert client.get(f"/api/exercises/{ex['id']}", headers=instructor.headers).json()["equipment_links"] == []

def test_delete_unreferenced_removes(client, instructor, make_exercise):
    ex = make_exercise(instructor)
    r = client.delete(f"/api/exercises/{ex['id']}", headers=instructor.headers)
    assert r.json() == {"removed": True, "archived": False}
    assert client.get(f"/api/exercises/{ex['id']}", headers=instructor.headers).status_code == 404

def test_delete_referenced_archives(client, instructor, make_exercise, make_program):
    ex = make_exercise(instructor)
    make_program(instructor, [{"exercise_id": ex["id"]}])
    r = client.delete(f"/api/exercises/{ex['id']}", headers=instructor.headers)
    assert r.json()["archived"] is True
    assert client.get(f"/api/exercises/{ex['id']}", headers=instructor.headers).json()["is_archived"] is True
    listed = [e["id"] for e in client.get("/api/exercises", headers=instructor.headers).json()]
    assert ex["id"] not in listed

def test_bulk_delete_touches_only_own(client, make_user, instructor, make_exercise, make_program):
    free = make_exercise(instructor)
    used = make_exercise(instructor)
    make_program(instructor, [{"exercise_id": used["id"]}])
    foreign = make_exercise(make_user(UserRole.instructor))

    r = client.post("/api/exercises/bulk-delete", headers=instructor.headers,
                    json={"ids": [free["id"], used["id"], foreign["id"]]})
    assert r.status_code == 200
    assert r.json() == {"deleted": 1, "archived": 1}
    assert client.get(f"/api/exercises/{foreign['id']}", headers=instructor.headers).status_code == 200
