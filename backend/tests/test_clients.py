import uuid
from coachhub.models import UserRole

def test_instructor_creates_client_with_one_time_password(client, instructor):
    email = f"c-{uuid.uuid4().hex[:8]}@ex.com"
    r = client.post("/api/clients", headers=instructor.headers, json={"email": email, "name": "New Client"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["instructor_id"] == instructor.id
    assert body["role"] == "client"
    password = body["password"]

    # the generated password works for login
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200

    # ...and is never shown again
    detail = client.get(f"/api/clients/{body['id']}", headers=instructor.headers).json()
    assert "password" not in detail

def test_duplicate_client_email_400(client, instructor, trainee):
    r = client.post("/api/clients", headers=instructor.headers, json={"email": trainee.email, "name": "Dup"})
    assert r.status_code == 400
    assert r.json()["code"] == "email_already_exists"

def test_list_only_own_clients(client, make_user, instructor, trainee):
    other = make_user(UserRole.instructor)
    make_user(UserRole.client, instructor=other)
    ids = [c["id"] for c in client.get("/api/clients", headers=instructor.headers).json()]
    assert ids == [trainee.id]

def test_client_detail_includes_programs(client, instructor, trainee, make_exercise, make_program, assign):
    ex = make_exercise(instructor)
    program = make_program(instructor, [{"exercise_id": ex["id"]}])
    assign(instructor, trainee, program["id"])
    r = client.get(f"/api/clients/{trainee.id}", headers=instructor.headers)
    assert r.status_code == 200
    assert [p["program_id"] for p in r.json()["programs"]] == [program["id"]]

def test_other_instructor_cannot_see_client(client, make_user, trainee):
    other = make_user(UserRole.instructor)
    assert client.get(f"/api/clients/{trainee.id}", headers=other.headers).status_code == 403

def test_missing_client_404(client, instructor):
    assert client.get("/api/clients/999999", headers=instructor.headers).status_code == 404
