# tests/test_users_and_auth_edges.py
import uuid
from fastapi.testclient import TestClient
from coachhub.main import app

client = TestClient(app)

def uniq_email(prefix="u"):
    return f"{prefix}-{uuid.uuid4().hex[:8]}@ex.com"

def make_user(email=None, password="StrongPassw0rd!"):
    email = email or uniq_email("usr")
    r = client.post("/auth/register", json={"email": email, "name": "Test", "password": password})
    assert r.status_code == 201, r.text
    return email, password

def login(email, password):
    # /auth/login expects JSON, not form
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]

def make_admin():
    admin_email, admin_pw = make_user(uniq_email("admin"))
    from coachhub.db import SessionLocal
    from coachhub.models import UserRole
    from coachhub.repositories.user_repo import UserRepository
    db = SessionLocal()
    repo = UserRepository(db)
    admin = repo.get_by_email(admin_email)
    admin.role = UserRole.admin
    db.commit()
    db.close()
    return login(admin_email, admin_pw)

def test_list_users_forbidden_for_non_admin():
    e, pw = make_user(uniq_email("forbidden"))
    token = login(e, pw)
    r = client.get("/users", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403, r.text
    assert r.json()["detail"] == "Insufficient role"

def test_admin_lists_users_paged():
    admin_token = make_admin()
    r = client.get("/users?limit=2&offset=0", headers={"Authorization": f"Bearer {admin_token}"})
    assert r.status_code == 200
    assert len(r.json()) <= 2

def test_duplicate_email_create_rejected():
    dup_email = uniq_email("dupe")
    make_user(dup_email)
    admin_token = make_admin()

    r = client.post(
        "/users",
        headers={"Authorization": f"Bearer {admin_token}"},
        json={"email": dup_email, "name": "Another"},
    )
    assert r.status_code == 400, r.text
    assert "already" in r.json()["detail"].lower()

def test_admin_creates_instructor():
    admin_token = make_admin()
    r = client.post(
        "/users",
        headers={"Authorization": f"Bearer {admin_token}"},
        json={"email": uniq_email("coach"), "name": "Coach", "role": "instructor"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "instructor"

def test_expired_token_rejected(monkeypatch):
    e, pw = make_user(uniq_email("expire"))
    token = login(e, pw)

    from jose.exceptions import ExpiredSignatureError
    def fake_decode(_): raise ExpiredSignatureError()

    # deps.auth imports decode_token at import-time
    import coachhub.deps.auth as deps_auth
    monkeypatch.setattr(deps_auth, "decode_token", fake_decode)

    r = client.get("/api/sessions", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401, r.text
    assert r.json()["detail"] == "Token expired"
