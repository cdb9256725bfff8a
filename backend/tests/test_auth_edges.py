from fastapi.testclient import TestClient
from coachhub.main import app
from coachhub.security import create_access_token
import uuid

client = TestClient(app)
def unique(): return f"{uuid.uuid4().hex[:10]}@ex.com"

def test_token_expired():
    email = unique(); pw = "StrongPassw0rd!"
    client.post("/auth/register", json={"email": email, "name": "Y", "password": pw})
    tok = client.post("/auth/login", json={"email": email, "password": pw}).json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {tok}"}).json()
    user_id = me["id"]

    # craft an already-expired token for the same user id
    expired = create_access_token(str(user_id), expires_minutes=-1)

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_garbage_token_rejected():
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

def test_token_for_missing_user_rejected():
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {create_access_token('999999')}"})
    assert r.status_code == 401

def test_requires_auth():
    assert client.get("/api/sessions").status_code == 401
    assert client.get("/api/notifications").status_code == 401
