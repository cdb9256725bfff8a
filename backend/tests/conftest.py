"""
Point the app at a throwaway SQLite file and create the schema before any
test module imports coachhub.main. Shared factories live here as fixtures.
"""
import os
import tempfile
import uuid
from types import SimpleNamespace

_DB_DIR = tempfile.mkdtemp(prefix="coachhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from coachhub.db import Base, SessionLocal, engine
import coachhub.models  # noqa: F401  (registers every table on Base.metadata)
from coachhub.main import app
from coachhub.models import UserRole
from coachhub.repositories.user_repo import UserRepository
from coachhub.security import create_access_token

Base.metadata.create_all(engine)

PWD = "StrongPassw0rd!"


def uniq_email(prefix="u"):
    return f"{prefix}-{uuid.uuid4().hex[:8]}@ex.com"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user():
    """Create a user straight through the repository and mint a bearer token for it."""
    def factory(role=UserRole.client, *, instructor=None, name="Test"):
        with SessionLocal() as session:
            user = UserRepository(session).create(
                email=uniq_email(role.value),
                name=name,
                password_hash="",
                role=role,
                instructor_id=instructor.id if instructor else None,
            )
            token = create_access_token(str(user.id))
            return SimpleNamespace(
                id=user.id,
                email=user.email,
                headers={"Authorization": f"Bearer {token}"},
            )
    return factory


@pytest.fixture
def instructor(make_user):
    return make_user(UserRole.instructor, name="Coach")


@pytest.fixture
def trainee(make_user, instructor):
    return make_user(UserRole.client, instructor=instructor, name="Client")


@pytest.fixture
def make_exercise(client):
    def factory(owner, name=None, **fields):
        body = {"name": name or f"Exercise {uuid.uuid4().hex[:6]}", **fields}
        r = client.post("/api/exercises", headers=owner.headers, json=body)
        assert r.status_code == 201, r.text
        return r.json()
    return factory


@pytest.fixture
def make_program(client):
    def factory(owner, items, name="Program", **fields):
        r = client.post("/api/programs", headers=owner.headers,
                        json={"name": name, "items": items, **fields})
        assert r.status_code == 201, r.text
        return r.json()
    return factory


@pytest.fixture
def assign(client):
    def factory(owner, client_user, program_id, **fields):
        r = client.post("/api/client-programs", headers=owner.headers,
                        json={"client_id": client_user.id, "program_id": program_id, **fields})
        assert r.status_code == 201, r.text
        return r.json()
    return factory
