# coachhub/deps/access.py
"""Ownership checks shared by the routers.

Loaders return the entity or raise NotFoundError/ForbiddenError, which the
app-level handler turns into 404/403.
"""
from sqlalchemy.orm import Session

from coachhub.errors import ForbiddenError, NotFoundError
from coachhub.models import ClientProgram, User, UserRole
from coachhub.repositories.client_program_repo import ClientProgramRepository


def is_admin(user: User) -> bool:
    return user.role == UserRole.admin


def ensure_owner(owner_id: int, user: User, what: str = "resource") -> None:
    """Owner or admin."""
    if owner_id != user.id and not is_admin(user):
        raise ForbiddenError(f"not the owner of this {what}")


def can_manage_client(user: User, client: User) -> bool:
    return is_admin(user) or (client.instructor_id is not None and client.instructor_id == user.id)


def get_client_or_404(db: Session, client_id: int, user: User) -> User:
    """A client the caller may act for: themself, their instructor, or an admin."""
    client = db.get(User, client_id)
    if client is None or client.role != UserRole.client:
        raise NotFoundError("client not found")
    if client.id != user.id and not can_manage_client(user, client):
        raise ForbiddenError("not your client")
    return client


def can_access_client_program(user: User, cp: ClientProgram) -> bool:
    if is_admin(user) or cp.client_id == user.id:
        return True
    if cp.program.creator_id == user.id:
        return True
    return cp.client.instructor_id == user.id


def get_client_program_or_404(db: Session, client_program_id: int, user: User) -> ClientProgram:
    cp = ClientProgramRepository(db).get_full(client_program_id)
    if cp is None:
        raise NotFoundError("client program not found")
    if not can_access_client_program(user, cp):
        raise ForbiddenError("no access to this client program")
    return cp
