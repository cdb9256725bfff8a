# coachhub/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from coachhub.errors import ConflictError
from coachhub.models import User, UserRole
from coachhub.repositories.base import BaseRepository, Page

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list(self, *, limit: int = 50, offset: int = 0) -> Page[User]:
        stmt = select(User).order_by(User.id.asc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def list_clients(self, instructor_id: int) -> list[User]:
        stmt = (
            select(User)
            .where(User.role == UserRole.client, User.instructor_id == instructor_id)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_ids_by_role(self, role: UserRole) -> list[int]:
        return list(self.db.execute(select(User.id).where(User.role == role)).scalars().all())

    # WRITES
    def create(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str = UserRole.client,
        instructor_id: int | None = None,
    ) -> User:
        user = User(
            email=email,
            name=name,
            password_hash=password_hash,
            role=role,
            instructor_id=instructor_id,
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("email already registered", code="email_already_exists")

    def update_name(self, user_id: int, *, name: str) -> Optional[User]:
        user = self.get(user_id)
        if not user:
            return None
        user.name = name
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_role(self, user_id: int, *, role: str) -> Optional[User]:
        """Use from an admin-only route; DB enum validates role values."""
        user = self.get(user_id)
        if not user:
            return None
        user.role = role
        self.db.commit()
        self.db.refresh(user)
        return user
