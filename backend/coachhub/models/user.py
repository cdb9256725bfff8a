from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, func, Enum as SAEnum, Integer
from coachhub.db import Base

class UserRole(str, Enum):
    client = "client"
    instructor = "instructor"
    admin = "admin"

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, server_default="")
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role"),
        nullable=False,
        server_default=UserRole.client.value,
    )
    # Clients belong to (at most) one instructor
    instructor_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
    )
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    instructor = relationship("User", remote_side="User.id", back_populates="clients")
    clients = relationship("User", back_populates="instructor")
    client_programs = relationship(
        "ClientProgram", back_populates="client", cascade="all, delete-orphan",
        foreign_keys="ClientProgram.client_id",
    )
    sessions = relationship("TrainingSession", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.instructor, UserRole.admin)
