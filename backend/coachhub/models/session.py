from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, Integer, ForeignKey, DateTime, Enum as SAEnum, String, Text, UniqueConstraint, func,
)
from coachhub.db import Base

class SessionStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"

class TrainingSession(Base):
    __tablename__ = "training_sessions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(SessionStatus, name="session_status"),
        nullable=False,
        default=SessionStatus.in_progress,
    )
    started_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    finished_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    user = relationship("User", back_populates="sessions")
    client_program = relationship("ClientProgram", back_populates="sessions")
    items = relationship("SessionItem", back_populates="session", cascade="all, delete-orphan")
    kudos = relationship("Kudos", back_populates="session", cascade="all, delete-orphan")

    @property
    def is_finished(self) -> bool:
        return self.status != SessionStatus.in_progress

class SessionItem(Base):
    __tablename__ = "session_items"
    __table_args__ = (UniqueConstraint("session_id", "exercise_id", name="uq_session_item_exercise"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("training_sessions.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recorded_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    session = relationship("TrainingSession", back_populates="items")

class Kudos(Base):
    __tablename__ = "kudos"
    __table_args__ = (UniqueConstraint("session_id", "instructor_id", name="uq_kudos_session_instructor"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("training_sessions.id", ondelete="CASCADE"), index=True)
    instructor_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    emoji: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    session = relationship("TrainingSession", back_populates="kudos")
