from datetime import date
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, Date, DateTime, Enum as SAEnum, ForeignKey, Integer, JSON, String, Text,
    UniqueConstraint, func,
)
from coachhub.db import Base
from coachhub.models.program import Section

class AssignmentSource(str, Enum):
    instructor = "instructor"
    self_service = "self_service"
    library = "library"

class ClientProgram(Base):
    __tablename__ = "client_programs"
    __table_args__ = (UniqueConstraint("client_id", "program_id", name="uq_client_program"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    program_id: Mapped[int] = mapped_column(ForeignKey("programs.id", ondelete="CASCADE"), index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assigned_by: Mapped[AssignmentSource] = mapped_column(
        SAEnum(AssignmentSource, name="assignment_source"),
        nullable=False,
        default=AssignmentSource.instructor,
    )
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    client = relationship("User", back_populates="client_programs", foreign_keys=[client_id])
    program = relationship("Program", back_populates="client_programs")
    custom_items = relationship(
        "ClientProgramItem", back_populates="client_program", cascade="all, delete-orphan"
    )
    schedules = relationship(
        "ScheduledProgram", back_populates="client_program", cascade="all, delete-orphan"
    )
    sessions = relationship(
        "TrainingSession", back_populates="client_program", cascade="all, delete-orphan"
    )
    exercise_notes = relationship(
        "ClientExerciseNote", back_populates="client_program", cascade="all, delete-orphan"
    )

class ClientProgramItem(Base):
    """Sparse per-client override of one exercise in an assigned program."""
    __tablename__ = "client_program_items"
    __table_args__ = (
        UniqueConstraint("client_program_id", "exercise_id", name="uq_client_program_item_exercise"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), index=True
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)

    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hold_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight_per_set: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)
    intensity: Mapped[str | None] = mapped_column(String(60), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    section: Mapped[Section | None] = mapped_column(SAEnum(Section, name="program_section"), nullable=True)

    is_removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_added: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    client_program = relationship("ClientProgram", back_populates="custom_items")
    exercise = relationship("Exercise")

class ClientExerciseNote(Base):
    """Instructor's note for one client about one exercise of an assigned program."""
    __tablename__ = "client_exercise_notes"
    __table_args__ = (
        UniqueConstraint("client_program_id", "exercise_id", name="uq_client_exercise_note"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), index=True
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    client_program = relationship("ClientProgram", back_populates="exercise_notes")
    exercise = relationship("Exercise")
