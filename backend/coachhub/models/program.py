from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, DateTime, Enum as SAEnum, ForeignKey, Integer, JSON, String, Text,
    UniqueConstraint, func,
)
from coachhub.db import Base

class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

class Section(str, Enum):
    WARMUP = "WARMUP"
    CORE = "CORE"
    COOLDOWN = "COOLDOWN"

class Program(Base):
    __tablename__ = "programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    difficulty: Mapped[Difficulty] = mapped_column(
        SAEnum(Difficulty, name="program_difficulty"), nullable=False, default=Difficulty.beginner
    )
    location: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "ProgramItem",
        back_populates="program",
        cascade="all, delete-orphan",
        order_by=lambda: (ProgramItem.order, ProgramItem.id),
    )
    client_programs = relationship("ClientProgram", back_populates="program")

class ProgramItem(Base):
    __tablename__ = "program_items"
    __table_args__ = (UniqueConstraint("program_id", "exercise_id", name="uq_program_item_exercise"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    program_id: Mapped[int] = mapped_column(ForeignKey("programs.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    section: Mapped[Section] = mapped_column(
        SAEnum(Section, name="program_section"), nullable=False, default=Section.CORE
    )

    # Null means "inherit from the exercise"
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hold_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight_per_set: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)
    intensity: Mapped[str | None] = mapped_column(String(60), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    program = relationship("Program", back_populates="items")
    exercise = relationship("Exercise")

    @property
    def exercise_name(self) -> str:
        return self.exercise.name
