from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, func
from coachhub.db import Base

class ScheduledProgram(Base):
    __tablename__ = "scheduled_programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), index=True
    )
    client_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    scheduled_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # "HH:MM"
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    client_program = relationship("ClientProgram", back_populates="schedules")
