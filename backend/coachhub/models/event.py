from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, DateTime, Enum as SAEnum, ForeignKey, Integer, String, Text, UniqueConstraint, func,
)
from coachhub.db import Base
from coachhub.timeutils import utcnow

class RegistrationStatus(str, Enum):
    registered = "registered"
    waitlisted = "waitlisted"
    cancelled = "cancelled"

class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_date: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_attendees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allow_waitlist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    registration_deadline_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    registrations = relationship(
        "EventRegistration", back_populates="event", cascade="all, delete-orphan"
    )

class EventRegistration(Base):
    __tablename__ = "event_registrations"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_registration_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    status: Mapped[RegistrationStatus] = mapped_column(
        SAEnum(RegistrationStatus, name="registration_status"), nullable=False
    )
    # Queue key for the waitlist; python-side default keeps sub-second precision
    joined_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    event = relationship("Event", back_populates="registrations")
    user = relationship("User")
