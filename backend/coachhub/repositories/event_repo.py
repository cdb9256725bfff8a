from __future__ import annotations
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select

from coachhub.models import Event, EventRegistration, RegistrationStatus
from coachhub.repositories.base import BaseRepository

class EventRepository(BaseRepository[Event]):
    model = Event

    def list_upcoming(self, now: datetime) -> list[Event]:
        stmt = select(Event).where(Event.start_date >= now).order_by(Event.start_date.asc(), Event.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, creator_id: int, **fields: Any) -> Event:
        return self.save(Event(creator_id=creator_id, **fields))

    def update(self, event: Event, **fields: Any) -> Event:
        for key, value in fields.items():
            setattr(event, key, value)
        self.db.commit()
        self.db.refresh(event)
        return event

    # Registrations

    def registration_for(self, event_id: int, user_id: int) -> Optional[EventRegistration]:
        stmt = select(EventRegistration).where(
            EventRegistration.event_id == event_id, EventRegistration.user_id == user_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def count(self, event_id: int, status: RegistrationStatus) -> int:
        stmt = select(func.count()).select_from(EventRegistration).where(
            EventRegistration.event_id == event_id, EventRegistration.status == status
        )
        return self.db.execute(stmt).scalar_one()

    def waitlist(self, event_id: int) -> list[EventRegistration]:
        """Waitlisted registrations in queue order (first joined first)."""
        stmt = (
            select(EventRegistration)
            .where(
                EventRegistration.event_id == event_id,
                EventRegistration.status == RegistrationStatus.waitlisted,
            )
            .order_by(EventRegistration.joined_at.asc(), EventRegistration.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def waitlist_position(self, registration: EventRegistration) -> Optional[int]:
        if registration.status != RegistrationStatus.waitlisted:
            return None
        queue = [r.id for r in self.waitlist(registration.event_id)]
        return queue.index(registration.id) + 1

    def list_registrations(self, event_id: int) -> list[EventRegistration]:
        stmt = (
            select(EventRegistration)
            .where(EventRegistration.event_id == event_id)
            .order_by(EventRegistration.joined_at.asc(), EventRegistration.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())
