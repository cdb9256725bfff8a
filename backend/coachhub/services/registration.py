"""
Event registration state machine.

    (none) --register--> REGISTERED       while seats are free (or no limit)
    (none) --register--> WAITLISTED       when full and the waitlist is on
    (none) --register--> rejected         when full and the waitlist is off
    REGISTERED --unregister--> CANCELLED  and the head of the waitlist moves up
    WAITLISTED --unregister--> CANCELLED

A cancelled row is reused on re-registration and rejoins at the back of the
queue. Registration closes ``registration_deadline_hours`` before the start.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from coachhub.errors import CapacityError, ConflictError, InvalidStateError, NotFoundError
from coachhub.models import Event, EventRegistration, NotificationType, RegistrationStatus
from coachhub.repositories.event_repo import EventRepository
from coachhub.repositories.notification_repo import NotificationRepository
from coachhub.timeutils import ensure_utc, utcnow

log = logging.getLogger(__name__)


def registration_closes_at(event: Event) -> datetime:
    return ensure_utc(event.start_date) - timedelta(hours=event.registration_deadline_hours or 0)


def has_free_seat(repo: EventRepository, event: Event) -> bool:
    if event.max_attendees is None:
        return True
    return repo.count(event.id, RegistrationStatus.registered) < event.max_attendees


def register(db: Session, event: Event, user_id: int, *, now: datetime | None = None) -> EventRegistration:
    now = now or utcnow()
    if now > registration_closes_at(event):
        raise InvalidStateError("registration for this event is closed", code="registration_closed")

    repo = EventRepository(db)
    reg = repo.registration_for(event.id, user_id)
    if reg is not None and reg.status != RegistrationStatus.cancelled:
        raise ConflictError("already registered for this event", code="already_registered")

    if has_free_seat(repo, event):
        status = RegistrationStatus.registered
    elif event.allow_waitlist:
        status = RegistrationStatus.waitlisted
    else:
        raise CapacityError("event is full", code="event_full")

    if reg is None:
        reg = EventRegistration(event_id=event.id, user_id=user_id, status=status, joined_at=now)
        db.add(reg)
    else:
        reg.status = status
        reg.joined_at = now

    if status == RegistrationStatus.registered:
        title, message = "Registration confirmed", f"You are registered for '{event.title}'."
    else:
        title, message = "Added to the waitlist", f"'{event.title}' is full; you are on the waitlist."
    NotificationRepository(db).add(
        user_id, NotificationType.event_registration, title, message,
        link=f"/events/{event.id}", commit=False,
    )
    db.commit()
    db.refresh(reg)
    log.info("user %s %s for event %s", user_id, status.value, event.id)
    return reg


def promote_waitlisted(db: Session, event: Event) -> list[EventRegistration]:
    """Move waitlisted registrants into free seats, first joined first. Caller commits."""
    if not event.allow_waitlist:
        return []
    repo = EventRepository(db)
    notifications = NotificationRepository(db)
    promoted = []
    for reg in repo.waitlist(event.id):
        if not has_free_seat(repo, event):
            break
        reg.status = RegistrationStatus.registered
        db.flush()
        promoted.append(reg)
        notifications.add(
            reg.user_id,
            NotificationType.event_promoted,
            "You're in!",
            f"A seat opened up for '{event.title}' and you have been registered.",
            link=f"/events/{event.id}",
            commit=False,
        )
        log.info("user %s promoted from waitlist for event %s", reg.user_id, event.id)
    return promoted


def unregister(db: Session, event: Event, user_id: int) -> list[EventRegistration]:
    """Cancel the caller's registration; returns any registrations promoted as a result."""
    repo = EventRepository(db)
    reg = repo.registration_for(event.id, user_id)
    if reg is None or reg.status == RegistrationStatus.cancelled:
        raise NotFoundError("not registered for this event", code="not_registered")

    was_registered = reg.status == RegistrationStatus.registered
    reg.status = RegistrationStatus.cancelled
    db.flush()
    promoted = promote_waitlisted(db, event) if was_registered else []
    db.commit()
    return promoted
