import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import Event, EventRegistration, RegistrationStatus, User
from coachhub.schemas.event import EventCreate, EventRead, EventUpdate, RegistrationRead, UnregisterResult
from coachhub.repositories.event_repo import EventRepository
from coachhub.services import registration
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import ensure_owner
from coachhub.errors import NotFoundError, ValidationFailed
from coachhub.timeutils import ensure_utc, utcnow

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])

def _load(db: Session, event_id: int) -> Event:
    event = EventRepository(db).get(event_id)
    if event is None:
        raise NotFoundError("event not found")
    return event

def _read(repo: EventRepository, event: Event, user: User) -> EventRead:
    out = EventRead.model_validate(event)
    out.registered_count = repo.count(event.id, RegistrationStatus.registered)
    out.waitlist_count = repo.count(event.id, RegistrationStatus.waitlisted)
    mine = repo.registration_for(event.id, user.id)
    if mine is not None:
        out.my_status = mine.status
        out.my_waitlist_position = repo.waitlist_position(mine)
    return out

def _read_registration(repo: EventRepository, reg: EventRegistration) -> RegistrationRead:
    out = RegistrationRead.model_validate(reg)
    out.waitlist_position = repo.waitlist_position(reg)
    return out

@router.get("", response_model=list[EventRead])
def list_events(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = EventRepository(db)
    return [_read(repo, e, current) for e in repo.list_upcoming(utcnow())]

@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    repo = EventRepository(db)
    event = repo.create(current.id, **payload.model_dump())
    log.info("event %s created by %s", event.id, current.id)
    return _read(repo, event, current)

@router.get("/{event_id}", response_model=EventRead)
def get_event(event_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _read(EventRepository(db), _load(db, event_id), current)

@router.patch("/{event_id}", response_model=EventRead)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    event = _load(db, event_id)
    ensure_owner(event.creator_id, current, "event")
    fields = payload.model_dump(exclude_unset=True)
    start = fields.get("start_date") or event.start_date
    end = fields.get("end_date", event.end_date)
    if end is not None and ensure_utc(end) < ensure_utc(start):
        raise ValidationFailed("end_date must not be before start_date", code="invalid_date_window")

    repo = EventRepository(db)
    event = repo.update(event, **fields)
    # more seats (or a waitlist switched on later) can move people up
    promoted = registration.promote_waitlisted(db, event)
    if promoted:
        db.commit()
    return _read(repo, event, current)

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    event = _load(db, event_id)
    ensure_owner(event.creator_id, current, "event")
    EventRepository(db).delete(event)

@router.post("/{event_id}/register", response_model=RegistrationRead, status_code=status.HTTP_201_CREATED)
def register(event_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    event = _load(db, event_id)
    reg = registration.register(db, event, current.id)
    return _read_registration(EventRepository(db), reg)

@router.delete("/{event_id}/register", response_model=UnregisterResult)
def unregister(event_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    event = _load(db, event_id)
    promoted = registration.unregister(db, event, current.id)
    return UnregisterResult(promoted_user_ids=[r.user_id for r in promoted])

@router.get("/{event_id}/registrations", response_model=list[RegistrationRead])
def list_registrations(event_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    event = _load(db, event_id)
    ensure_owner(event.creator_id, current, "event")
    repo = EventRepository(db)
    return [_read_registration(repo, r) for r in repo.list_registrations(event.id)]
