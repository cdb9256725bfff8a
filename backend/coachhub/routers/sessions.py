import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import NotificationType, TrainingSession, User
from coachhub.schemas.session import (
    KudosCreate, KudosRead, SessionCreate, SessionFinish, SessionItemIn, SessionItemRead, SessionRead,
)
from coachhub.repositories.session_repo import KudosRepository, SessionRepository
from coachhub.repositories.notification_repo import NotificationRepository
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import can_manage_client, get_client_or_404, get_client_program_or_404
from coachhub.errors import ForbiddenError, NotFoundError
from coachhub.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])
kudos_router = APIRouter(prefix="/api/kudos", tags=["kudos"])

def _load(db: Session, session_id: int, current: User) -> TrainingSession:
    sess = SessionRepository(db).get_full(session_id)
    if sess is None:
        raise NotFoundError("session not found")
    if sess.user_id != current.id and not can_manage_client(current, sess.user):
        raise ForbiddenError("no access to this session")
    return sess

def _own(db: Session, session_id: int, current: User) -> TrainingSession:
    sess = _load(db, session_id, current)
    if sess.user_id != current.id:
        raise ForbiddenError("only the client can change their session")
    return sess

@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def start_session(
    payload: SessionCreate,
    response: Response,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    cp = get_client_program_or_404(db, payload.client_program_id, current)
    if cp.client_id != current.id:
        raise ForbiddenError("only the client can train their program")
    sess, created = SessionRepository(db).start(current.id, cp.id, notes=payload.notes)
    if not created:
        response.status_code = status.HTTP_200_OK
    return sess

@router.get("", response_model=list[SessionRead])
def list_sessions(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    client_id: int | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    # staff may look at one of their clients' history
    target = get_client_or_404(db, client_id, current).id if client_id is not None else current.id
    return SessionRepository(db).list_by_user(target, limit=limit, offset=offset)

@router.get("/{session_id}", response_model=SessionRead)
def get_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _load(db, session_id, current)

@router.post("/{session_id}/items", response_model=SessionItemRead)
def record_item(
    session_id: int,
    payload: SessionItemIn,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    sess = _own(db, session_id, current)
    return SessionRepository(db).record_item(sess, payload.exercise_id, skipped=payload.skipped)

@router.post("/{session_id}/finish", response_model=SessionRead)
def finish_session(
    session_id: int,
    payload: SessionFinish | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    sess = _own(db, session_id, current)
    return SessionRepository(db).finish(sess, notes=payload.notes if payload else None)

@router.post("/{session_id}/cancel", response_model=SessionRead)
def cancel_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return SessionRepository(db).cancel(_own(db, session_id, current))

# Kudos

@kudos_router.post("", response_model=KudosRead)
def give_kudos(payload: KudosCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    sess = SessionRepository(db).get_full(payload.session_id)
    if sess is None:
        raise NotFoundError("session not found")
    if not can_manage_client(current, sess.user):
        raise ForbiddenError("not your client")
    emoji = payload.emoji or get_settings().DEFAULT_KUDOS_EMOJI
    kudos = KudosRepository(db).upsert(sess.id, current.id, emoji=emoji, message=payload.message)
    NotificationRepository(db).add(
        sess.user_id,
        NotificationType.kudos_received,
        f"{emoji} Kudos from {current.name}",
        payload.message or "Great job on your workout!",
        link=f"/sessions/{sess.id}",
    )
    log.info("kudos from %s on session %s", current.id, sess.id)
    return kudos

@kudos_router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_kudos(session_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    if not KudosRepository(db).remove_for(session_id, current.id):
        raise NotFoundError("no kudos on this session")
