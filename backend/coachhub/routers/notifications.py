import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import NotificationType, User
from coachhub.schemas.notification import MarkRead, NotificationList, NotificationRead, Nudge
from coachhub.repositories.notification_repo import NotificationRepository
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import get_client_or_404
from coachhub.errors import NotFoundError
from coachhub.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

@router.get("", response_model=NotificationList)
def list_notifications(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int | None = Query(None, ge=1, le=200),
):
    repo = NotificationRepository(db)
    return NotificationList(
        notifications=repo.latest(current.id, limit=limit or get_settings().NOTIFICATIONS_PAGE_SIZE),
        unread_count=repo.unread_count(current.id),
    )

@router.post("/read")
def mark_read(payload: MarkRead, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = NotificationRepository(db)
    if payload.mark_all_read:
        return {"updated": repo.mark_all_read(current.id)}
    if repo.mark_read(current.id, payload.notification_id) is None:
        raise NotFoundError("notification not found")
    return {"updated": 1}

@router.post("/nudge", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def nudge_client(payload: Nudge, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    client = get_client_or_404(db, payload.client_id, current)
    message = payload.message or f"{current.name} is checking in: time for your next workout!"
    n = NotificationRepository(db).add(
        client.id, NotificationType.instructor_nudge, f"A nudge from {current.name}", message,
    )
    log.info("instructor %s nudged client %s", current.id, client.id)
    return n
