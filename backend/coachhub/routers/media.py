from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import MediaKind, User
from coachhub.schemas.exercise import BulkDelete
from coachhub.schemas.media import MediaCreate, MediaRead, MediaUpdate
from coachhub.repositories.media_repo import MediaRepository
from coachhub.deps.auth import require_staff
from coachhub.deps.access import ensure_owner
from coachhub.errors import NotFoundError

router = APIRouter(prefix="/api/media", tags=["media"])

def _owned(db: Session, media_id: int, current: User):
    media = MediaRepository(db).get(media_id)
    if media is None:
        raise NotFoundError("media not found")
    ensure_owner(media.owner_id, current, "media")
    return media

@router.get("", response_model=list[MediaRead])
def list_media(
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
    kind: MediaKind | None = Query(None),
):
    return MediaRepository(db).list_own(current.id, kind=kind)

@router.post("", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
def register_media(payload: MediaCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return MediaRepository(db).create(current.id, **payload.model_dump())

@router.post("/bulk-delete")
def bulk_delete(payload: BulkDelete, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return {"deleted": MediaRepository(db).bulk_delete(current.id, payload.ids)}

@router.get("/{media_id}", response_model=MediaRead)
def get_media(media_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return _owned(db, media_id, current)

@router.patch("/{media_id}", response_model=MediaRead)
def update_media(
    media_id: int,
    payload: MediaUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    media = _owned(db, media_id, current)
    return MediaRepository(db).update(media, **payload.model_dump(exclude_unset=True))

@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(media_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    MediaRepository(db).delete(_owned(db, media_id, current))
