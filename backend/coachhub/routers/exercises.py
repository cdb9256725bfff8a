from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import Location, User
from coachhub.schemas.exercise import (
    BulkDelete, ExerciseCreate, ExerciseRead, ExerciseUpdate, RemovalResult,
)
from coachhub.schemas.program import RemovalRead
from coachhub.repositories.exercise_repo import ExerciseRepository
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import ensure_owner
from coachhub.errors import NotFoundError

router = APIRouter(prefix="/api/exercises", tags=["exercises"])

def _load(db: Session, exercise_id: int):
    ex = ExerciseRepository(db).get(exercise_id)
    if ex is None:
        raise NotFoundError("exercise not found")
    return ex

@router.get("", response_model=list[ExerciseRead])
def list_exercises(
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
    location: Location | None = Query(None),
    q: str | None = Query(None, max_length=120),
):
    return ExerciseRepository(db).list_own(
        current.id, location=location.value if location else None, q=q
    )

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    data = payload.model_dump(mode="json")
    links = data.pop("equipment_links")
    return ExerciseRepository(db).create(current.id, equipment_links=links, **data)

@router.post("/bulk-delete", response_model=RemovalResult)
def bulk_delete(payload: BulkDelete, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    deleted, archived = ExerciseRepository(db).bulk_remove(current.id, payload.ids)
    return RemovalResult(deleted=deleted, archived=archived)

@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(exercise_id: int, db: Session = Depends(get_db), _user: User = Depends(get_current_user)):
    return _load(db, exercise_id)

@router.put("/{exercise_id}", response_model=ExerciseRead)
def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    ex = _load(db, exercise_id)
    ensure_owner(ex.creator_id, current, "exercise")
    data = payload.model_dump(mode="json")
    links = data.pop("equipment_links")
    return ExerciseRepository(db).update(ex, equipment_links=links, **data)

@router.delete("/{exercise_id}", response_model=RemovalRead)
def delete_exercise(exercise_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    ex = _load(db, exercise_id)
    ensure_owner(ex.creator_id, current, "exercise")
    archived = ExerciseRepository(db).remove(ex)
    return RemovalRead(archived=archived)
