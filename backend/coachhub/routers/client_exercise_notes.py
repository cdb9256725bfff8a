from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import ClientExerciseNote, User
from coachhub.schemas.client_program import ExerciseNoteRead, ExerciseNotesReplace
from coachhub.repositories.client_program_repo import ClientExerciseNoteRepository
from coachhub.services.customization import resolve
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import get_client_program_or_404

router = APIRouter(prefix="/api/client-exercise-notes", tags=["customizations"])

def _read(n: ClientExerciseNote) -> ExerciseNoteRead:
    return ExerciseNoteRead(
        id=n.id,
        client_program_id=n.client_program_id,
        exercise_id=n.exercise_id,
        exercise_name=n.exercise.name,
        note=n.note,
        created_at=n.created_at,
    )

@router.get("", response_model=list[ExerciseNoteRead])
def list_notes(
    client_program_id: int = Query(...),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    cp = get_client_program_or_404(db, client_program_id, current)
    return [_read(n) for n in ClientExerciseNoteRepository(db).list_for(cp.id)]

@router.post("", response_model=list[ExerciseNoteRead])
def replace_notes(
    payload: ExerciseNotesReplace,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    cp = get_client_program_or_404(db, payload.client_program_id, current)
    # removed exercises keep their notes so they survive a put-back
    effective = resolve(cp)
    allowed = {i.exercise_id for i in effective.items} | {i.exercise_id for i in effective.removed}
    notes = ClientExerciseNoteRepository(db).replace_all(
        cp, [n.model_dump() for n in payload.notes], allowed=allowed
    )
    return [_read(n) for n in notes]
