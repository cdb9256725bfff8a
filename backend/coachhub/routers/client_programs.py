import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import AssignmentSource, NotificationType, User
from coachhub.schemas.client_program import (
    ClientProgramAssign, ClientProgramRead, ClientProgramReorder, ClientProgramUpdate,
    CustomProgramCreate, EffectiveProgramRead,
)
from coachhub.repositories.client_program_repo import ClientProgramRepository
from coachhub.repositories.notification_repo import NotificationRepository
from coachhub.repositories.program_repo import ProgramRepository
from coachhub.services.customization import resolve
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import ensure_owner, get_client_or_404, get_client_program_or_404
from coachhub.errors import NotFoundError, ValidationFailed

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/client-programs", tags=["client-programs"])

def _target_client_id(db: Session, current: User, client_id: int | None) -> int:
    """Clients act on themselves; staff name one of their clients."""
    if not current.is_staff:
        return current.id
    if client_id is None:
        raise ValidationFailed("client_id is required", code="client_id_required")
    return get_client_or_404(db, client_id, current).id

@router.get("", response_model=list[ClientProgramRead])
def list_client_programs(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    client_id: int | None = Query(None),
    active_only: bool = Query(False),
):
    target = _target_client_id(db, current, client_id)
    return ClientProgramRepository(db).list_for_client(target, active_only=active_only)

@router.post("", response_model=ClientProgramRead, status_code=status.HTTP_201_CREATED)
def assign_program(payload: ClientProgramAssign, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    client = get_client_or_404(db, payload.client_id, current)
    program = ProgramRepository(db).get(payload.program_id)
    if program is None or program.is_archived:
        raise NotFoundError("program not found")
    ensure_owner(program.creator_id, current, "program")

    cp = ClientProgramRepository(db).assign(
        client_id=client.id,
        program_id=program.id,
        order=payload.order,
        start_date=payload.start_date,
        end_date=payload.end_date,
        assigned_by=AssignmentSource.instructor,
    )
    NotificationRepository(db).add(
        client.id,
        NotificationType.program_assigned,
        "New program",
        f"{current.name} assigned you '{program.name}'.",
        link=f"/client-programs/{cp.id}",
    )
    return cp

@router.post("/custom", response_model=ClientProgramRead, status_code=status.HTTP_201_CREATED)
def create_custom_program(
    payload: CustomProgramCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    if current.is_staff:
        raise ValidationFailed("custom programs are built by clients", code="not_a_client")
    items = [
        {"exercise_id": e.exercise_id, "order": e.order, "sets": e.sets, "reps": e.reps}
        for e in payload.exercises
    ]
    program = ProgramRepository(db).create(
        current.id, items=items, name=payload.name, description=payload.description, is_public=False,
    )
    cp = ClientProgramRepository(db).assign(
        client_id=current.id, program_id=program.id, assigned_by=AssignmentSource.self_service,
    )
    NotificationRepository(db).add(
        current.id,
        NotificationType.program_created,
        "Program created",
        f"Your program '{program.name}' is ready.",
        link=f"/client-programs/{cp.id}",
    )
    log.info("client %s built custom program %s", current.id, program.id)
    return cp

@router.post("/reorder", response_model=list[ClientProgramRead])
def reorder_client_programs(
    payload: ClientProgramReorder,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    client_id: int | None = Query(None),
):
    target = _target_client_id(db, current, client_id)
    return ClientProgramRepository(db).reorder(target, payload.ids)

@router.get("/{client_program_id}", response_model=ClientProgramRead)
def get_client_program(client_program_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return get_client_program_or_404(db, client_program_id, current)

@router.patch("/{client_program_id}", response_model=ClientProgramRead)
def update_client_program(
    client_program_id: int,
    payload: ClientProgramUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    cp = get_client_program_or_404(db, client_program_id, current)
    return ClientProgramRepository(db).update(cp, **payload.model_dump(exclude_unset=True))

@router.delete("/{client_program_id}", status_code=status.HTTP_204_NO_CONTENT)
def unassign_program(client_program_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    cp = get_client_program_or_404(db, client_program_id, current)
    repo = ClientProgramRepository(db)
    if current.is_staff:
        repo.unassign(cp)
    else:
        # clients only shelve it; sessions and schedules stay
        repo.update(cp, is_active=False)

@router.get("/{client_program_id}/effective", response_model=EffectiveProgramRead)
def effective_program(client_program_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return resolve(get_client_program_or_404(db, client_program_id, current))
