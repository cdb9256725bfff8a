from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import ScheduledProgram, User
from coachhub.schemas.schedule import (
    ClientScheduleCreate, ScheduleCreate, ScheduleCreated, ScheduledProgramRead, ScheduleUpdate,
)
from coachhub.repositories.schedule_repo import ScheduleRepository
from coachhub.services.scheduling import resolve_dates, status_for
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import get_client_or_404, get_client_program_or_404
from coachhub.errors import ForbiddenError, NotFoundError, ValidationFailed
from coachhub.timeutils import today

router = APIRouter(prefix="/api/scheduled-programs", tags=["schedule"])

def _read(sp: ScheduledProgram, *, on: date) -> ScheduledProgramRead:
    return ScheduledProgramRead(
        id=sp.id,
        client_program_id=sp.client_program_id,
        client_id=sp.client_id,
        program_id=sp.client_program.program_id,
        program_name=sp.client_program.program.name,
        scheduled_date=sp.scheduled_date,
        scheduled_time=sp.scheduled_time,
        completed=sp.completed,
        notes=sp.notes,
        status=status_for(sp.scheduled_date, sp.completed, today=on),
        created_at=sp.created_at,
    )

def _load(db: Session, scheduled_id: int, current: User) -> ScheduledProgram:
    sp = ScheduleRepository(db).get_full(scheduled_id)
    if sp is None:
        raise NotFoundError("scheduled program not found")
    # client owner, their instructor or an admin
    get_client_or_404(db, sp.client_id, current)
    return sp

@router.post("", response_model=ScheduleCreated, status_code=status.HTTP_201_CREATED)
def schedule_program(payload: ScheduleCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    client = get_client_or_404(db, payload.client_id, current)
    cp = get_client_program_or_404(db, payload.client_program_id, current)
    if cp.client_id != client.id:
        raise ValidationFailed("program is not assigned to this client", code="client_mismatch")

    now = today()
    dates = resolve_dates(
        dates=payload.dates,
        day_of_week=payload.day_of_week,
        repeat_weeks=payload.repeat_weeks,
        today=now,
    )
    rows = ScheduleRepository(db).create_many(cp, dates, scheduled_time=payload.scheduled_time)
    return ScheduleCreated(created=len(rows), items=[_read(r, on=now) for r in rows])

@router.post("/self", response_model=ScheduledProgramRead, status_code=status.HTTP_201_CREATED)
def schedule_own(payload: ClientScheduleCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    cp = get_client_program_or_404(db, payload.client_program_id, current)
    if cp.client_id != current.id:
        raise ForbiddenError("clients schedule only their own programs")
    rows = ScheduleRepository(db).create_many(
        cp, [payload.scheduled_date], scheduled_time=payload.scheduled_time
    )
    return _read(rows[0], on=today())

@router.get("", response_model=list[ScheduledProgramRead])
def list_schedule(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    client_id: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
):
    if current.is_staff:
        if client_id is None:
            raise ValidationFailed("client_id is required", code="client_id_required")
        target = get_client_or_404(db, client_id, current).id
    else:
        target = current.id
    now = today()
    rows = ScheduleRepository(db).list_for_client(target, start_date=start_date, end_date=end_date)
    return [_read(r, on=now) for r in rows]

@router.patch("/{scheduled_id}", response_model=ScheduledProgramRead)
def update_schedule(
    scheduled_id: int,
    payload: ScheduleUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    sp = _load(db, scheduled_id, current)
    sp = ScheduleRepository(db).update(sp, completed=payload.completed, notes=payload.notes)
    return _read(sp, on=today())

@router.delete("/{scheduled_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(scheduled_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    ScheduleRepository(db).delete(_load(db, scheduled_id, current))
