from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import AssignmentSource, Difficulty, Location, User
from coachhub.schemas.program import LibraryAdd, ProgramCreate, ProgramRead, RemovalRead
from coachhub.schemas.client_program import ClientProgramRead
from coachhub.repositories.program_repo import ProgramRepository
from coachhub.repositories.client_program_repo import ClientProgramRepository
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import ensure_owner, is_admin
from coachhub.errors import ForbiddenError, NotFoundError, ValidationFailed

router = APIRouter(prefix="/api/programs", tags=["programs"])
library_router = APIRouter(prefix="/api/library", tags=["library"])

def _load(db: Session, program_id: int):
    program = ProgramRepository(db).get_full(program_id)
    if program is None:
        raise NotFoundError("program not found")
    return program

def _split(payload: ProgramCreate) -> tuple[list[dict], dict]:
    data = payload.model_dump(mode="json")
    return data.pop("items"), data

@router.get("", response_model=list[ProgramRead])
def list_programs(db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return ProgramRepository(db).list_own(current.id)

@router.post("", response_model=ProgramRead, status_code=status.HTTP_201_CREATED)
def create_program(payload: ProgramCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    items, fields = _split(payload)
    return ProgramRepository(db).create(current.id, items=items, **fields)

@router.get("/{program_id}", response_model=ProgramRead)
def get_program(program_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    program = _load(db, program_id)
    if program.creator_id == current.id or program.is_public or is_admin(current):
        return program
    if ClientProgramRepository(db).get_by_pair(current.id, program.id) is not None:
        return program
    raise ForbiddenError("no access to this program")

@router.put("/{program_id}", response_model=ProgramRead)
def replace_program(
    program_id: int,
    payload: ProgramCreate,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    program = _load(db, program_id)
    ensure_owner(program.creator_id, current, "program")
    items, fields = _split(payload)
    return ProgramRepository(db).replace(program, items=items, **fields)

@router.delete("/{program_id}", response_model=RemovalRead)
def delete_program(program_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    program = _load(db, program_id)
    ensure_owner(program.creator_id, current, "program")
    return RemovalRead(archived=ProgramRepository(db).remove(program))

# Library

@library_router.get("/programs", response_model=list[ProgramRead])
def list_library(
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
    difficulty: Difficulty | None = Query(None),
    location: Location | None = Query(None),
    search: str | None = Query(None, max_length=120),
):
    return ProgramRepository(db).list_public(
        difficulty=difficulty,
        location=location.value if location else None,
        search=search,
    )

@library_router.post("/programs", response_model=ClientProgramRead, status_code=status.HTTP_201_CREATED)
def add_from_library(payload: LibraryAdd, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    program = ProgramRepository(db).get(payload.program_id)
    if program is None or not program.is_public or program.is_archived:
        raise NotFoundError("program not found in the library")
    if current.is_staff:
        raise ValidationFailed("only clients keep a program list", code="not_a_client")
    return ClientProgramRepository(db).assign(
        client_id=current.id,
        program_id=program.id,
        assigned_by=AssignmentSource.library,
    )
