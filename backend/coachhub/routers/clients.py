import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import User, UserRole
from coachhub.schemas.user import ClientCreate, ClientCreated, UserRead
from coachhub.schemas.client_program import ClientDetail
from coachhub.security import generate_password, hash_password
from coachhub.deps.auth import require_staff
from coachhub.deps.access import get_client_or_404
from coachhub.errors import ConflictError
from coachhub.repositories.user_repo import UserRepository
from coachhub.repositories.client_program_repo import ClientProgramRepository

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clients", tags=["clients"])

@router.get("", response_model=list[UserRead])
def list_clients(db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return UserRepository(db).list_clients(current.id)

@router.post("", response_model=ClientCreated, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise ConflictError("email already registered", code="email_already_exists")
    password = generate_password()
    client = repo.create(
        email=payload.email,
        name=payload.name,
        password_hash=hash_password(password),
        role=UserRole.client,
        instructor_id=current.id,
    )
    log.info("instructor %s created client %s", current.id, client.id)
    # the plain password leaves the server exactly once
    return ClientCreated(**UserRead.model_validate(client).model_dump(), password=password)

@router.get("/{client_id}", response_model=ClientDetail)
def get_client(client_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    client = get_client_or_404(db, client_id, current)
    programs = ClientProgramRepository(db).list_for_client(client.id)
    return ClientDetail(
        id=client.id,
        email=client.email,
        name=client.name,
        instructor_id=client.instructor_id,
        created_at=client.created_at,
        programs=programs,
    )
