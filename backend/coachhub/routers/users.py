from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import UserRole
from coachhub.repositories.user_repo import UserRepository
from coachhub.schemas.user import RoleUpdate, UserCreate, UserRead
from coachhub.deps.auth import require_role, require_user_or_role

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=list[UserRead], dependencies=[Depends(require_role(UserRole.admin))])
def list_users(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = UserRepository(db).list(limit=limit, offset=offset)
    return page.items

@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_user_or_role(UserRole.admin)),  # owner or admin
):
    user = UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

# Admin-only create (register is preferred for normal signups); no password is set
@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_role(UserRole.admin))])
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="email already registered")
    return repo.create(email=payload.email, name=payload.name, password_hash="", role=payload.role)

@router.patch("/{user_id}/role", response_model=UserRead,
              dependencies=[Depends(require_role(UserRole.admin))])
def set_role(user_id: int, payload: RoleUpdate, db: Session = Depends(get_db)):
    user = UserRepository(db).set_role(user_id, role=payload.role)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
