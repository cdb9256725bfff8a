from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import User
from coachhub.schemas.exercise import EquipmentCreate, EquipmentRead
from coachhub.repositories.exercise_repo import EquipmentRepository
from coachhub.deps.auth import require_staff
from coachhub.deps.access import ensure_owner
from coachhub.errors import NotFoundError

router = APIRouter(prefix="/api/equipment", tags=["equipment"])

def _owned(db: Session, equipment_id: int, current: User):
    eq = EquipmentRepository(db).get(equipment_id)
    if eq is None:
        raise NotFoundError("equipment not found")
    ensure_owner(eq.creator_id, current, "equipment")
    return eq

@router.get("", response_model=list[EquipmentRead])
def list_equipment(db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return EquipmentRepository(db).list_own(current.id)

@router.post("", response_model=EquipmentRead, status_code=status.HTTP_201_CREATED)
def create_equipment(payload: EquipmentCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return EquipmentRepository(db).create(current.id, **payload.model_dump())

@router.get("/{equipment_id}", response_model=EquipmentRead)
def get_equipment(equipment_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return _owned(db, equipment_id, current)

@router.put("/{equipment_id}", response_model=EquipmentRead)
def update_equipment(
    equipment_id: int,
    payload: EquipmentCreate,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    eq = _owned(db, equipment_id, current)
    return EquipmentRepository(db).update(eq, **payload.model_dump())

@router.delete("/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment(equipment_id: int, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    EquipmentRepository(db).remove(_owned(db, equipment_id, current))
