from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import User
from coachhub.schemas.client_program import (
    CustomItemPatch, CustomItemRead, CustomItemsReplace, EffectiveProgramRead, ItemReorder,
)
from coachhub.repositories.client_program_repo import ClientProgramItemRepository
from coachhub.services.customization import resolve
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import get_client_program_or_404
from coachhub.errors import NotFoundError

router = APIRouter(prefix="/api/client-program-items", tags=["customizations"])

@router.get("", response_model=list[CustomItemRead])
def list_customizations(
    client_program_id: int = Query(...),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    cp = get_client_program_or_404(db, client_program_id, current)
    return ClientProgramItemRepository(db).list_for(cp.id)

@router.put("", response_model=list[CustomItemRead])
def replace_customizations(
    payload: CustomItemsReplace,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    cp = get_client_program_or_404(db, payload.client_program_id, current)
    items = [i.model_dump(mode="json") for i in payload.items]
    return ClientProgramItemRepository(db).replace_all(cp, items)

@router.put("/{client_program_id}/{exercise_id}", response_model=CustomItemRead | None)
def upsert_customization(
    client_program_id: int,
    exercise_id: int,
    payload: CustomItemPatch,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    # null body in the response: the change matched the template and nothing is stored
    cp = get_client_program_or_404(db, client_program_id, current)
    data = payload.model_dump(mode="json", exclude_unset=True)
    return ClientProgramItemRepository(db).upsert(cp, exercise_id, data)

@router.delete("/{client_program_id}/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def reset_customization(
    client_program_id: int,
    exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    cp = get_client_program_or_404(db, client_program_id, current)
    if not ClientProgramItemRepository(db).reset(cp, exercise_id):
        raise NotFoundError("no customization for this exercise")

@router.post("/{client_program_id}/reorder", response_model=EffectiveProgramRead)
def reorder_items(
    client_program_id: int,
    payload: ItemReorder,
    db: Session = Depends(get_db),
    current: User = Depends(require_staff),
):
    cp = get_client_program_or_404(db, client_program_id, current)
    ClientProgramItemRepository(db).reorder(cp, payload.exercise_ids)
    return resolve(get_client_program_or_404(db, client_program_id, current))
