from __future__ import annotations
import logging
from typing import Any, Iterable

from sqlalchemy import delete, exists, func, or_, select, update

from coachhub.errors import ValidationFailed
from coachhub.models import (
    ClientExerciseNote, ClientProgramItem, Equipment, Exercise, ExerciseEquipment, ProgramItem,
    SessionItem,
)
from coachhub.repositories.base import BaseRepository

log = logging.getLogger(__name__)

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    def list_own(self, creator_id: int, *, location: str | None = None, q: str | None = None) -> list[Exercise]:
        stmt = select(Exercise).where(Exercise.creator_id == creator_id, Exercise.is_archived.is_(False))
        if q:
            stmt = stmt.where(func.lower(Exercise.name).contains(q.lower()))
        stmt = stmt.order_by(Exercise.created_at.desc(), Exercise.id.desc())
        items = list(self.db.execute(stmt).scalars().all())
        # locations is a JSON list; filter portably in Python
        if location:
            items = [e for e in items if location in (e.locations or [])]
        return items

    def get_many(self, ids: Iterable[int]) -> dict[int, Exercise]:
        ids = list(set(ids))
        if not ids:
            return {}
        rows = self.db.execute(select(Exercise).where(Exercise.id.in_(ids))).scalars().all()
        return {e.id: e for e in rows}

    def create(self, creator_id: int, *, equipment_links: list[dict] | None = None, **fields: Any) -> Exercise:
        ex = Exercise(creator_id=creator_id, **fields)
        self.db.add(ex)
        self.db.flush()
        if equipment_links:
            self._replace_links(ex, equipment_links)
        self.db.commit()
        self.db.refresh(ex)
        return ex

    def update(self, ex: Exercise, *, equipment_links: list[dict] | None = None, **fields: Any) -> Exercise:
        for key, value in fields.items():
            setattr(ex, key, value)
        if equipment_links is not None:
            self._replace_links(ex, equipment_links)
        self.db.commit()
        self.db.refresh(ex)
        return ex

    def _replace_links(self, ex: Exercise, links: list[dict]) -> None:
        ids = {l["equipment_id"] for l in links}
        ids |= {l["alternative_equipment_id"] for l in links if l.get("alternative_equipment_id")}
        found = set(self.db.execute(select(Equipment.id).where(Equipment.id.in_(ids))).scalars().all())
        missing = ids - found
        if missing:
            raise ValidationFailed(f"unknown equipment: {sorted(missing)}", code="unknown_equipment")

        ex.equipment_links.clear()
        self.db.flush()
        for i, link in enumerate(links):
            ex.equipment_links.append(ExerciseEquipment(
                equipment_id=link["equipment_id"],
                alternative_equipment_id=link.get("alternative_equipment_id"),
                alternative_text=link.get("alternative_text"),
                order=i,
            ))

    def is_referenced(self, exercise_id: int) -> bool:
        stmt = select(or_(
            exists().where(ProgramItem.exercise_id == exercise_id),
            exists().where(ClientProgramItem.exercise_id == exercise_id),
            exists().where(SessionItem.exercise_id == exercise_id),
            exists().where(ClientExerciseNote.exercise_id == exercise_id),
        ))
        return bool(self.db.execute(stmt).scalar())

    def remove(self, ex: Exercise) -> bool:
        """Hard-delete, or archive when programs/sessions still point at it. Returns True if archived."""
        if self.is_referenced(ex.id):
            ex.is_archived = True
            self.db.commit()
            log.info("exercise %s archived (still referenced)", ex.id)
            return True
        self.delete(ex)
        return False

    def bulk_remove(self, creator_id: int, ids: list[int]) -> tuple[int, int]:
        """Returns (deleted, archived); ids not owned by creator_id are ignored."""
        stmt = select(Exercise).where(Exercise.id.in_(ids), Exercise.creator_id == creator_id)
        deleted = archived = 0
        for ex in self.db.execute(stmt).scalars().all():
            if self.is_referenced(ex.id):
                ex.is_archived = True
                archived += 1
            else:
                self.db.delete(ex)
                deleted += 1
        self.db.commit()
        log.info("bulk exercise delete by %s: deleted=%s archived=%s", creator_id, deleted, archived)
        return deleted, archived

class EquipmentRepository(BaseRepository[Equipment]):
    model = Equipment

    def list_own(self, creator_id: int) -> list[Equipment]:
        stmt = select(Equipment).where(Equipment.creator_id == creator_id).order_by(Equipment.name.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, creator_id: int, **fields: Any) -> Equipment:
        return self.save(Equipment(creator_id=creator_id, **fields))

    def update(self, eq: Equipment, **fields: Any) -> Equipment:
        for key, value in fields.items():
            setattr(eq, key, value)
        self.db.commit()
        self.db.refresh(eq)
        return eq

    def remove(self, eq: Equipment) -> None:
        # drop links explicitly; sqlite does not enforce ON DELETE
        self.db.execute(delete(ExerciseEquipment).where(ExerciseEquipment.equipment_id == eq.id))
        self.db.execute(
            update(ExerciseEquipment)
            .where(ExerciseEquipment.alternative_equipment_id == eq.id)
            .values(alternative_equipment_id=None)
        )
        self.delete(eq)
