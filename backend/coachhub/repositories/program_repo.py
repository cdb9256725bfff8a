from __future__ import annotations
import logging
from typing import Any, Optional

from sqlalchemy import exists, func, or_, select
from sqlalchemy.orm import selectinload

from coachhub.errors import ValidationFailed
from coachhub.models import ClientProgram, Exercise, Program, ProgramItem, Section
from coachhub.repositories.base import BaseRepository

log = logging.getLogger(__name__)

ITEM_FIELDS = (
    "sets", "reps", "hold_seconds", "duration_minutes", "rest_seconds",
    "weight_per_set", "intensity", "notes",
)

class ProgramRepository(BaseRepository[Program]):
    model = Program

    def _with_items(self):
        return select(Program).options(
            selectinload(Program.items).selectinload(ProgramItem.exercise)
        )

    def get_full(self, program_id: int) -> Optional[Program]:
        stmt = self._with_items().where(Program.id == program_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_own(self, creator_id: int) -> list[Program]:
        stmt = (
            self._with_items()
            .where(Program.creator_id == creator_id, Program.is_archived.is_(False))
            .order_by(Program.created_at.desc(), Program.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_public(
        self,
        *,
        difficulty: str | None = None,
        location: str | None = None,
        search: str | None = None,
    ) -> list[Program]:
        stmt = self._with_items().where(Program.is_public.is_(True), Program.is_archived.is_(False))
        if difficulty:
            stmt = stmt.where(Program.difficulty == difficulty)
        if location:
            stmt = stmt.where(Program.location == location)
        if search:
            needle = search.lower()
            stmt = stmt.where(or_(
                func.lower(Program.name).contains(needle),
                func.lower(func.coalesce(Program.description, "")).contains(needle),
            ))
        stmt = stmt.order_by(Program.created_at.desc(), Program.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def _build_items(self, items: list[dict]) -> list[ProgramItem]:
        ex_ids = [i["exercise_id"] for i in items]
        if len(ex_ids) != len(set(ex_ids)):
            raise ValidationFailed("an exercise may appear only once per program", code="duplicate_exercise")
        found = set(self.db.execute(select(Exercise.id).where(Exercise.id.in_(ex_ids))).scalars().all())
        missing = set(ex_ids) - found
        if missing:
            raise ValidationFailed(f"unknown exercises: {sorted(missing)}", code="unknown_exercise")

        built = []
        for index, item in enumerate(items):
            order = item.get("order")
            built.append(ProgramItem(
                exercise_id=item["exercise_id"],
                order=index if order is None else order,
                section=item.get("section") or Section.CORE,
                **{f: item.get(f) for f in ITEM_FIELDS},
            ))
        return built

    def create(self, creator_id: int, *, items: list[dict], **fields: Any) -> Program:
        program = Program(creator_id=creator_id, **fields)
        program.items = self._build_items(items)
        self.db.add(program)
        self.db.commit()
        return self.get_full(program.id)

    def replace(self, program: Program, *, items: list[dict], **fields: Any) -> Program:
        new_items = self._build_items(items)
        for key, value in fields.items():
            setattr(program, key, value)
        program.items.clear()
        self.db.flush()
        program.items.extend(new_items)
        self.db.commit()
        self.db.expire(program)
        return self.get_full(program.id)

    def is_assigned(self, program_id: int) -> bool:
        stmt = select(exists().where(ClientProgram.program_id == program_id))
        return bool(self.db.execute(stmt).scalar())

    def remove(self, program: Program) -> bool:
        """Hard-delete, or archive once any client has it assigned. Returns True if archived."""
        if self.is_assigned(program.id):
            program.is_archived = True
            self.db.commit()
            log.info("program %s archived (assigned to clients)", program.id)
            return True
        self.delete(program)
        return False
