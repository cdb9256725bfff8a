from __future__ import annotations
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from coachhub.errors import ConflictError, ValidationFailed
from coachhub.models import (
    AssignmentSource, ClientExerciseNote, ClientProgram, ClientProgramItem, Exercise, Program,
    ProgramItem,
)
from coachhub.repositories.base import BaseRepository
from coachhub.services.customization import OVERRIDE_FIELDS, is_noop

log = logging.getLogger(__name__)

class ClientProgramRepository(BaseRepository[ClientProgram]):
    model = ClientProgram

    def _full(self):
        return select(ClientProgram).options(
            selectinload(ClientProgram.program)
            .selectinload(Program.items)
            .selectinload(ProgramItem.exercise),
            selectinload(ClientProgram.custom_items).selectinload(ClientProgramItem.exercise),
            selectinload(ClientProgram.client),
        )

    def get_full(self, client_program_id: int) -> Optional[ClientProgram]:
        stmt = self._full().where(ClientProgram.id == client_program_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_pair(self, client_id: int, program_id: int) -> Optional[ClientProgram]:
        stmt = select(ClientProgram).where(
            ClientProgram.client_id == client_id, ClientProgram.program_id == program_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_client(self, client_id: int, *, active_only: bool = False) -> list[ClientProgram]:
        stmt = self._full().where(ClientProgram.client_id == client_id)
        if active_only:
            stmt = stmt.where(ClientProgram.is_active.is_(True))
        stmt = stmt.order_by(ClientProgram.order.asc(), ClientProgram.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def next_order(self, client_id: int) -> int:
        current = self.db.execute(
            select(func.max(ClientProgram.order)).where(ClientProgram.client_id == client_id)
        ).scalar_one()
        return (current if current is not None else -1) + 1

    def assign(
        self,
        *,
        client_id: int,
        program_id: int,
        order: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        assigned_by: AssignmentSource = AssignmentSource.instructor,
    ) -> ClientProgram:
        cp = ClientProgram(
            client_id=client_id,
            program_id=program_id,
            order=self.next_order(client_id) if order is None else order,
            start_date=start_date,
            end_date=end_date,
            assigned_by=assigned_by,
        )
        try:
            self.db.add(cp)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("program already assigned to client", code="program_already_assigned")
        log.info("program %s assigned to client %s (%s)", program_id, client_id, assigned_by.value)
        return self.get_full(cp.id)

    def update(self, cp: ClientProgram, **fields: Any) -> ClientProgram:
        for key, value in fields.items():
            setattr(cp, key, value)
        if cp.start_date and cp.end_date and cp.end_date < cp.start_date:
            self.db.rollback()
            raise ValidationFailed("end_date must not be before start_date", code="invalid_date_window")
        self.db.commit()
        return self.get_full(cp.id)

    def reorder(self, client_id: int, ordered_ids: list[int]) -> list[ClientProgram]:
        current = {cp.id: cp for cp in self.list_for_client(client_id)}
        if set(ordered_ids) != set(current) or len(ordered_ids) != len(current):
            raise ValidationFailed("ids must list every program of the client exactly once", code="invalid_order")
        for index, cp_id in enumerate(ordered_ids):
            current[cp_id].order = index
        self.db.commit()
        return self.list_for_client(client_id)

    def unassign(self, cp: ClientProgram) -> None:
        log.info("client program %s removed (client=%s program=%s)", cp.id, cp.client_id, cp.program_id)
        self.delete(cp)


class ClientProgramItemRepository(BaseRepository[ClientProgramItem]):
    """Writes the sparse customization records of one assigned program."""
    model = ClientProgramItem

    def list_for(self, client_program_id: int) -> list[ClientProgramItem]:
        stmt = (
            select(ClientProgramItem)
            .options(selectinload(ClientProgramItem.exercise))
            .where(ClientProgramItem.client_program_id == client_program_id)
            .order_by(ClientProgramItem.order.asc().nulls_last(), ClientProgramItem.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    @staticmethod
    def _template_orders(cp: ClientProgram) -> dict[int, int]:
        return {pi.exercise_id: pi.order for pi in cp.program.items}

    def _check(self, cp: ClientProgram, exercise_id: int, *, is_added: bool) -> None:
        in_template = exercise_id in self._template_orders(cp)
        if is_added and in_template:
            raise ValidationFailed(
                f"exercise {exercise_id} is already part of the program", code="already_in_program"
            )
        if not is_added and not in_template:
            raise ValidationFailed(
                f"exercise {exercise_id} is not part of the program; mark it as added",
                code="not_in_program",
            )
        if is_added and self.db.get(Exercise, exercise_id) is None:
            raise ValidationFailed(f"unknown exercise {exercise_id}", code="unknown_exercise")

    def _build(self, cp: ClientProgram, data: dict) -> ClientProgramItem:
        return ClientProgramItem(
            client_program_id=cp.id,
            exercise_id=data["exercise_id"],
            is_removed=bool(data.get("is_removed")),
            is_added=bool(data.get("is_added")),
            order=data.get("order"),
            section=data.get("section"),
            **{f: data.get(f) for f in OVERRIDE_FIELDS},
        )

    def replace_all(self, cp: ClientProgram, items: list[dict]) -> list[ClientProgramItem]:
        ex_ids = [i["exercise_id"] for i in items]
        if len(ex_ids) != len(set(ex_ids)):
            raise ValidationFailed("an exercise may be customized only once", code="duplicate_exercise")
        for data in items:
            self._check(cp, data["exercise_id"], is_added=bool(data.get("is_added")))

        orders = self._template_orders(cp)
        cp.custom_items.clear()
        self.db.flush()
        kept = 0
        for data in items:
            record = self._build(cp, data)
            if is_noop(record, orders.get(record.exercise_id)):
                continue
            cp.custom_items.append(record)
            kept += 1
        self.db.commit()
        log.info("client program %s customizations replaced (%s kept of %s)", cp.id, kept, len(items))
        return self.list_for(cp.id)

    def upsert(self, cp: ClientProgram, exercise_id: int, data: dict) -> Optional[ClientProgramItem]:
        """Create or overwrite one record; returns None when the result is a no-op and was pruned."""
        existing = next((r for r in cp.custom_items if r.exercise_id == exercise_id), None)
        is_added = bool(data.get("is_added", existing.is_added if existing else False))
        self._check(cp, exercise_id, is_added=is_added)

        record = existing or ClientProgramItem(client_program_id=cp.id, exercise_id=exercise_id)
        record.is_added = is_added
        record.is_removed = bool(data.get("is_removed", record.is_removed or False))
        for name in OVERRIDE_FIELDS + ("order", "section"):
            if name in data:
                setattr(record, name, data[name])

        if is_noop(record, self._template_orders(cp).get(exercise_id)):
            if existing is not None:
                cp.custom_items.remove(existing)
            self.db.commit()
            return None
        if existing is None:
            cp.custom_items.append(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def reset(self, cp: ClientProgram, exercise_id: int) -> bool:
        existing = next((r for r in cp.custom_items if r.exercise_id == exercise_id), None)
        if existing is None:
            return False
        cp.custom_items.remove(existing)
        self.db.commit()
        return True

    def reorder(self, cp: ClientProgram, exercise_ids: list[int]) -> None:
        """Persist a drag-and-drop order: every listed exercise gets an explicit order."""
        records = {r.exercise_id: r for r in cp.custom_items}
        orders = self._template_orders(cp)
        visible = set(orders) | {r.exercise_id for r in records.values() if r.is_added}
        visible -= {r.exercise_id for r in records.values() if r.is_removed}
        if set(exercise_ids) != visible or len(exercise_ids) != len(visible):
            raise ValidationFailed(
                "exercise_ids must list every visible exercise exactly once", code="invalid_order"
            )

        for index, exercise_id in enumerate(exercise_ids):
            record = records.get(exercise_id)
            if record is None:
                if orders.get(exercise_id) == index:
                    continue
                record = ClientProgramItem(client_program_id=cp.id, exercise_id=exercise_id)
                cp.custom_items.append(record)
            record.order = index
        self.db.commit()


class ClientExerciseNoteRepository(BaseRepository[ClientExerciseNote]):
    model = ClientExerciseNote

    def list_for(self, client_program_id: int) -> list[ClientExerciseNote]:
        stmt = (
            select(ClientExerciseNote)
            .options(selectinload(ClientExerciseNote.exercise))
            .where(ClientExerciseNote.client_program_id == client_program_id)
            .order_by(ClientExerciseNote.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def replace_all(self, cp: ClientProgram, notes: list[dict], *, allowed: set[int]) -> list[ClientExerciseNote]:
        """Swap every note of the client program for ``notes``; exercises must be in ``allowed``."""
        ex_ids = [n["exercise_id"] for n in notes]
        if len(ex_ids) != len(set(ex_ids)):
            raise ValidationFailed("one note per exercise", code="duplicate_exercise")
        outside = set(ex_ids) - allowed
        if outside:
            raise ValidationFailed(
                f"exercises not in this program: {sorted(outside)}", code="not_in_program"
            )

        cp.exercise_notes.clear()
        self.db.flush()
        for n in notes:
            cp.exercise_notes.append(ClientExerciseNote(exercise_id=n["exercise_id"], note=n["note"]))
        self.db.commit()
        log.info("client program %s exercise notes replaced (%s notes)", cp.id, len(notes))
        return self.list_for(cp.id)
