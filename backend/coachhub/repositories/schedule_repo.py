from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from coachhub.models import ClientProgram, ScheduledProgram
from coachhub.repositories.base import BaseRepository

class ScheduleRepository(BaseRepository[ScheduledProgram]):
    model = ScheduledProgram

    def get_full(self, scheduled_id: int) -> Optional[ScheduledProgram]:
        stmt = (
            select(ScheduledProgram)
            .options(selectinload(ScheduledProgram.client_program).selectinload(ClientProgram.program))
            .where(ScheduledProgram.id == scheduled_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_client(
        self,
        client_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[ScheduledProgram]:
        stmt = (
            select(ScheduledProgram)
            .options(selectinload(ScheduledProgram.client_program).selectinload(ClientProgram.program))
            .where(ScheduledProgram.client_id == client_id)
        )
        if start_date:
            stmt = stmt.where(ScheduledProgram.scheduled_date >= start_date)
        if end_date:
            stmt = stmt.where(ScheduledProgram.scheduled_date <= end_date)
        stmt = stmt.order_by(ScheduledProgram.scheduled_date.asc(), ScheduledProgram.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create_many(
        self,
        cp: ClientProgram,
        dates: list[date],
        *,
        scheduled_time: str | None = None,
    ) -> list[ScheduledProgram]:
        rows = [
            ScheduledProgram(
                client_program_id=cp.id,
                client_id=cp.client_id,
                scheduled_date=d,
                scheduled_time=scheduled_time,
            )
            for d in dates
        ]
        self.db.add_all(rows)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        return rows

    def update(self, sp: ScheduledProgram, *, completed: bool | None = None, notes: str | None = None) -> ScheduledProgram:
        if completed is not None:
            sp.completed = completed
        if notes is not None:
            sp.notes = notes
        self.db.commit()
        self.db.refresh(sp)
        return sp

    def pending_on(self, client_program_id: int, day: date) -> list[ScheduledProgram]:
        stmt = select(ScheduledProgram).where(
            ScheduledProgram.client_program_id == client_program_id,
            ScheduledProgram.scheduled_date == day,
            ScheduledProgram.completed.is_(False),
        )
        return list(self.db.execute(stmt).scalars().all())
