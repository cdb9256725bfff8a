from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from coachhub.errors import InvalidStateError, ValidationFailed
from coachhub.models import Exercise, Kudos, SessionItem, SessionStatus, TrainingSession
from coachhub.repositories.base import BaseRepository
from coachhub.repositories.schedule_repo import ScheduleRepository
from coachhub.timeutils import today, utcnow

log = logging.getLogger(__name__)

class SessionRepository(BaseRepository[TrainingSession]):
    model = TrainingSession

    def get_full(self, session_id: int) -> Optional[TrainingSession]:
        stmt = (
            select(TrainingSession)
            .options(
                selectinload(TrainingSession.items),
                selectinload(TrainingSession.kudos),
                selectinload(TrainingSession.user),
            )
            .where(TrainingSession.id == session_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(self, user_id: int, *, limit: int = 50, offset: int = 0) -> list[TrainingSession]:
        stmt = (
            select(TrainingSession)
            .options(selectinload(TrainingSession.items), selectinload(TrainingSession.kudos))
            .where(TrainingSession.user_id == user_id)
            .order_by(TrainingSession.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars().all())

    def active_for(self, user_id: int, client_program_id: int) -> Optional[TrainingSession]:
        stmt = select(TrainingSession).where(
            TrainingSession.user_id == user_id,
            TrainingSession.client_program_id == client_program_id,
            TrainingSession.status == SessionStatus.in_progress,
        )
        return self.db.execute(stmt).scalars().first()

    def start(self, user_id: int, client_program_id: int, *, notes: str | None = None) -> tuple[TrainingSession, bool]:
        """Returns (session, created). An in-progress session is reused rather than duplicated."""
        existing = self.active_for(user_id, client_program_id)
        if existing:
            return self.get_full(existing.id), False
        sess = TrainingSession(user_id=user_id, client_program_id=client_program_id, notes=notes)
        self.db.add(sess)
        self.db.commit()
        return self.get_full(sess.id), True

    @staticmethod
    def _ensure_open(sess: TrainingSession) -> None:
        if sess.is_finished:
            raise InvalidStateError(f"session is already {sess.status.value}", code="session_finished")

    def record_item(self, sess: TrainingSession, exercise_id: int, *, skipped: bool) -> SessionItem:
        self._ensure_open(sess)
        item = next((i for i in sess.items if i.exercise_id == exercise_id), None)
        if item is None:
            if self.db.get(Exercise, exercise_id) is None:
                raise ValidationFailed(f"unknown exercise {exercise_id}", code="unknown_exercise")
            item = SessionItem(session_id=sess.id, exercise_id=exercise_id)
            sess.items.append(item)
        item.skipped = skipped
        item.completed = not skipped
        self.db.commit()
        self.db.refresh(item)
        return item

    def finish(self, sess: TrainingSession, *, notes: str | None = None) -> TrainingSession:
        self._ensure_open(sess)
        sess.status = SessionStatus.completed
        sess.finished_at = utcnow()
        if notes is not None:
            sess.notes = notes
        # the day's calendar entry for this program counts as done
        for sp in ScheduleRepository(self.db).pending_on(sess.client_program_id, today()):
            sp.completed = True
        self.db.commit()
        log.info("session %s completed by user %s", sess.id, sess.user_id)
        return self.get_full(sess.id)

    def cancel(self, sess: TrainingSession) -> TrainingSession:
        self._ensure_open(sess)
        sess.status = SessionStatus.cancelled
        sess.finished_at = utcnow()
        self.db.commit()
        log.info("session %s cancelled by user %s", sess.id, sess.user_id)
        return self.get_full(sess.id)


class KudosRepository(BaseRepository[Kudos]):
    model = Kudos

    def get_for(self, session_id: int, instructor_id: int) -> Optional[Kudos]:
        stmt = select(Kudos).where(Kudos.session_id == session_id, Kudos.instructor_id == instructor_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, session_id: int, instructor_id: int, *, emoji: str, message: str | None) -> Kudos:
        kudos = self.get_for(session_id, instructor_id)
        if kudos is None:
            kudos = Kudos(session_id=session_id, instructor_id=instructor_id)
            self.db.add(kudos)
        kudos.emoji = emoji
        kudos.message = message
        self.db.commit()
        self.db.refresh(kudos)
        return kudos

    def remove_for(self, session_id: int, instructor_id: int) -> bool:
        kudos = self.get_for(session_id, instructor_id)
        if kudos is None:
            return False
        self.delete(kudos)
        return True
