from __future__ import annotations
from typing import Iterable, Optional

from sqlalchemy import func, select, update

from coachhub.models import Notification, NotificationType
from coachhub.repositories.base import BaseRepository

class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    def latest(self, user_id: int, *, limit: int) -> list[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def unread_count(self, user_id: int) -> int:
        stmt = select(func.count()).select_from(Notification).where(
            Notification.user_id == user_id, Notification.read.is_(False)
        )
        return self.db.execute(stmt).scalar_one()

    def add(
        self,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        *,
        link: str | None = None,
        commit: bool = True,
    ) -> Notification:
        """Queue a notification row; pass commit=False to ride on the caller's transaction."""
        n = Notification(user_id=user_id, type=type, title=title, message=message, link=link)
        self.db.add(n)
        if commit:
            self.db.commit()
            self.db.refresh(n)
        return n

    def add_many(
        self,
        user_ids: Iterable[int],
        type: NotificationType,
        title: str,
        message: str,
        *,
        link: str | None = None,
    ) -> int:
        rows = [
            Notification(user_id=uid, type=type, title=title, message=message, link=link)
            for uid in user_ids
        ]
        self.db.add_all(rows)
        self.db.commit()
        return len(rows)

    def mark_read(self, user_id: int, notification_id: int) -> Optional[Notification]:
        n = self.get(notification_id)
        if n is None or n.user_id != user_id:
            return None
        n.read = True
        self.db.commit()
        return n

    def mark_all_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
        )
        self.db.commit()
        return result.rowcount
