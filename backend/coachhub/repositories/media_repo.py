from __future__ import annotations
import logging
from typing import Any

from sqlalchemy import delete, select

from coachhub.models import Media, MediaKind
from coachhub.repositories.base import BaseRepository

log = logging.getLogger(__name__)

class MediaRepository(BaseRepository[Media]):
    model = Media

    def list_own(self, owner_id: int, *, kind: MediaKind | None = None) -> list[Media]:
        stmt = select(Media).where(Media.owner_id == owner_id)
        if kind is not None:
            stmt = stmt.where(Media.kind == kind)
        stmt = stmt.order_by(Media.created_at.desc(), Media.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, owner_id: int, *, mime_type: str, **fields: Any) -> Media:
        return self.save(Media(
            owner_id=owner_id,
            mime_type=mime_type,
            kind=MediaKind.from_mime(mime_type),
            **fields,
        ))

    def update(self, media: Media, **fields: Any) -> Media:
        for key, value in fields.items():
            setattr(media, key, value)
        self.db.commit()
        self.db.refresh(media)
        return media

    def bulk_delete(self, owner_id: int, ids: list[int]) -> int:
        result = self.db.execute(delete(Media).where(Media.id.in_(ids), Media.owner_id == owner_id))
        self.db.commit()
        log.info("bulk media delete by %s: %s rows", owner_id, result.rowcount)
        return result.rowcount
