from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field

from coachhub.models.media import MediaKind

class MediaCreate(BaseModel):
    url: Annotated[str, Field(min_length=1, max_length=500)]
    filename: Annotated[str, Field(min_length=1, max_length=255)]
    mime_type: Annotated[str, Field(pattern=r"^[\w.+-]+/[\w.+-]+$", max_length=120)]
    size_bytes: Annotated[int, Field(ge=0)] | None = None
    alt_text: Annotated[str, Field(max_length=255)] | None = None

class MediaUpdate(BaseModel):
    filename: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    alt_text: Annotated[str, Field(max_length=255)] | None = None

class MediaRead(MediaCreate):
    id: int
    owner_id: int
    kind: MediaKind
    created_at: datetime

    model_config = {"from_attributes": True}
