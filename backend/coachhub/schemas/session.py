from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints

from coachhub.models.session import SessionStatus

# Notes: trimmed, up to 500 chars
NotesStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]

class SessionCreate(BaseModel):
    client_program_id: int
    notes: NotesStr | None = None

class SessionFinish(BaseModel):
    notes: NotesStr | None = None

class SessionItemIn(BaseModel):
    exercise_id: int
    skipped: bool = False

class SessionItemRead(BaseModel):
    id: int
    exercise_id: int
    completed: bool
    skipped: bool

    model_config = {"from_attributes": True}

class KudosRead(BaseModel):
    id: int
    session_id: int
    instructor_id: int
    emoji: str
    message: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

class SessionRead(BaseModel):
    id: int
    user_id: int
    client_program_id: int
    status: SessionStatus
    started_at: datetime
    finished_at: datetime | None = None
    notes: str | None = None
    items: list[SessionItemRead] = []
    kudos: list[KudosRead] = []

    model_config = {"from_attributes": True}

class KudosCreate(BaseModel):
    session_id: int
    emoji: Annotated[str, Field(max_length=16)] | None = None
    message: Annotated[str, Field(max_length=1000)] | None = None
