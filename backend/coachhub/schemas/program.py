from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints

from coachhub.models.exercise import Location
from coachhub.models.program import Difficulty, Section

Count = Annotated[int, Field(ge=0, le=10_000)]
Weight = Annotated[float, Field(ge=0, le=1000)]

class ItemOverrides(BaseModel):
    """Nullable per-item values; None inherits from the exercise."""
    sets: Count | None = None
    reps: Count | None = None
    hold_seconds: Count | None = None
    duration_minutes: Count | None = None
    rest_seconds: Count | None = None
    weight_per_set: list[Weight] | None = None
    intensity: Annotated[str, Field(max_length=60)] | None = None
    notes: str | None = None

class ProgramItemIn(ItemOverrides):
    exercise_id: int
    order: Annotated[int, Field(ge=0)] | None = None
    section: Section = Section.CORE

class ProgramItemRead(ItemOverrides):
    id: int
    exercise_id: int
    exercise_name: str
    order: int
    section: Section

    model_config = {"from_attributes": True}

class ProgramBase(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=160)]
    description: str | None = None
    short_description: Annotated[str, Field(max_length=255)] | None = None
    difficulty: Difficulty = Difficulty.beginner
    location: Location | None = None
    is_public: bool = False

class ProgramCreate(ProgramBase):
    items: list[ProgramItemIn] = Field(default_factory=list)

class ProgramRead(ProgramBase):
    id: int
    creator_id: int
    is_archived: bool
    created_at: datetime
    items: list[ProgramItemRead]

    model_config = {"from_attributes": True}

class RemovalRead(BaseModel):
    removed: bool = True
    archived: bool

class LibraryAdd(BaseModel):
    program_id: int
