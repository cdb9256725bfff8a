from typing import Annotated
from datetime import date, datetime
from pydantic import BaseModel, Field, StringConstraints, model_validator

from coachhub.models.client_program import AssignmentSource
from coachhub.models.program import Section
from coachhub.schemas.program import ItemOverrides, ProgramRead

class DateWindow(BaseModel):
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class ClientProgramAssign(DateWindow):
    client_id: int
    program_id: int
    order: Annotated[int, Field(ge=0)] | None = None

class ClientProgramUpdate(DateWindow):
    is_active: bool | None = None
    order: Annotated[int, Field(ge=0)] | None = None

class ClientProgramReorder(BaseModel):
    ids: Annotated[list[int], Field(min_length=1)]

class ClientProgramRead(BaseModel):
    id: int
    client_id: int
    program_id: int
    is_active: bool
    start_date: date | None = None
    end_date: date | None = None
    order: int
    assigned_by: AssignmentSource
    created_at: datetime
    program: ProgramRead

    model_config = {"from_attributes": True}

class CustomProgramExercise(BaseModel):
    exercise_id: int
    order: Annotated[int, Field(ge=0)] | None = None
    sets: Annotated[int, Field(ge=0, le=10_000)] | None = None
    reps: Annotated[int, Field(ge=0, le=10_000)] | None = None

class CustomProgramCreate(BaseModel):
    """A client-built program; becomes a private program plus a self-service assignment."""
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=160)]
    description: str | None = None
    exercises: Annotated[list[CustomProgramExercise], Field(min_length=1)]

# Customizations

class CustomItemIn(ItemOverrides):
    exercise_id: int
    is_removed: bool = False
    is_added: bool = False
    order: Annotated[int, Field(ge=0)] | None = None
    section: Section | None = None

class CustomItemsReplace(BaseModel):
    client_program_id: int
    items: list[CustomItemIn]

class CustomItemPatch(ItemOverrides):
    """Partial update of one exercise; only the fields sent are written."""
    is_removed: bool | None = None
    is_added: bool | None = None
    order: Annotated[int, Field(ge=0)] | None = None
    section: Section | None = None

class CustomItemRead(ItemOverrides):
    id: int
    client_program_id: int
    exercise_id: int
    is_removed: bool
    is_added: bool
    order: int | None = None
    section: Section | None = None

    model_config = {"from_attributes": True}

class ItemReorder(BaseModel):
    exercise_ids: Annotated[list[int], Field(min_length=1)]

class EffectiveItemRead(ItemOverrides):
    exercise_id: int
    exercise_name: str
    section: Section
    order: int
    position: int
    source: str
    customized: bool
    program_item_id: int | None = None
    custom_item_id: int | None = None

    model_config = {"from_attributes": True}

class EffectiveProgramRead(BaseModel):
    client_program_id: int
    program_id: int
    program_name: str
    items: list[EffectiveItemRead]
    removed: list[EffectiveItemRead]

    model_config = {"from_attributes": True}

class ClientDetail(BaseModel):
    id: int
    email: str
    name: str
    instructor_id: int | None = None
    created_at: datetime
    programs: list[ClientProgramRead] = []

# Per-client exercise notes

class ExerciseNoteIn(BaseModel):
    exercise_id: int
    note: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]

class ExerciseNotesReplace(BaseModel):
    client_program_id: int
    notes: list[ExerciseNoteIn]

class ExerciseNoteRead(BaseModel):
    id: int
    client_program_id: int
    exercise_id: int
    exercise_name: str
    note: str
    created_at: datetime
