from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from coachhub.models.exercise import Location

NameStr = Annotated[str, Field(max_length=120)]
Count = Annotated[int, Field(ge=0, le=10_000)]
UrlStr = Annotated[str, Field(max_length=500)]

class EquipmentLinkIn(BaseModel):
    equipment_id: int
    alternative_equipment_id: int | None = None
    alternative_text: Annotated[str, Field(max_length=255)] | None = None

class ExerciseBase(BaseModel):
    name: NameStr
    description: str | None = None
    instructions: str | None = None
    sets: Count | None = None
    reps: Count | None = None
    hold_seconds: Count | None = None
    rest_seconds: Count | None = None
    duration_minutes: Count | None = None
    requires_equipment: bool = False
    equipment: Annotated[str, Field(max_length=255)] | None = None
    locations: list[Location] = Field(default_factory=lambda: [Location.GYM])
    image_url: UrlStr | None = None
    video_url: UrlStr | None = None
    audio_url: UrlStr | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

    @field_validator("locations")
    @classmethod
    def unique_locations(cls, v: list[Location]) -> list[Location]:
        if not v:
            raise ValueError("at least one location is required")
        return list(dict.fromkeys(v))

class ExerciseCreate(ExerciseBase):
    equipment_links: list[EquipmentLinkIn] = Field(default_factory=list)

class ExerciseUpdate(ExerciseBase):
    # None leaves existing links alone; [] clears them
    equipment_links: list[EquipmentLinkIn] | None = None

class EquipmentLinkRead(BaseModel):
    equipment_id: int
    alternative_equipment_id: int | None = None
    alternative_text: str | None = None
    order: int

    model_config = {"from_attributes": True}

class ExerciseRead(ExerciseBase):
    id: int
    creator_id: int
    is_archived: bool
    created_at: datetime
    equipment_links: list[EquipmentLinkRead] = []

    model_config = {"from_attributes": True}

class BulkDelete(BaseModel):
    ids: Annotated[list[int], Field(min_length=1)]

class RemovalResult(BaseModel):
    deleted: int
    archived: int

class EquipmentBase(BaseModel):
    name: NameStr
    type: Annotated[str, Field(max_length=60)] | None = None
    description: str | None = None

class EquipmentCreate(EquipmentBase):
    pass

class EquipmentRead(EquipmentBase):
    id: int
    creator_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
