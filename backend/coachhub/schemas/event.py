from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints, model_validator

from coachhub.models.event import RegistrationStatus

TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]

class EventBase(BaseModel):
    title: TitleStr
    description: str | None = None
    location: Annotated[str, Field(max_length=255)] | None = None
    start_date: datetime
    end_date: datetime | None = None
    max_attendees: Annotated[int, Field(ge=1)] | None = None
    allow_waitlist: bool = False
    registration_deadline_hours: Annotated[int, Field(ge=0, le=24 * 365)] = 0

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class EventCreate(EventBase):
    pass

class EventUpdate(BaseModel):
    title: TitleStr | None = None
    description: str | None = None
    location: Annotated[str, Field(max_length=255)] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    max_attendees: Annotated[int, Field(ge=1)] | None = None
    allow_waitlist: bool | None = None
    registration_deadline_hours: Annotated[int, Field(ge=0, le=24 * 365)] | None = None

class EventRead(EventBase):
    id: int
    creator_id: int
    created_at: datetime
    registered_count: int = 0
    waitlist_count: int = 0
    my_status: RegistrationStatus | None = None
    my_waitlist_position: int | None = None

    model_config = {"from_attributes": True}

class RegistrationRead(BaseModel):
    id: int
    event_id: int
    user_id: int
    status: RegistrationStatus
    joined_at: datetime
    waitlist_position: int | None = None

    model_config = {"from_attributes": True}

class UnregisterResult(BaseModel):
    success: bool = True
    promoted_user_ids: list[int] = []
