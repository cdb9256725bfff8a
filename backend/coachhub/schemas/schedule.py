from typing import Annotated
from datetime import date, datetime
from pydantic import BaseModel, Field

from coachhub.services.scheduling import ScheduleStatus

TimeStr = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]

class ScheduleCreate(BaseModel):
    client_id: int
    client_program_id: int
    dates: list[date] | None = None
    day_of_week: Annotated[int, Field(ge=0, le=6)] | None = None  # 0=Monday
    repeat_weeks: Annotated[int, Field(ge=1, le=104)] | None = None
    scheduled_time: TimeStr | None = None

class ClientScheduleCreate(BaseModel):
    client_program_id: int
    scheduled_date: date
    scheduled_time: TimeStr | None = None

class ScheduleUpdate(BaseModel):
    completed: bool | None = None
    notes: Annotated[str, Field(max_length=2000)] | None = None

class ScheduledProgramRead(BaseModel):
    id: int
    client_program_id: int
    client_id: int
    program_id: int
    program_name: str
    scheduled_date: date
    scheduled_time: str | None = None
    completed: bool
    notes: str | None = None
    status: ScheduleStatus
    created_at: datetime

class ScheduleCreated(BaseModel):
    created: int
    items: list[ScheduledProgramRead]
