from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from coachhub.models.notification import NotificationType

class NotificationRead(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    link: str | None = None
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}

class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int

class MarkRead(BaseModel):
    notification_id: int | None = None
    mark_all_read: bool = False

    @model_validator(mode="after")
    def one_target(self):
        if not self.mark_all_read and self.notification_id is None:
            raise ValueError("give notification_id or mark_all_read")
        return self

class Nudge(BaseModel):
    client_id: int
    message: Annotated[str, Field(max_length=1000)] | None = None
