from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints

from coachhub.models.user import UserRole

ContentStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=10_000)]

class CommunityCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
    description: str | None = None

class CommunityRead(CommunityCreate):
    id: int
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}

class MemberAdd(BaseModel):
    user_id: int

class AuthorRead(BaseModel):
    id: int
    name: str
    role: UserRole

    model_config = {"from_attributes": True}

class PostCreate(BaseModel):
    community_id: int | None = None
    title: Annotated[str, Field(max_length=200)] | None = None
    content: ContentStr
    image_url: Annotated[str, Field(max_length=500)] | None = None
    video_url: Annotated[str, Field(max_length=500)] | None = None
    publish_at: datetime | None = None

class CommentCreate(BaseModel):
    content: ContentStr
    parent_id: int | None = None

class CommentRead(BaseModel):
    id: int
    post_id: int
    parent_id: int | None = None
    content: str
    created_at: datetime
    author: AuthorRead
    like_count: int = 0

class PostRead(BaseModel):
    id: int
    community_id: int | None = None
    title: str | None = None
    content: str
    image_url: str | None = None
    video_url: str | None = None
    is_pinned: bool
    is_published: bool
    publish_at: datetime | None = None
    created_at: datetime
    author: AuthorRead
    like_count: int = 0
    comment_count: int = 0
    liked_by_me: bool = False
    comments: list[CommentRead] = []

class LikeResult(BaseModel):
    liked: bool
    like_count: int
