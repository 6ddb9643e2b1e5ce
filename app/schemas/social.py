from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel
from app.schemas.profile import ProfileSummary


class CreatePostRequest(CamelModel):
    body: str


class PostDto(CamelModel):
    id: UUID
    body: str
    created_at: datetime


class FeedItem(CamelModel):
    id: UUID
    body: str
    created_at: datetime
    author: ProfileSummary


class FollowResult(CamelModel):
    success: bool = True
    already_following: bool = False


class FollowStatus(CamelModel):
    following: bool
