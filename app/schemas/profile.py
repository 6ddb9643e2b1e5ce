from typing import Optional
from uuid import UUID

from app.schemas.common import CamelModel


class ProfileSummary(CamelModel):
    id: UUID
    full_name: str
    handle: str


class ProfileDto(CamelModel):
    id: UUID
    full_name: Optional[str] = None
    handle: str
    role: Optional[str] = None
    location: Optional[str] = None
    rating: Optional[float] = None
    ratings_count: int = 0


class ViewerDto(CamelModel):
    id: UUID


class MeDto(CamelModel):
    user: Optional[ViewerDto] = None
    profile: Optional[ProfileDto] = None
