from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.database import get_db
from app.dependencies import Viewer, get_optional_viewer, viewer_id
from app.schemas.profile import MeDto, ProfileDto
from app.services import social

router = APIRouter()


@router.get("/me", response_model=MeDto)
async def get_me(
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await social.get_me(db, viewer_id(viewer))


@router.get("/{handle}", response_model=ProfileDto)
async def get_profile(handle: str, db: AsyncSession = Depends(get_db)):
    profile = await social.get_profile_by_handle(db, handle)
    return ProfileDto.model_validate(profile)
