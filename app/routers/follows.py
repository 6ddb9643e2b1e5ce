from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID

from app.database import get_db
from app.dependencies import Viewer, get_optional_viewer, viewer_id
from app.schemas.social import FollowResult, FollowStatus
from app.services import social

router = APIRouter()


@router.get("/{user_id}", response_model=FollowStatus)
async def follow_status(
    user_id: UUID,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    return FollowStatus(following=await social.is_following(db, viewer_id(viewer), user_id))


@router.post("/{user_id}", response_model=FollowResult)
async def follow(
    user_id: UUID,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await social.follow_user(db, viewer_id(viewer), user_id)


@router.delete("/{user_id}", response_model=FollowResult)
async def unfollow(
    user_id: UUID,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await social.unfollow_user(db, viewer_id(viewer), user_id)
