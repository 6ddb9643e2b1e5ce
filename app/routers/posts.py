from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.dependencies import Viewer, get_optional_viewer, viewer_id
from app.schemas.social import CreatePostRequest, FeedItem, PostDto
from app.services import social

router = APIRouter()
feed_router = APIRouter()


@router.post("", response_model=PostDto, status_code=201)
async def create_post(
    body: CreatePostRequest,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    post = await social.create_post(db, viewer_id(viewer), body.body)
    return PostDto.model_validate(post)


@router.get("/user/{user_id}", response_model=List[PostDto])
async def user_posts(user_id: UUID, db: AsyncSession = Depends(get_db)):
    """Latest posts on a user's profile."""
    posts = await social.get_user_posts(db, user_id)
    return [PostDto.model_validate(p) for p in posts]


@feed_router.get("", response_model=List[FeedItem])
async def followers_feed(
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await social.get_followers_feed(db, viewer_id(viewer))
