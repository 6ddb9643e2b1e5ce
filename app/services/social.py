"""
Profiles, follows and posts.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import AuthenticationRequired, BackendUnavailable, NotFound, ValidationFailed
from app.models.follow import Follow
from app.models.post import Post
from app.models.profile import Profile
from app.schemas.profile import MeDto, ProfileDto, ProfileSummary, ViewerDto
from app.schemas.social import FeedItem, FollowResult
from app.services.threads import display_fields

logger = logging.getLogger(__name__)


async def get_me(db: AsyncSession, current_user_id: Optional[UUID]) -> MeDto:
    if current_user_id is None:
        return MeDto()

    try:
        result = await db.execute(select(Profile).where(Profile.id == current_user_id))
        profile = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception(f"Failed to load profile for {current_user_id}")
        profile = None

    return MeDto(
        user=ViewerDto(id=current_user_id),
        profile=ProfileDto.model_validate(profile) if profile else None,
    )


async def get_profile_by_handle(db: AsyncSession, handle: str) -> Profile:
    try:
        result = await db.execute(select(Profile).where(Profile.handle == handle))
        profile = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception(f"Failed to load profile @{handle}")
        profile = None
    if not profile:
        raise NotFound("Profile not found")
    return profile


async def follow_user(db: AsyncSession, current_user_id: Optional[UUID], target_id: UUID) -> FollowResult:
    if current_user_id is None:
        raise AuthenticationRequired("You must be logged in to follow users")

    try:
        result = await db.execute(select(Profile.id).where(Profile.id.in_([current_user_id, target_id])))
        known = set(result.scalars().all())
        result = await db.execute(
            select(Follow.id).where(Follow.follower_id == current_user_id, Follow.followee_id == target_id)
        )
        existing = result.first()
    except SQLAlchemyError:
        logger.exception(f"Failed to follow {target_id} as {current_user_id}")
        raise BackendUnavailable("Failed to follow user")

    if target_id not in known:
        raise NotFound("User not found")
    if current_user_id not in known:
        raise NotFound("Create your profile before following users")
    if existing is not None:
        return FollowResult(success=True, already_following=True)

    db.add(Follow(follower_id=current_user_id, followee_id=target_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # A concurrent request may have inserted the same pair
        if await is_following(db, current_user_id, target_id):
            return FollowResult(success=True, already_following=True)
        logger.exception(f"Failed to follow {target_id} as {current_user_id}")
        raise BackendUnavailable("Failed to follow user")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to follow {target_id} as {current_user_id}")
        raise BackendUnavailable("Failed to follow user")

    return FollowResult(success=True, already_following=False)


async def unfollow_user(db: AsyncSession, current_user_id: Optional[UUID], target_id: UUID) -> FollowResult:
    if current_user_id is None:
        raise AuthenticationRequired("You must be logged in to unfollow users")

    stmt = delete(Follow).where(Follow.follower_id == current_user_id, Follow.followee_id == target_id)
    try:
        await db.execute(stmt)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to unfollow {target_id} as {current_user_id}")
        raise BackendUnavailable("Failed to unfollow user")

    return FollowResult(success=True)


async def is_following(db: AsyncSession, current_user_id: Optional[UUID], target_id: UUID) -> bool:
    if current_user_id is None:
        return False

    stmt = select(Follow.id).where(Follow.follower_id == current_user_id, Follow.followee_id == target_id)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError:
        logger.exception("Failed to check follow status")
        return False
    return result.first() is not None


def validate_post_body(body: Optional[str]) -> str:
    max_length = get_settings().post_max_length
    text = (body or "").strip()
    if not text:
        raise ValidationFailed("Post cannot be empty")
    if len(text) > max_length:
        raise ValidationFailed(f"Post cannot exceed {max_length} characters")
    return text


async def create_post(db: AsyncSession, current_user_id: Optional[UUID], body: Optional[str]) -> Post:
    if current_user_id is None:
        raise AuthenticationRequired("You must be logged in to create posts")

    post = Post(author_id=current_user_id, body=validate_post_body(body))
    try:
        db.add(post)
        await db.commit()
        await db.refresh(post)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to create post for {current_user_id}")
        raise BackendUnavailable("Failed to create post")
    return post


async def get_user_posts(db: AsyncSession, user_id: UUID) -> List[Post]:
    stmt = (
        select(Post)
        .where(Post.author_id == user_id)
        .order_by(Post.created_at.desc())
        .limit(get_settings().feed_limit)
    )
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch posts for {user_id}")
        return []
    return list(result.scalars().all())


async def get_followers_feed(db: AsyncSession, current_user_id: Optional[UUID]) -> List[FeedItem]:
    """Latest posts from everyone the current user follows."""
    if current_user_id is None:
        return []

    try:
        result = await db.execute(select(Follow.followee_id).where(Follow.follower_id == current_user_id))
        followee_ids = list(result.scalars().all())
        if not followee_ids:
            return []

        stmt = (
            select(Post)
            .where(Post.author_id.in_(followee_ids))
            .order_by(Post.created_at.desc())
            .limit(get_settings().feed_limit)
        )
        result = await db.execute(stmt)
        posts = result.scalars().all()

        author_ids = {p.author_id for p in posts}
        result = await db.execute(select(Profile).where(Profile.id.in_(list(author_ids))))
        profile_map = {p.id: p for p in result.scalars().all()}
    except SQLAlchemyError:
        logger.exception(f"Failed to build feed for {current_user_id}")
        return []

    feed = []
    for post in posts:
        name, handle = display_fields(profile_map.get(post.author_id))
        feed.append(
            FeedItem(
                id=post.id,
                body=post.body,
                created_at=post.created_at,
                author=ProfileSummary(id=post.author_id, full_name=name, handle=handle),
            )
        )
    return feed
