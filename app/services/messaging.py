"""
Direct messaging: inbox threads, conversation history and sending.

Every function takes the caller's user id explicitly. Read paths degrade to
empty results when the database fails; the failure is logged, not retried.
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import AuthenticationRequired, BackendUnavailable, NotFound, ValidationFailed
from app.models.message import Message
from app.models.profile import Profile
from app.schemas.message import MessageDto, ThreadDetailDto, ThreadDto
from app.schemas.profile import ProfileSummary
from app.services.threads import aggregate_threads, counterpart_of, display_fields
from app.ws import manager

logger = logging.getLogger(__name__)

INVALIDATE_EVENT = "messages:invalidate"


def validate_message_body(body: Optional[str]) -> str:
    """Return the trimmed body or raise ValidationFailed."""
    max_length = get_settings().message_max_length
    if body is None or not body.strip():
        raise ValidationFailed("Message cannot be empty")
    if len(body) > max_length:
        raise ValidationFailed(f"Message too long (max {max_length} characters)")
    return body.strip()


async def _load_profiles(db: AsyncSession, ids: Iterable[UUID]) -> Dict[UUID, Profile]:
    if not ids:
        return {}
    try:
        result = await db.execute(select(Profile).where(Profile.id.in_(list(ids))))
    except SQLAlchemyError:
        logger.exception("Failed to load counterpart profiles, using placeholders")
        return {}
    return {p.id: p for p in result.scalars().all()}


async def list_threads_for_user(db: AsyncSession, current_user_id: Optional[UUID]) -> List[ThreadDto]:
    if current_user_id is None:
        return []

    stmt = (
        select(Message)
        .where(or_(Message.sender_id == current_user_id, Message.recipient_id == current_user_id))
        .order_by(Message.created_at.desc())
    )
    try:
        result = await db.execute(stmt)
        messages = result.scalars().all()
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch messages for user {current_user_id}")
        return []

    counterpart_ids = {counterpart_of(m, current_user_id) for m in messages}
    profiles = await _load_profiles(db, counterpart_ids)
    return aggregate_threads(messages, current_user_id, profiles)


async def get_thread_with(
    db: AsyncSession,
    current_user_id: Optional[UUID],
    counterpart_id: UUID,
    before: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> ThreadDetailDto:
    """Counterpart profile plus the conversation in ascending order.

    ``before``/``limit`` page backwards from the newest message; without them
    the whole history is returned.
    """
    if current_user_id is None:
        raise AuthenticationRequired()

    try:
        result = await db.execute(select(Profile).where(Profile.id == counterpart_id))
        other = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception(f"Failed to load profile {counterpart_id}")
        other = None
    if other is None:
        raise NotFound("User not found")

    name, handle = display_fields(other)
    counterpart = ProfileSummary(id=other.id, full_name=name, handle=handle)

    between = or_(
        and_(Message.sender_id == current_user_id, Message.recipient_id == counterpart_id),
        and_(Message.sender_id == counterpart_id, Message.recipient_id == current_user_id),
    )
    stmt = select(Message).where(between)
    if before is not None:
        stmt = stmt.where(Message.created_at < before)
    if limit is not None:
        stmt = stmt.order_by(Message.created_at.desc()).limit(limit)
    else:
        stmt = stmt.order_by(Message.created_at.asc())

    try:
        result = await db.execute(stmt)
        messages = list(result.scalars().all())
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch thread between {current_user_id} and {counterpart_id}")
        messages = []

    if limit is not None:
        messages.reverse()

    return ThreadDetailDto(
        counterpart=counterpart,
        messages=[MessageDto.model_validate(m) for m in messages],
    )


async def send_message(
    db: AsyncSession,
    current_user_id: Optional[UUID],
    recipient_id: UUID,
    body: Optional[str],
) -> Message:
    if current_user_id is None:
        raise AuthenticationRequired()

    text = validate_message_body(body)

    try:
        result = await db.execute(select(Profile.id).where(Profile.id == recipient_id))
        recipient = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception(f"Failed to look up recipient {recipient_id}")
        raise BackendUnavailable("Failed to send message")
    if recipient is None:
        raise NotFound("Recipient not found")

    msg = Message(sender_id=current_user_id, recipient_id=recipient_id, body=text)
    try:
        db.add(msg)
        await db.commit()
        await db.refresh(msg)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to send message from {current_user_id} to {recipient_id}")
        raise BackendUnavailable("Failed to send message")

    await invalidate_messages_view(msg)
    return msg


async def invalidate_messages_view(msg: Message) -> None:
    """Tell both participants' open inboxes to refetch."""
    payload = {
        "event": INVALIDATE_EVENT,
        "message": {
            "id": str(msg.id),
            "senderId": str(msg.sender_id),
            "recipientId": str(msg.recipient_id),
            "createdAt": msg.created_at.isoformat(),
        },
    }
    try:
        await manager.notify({msg.sender_id, msg.recipient_id}, payload)
    except Exception:
        # Delivery is best effort, the message is already stored
        logger.exception("Failed to push messages invalidation")
