"""
Conversation thread aggregation.

Direct messages are stored as a flat table. The inbox view groups the
messages a user sent or received into one summary per counterpart.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import UUID

from app.models.message import Message
from app.models.profile import Profile
from app.schemas.message import ThreadDto

UNKNOWN_NAME = "Unknown User"
UNKNOWN_HANDLE = "unknown"


def counterpart_of(msg: Message, current_user_id: UUID) -> UUID:
    """The participant of ``msg`` who is not the current user."""
    return msg.recipient_id if msg.sender_id == current_user_id else msg.sender_id


def display_fields(profile: Optional[Profile]) -> Tuple[str, str]:
    """Name and handle for display, with placeholders for a missing profile."""
    if profile is None:
        return UNKNOWN_NAME, UNKNOWN_HANDLE
    return profile.full_name or UNKNOWN_NAME, profile.handle or UNKNOWN_HANDLE


def aggregate_threads(
    messages: Iterable[Message],
    current_user_id: UUID,
    profiles: Optional[Mapping[UUID, Profile]] = None,
) -> List[ThreadDto]:
    """Group messages into one thread per counterpart, most recent first.

    The latest message wins on equal timestamps in iteration order.
    ``unread_count`` counts every incoming message from the counterpart;
    no read state is tracked.
    """
    profiles = profiles or {}
    threads: Dict[UUID, ThreadDto] = {}

    for msg in messages:
        other_id = counterpart_of(msg, current_user_id)
        thread = threads.get(other_id)

        if thread is None:
            name, handle = display_fields(profiles.get(other_id))
            thread = ThreadDto(
                counterpart_id=other_id,
                counterpart_name=name,
                counterpart_handle=handle,
                last_message_body=msg.body,
                last_message_time=msg.created_at,
                unread_count=0,
            )
            threads[other_id] = thread
        elif msg.created_at >= thread.last_message_time:
            thread.last_message_body = msg.body
            thread.last_message_time = msg.created_at

        if msg.sender_id != current_user_id:
            thread.unread_count += 1

    return sorted(threads.values(), key=lambda t: t.last_message_time, reverse=True)


def filter_threads(threads: List[ThreadDto], query: Optional[str]) -> List[ThreadDto]:
    """Inbox search: case-insensitive match on counterpart name or handle."""
    if not query or not query.strip():
        return threads
    needle = query.strip().lower()
    return [
        t for t in threads
        if needle in t.counterpart_name.lower() or needle in t.counterpart_handle.lower()
    ]
