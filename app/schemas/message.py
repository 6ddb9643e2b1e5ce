from datetime import datetime
from typing import List
from uuid import UUID

from app.schemas.common import CamelModel
from app.schemas.profile import ProfileSummary


class SendMessageRequest(CamelModel):
    recipient_id: UUID
    body: str


class MessageDto(CamelModel):
    id: UUID
    sender_id: UUID
    recipient_id: UUID
    body: str
    created_at: datetime


class ThreadDto(CamelModel):
    """Conversation summary with one counterpart, derived from the message table."""

    counterpart_id: UUID
    counterpart_name: str
    counterpart_handle: str
    last_message_body: str
    last_message_time: datetime
    unread_count: int = 0


class ThreadDetailDto(CamelModel):
    counterpart: ProfileSummary
    messages: List[MessageDto]
