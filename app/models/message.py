from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid, Index
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.database import Base


class Message(Base):
    """Direct message from one profile to another. Immutable once inserted."""
    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    body = Column(Text, nullable=False)

    # Foreign keys
    sender_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    recipient_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)

    __table_args__ = (
        Index("ix_messages_sender_created", "sender_id", "created_at"),
        Index("ix_messages_recipient_created", "recipient_id", "created_at"),
    )

    # Relationships
    sender = relationship("Profile", foreign_keys=[sender_id], back_populates="sent_messages")
    recipient = relationship("Profile", foreign_keys=[recipient_id], back_populates="received_messages")
