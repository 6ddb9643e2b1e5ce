from sqlalchemy import Column, String, Integer, Float, DateTime, Uuid
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.database import Base


class Profile(Base):
    """Public profile of a film-industry user. The id is the identity provider's user id."""
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(200), nullable=True)
    handle = Column(String(100), unique=True, nullable=False, index=True)
    role = Column(String(100), nullable=True)  # e.g. Director of Photography, Gaffer
    location = Column(String(200), nullable=True)
    rating = Column(Float, nullable=True)
    ratings_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    sent_messages = relationship("Message", foreign_keys="Message.sender_id", back_populates="sender")
    received_messages = relationship("Message", foreign_keys="Message.recipient_id", back_populates="recipient")
    posts = relationship("Post", back_populates="author")
