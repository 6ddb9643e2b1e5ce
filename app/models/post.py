from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.database import Base


class Post(Base):
    """Short text post shown on the author's profile and in followers' feeds."""
    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    body = Column(Text, nullable=False)

    author_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    author = relationship("Profile", back_populates="posts")
