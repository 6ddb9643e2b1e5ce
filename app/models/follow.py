from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid
import uuid
from datetime import datetime
from app.database import Base


class Follow(Base):
    __tablename__ = "follows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    follower_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    followee_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    # A user can follow another user only once
    __table_args__ = (
        UniqueConstraint("follower_id", "followee_id", name="unique_follow"),
    )
