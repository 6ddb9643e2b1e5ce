"""Builders for arranging test data through a synchronous session."""
from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy.orm import Session

from app.models import Follow, Message, Post, Profile
from app.security import create_access_token


def auth_headers(user_id: uuid.UUID) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def add_profile(session: Session, handle: str, full_name: Optional[str] = None) -> Profile:
    profile = Profile(id=uuid.uuid4(), handle=handle, full_name=full_name)
    session.add(profile)
    session.commit()
    return profile


def add_message(session: Session, sender: Profile, recipient: Profile, body: str, created_at: datetime) -> Message:
    msg = Message(sender_id=sender.id, recipient_id=recipient.id, body=body, created_at=created_at)
    session.add(msg)
    session.commit()
    return msg


def add_follow(session: Session, follower: Profile, followee: Profile) -> Follow:
    follow = Follow(follower_id=follower.id, followee_id=followee.id)
    session.add(follow)
    session.commit()
    return follow


def add_post(session: Session, author: Profile, body: str, created_at: datetime) -> Post:
    post = Post(author_id=author.id, body=body, created_at=created_at)
    session.add(post)
    session.commit()
    return post
