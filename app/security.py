from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

from app.config import get_settings


def create_access_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token shaped like the identity provider's. Used by local tooling and tests."""
    settings = get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_user_id(token: str) -> Optional[UUID]:
    """Return the ``sub`` claim as a UUID, or None when the token is unusable."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    sub = payload.get("sub")
    if not sub:
        return None
    try:
        return UUID(sub)
    except ValueError:
        return None
