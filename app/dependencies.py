from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import get_settings
from app.exceptions import AuthenticationRequired
from app.security import decode_user_id

settings = get_settings()
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Viewer:
    """The authenticated caller, passed explicitly into every service call."""
    user_id: UUID


def _token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_viewer(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Viewer]:
    """Viewer from bearer header or session cookie; None when anonymous."""
    token = _token_from_request(request, credentials)
    if not token:
        return None

    user_id = decode_user_id(token)
    if user_id is None:
        raise AuthenticationRequired("Invalid token")
    return Viewer(user_id=user_id)


async def get_viewer(viewer: Optional[Viewer] = Depends(get_optional_viewer)) -> Viewer:
    if viewer is None:
        raise AuthenticationRequired()
    return viewer


def viewer_id(viewer: Optional[Viewer]) -> Optional[UUID]:
    return viewer.user_id if viewer else None
