"""
Exception hierarchy shared by services and routers.

All errors subclass FastAPI's HTTPException, so a service can raise them
directly and the client receives the usual ``{"detail": ...}`` body.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base exception for all application errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class AuthenticationRequired(AppError):
    """No current user."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, status.HTTP_401_UNAUTHORIZED)


class ValidationFailed(AppError):
    def __init__(self, detail: str):
        super().__init__(detail, status.HTTP_400_BAD_REQUEST)


class NotFound(AppError):
    def __init__(self, detail: str = "Not found"):
        super().__init__(detail, status.HTTP_404_NOT_FOUND)


class BackendUnavailable(AppError):
    """The database could not complete a write."""

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(detail, status.HTTP_503_SERVICE_UNAVAILABLE)
