from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID
from datetime import datetime
import logging

from app.config import get_settings
from app.database import get_db
from app.dependencies import Viewer, get_optional_viewer, get_viewer, viewer_id
from app.schemas.message import MessageDto, SendMessageRequest, ThreadDetailDto, ThreadDto
from app.security import decode_user_id
from app.services import messaging
from app.services.threads import filter_threads
from app.ws import manager

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[ThreadDto])
async def list_threads(
    q: Optional[str] = None,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    """Inbox: one thread per counterpart, most recent first. Anonymous callers get an empty list."""
    threads = await messaging.list_threads_for_user(db, viewer_id(viewer))
    return filter_threads(threads, q)


@router.post("", response_model=MessageDto, status_code=201)
async def send_message(
    body: SendMessageRequest,
    viewer: Optional[Viewer] = Depends(get_optional_viewer),
    db: AsyncSession = Depends(get_db),
):
    msg = await messaging.send_message(db, viewer_id(viewer), body.recipient_id, body.body)
    return MessageDto.model_validate(msg)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for inbox invalidation events. Authenticates using session cookie or ?token=."""
    token = websocket.cookies.get(settings.session_cookie_name) or websocket.query_params.get("token")
    user_id = decode_user_id(token) if token else None
    if user_id is None:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    key = str(user_id)
    await manager.connect(key, websocket)

    try:
        while True:
            # Keep connection alive; clients only listen
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.disconnect(key, websocket)
    except Exception:
        logger.exception(f"Websocket for user {key} failed")
        await manager.disconnect(key, websocket)


@router.get("/{counterpart_id}", response_model=ThreadDetailDto)
async def get_thread(
    counterpart_id: UUID,
    before: Optional[datetime] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    """Conversation with one user, oldest first."""
    return await messaging.get_thread_with(db, viewer.user_id, counterpart_id, before=before, limit=limit)
