from typing import Dict, Set, Optional, Any
from fastapi import WebSocket
import asyncio
import json
import logging

import redis.asyncio as aioredis

from app.config import get_settings

logger = logging.getLogger(__name__)

EVENTS_CHANNEL = "messages:events"


class ConnectionManager:
    def __init__(self):
        # user_id (UUID string) -> set of WebSocket
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()
        self.redis: Optional[Any] = None
        self._listener: Optional[asyncio.Task] = None

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            conns = self.active_connections.get(user_id)
            if not conns:
                conns = set()
                self.active_connections[user_id] = conns
            conns.add(websocket)

    async def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            conns = self.active_connections.get(user_id)
            if not conns:
                return
            conns.discard(websocket)
            if len(conns) == 0:
                self.active_connections.pop(user_id, None)

    async def send_json_to_user(self, user_id: str, data) -> None:
        conns = self.active_connections.get(user_id)
        if not conns:
            return
        to_remove = []
        for ws in list(conns):
            try:
                await ws.send_json(data)
            except Exception:
                logger.warning(f"Dropping dead websocket for user {user_id}")
                to_remove.append(ws)
        if to_remove:
            async with self._lock:
                for ws in to_remove:
                    conns.discard(ws)
                if len(conns) == 0:
                    self.active_connections.pop(user_id, None)

    async def publish(self, channel: str, message: dict) -> None:
        """Publish message to Redis channel if configured."""
        if not self.redis:
            return
        try:
            await self.redis.publish(channel, json.dumps(message))
        except Exception:
            logger.exception("Failed to publish to redis")

    async def notify(self, user_ids, payload: dict) -> None:
        """Deliver ``payload`` to local sockets and fan out to other instances."""
        for user_id in user_ids:
            await self.send_json_to_user(str(user_id), payload)
            await self.publish(EVENTS_CHANNEL, {"target_user_id": str(user_id), "payload": payload})


async def _redis_listener(redis_client, channel_name: str):
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(channel_name)
    async for item in pubsub.listen():
        if item is None:
            continue
        if item['type'] == 'message':
            try:
                data = json.loads(item['data'])
                # Expect data to have 'target_user_id' and payload
                target = data.get('target_user_id')
                payload = data.get('payload')
                if target and payload:
                    await manager.send_json_to_user(str(target), payload)
            except Exception:
                logger.exception('Error processing pubsub message')


manager = ConnectionManager()


def init_redis() -> None:
    """Initialize Redis client if REDIS_URL is configured. Call from a running event loop."""
    if manager.redis is not None:
        # Already initialized
        return

    redis_url = get_settings().redis_url
    if not redis_url:
        logger.info("REDIS_URL not configured, running without Redis pub/sub")
        return

    try:
        manager.redis = aioredis.from_url(redis_url)
        manager._listener = asyncio.get_running_loop().create_task(
            _redis_listener(manager.redis, EVENTS_CHANNEL)
        )
        logger.info(f"Redis initialized: {redis_url}")
    except Exception as e:
        logger.exception(f'Failed to initialize Redis client: {e}')
        manager.redis = None


async def close_redis() -> None:
    if manager._listener is not None:
        manager._listener.cancel()
        manager._listener = None
    if manager.redis is not None:
        await manager.redis.aclose()
        manager.redis = None
