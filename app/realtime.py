"""
Realtime change feed.

Each authenticated socket subscribes to its own user's channel and receives
newly created messages and notifications as JSON events.
"""

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self.channels: dict[str, list[WebSocket]] = {}

    async def connect(self, user_id: str, ws: WebSocket) -> None:
        await ws.accept()
        self.channels.setdefault(user_id, []).append(ws)
        logger.debug(f"🔌 Realtime subscriber added for user {user_id}")

    def disconnect(self, user_id: str, ws: WebSocket) -> None:
        remaining = [c for c in self.channels.get(user_id, []) if c is not ws]
        if remaining:
            self.channels[user_id] = remaining
        else:
            self.channels.pop(user_id, None)

    def subscriber_count(self, user_id: str) -> int:
        return len(self.channels.get(user_id, []))

    async def publish(self, user_id: str, event_type: str, data: dict[str, Any]) -> int:
        """Send an event to every socket of a user; returns deliveries"""
        delivered = 0
        dead: list[WebSocket] = []
        for ws in list(self.channels.get(user_id, [])):
            try:
                await ws.send_json({"type": event_type, "data": data})
                delivered += 1
            except Exception as e:
                logger.warning(f"⚠️ Dropping realtime subscriber for user {user_id}: {e}")
                dead.append(ws)
        for ws in dead:
            self.disconnect(user_id, ws)
        return delivered


manager = ConnectionManager()
