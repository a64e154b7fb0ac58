"""WebSocket push channel for editor state and user-facing notices."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Dict
from uuid import uuid4

from fastapi import WebSocket

from shared.utils import setup_logging

logger = setup_logging("editor-notifier")

HISTORY_LIMIT = 50


class EditorNotifier:
    """Track WebSocket connections and push editor events to them."""

    def __init__(self) -> None:
        self._connections: Dict[str, WebSocket] = {}
        self._lock = asyncio.Lock()
        self.history: deque[dict[str, Any]] = deque(maxlen=HISTORY_LIMIT)

    async def connect(self, websocket: WebSocket, client_id: str | None = None) -> str:
        """Accept WebSocket connection and register client."""
        client_key = client_id or str(uuid4())
        await websocket.accept()
        async with self._lock:
            self._connections[client_key] = websocket
        return client_key

    async def disconnect(self, client_id: str) -> None:
        websocket: WebSocket | None = None
        async with self._lock:
            websocket = self._connections.pop(client_id, None)
        if websocket:
            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Closing websocket {client_id} failed: {e}")

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send a message to all connected clients, dropping dead ones."""
        async with self._lock:
            recipients = list(self._connections.items())

        for client_id, websocket in recipients:
            try:
                await websocket.send_json(message)
            except Exception:
                await self.disconnect(client_id)

    async def notify(self, message: str, level: str = "error", **details: Any) -> None:
        """Surface a single user-facing notification."""
        notice = {"event": "notification", "level": level, "message": message, **details}
        self.history.append(notice)
        logger.info(f"Notification ({level}): {message}")
        await self.broadcast(notice)

    async def publish_state(self, snapshot: dict[str, Any]) -> None:
        await self.broadcast({"event": "state", "state": snapshot})

    async def reset(self) -> None:
        """Clear all connections (primarily for tests)."""
        async with self._lock:
            connections = list(self._connections.items())
            self._connections.clear()
        self.history.clear()

        for client_id, websocket in connections:
            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Closing websocket {client_id} failed: {e}")
