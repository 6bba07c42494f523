"""WebSocket endpoint for real-time action notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter()
logger = logging.getLogger(__name__)

# Connected viewers (renderers, spectators)
connections: list[WebSocket] = []


async def broadcast(message: dict[str, Any]) -> None:
    """Send a message to all connected WebSocket clients.

    Args:
        message: The JSON-serializable message to send.
    """
    disconnected = []
    for i, ws in enumerate(connections):
        try:
            await ws.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.debug("Dropping websocket client: %s", exc)
            disconnected.append(i)
    for i in reversed(disconnected):
        connections.pop(i)


async def notify_actions(actions: list[dict[str, Any]]) -> None:
    """Notify all clients of committed actions, in order."""
    for action in actions:
        await broadcast({"type": "action", "action": action})


async def notify_game_started(tower_name: str) -> None:
    await broadcast({"type": "game_started", "tower": tower_name})


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream every committed action to the client.

    Rendering clients replay these to animate moves; the game state has
    already changed by the time a message is sent.
    """
    await websocket.accept()
    connections.append(websocket)

    try:
        await websocket.send_json({"type": "connected"})

        # Keep connection alive, listen for client messages (ignored)
        while True:
            try:
                await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        if websocket in connections:
            connections.remove(websocket)
