"""WebSocket endpoint streaming location cell updates.

On connect the client receives the current value of every cell (the
replay a late subscriber gets), then one message per later emission:

    {"type": "cell", "cell": "<name>", "value": <json>}
"""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from locator.session import LocationSession

router = APIRouter(prefix="/ws", tags=["websocket"])


def serialize(name: str, value) -> dict:
    """Convert a cell value into a JSON-ready message."""
    if value is None:
        data = None
    elif name == "overlays":
        data = [
            {"title": layer.title, "type": layer.type, "color": layer.color, "loaded": layer.is_loaded()}
            for layer in value.values()
        ]
    elif isinstance(value, list):
        data = [item.to_dict() for item in value]
    elif hasattr(value, "to_dict"):
        data = value.to_dict()
    else:
        data = value
    return {"type": "cell", "cell": name, "value": data}


@router.websocket("/location")
async def websocket_location(websocket: WebSocket):
    """Live feed of the location session's cells."""
    session: LocationSession | None = getattr(websocket.app.state, "location_session", None)
    await websocket.accept()
    if session is None:
        await websocket.send_text(json.dumps({"type": "error", "message": "Location session not initialized"}))
        await websocket.close()
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    subscriptions = []

    def forward(name: str):
        def _on_value(value) -> None:
            message = serialize(name, value)
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                queue.put_nowait(message)
            else:
                loop.call_soon_threadsafe(queue.put_nowait, message)
        return _on_value

    for name, cell in session.cells().items():
        subscriptions.append(cell.subscribe(forward(name)))
    logger.info(f"Location WebSocket connected ({len(subscriptions)} cells)")

    async def pump() -> None:
        while True:
            message = await queue.get()
            await websocket.send_text(json.dumps(message))

    sender = asyncio.create_task(pump())
    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await queue.put({"type": "error", "message": "Invalid JSON"})
                continue
            msg_type = message.get("type") if isinstance(message, dict) else None
            if msg_type == "ping":
                await queue.put({"type": "pong"})
            else:
                await queue.put({"type": "error", "message": f"Unknown message type: {msg_type}"})
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        for subscription in subscriptions:
            subscription.close()
        logger.info("Location WebSocket disconnected")
