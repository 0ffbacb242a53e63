"""FastAPI application serving the room protocol over websockets."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, WebSocket

from .handler import Connection, disconnect, dispatch
from .registry import RoomRegistry

logger = logging.getLogger(__name__)


def create_app(registry: Optional[RoomRegistry] = None) -> FastAPI:
    """Build the application around a single, explicitly owned registry."""

    app = FastAPI(
        title="xoroom",
        description="Password-protected tic-tac-toe rooms for two remote players",
    )
    app.state.registry = registry if registry is not None else RoomRegistry()

    @app.get("/health")
    def health() -> Dict[str, object]:
        return {"status": "ok", "rooms": len(app.state.registry)}

    @app.websocket("/")
    async def play(websocket: WebSocket) -> None:
        await websocket.accept()
        room_registry: RoomRegistry = app.state.registry
        conn = Connection(channel=websocket)
        logger.debug(f"Connection {conn.conn_id} opened")
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
                conn = await dispatch(room_registry, conn, raw)
        finally:
            await disconnect(room_registry, conn)
            logger.debug(f"Connection {conn.conn_id} closed")

    return app


app = create_app()
