"""Fire-and-forget delivery of serialized frames to room participants."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import WebSocketDisconnect
from fastapi.websockets import WebSocketState

from .room import Room

logger = logging.getLogger(__name__)


def is_open(channel: Any) -> bool:
    return (
        channel is not None
        and channel.client_state == WebSocketState.CONNECTED
        and channel.application_state == WebSocketState.CONNECTED
    )


async def deliver(channel: Any, data: str) -> bool:
    """Write one text frame; a closed or failing channel is skipped."""
    if not is_open(channel):
        return False
    try:
        await channel.send_text(data)
    except (RuntimeError, WebSocketDisconnect) as exc:
        logger.debug(f"Dropped frame to closing websocket: {exc}")
        return False
    return True


async def broadcast(room: Room, data: str, exclude: Optional[str] = None) -> int:
    """Send ``data`` to every participant of ``room`` except ``exclude``.

    Nothing is retried or queued: the next state change carries the
    current state to whoever is still connected.
    """
    delivered = 0
    for conn_id, participant in list(room.participants.items()):
        if conn_id == exclude:
            continue
        if await deliver(participant.channel, data):
            delivered += 1
    return delivered
