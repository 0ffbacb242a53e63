"""Shared fixtures: a fresh registry and in-memory websocket stand-ins."""

from __future__ import annotations

import asyncio
import json
from typing import Dict, List

import pytest
from fastapi.websockets import WebSocketState

from xoroom.registry import RoomRegistry


class FakeChannel:
    """Records frames the server would have written to a websocket."""

    def __init__(self) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent: List[str] = []

    async def send_text(self, data: str) -> None:
        self.sent.append(data)
        # a real socket write suspends; let other tasks run meanwhile
        await asyncio.sleep(0)

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED

    def frames(self) -> List[Dict[str, object]]:
        return [json.loads(data) for data in self.sent]

    def pop(self) -> List[Dict[str, object]]:
        frames = self.frames()
        self.sent.clear()
        return frames


@pytest.fixture()
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture()
def make_channel():
    return FakeChannel
