"""In-memory registry mapping room codes to live rooms."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from .exceptions import CodeInUse, RoomNotFound
from .room import Room

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Owns every room of the process.

    One instance is built per application and shared by all connection
    tasks. ``_lock`` guards the code -> room mapping; each room's own lock
    guards its fields. When both are needed the room lock is taken first.
    The only exception is :meth:`create_or_reject`, which locks a room that
    is not yet visible to anyone else and therefore never waits on it.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        return code in self._rooms

    async def lookup(self, code: str) -> Optional[Room]:
        async with self._lock:
            return self._rooms.get(code)

    @asynccontextmanager
    async def create_or_reject(
        self, code: str, password: str, conn_id: str, username: str, channel: Any
    ) -> AsyncIterator[Room]:
        """Register a new room with its creator seated as X.

        Yields the room with its lock held so the creator hears about the
        room before anyone joining it can act.
        """
        async with self._lock:
            existing = self._rooms.get(code)
            if existing is not None and existing.participants:
                raise CodeInUse(code)
            if existing is not None:
                # emptied but not yet removed by its last leaver
                existing.closed = True
            room = Room(code=code, password=password)
            room.add_participant(conn_id, username, channel)
            await room.lock.acquire()
            self._rooms[code] = room
        logger.info(f"Created room {code} for {username}")
        try:
            yield room
        finally:
            room.lock.release()

    @asynccontextmanager
    async def acquire(self, code: str) -> AsyncIterator[Room]:
        """Yield the live room under ``code`` with its lock held."""
        room = await self.lookup(code)
        if room is None:
            raise RoomNotFound(code)
        async with room.lock:
            if room.closed:
                raise RoomNotFound(code)
            yield room

    async def remove_if_empty(self, room: Room) -> bool:
        """Drop ``room`` once nobody is seated in it.

        Only removes the mapping if it still points at this very room, so a
        fresh room created under the same code is left alone.
        """
        if room.participants:
            return False
        async with self._lock:
            room.closed = True
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
                logger.info(f"Removed empty room {room.code}")
                return True
        return False
