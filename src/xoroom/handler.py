"""Per-connection dispatch of inbound protocol messages.

Each websocket is represented by a :class:`Connection` record. The record
only remembers the code of the room the connection sits in; the room itself
is always fetched from the registry, so a room that was removed and created
again under the same code is never confused with its predecessor.

Every action takes ``(registry, connection, payload)`` and returns the
updated record. Replies and broadcasts are written while the room lock is
held so all participants see state frames in the order they were applied.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, Optional

from . import protocol
from .broadcast import broadcast, deliver
from .exceptions import NotInRoom, RoomError, RoomNotFound, RoomUnavailable, UnknownAction
from .registry import RoomRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    channel: Any = field(repr=False)
    conn_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    room_code: Optional[str] = None


Action = Callable[[RoomRegistry, Connection, Dict[str, Any]], Awaitable[Connection]]


async def leave_current_room(
    registry: RoomRegistry, conn: Connection, reason: str
) -> Connection:
    """Unseat ``conn`` from its room, if any.

    An emptied room is removed from the registry; otherwise the remaining
    participant gets a fresh board and a ``player_left`` notice.
    """
    if conn.room_code is None:
        return conn
    try:
        async with registry.acquire(conn.room_code) as room:
            participant = room.remove_participant(conn.conn_id)
            if participant is not None:
                logger.info(
                    f"{participant.username} left room {room.code} ({reason})"
                )
                if room.participants:
                    await broadcast(
                        room, protocol.player_left(room, participant.username, reason)
                    )
                else:
                    await registry.remove_if_empty(room)
    except RoomNotFound:
        pass
    return replace(conn, room_code=None)


async def create_room(
    registry: RoomRegistry, conn: Connection, payload: Dict[str, Any]
) -> Connection:
    creds = protocol.parse_credentials(payload)
    async with registry.create_or_reject(
        creds.code, creds.password, conn.conn_id, creds.username, conn.channel
    ) as room:
        await deliver(conn.channel, protocol.room_entered("room_created", room, conn.conn_id))
    return replace(conn, room_code=room.code)


async def join_room(
    registry: RoomRegistry, conn: Connection, payload: Dict[str, Any]
) -> Connection:
    creds = protocol.parse_credentials(payload)
    async with registry.acquire(creds.code) as room:
        room.check_password(creds.password)
        participant = room.add_participant(conn.conn_id, creds.username, conn.channel)
        logger.info(f"{participant.username} joined room {room.code} as {participant.mark}")
        await deliver(conn.channel, protocol.room_entered("room_joined", room, conn.conn_id))
        await broadcast(
            room, protocol.player_joined(room, participant.username), exclude=conn.conn_id
        )
    return replace(conn, room_code=room.code)


async def make_move(
    registry: RoomRegistry, conn: Connection, payload: Dict[str, Any]
) -> Connection:
    if conn.room_code is None:
        raise NotInRoom()
    try:
        async with registry.acquire(conn.room_code) as room:
            if conn.conn_id not in room.participants:
                raise NotInRoom()
            index = protocol.parse_move(payload)
            if room.apply_move(conn.conn_id, index):
                await broadcast(room, protocol.game_state(room))
    except RoomNotFound as exc:
        raise RoomUnavailable(exc.code) from exc
    return conn


async def reset_game(
    registry: RoomRegistry, conn: Connection, payload: Dict[str, Any]
) -> Connection:
    if conn.room_code is None:
        return conn
    try:
        async with registry.acquire(conn.room_code) as room:
            if conn.conn_id in room.participants:
                room.reset()
                await broadcast(room, protocol.game_state(room))
    except RoomNotFound:
        pass
    return conn


async def leave_room(
    registry: RoomRegistry, conn: Connection, payload: Dict[str, Any]
) -> Connection:
    return await leave_current_room(registry, conn, reason="leave")


ACTIONS: Dict[str, Action] = {
    "create_room": create_room,
    "join_room": join_room,
    "make_move": make_move,
    "reset_game": reset_game,
    "leave_room": leave_room,
}

# A connection sits in one room at most; these leave the current one first.
ROOM_ENTRY_ACTIONS = frozenset({"create_room", "join_room"})


async def dispatch(registry: RoomRegistry, conn: Connection, raw: str) -> Connection:
    """Apply one inbound frame and return the connection's new record.

    Any :class:`RoomError` is reported to ``conn`` alone; the returned
    record still reflects an implicit leave performed before the failure.
    """
    try:
        envelope = protocol.decode(raw)
        action = ACTIONS.get(envelope.type or "")
        if action is None:
            raise UnknownAction(envelope.type)
        if envelope.type in ROOM_ENTRY_ACTIONS:
            conn = await leave_current_room(registry, conn, reason="replaced")
        return await action(registry, conn, envelope.payload or {})
    except RoomError as exc:
        logger.debug(f"Rejected request from {conn.conn_id}: {exc.message}")
        await deliver(conn.channel, protocol.error(exc.message))
        return conn


async def disconnect(registry: RoomRegistry, conn: Connection) -> Connection:
    return await leave_current_room(registry, conn, reason="disconnect")
