"""Wire format: ``{"type": ..., "payload": {...}}`` JSON envelopes."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import InvalidMessage, MissingFields, OutOfRange
from .room import Room


class Envelope(BaseModel):
    """Inbound frame; ``payload`` may be omitted for room-implicit actions."""

    type: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None


class RoomCredentials(BaseModel):
    """Payload of ``create_room`` and ``join_room``."""

    code: str = ""
    password: str = ""
    username: str = ""

    @field_validator("code", "password", "username", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def ensure_present(self) -> "RoomCredentials":
        if not (self.code and self.password and self.username):
            raise ValueError("code, password and username are required")
        return self


class MovePayload(BaseModel):
    """Payload of ``make_move``."""

    index: int = Field(ge=0, le=8)


def decode(raw: str) -> Envelope:
    try:
        return Envelope.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidMessage() from exc


def parse_credentials(payload: Dict[str, Any]) -> RoomCredentials:
    try:
        return RoomCredentials.model_validate(payload)
    except ValidationError as exc:
        raise MissingFields() from exc


def parse_move(payload: Dict[str, Any]) -> int:
    try:
        return MovePayload.model_validate(payload).index
    except ValidationError as exc:
        raise OutOfRange() from exc


def encode(message_type: str, payload: Dict[str, Any]) -> str:
    return json.dumps({"type": message_type, "payload": payload})


# ---- outbound frames ----


def room_entered(message_type: str, room: Room, conn_id: str) -> str:
    """``room_created`` / ``room_joined`` for the participant ``conn_id``."""
    return encode(
        message_type,
        {
            "code": room.code,
            "symbol": room.participants[conn_id].mark,
            "board": list(room.board),
            "turn": room.turn,
            "players": room.players(),
        },
    )


def player_joined(room: Room, username: str) -> str:
    return encode("player_joined", {"username": username, "players": room.players()})


def player_left(room: Room, username: str, reason: str) -> str:
    return encode(
        "player_left",
        {
            "username": username,
            "players": room.players(),
            "board": list(room.board),
            "turn": room.turn,
            "reason": reason,
        },
    )


def game_state(room: Room) -> str:
    return encode("game_state", room.state())


def error(message: str) -> str:
    return encode("error", {"message": message})
