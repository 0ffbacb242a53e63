"""Authoritative state of one match and the participants seated in it."""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import BadPassword, NotInRoom, NotYourTurn, OutOfRange, RoomFull
from .game import DRAW, MARKS, X, Board, Mark, empty_board, is_full, next_turn, winner

MAX_PARTICIPANTS = 2


class RoomStatus(str, Enum):
    OPEN = "open"
    ACTIVE = "active"
    FINISHED = "finished"
    CLOSING = "closing"


@dataclass
class Participant:
    """A connected client seated in a room with a fixed mark."""

    username: str
    mark: Mark
    channel: Any = field(default=None, repr=False)


@dataclass
class Room:
    """One tic-tac-toe match keyed by its room code.

    The methods here are synchronous state transitions; callers hold
    ``lock`` around them (and around the broadcast that follows) so two
    requests for the same room never interleave.
    """

    code: str
    password: str = field(repr=False)
    board: Board = field(default_factory=empty_board)
    # None once the match has an outcome
    turn: Optional[Mark] = X
    # None, a mark, or DRAW
    winner: Optional[str] = None
    participants: Dict[str, Participant] = field(default_factory=dict)
    closed: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def status(self) -> RoomStatus:
        if self.closed:
            return RoomStatus.CLOSING
        if self.winner is not None:
            return RoomStatus.FINISHED
        if len(self.participants) < MAX_PARTICIPANTS:
            return RoomStatus.OPEN
        return RoomStatus.ACTIVE

    # ---- participants ----

    def check_password(self, password: str) -> None:
        if not secrets.compare_digest(
            password.encode("utf-8"), self.password.encode("utf-8")
        ):
            raise BadPassword()

    def add_participant(self, conn_id: str, username: str, channel: Any) -> Participant:
        if len(self.participants) >= MAX_PARTICIPANTS:
            raise RoomFull()
        taken = {p.mark for p in self.participants.values()}
        mark = next(m for m in MARKS if m not in taken)
        participant = Participant(username=username, mark=mark, channel=channel)
        self.participants[conn_id] = participant
        return participant

    def remove_participant(self, conn_id: str) -> Optional[Participant]:
        """Unseat ``conn_id``; whoever remains starts over on a fresh board."""
        participant = self.participants.pop(conn_id, None)
        if participant is not None and self.participants:
            self.reset()
        return participant

    def players(self) -> List[Dict[str, str]]:
        return [
            {"username": p.username, "symbol": p.mark}
            for p in self.participants.values()
        ]

    # ---- match ----

    def apply_move(self, conn_id: str, index: int) -> bool:
        """Place the participant's mark on ``index``.

        Returns ``False`` without touching state when the match is already
        decided or the cell is taken: late clicks that lost a race are
        expected and ignored. Raises for requests that are wrong on their
        own (not seated, bad index, out of turn).
        """
        participant = self.participants.get(conn_id)
        if participant is None:
            raise NotInRoom()
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 8:
            raise OutOfRange()
        if self.winner is not None:
            return False
        if self.board[index] is not None:
            return False
        if participant.mark != self.turn:
            raise NotYourTurn()

        self.board[index] = participant.mark
        won = winner(self.board)
        if won is not None:
            self.winner = won
            self.turn = None
        elif is_full(self.board):
            self.winner = DRAW
            self.turn = None
        else:
            self.turn = next_turn(participant.mark)
        return True

    def reset(self) -> None:
        self.board = empty_board()
        self.turn = X
        self.winner = None

    def state(self) -> Dict[str, object]:
        return {"board": list(self.board), "turn": self.turn, "winner": self.winner}
