"""Core tic-tac-toe rules: line detection, full-board check and turn order."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

Mark = str  # "X" or "O"
Board = List[Optional[Mark]]

X: Mark = "X"
O: Mark = "O"
MARKS: Tuple[Mark, ...] = (X, O)
DRAW = "draw"

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def empty_board() -> Board:
    return [None] * 9


def winner(board: Sequence[Optional[Mark]]) -> Optional[Mark]:
    """Return the mark owning a complete line, or ``None``.

    Lines are scanned rows first, then columns, then diagonals. A legal game
    can complete at most one owner's lines, so the order only decides which
    line is found first.
    """
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v is not None and v == board[b] == board[c]:
            return v
    return None


def is_full(board: Sequence[Optional[Mark]]) -> bool:
    return all(c is not None for c in board)


def next_turn(mark: Mark) -> Mark:
    return O if mark == X else X
