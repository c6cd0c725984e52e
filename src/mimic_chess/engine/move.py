from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        promotion (Optional[str]): ``"q"`` when the text named a promotion
            piece. Promotion is always to a queen; the letter only has to
            match a move that actually promotes.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[str] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"``.
        """
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + (self.promotion or "")


def parse_uci(uci: str) -> Move:
    """Parse a long algebraic move string.

    A trailing ``q`` (as sent by GUIs for promotions) is kept on the move;
    any other promotion letter is rejected. Whether the move really promotes
    depends on the position and is checked by ``Game.apply_move``.

    Args:
        uci (str): Move encoded like ``"e2e4"`` or ``"e7e8q"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    if len(uci) == 5 and uci[4].lower() != "q":
        raise ValueError(f"invalid promotion piece: {uci[4]!r}")
    promotion = "q" if len(uci) == 5 else None
    return Move(from_sq, to_sq, promotion)


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if not isinstance(s, str) or len(s) != 2 or s[0] not in FILES or s[1] not in RANKS:
        raise ValueError(f"invalid square: {s!r}")
    return RANKS.index(s[1]) * 8 + FILES.index(s[0])


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    file, rank = square_coords(idx)
    return FILES[file] + RANKS[rank]


def square_coords(idx: int) -> Tuple[int, int]:
    """Return the ``(file, rank)`` pair of a square index, both in 0..7."""
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    return idx % 8, idx // 8


def coords_to_square(file: int, rank: int) -> Optional[int]:
    """Return the square index for ``(file, rank)``, or None when off board."""
    if file < 0 or file > 7 or rank < 0 or rank > 7:
        return None
    return rank * 8 + file
