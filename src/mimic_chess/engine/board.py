from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .move import square_coords


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

# Colors
WHITE, BLACK = "w", "b"
COLORS = (WHITE, BLACK)

# Piece kinds (lowercase FEN letters)
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = "p", "n", "b", "r", "q", "k"
PIECE_KINDS = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)
PIECE_NAMES = {
    PAWN: "pawn",
    KNIGHT: "knight",
    BISHOP: "bishop",
    ROOK: "rook",
    QUEEN: "queen",
    KING: "king",
}

# Rank index (0-based) a pawn promotes on, per color
PROMOTION_RANK = {WHITE: 7, BLACK: 0}


def opponent(color: str) -> str:
    """Return the other color."""
    if color == WHITE:
        return BLACK
    if color == BLACK:
        return WHITE
    raise ValueError(f"invalid color: {color!r}")


@dataclass(frozen=True)
class Piece:
    kind: str  # one of PIECE_KINDS
    color: str  # 'w' or 'b'

    @property
    def symbol(self) -> str:
        """FEN symbol: uppercase for white, lowercase for black."""
        return self.kind.upper() if self.color == WHITE else self.kind

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        if ch.lower() not in PIECE_KINDS:
            raise ValueError(f"invalid piece in FEN: {ch!r}")
        return cls(kind=ch.lower(), color=WHITE if ch.isupper() else BLACK)


@dataclass(frozen=True)
class Board:
    """Immutable 8x8 board with FEN placement I/O.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - Every square maps to a ``Piece`` or ``None``; relocation helpers return
      a new board and keep this one unchanged.
    """

    squares: Tuple[Optional[Piece], ...]

    def __post_init__(self) -> None:
        if len(self.squares) != 64:
            raise ValueError("board must have 64 squares")

    @classmethod
    def empty(cls) -> "Board":
        return cls(squares=(None,) * 64)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board with the standard chess starting layout."""
        return cls.from_fen(STARTPOS_PLACEMENT)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Args:
            fen (str): Either a bare placement such as
                ``"4k3/8/8/8/8/8/8/4K3"`` or a full FEN; only the first field
                is read.

        Returns:
            Board: Board holding the encoded pieces.

        Raises:
            ValueError: If ``fen`` is empty, does not describe 8 ranks of 8
                squares, or contains an invalid piece letter.
        """
        if not fen or not isinstance(fen, str) or not fen.strip():
            raise ValueError("FEN must be a non-empty string")
        placement = fen.strip().split()[0]

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        squares: List[Optional[Piece]] = [None] * 64
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    if file_idx >= 8:
                        raise ValueError("too many squares in FEN rank")
                    squares[rank_idx * 8 + file_idx] = Piece.from_symbol(ch)
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")
        return cls(squares=tuple(squares))

    def to_fen(self) -> str:
        """Serialize the piece placement into its FEN field."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for file_idx in range(8):
                piece = self.squares[rank_idx * 8 + file_idx]
                if piece is None:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(piece.symbol)
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        return "/".join(ranks_str)

    def piece_at(self, sq: int) -> Optional[Piece]:
        square_coords(sq)  # range check
        return self.squares[sq]

    def pieces(self) -> Iterator[Tuple[int, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, a1 first."""
        for sq, piece in enumerate(self.squares):
            if piece is not None:
                yield sq, piece

    def piece_count(self) -> int:
        return sum(1 for p in self.squares if p is not None)

    def relocate(self, from_sq: int, to_sq: int, placed: Piece) -> "Board":
        """Return a new board with ``from_sq`` cleared and ``placed`` on ``to_sq``.

        Whatever stood on ``to_sq`` is replaced (captured).
        """
        square_coords(from_sq)
        square_coords(to_sq)
        squares = list(self.squares)
        squares[from_sq] = None
        squares[to_sq] = placed
        return Board(squares=tuple(squares))
