"""Move geometry: reachability, decomposition into start/middle/end, relocation.

Everything here is pure coordinate arithmetic; no position is consulted
except by :func:`make_move`, which works on anything exposing ``relocate``
and ``data`` (both :class:`ClassicalPosition` and :class:`QuantumPosition`).
"""

from __future__ import annotations

from typing import Protocol

from qchess.core.enums import Declaration, PieceKind, Side
from qchess.core.errors import InvalidMoveError
from qchess.core.move import CastleMove, EnPassantMove, Move, PawnDoubleMove, StandardMove
from qchess.core.position import GameData, landing_coord
from qchess.core.types import Coord, forward, home_rank


class _Placed(Protocol):
    coord: Coord


class _Board(Protocol):
    data: GameData | None

    def relocate(self, start: Coord, end: Coord) -> None: ...


# ── Reachability ────────────────────────────────────────────────────────────


def is_in_range(start: Coord, end: Coord, kind: PieceKind, side: Side = Side.WHITE) -> bool:
    """Whether a *kind* piece of *side* can geometrically reach *end* from *start*.

    Pawns may step one square forward or diagonally forward; the null move is
    never in range.
    """
    if start == end:
        return False
    dx = end.x - start.x
    dy = end.y - start.y
    squared = dx * dx + dy * dy
    if kind == PieceKind.PAWN:
        return squared <= 2 and dy * forward(side) > 0
    if kind == PieceKind.KNIGHT:
        return squared == 5
    if kind == PieceKind.BISHOP:
        return abs(dx) == abs(dy)
    if kind == PieceKind.ROOK:
        return dx == 0 or dy == 0
    if kind == PieceKind.QUEEN:
        return abs(dx) == abs(dy) or dx == 0 or dy == 0
    return squared <= 2


# ── Decomposition ───────────────────────────────────────────────────────────


def _standard_middle(start: Coord, end: Coord) -> list[Coord]:
    dx = end.x - start.x
    dy = end.y - start.y
    if start == end:
        raise InvalidMoveError(f"Null move on {start}")
    if dx == 0 or dy == 0 or abs(dx) == abs(dy):
        step_x = (dx > 0) - (dx < 0)
        step_y = (dy > 0) - (dy < 0)
        steps = max(abs(dx), abs(dy))
        squares = [start.translate(step_x * i, step_y * i) for i in range(1, steps)]
        return sorted(squares, key=lambda c: (c.x, c.y))
    # Knight-shaped jumps get two artificial squares along the long axis.
    if abs(dx) == 2 and abs(dy) == 1:
        return [start.translate(dx // 2, 0), start.translate(dx, 0)]
    if abs(dx) == 1 and abs(dy) == 2:
        return [start.translate(0, dy // 2), start.translate(0, dy)]
    raise InvalidMoveError(f"Unrecognised displacement {start}->{end}")


def start_middle_end(move: Move) -> tuple[Coord, list[Coord], Coord]:
    """Decompose *move* into its origin, intermediate squares and destination.

    Raises :class:`InvalidMoveError` for a null move or a displacement that is
    neither straight, diagonal nor knight-shaped.
    """
    if isinstance(move, StandardMove):
        middle = _standard_middle(move.start, move.end)
        return move.start.without_promotion(), middle, move.end.without_promotion()
    if isinstance(move, CastleMove):
        rank = home_rank(move.side)
        files: list[int] = []
        x = 5
        while 1 < x < 8:
            files.append(x)
            x += move.direction
        squares = [Coord(f, rank) for f in files]
        return squares[0], squares[1:], squares[2]
    if isinstance(move, EnPassantMove):
        return (
            move.attacking_pawn.without_promotion(),
            [],
            move.capture_square.without_promotion(),
        )
    pawn = move.pushed_pawn.without_promotion()
    white = pawn.y == 2
    return pawn, [Coord(pawn.x, 3 if white else 6)], Coord(pawn.x, 4 if white else 5)


def move_start(move: Move) -> Coord:
    """Origin square; unlike :func:`start_middle_end` this never raises."""
    if isinstance(move, StandardMove):
        return move.start.without_promotion()
    if isinstance(move, CastleMove):
        return Coord(5, home_rank(move.side))
    if isinstance(move, EnPassantMove):
        return move.attacking_pawn.without_promotion()
    return move.pushed_pawn.without_promotion()


def move_end(move: Move) -> Coord:
    """Destination square of the moving piece; never raises."""
    if isinstance(move, StandardMove):
        return move.end.without_promotion()
    if isinstance(move, CastleMove):
        return Coord(5 + 2 * move.direction, home_rank(move.side))
    if isinstance(move, EnPassantMove):
        return move.capture_square.without_promotion()
    return start_middle_end(move)[2]


def captured_square(move: Move) -> Coord:
    """Square whose occupant is taken; en passant takes the pawn behind the target."""
    if isinstance(move, EnPassantMove):
        target = move.capture_square
        return Coord(target.x, target.y + (1 if target.y == 3 else -1))
    return move_end(move)


def required_declarations(move: Move, kind: PieceKind) -> Declaration:
    """Flags a move by *kind* must always carry.

    Pawns declare whether they capture (diagonal) or not (straight); every
    piece except the knight declares that it does not leap.
    """
    required = Declaration.NONE
    if kind == PieceKind.PAWN:
        straight = move_start(move).x == move_end(move).x
        required |= Declaration.NO_CAPTURE if straight else Declaration.CAPTURE_ONLY
    if kind != PieceKind.KNIGHT:
        required |= Declaration.NON_LEAPING
    return required


# ── Relocation ──────────────────────────────────────────────────────────────


def relocations(move: Move) -> list[tuple[Coord, Coord]]:
    """``(from, to)`` pairs applied by *move*, the moving piece first."""
    if isinstance(move, StandardMove):
        return [(move.start.without_promotion(), move.end)]
    if isinstance(move, CastleMove):
        rank = home_rank(move.side)
        rook_from = 8 if move.direction == 1 else 1
        rook_to = 6 if move.direction == 1 else 4
        return [
            (Coord(5, rank), Coord(5 + 2 * move.direction, rank)),
            (Coord(rook_from, rank), Coord(rook_to, rank)),
        ]
    if isinstance(move, EnPassantMove):
        return [(move.attacking_pawn.without_promotion(), move.capture_square)]
    start, _, end = start_middle_end(move)
    return [(start, end)]


def make_move(move: Move, board: _Board, mover: _Placed | None = None) -> None:
    """Apply *move*'s coordinate changes to *board* in place.

    When *mover* is given it is moved instead of whatever stands on the
    move's origin.  A pawn double move records the square it skipped as the
    en passant target.
    """
    steps = relocations(move)
    if isinstance(move, PawnDoubleMove) and board.data is not None:
        board.data.en_passant = start_middle_end(move)[1][0]
    for index, (start, end) in enumerate(steps):
        if index == 0 and mover is not None:
            mover.coord = landing_coord(mover.coord, end)
        else:
            board.relocate(start, end)
