"""Classical rules: blocking, captures, check and single-move legality."""

from __future__ import annotations

from qchess.core.enums import CastlingRights, Declaration, PieceKind, Side
from qchess.core.errors import InvalidMoveError
from qchess.core.geometry import (
    captured_square,
    is_in_range,
    make_move,
    required_declarations,
    start_middle_end,
)
from qchess.core.move import (
    CastleMove,
    DeclaredMove,
    EnPassantMove,
    Move,
    PawnDoubleMove,
    StandardMove,
)
from qchess.core.position import ClassicalPosition, GameData, PlacedPiece, QuantumPosition
from qchess.core.types import Coord, forward, pawn_rank, promotion_rank


def _turn(board: ClassicalPosition) -> Side:
    return board.data.whose_turn if board.data is not None else Side.WHITE


class Rules:
    """Static rule-checker that operates on a :class:`ClassicalPosition`."""

    # ── Blocking and captures ────────────────────────────────────────────

    @staticmethod
    def blocking_pieces(move: Move, board: ClassicalPosition) -> list[PlacedPiece]:
        middle = set(start_middle_end(move)[1])
        return [placed for placed in board.pieces if placed.coord in middle]

    @staticmethod
    def is_blocked(move: Move, board: ClassicalPosition) -> bool:
        """Whether any intermediate square of *move* is occupied."""
        occupied = board.occupied()
        return any(square in occupied for square in start_middle_end(move)[1])

    @staticmethod
    def is_endpoint_blocked(move: Move, board: ClassicalPosition) -> bool:
        """Whether the destination holds a piece of the mover's own side."""
        start, _, end = start_middle_end(move)
        mover = board.piece_at(start)
        occupant = board.piece_at(end)
        return mover is not None and occupant is not None and mover.side == occupant.side

    @staticmethod
    def is_capture(move: Move, board: ClassicalPosition) -> bool:
        mover = board.piece_at(start_middle_end(move)[0])
        victim = board.piece_at(captured_square(move))
        return mover is not None and victim is not None and victim.side != mover.side

    # ── Check detection ──────────────────────────────────────────────────

    @staticmethod
    def leap_checking_pieces(
        board: ClassicalPosition,
        side: Side | None = None,
        king_coord: Coord | None = None,
    ) -> list[PlacedPiece]:
        """Enemy pieces whose geometry reaches *side*'s king, ignoring blockers.

        A pawn on the king's file is skipped: it can only push, never take.
        """
        side = _turn(board) if side is None else side
        if king_coord is None:
            king = board.king(side)
            if king is None:
                return []
            king_coord = king.coord
        return [
            placed
            for placed in board.pieces
            if placed.side != side
            and is_in_range(placed.coord, king_coord, placed.kind, placed.side)
            and not (placed.kind == PieceKind.PAWN and placed.coord.x == king_coord.x)
        ]

    @staticmethod
    def checking_pieces(
        board: ClassicalPosition,
        side: Side | None = None,
        king_coord: Coord | None = None,
    ) -> list[PlacedPiece]:
        side = _turn(board) if side is None else side
        if king_coord is None:
            king = board.king(side)
            if king is None:
                return []
            king_coord = king.coord
        return [
            placed
            for placed in Rules.leap_checking_pieces(board, side, king_coord)
            if placed.kind == PieceKind.KNIGHT
            or not Rules.is_blocked(StandardMove(placed.coord, king_coord), board)
        ]

    @staticmethod
    def is_in_check(
        board: ClassicalPosition,
        side: Side | None = None,
        king_coord: Coord | None = None,
    ) -> bool:
        return bool(Rules.checking_pieces(board, side, king_coord))

    # ── Move application ─────────────────────────────────────────────────

    @staticmethod
    def castle_values(board: ClassicalPosition) -> CastlingRights:
        """Castling rights still permitted by the literal king/rook squares."""
        return QuantumPosition.from_classical(board).castle_values()

    @staticmethod
    def result_of_move(
        move: Move, board: ClassicalPosition, copy: bool = True
    ) -> ClassicalPosition:
        """Board after *move*: capture removed, pieces moved, turn flipped.

        Castling rights only ever shrink to what the new king and rook
        placement still allows.
        """
        result = board.copy() if copy else board
        result.remove_at(captured_square(move))
        if result.data is not None:
            result.data.en_passant = None
        make_move(move, result)
        if result.data is not None:
            result.data.whose_turn = result.data.whose_turn.opposite
            result.data.castling &= Rules.castle_values(result)
        return result

    # ── Legality ─────────────────────────────────────────────────────────

    @staticmethod
    def is_move_legal(
        declared: DeclaredMove,
        board: ClassicalPosition,
        win_by_checkmate: bool = False,
        data: GameData | None = None,
    ) -> bool:
        """Whether *declared* is legal on the classical *board*.

        An undecomposable move (null move, impossible displacement) is
        illegal rather than an error.
        """
        move = declared.move
        try:
            start, _, _ = start_middle_end(move)
        except InvalidMoveError:
            return False
        if data is None:
            data = board.data if board.data is not None else GameData()
        turn = data.whose_turn

        mover = board.piece_at(start)
        if mover is None:
            return False
        if isinstance(move, StandardMove):
            if not is_in_range(move.start, move.end, mover.kind, mover.side):
                return False
            if move.promotion is not None and not (
                move.end.y == promotion_rank(turn) and mover.kind == PieceKind.PAWN
            ):
                return False
        elif isinstance(move, EnPassantMove):
            if move.capture_square.y not in (3, 6):
                return False

        scratch = board.copy()
        scratch.data = data.copy()
        after = Rules.result_of_move(move, scratch, copy=False)

        flags = declared.declarations
        if int(flags) & ~int(Declaration.ALL):
            return False
        required = required_declarations(move, mover.kind)
        if (flags & required) != required:
            return False
        if mover.side != turn or Rules.is_endpoint_blocked(move, board):
            return False
        if win_by_checkmate and Rules.is_in_check(after, turn):
            return False
        if Declaration.NON_LEAPING in flags and Rules.is_blocked(move, board):
            return False
        capture = Rules.is_capture(move, board)
        if Declaration.NO_CAPTURE in flags and capture:
            return False
        if Declaration.CAPTURE_ONLY in flags and not capture:
            return False
        if Declaration.NO_CHECK in flags and Rules.is_in_check(after, turn.opposite):
            return False
        if Declaration.CHECK_ONLY in flags and not Rules.is_in_check(after, turn.opposite):
            return False

        if isinstance(move, CastleMove):
            return Rules._is_castle_allowed(move, board, mover, data, win_by_checkmate)
        if isinstance(move, EnPassantMove):
            target = move.capture_square
            return (
                mover.kind == PieceKind.PAWN
                and data.en_passant is not None
                and target == data.en_passant
                and abs(target.x - mover.coord.x) == 1
                and target.y == mover.coord.y + forward(turn)
            )
        if isinstance(move, PawnDoubleMove):
            return mover.kind == PieceKind.PAWN and mover.coord.y == pawn_rank(turn)
        return True

    @staticmethod
    def _is_castle_allowed(
        move: CastleMove,
        board: ClassicalPosition,
        king: PlacedPiece,
        data: GameData,
        win_by_checkmate: bool,
    ) -> bool:
        if data.whose_turn != move.side or not data.can_castle(move.side, move.direction):
            return False
        if not win_by_checkmate:
            return True
        if Rules.is_in_check(board, data.whose_turn):
            return False
        # The king may not pass through an attacked square either.
        passing = board.copy()
        passing.relocate(king.coord, king.coord.translate(move.direction, 0))
        return not Rules.is_in_check(passing, data.whose_turn)
