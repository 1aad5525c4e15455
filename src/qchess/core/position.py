"""Quantum position model (objects, units, entanglement) and classical boards.

A :class:`QuantumPosition` owns a list of :class:`QuantumObject` values.  Each
object is one physical piece spread over several :class:`Unit` placements;
entanglement links are stored as indices into the owning object's unit list,
so every removal goes through :meth:`QuantumObject.remove_units`, which
remaps the surviving links.

A :class:`ClassicalPosition` is an ordinary one-square-per-piece board used
for legality checks.  It is produced on demand and thrown away afterwards.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from fractions import Fraction

from qchess.core.arithmetic import ONE, fraction_sum
from qchess.core.enums import CastlingRights, PieceKind, Side
from qchess.core.errors import StructuralViolationError
from qchess.core.piece import ColoredPiece
from qchess.core.types import Coord, home_rank, pawn_rank

# ── Game metadata ───────────────────────────────────────────────────────────


@dataclass(slots=True)
class GameData:
    """Side to move, castling availability, en passant target and qubit balances."""

    whose_turn: Side = Side.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Coord | None = None
    white_qubits: float = 0.0
    black_qubits: float = 0.0

    def qubits(self, side: Side | None = None) -> float:
        """Balance of *side* (defaults to the side to move)."""
        side = self.whose_turn if side is None else side
        return self.white_qubits if side == Side.WHITE else self.black_qubits

    def set_qubits(self, side: Side, amount: float) -> None:
        if side == Side.WHITE:
            self.white_qubits = amount
        else:
            self.black_qubits = amount

    def adjust_qubits(self, side: Side, delta: float) -> None:
        self.set_qubits(side, self.qubits(side) + delta)

    def can_castle(self, side: Side, direction: int) -> bool:
        return bool(self.castling & CastlingRights.for_castle(side, direction))

    def copy(self) -> GameData:
        return replace(self)


# ── Classical board ─────────────────────────────────────────────────────────


@dataclass(slots=True)
class PlacedPiece:
    """A piece standing on exactly one square."""

    piece: ColoredPiece
    coord: Coord

    @property
    def side(self) -> Side:
        return self.piece.side

    @property
    def kind(self) -> PieceKind:
        """Kind the piece moves as (a promoted pawn moves as its promotion)."""
        return self.coord.promotion or self.piece.kind


class ClassicalPosition:
    """Fully collapsed board: every listed piece is certainly present."""

    __slots__ = ("pieces", "data")

    def __init__(
        self, pieces: Iterable[PlacedPiece] = (), data: GameData | None = None
    ) -> None:
        self.pieces: list[PlacedPiece] = list(pieces)
        self.data = data

    def piece_at(self, coord: Coord) -> PlacedPiece | None:
        for placed in self.pieces:
            if placed.coord == coord:
                return placed
        return None

    def king(self, side: Side) -> PlacedPiece | None:
        """First king object of *side*, matched on its unpromoted kind."""
        for placed in self.pieces:
            if placed.piece.kind == PieceKind.KING and placed.side == side:
                return placed
        return None

    def remove_at(self, coord: Coord) -> PlacedPiece | None:
        for index, placed in enumerate(self.pieces):
            if placed.coord == coord:
                return self.pieces.pop(index)
        return None

    def relocate(self, start: Coord, end: Coord) -> None:
        """Move the piece on *start* to *end*; a missing piece is ignored."""
        placed = self.piece_at(start)
        if placed is not None:
            placed.coord = landing_coord(placed.coord, end)

    def occupied(self) -> set[Coord]:
        return {placed.coord for placed in self.pieces}

    def copy(self) -> ClassicalPosition:
        return ClassicalPosition(
            (PlacedPiece(placed.piece, placed.coord) for placed in self.pieces),
            None if self.data is None else self.data.copy(),
        )

    def __len__(self) -> int:
        return len(self.pieces)

    def __iter__(self) -> Iterator[PlacedPiece]:
        return iter(self.pieces)

    def __repr__(self) -> str:
        squares = ", ".join(f"{p.piece.token}@{p.coord}" for p in self.pieces)
        return f"ClassicalPosition([{squares}])"


def landing_coord(current: Coord, target: Coord) -> Coord:
    """Square a piece lands on; a promotion already carried is kept unless replaced."""
    return Coord(target.x, target.y, target.promotion or current.promotion)


# ── Quantum position ────────────────────────────────────────────────────────


@dataclass(slots=True)
class Unit:
    """One weighted candidate placement of an object."""

    coord: Coord
    probability: Fraction
    entangled_to: list[int] = field(default_factory=list)

    def copy(self) -> Unit:
        return Unit(self.coord, self.probability, list(self.entangled_to))


@dataclass(slots=True)
class QuantumObject:
    """A single piece tracked across all of its superposed placements.

    The unit probabilities sum to at most one; the shortfall is the chance
    that the piece has already been captured.
    """

    piece: ColoredPiece
    units: list[Unit] = field(default_factory=list)

    @property
    def side(self) -> Side:
        return self.piece.side

    def total_probability(self) -> Fraction:
        return fraction_sum(unit.probability for unit in self.units)

    def is_certain(self) -> bool:
        return self.total_probability() == ONE

    def unit_index_at(self, coord: Coord) -> int | None:
        for index, unit in enumerate(self.units):
            if unit.coord == coord:
                return index
        return None

    def kind_of(self, unit: Unit) -> PieceKind:
        return unit.coord.promotion or self.piece.kind

    def entangled_group(self, index: int) -> list[int]:
        """*index* followed by every unit index it is entangled to."""
        group = [index]
        for linked in self.units[index].entangled_to:
            if linked not in group:
                group.append(linked)
        return group

    # ── Arena maintenance ────────────────────────────────────────────────

    def remove_units(
        self, indices: Iterable[int], redirect: Mapping[int, int] | None = None
    ) -> None:
        """Delete the units at *indices* and remap every surviving link.

        A link that pointed at a removed unit is dropped, unless *redirect*
        maps that unit to a survivor, in which case the link follows it.
        """
        removed = set(indices)
        if not removed:
            return
        redirect = redirect or {}
        remap: dict[int, int] = {}
        survivors: list[Unit] = []
        for old, unit in enumerate(self.units):
            if old not in removed:
                remap[old] = len(survivors)
                survivors.append(unit)

        for new, unit in enumerate(survivors):
            links: list[int] = []
            for target in unit.entangled_to:
                target = redirect.get(target, target)
                mapped = remap.get(target)
                if mapped is not None and mapped != new and mapped not in links:
                    links.append(mapped)
            unit.entangled_to = links
        self.units = survivors

    def clean_entanglements(self) -> None:
        """Strip dangling, duplicate and self links."""
        size = len(self.units)
        for index, unit in enumerate(self.units):
            links: list[int] = []
            for target in unit.entangled_to:
                if 0 <= target < size and target != index and target not in links:
                    links.append(target)
            unit.entangled_to = links

    def merge_coincident(self) -> None:
        """Fold units standing on the same square into the first of them."""
        first_on: dict[Coord, int] = {}
        redirect: dict[int, int] = {}
        for index, unit in enumerate(self.units):
            keeper = first_on.setdefault(unit.coord, index)
            if keeper != index:
                kept = self.units[keeper]
                kept.probability = fraction_sum((kept.probability, unit.probability))
                redirect[index] = keeper
        if redirect:
            self.remove_units(redirect, redirect)
        self.clean_entanglements()

    def collapse_to(self, index: int) -> None:
        """Keep only the unit at *index*, now certain."""
        kept = self.units[index]
        kept.probability = ONE
        kept.entangled_to = []
        self.units = [kept]

    def copy(self) -> QuantumObject:
        return QuantumObject(self.piece, [unit.copy() for unit in self.units])


@dataclass(slots=True)
class QuantumPosition:
    """Top-level mutable game state: every object plus :class:`GameData`."""

    objects: list[QuantumObject] = field(default_factory=list)
    data: GameData = field(default_factory=GameData)

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_classical(cls, position: ClassicalPosition) -> QuantumPosition:
        """One certain single-unit object per classical piece."""
        objects = [
            QuantumObject(placed.piece, [Unit(placed.coord, ONE)])
            for placed in position.pieces
        ]
        data = position.data.copy() if position.data is not None else GameData()
        return cls(objects, data)

    @classmethod
    def initial(cls, unlimited_qubits: bool = False) -> QuantumPosition:
        """Standard starting position, every piece certain."""
        position = cls.from_classical(initial_classical_position())
        if unlimited_qubits:
            position.data.white_qubits = math.inf
            position.data.black_qubits = math.inf
        return position

    def copy(self) -> QuantumPosition:
        """Canonical deep copy; fractions and coords are immutable and shared."""
        return QuantumPosition([obj.copy() for obj in self.objects], self.data.copy())

    def validate(self) -> None:
        """Raise :class:`StructuralViolationError` on doubled squares or bad links."""
        seen: set[Coord] = set()
        for obj in self.objects:
            size = len(obj.units)
            for index, unit in enumerate(obj.units):
                if unit.coord in seen:
                    raise StructuralViolationError(
                        f"Multiple units on {unit.coord}"
                    )
                seen.add(unit.coord)
                for target in unit.entangled_to:
                    if not (0 <= target < size) or target == index:
                        raise StructuralViolationError(
                            f"Invalid entanglement {index}-{target} in {obj.piece.token}"
                        )

    # ── Queries ──────────────────────────────────────────────────────────

    def locate(
        self, coord: Coord, exclude_side: Side | None = None
    ) -> tuple[int, int] | None:
        """``(object_index, unit_index)`` of the first unit on *coord*."""
        for object_index, obj in enumerate(self.objects):
            if obj.side == exclude_side:
                continue
            unit_index = obj.unit_index_at(coord)
            if unit_index is not None:
                return object_index, unit_index
        return None

    def find_object(self, coord: Coord, exclude_side: Side | None = None) -> QuantumObject | None:
        found = self.locate(coord, exclude_side)
        return None if found is None else self.objects[found[0]]

    def find_unit(self, coord: Coord, exclude_side: Side | None = None) -> Unit | None:
        found = self.locate(coord, exclude_side)
        if found is None:
            return None
        object_index, unit_index = found
        return self.objects[object_index].units[unit_index]

    def side_objects(self, side: Side | None = None) -> list[QuantumObject]:
        side = self.data.whose_turn if side is None else side
        return [obj for obj in self.objects if obj.side == side]

    def king_object(self, side: Side | None = None) -> QuantumObject | None:
        for obj in self.side_objects(side):
            if obj.piece.kind == PieceKind.KING:
                return obj
        return None

    def coord_kind(self, coord: Coord) -> PieceKind | None:
        """Kind that moves from *coord*, or ``None`` for an empty square."""
        found = self.locate(coord)
        if found is None:
            return None
        obj = self.objects[found[0]]
        return obj.kind_of(obj.units[found[1]])

    def are_different_objects(self, first: Coord, second: Coord) -> bool:
        """Both squares are occupied, by units of two distinct objects."""
        one = self.locate(first)
        two = self.locate(second)
        return one is not None and two is not None and one[0] != two[0]

    def remove_object(self, obj: QuantumObject) -> None:
        for index, candidate in enumerate(self.objects):
            if candidate is obj:
                del self.objects[index]
                return

    def index_of(self, obj: QuantumObject) -> int:
        for index, candidate in enumerate(self.objects):
            if candidate is obj:
                return index
        raise ValueError(f"{obj.piece.token} is not part of this position")

    def filled_position(self) -> ClassicalPosition:
        """Every unit of every object placed at once (used for geometry lookups)."""
        return ClassicalPosition(
            (PlacedPiece(obj.piece, unit.coord) for obj in self.objects for unit in obj.units),
            self.data.copy(),
        )

    def relocate(self, start: Coord, end: Coord) -> None:
        """Move the first unit on *start* to *end*; a missing unit is ignored."""
        unit = self.find_unit(start)
        if unit is not None:
            unit.coord = landing_coord(unit.coord, end)

    def castle_values(self) -> CastlingRights:
        """Castling rights the literal king and rook placements still permit.

        A right survives only while the side's king and the matching rook are
        each on their home square with probability one.
        """
        rights = CastlingRights.NONE
        for side in Side:
            rank = home_rank(side)
            king = self.king_object(side)
            if king is None or not _stands_certainly(king, Coord(5, rank)):
                continue
            rooks = [obj for obj in self.side_objects(side) if obj.piece.kind == PieceKind.ROOK]
            for direction, corner in ((1, 8), (-1, 1)):
                if any(_stands_certainly(rook, Coord(corner, rank)) for rook in rooks):
                    rights |= CastlingRights.for_castle(side, direction)
        return rights

    def __repr__(self) -> str:
        return f"QuantumPosition(objects={len(self.objects)}, turn={self.data.whose_turn})"


def _stands_certainly(obj: QuantumObject, coord: Coord) -> bool:
    return any(unit.coord == coord and unit.probability == ONE for unit in obj.units)


# ── Starting position ───────────────────────────────────────────────────────

_BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


def initial_classical_position() -> ClassicalPosition:
    """Standard chess start: pawns then back rank, white first."""
    pieces: list[PlacedPiece] = []
    for side in Side:
        pawn = ColoredPiece(PieceKind.PAWN, side)
        pieces.extend(PlacedPiece(pawn, Coord(x, pawn_rank(side))) for x in range(1, 9))
        pieces.extend(
            PlacedPiece(ColoredPiece(kind, side), Coord(x, home_rank(side)))
            for x, kind in enumerate(_BACK_RANK, start=1)
        )
    return ClassicalPosition(pieces, GameData())
