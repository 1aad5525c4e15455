"""Textual encoding of a quantum position.

Layout::

    turn: white, castling: wl true wr true bl true br true, enpassant: false, qubits: w 0 b 0|pawnW: (e2,1/2), (e4,1/2), <0-1>, <1-0>|...

The metadata segment is followed by one ``|``-separated segment per object:
its token, then every unit ``(<square>,<n>/<d>[,<promotion>])`` and after
them every entanglement link ``<i-j>`` in unit order.
"""

from __future__ import annotations

import math
import re

from qchess.core.arithmetic import ONE, ZERO, make_fraction, serialize_fraction
from qchess.core.enums import CastlingRights, PieceKind, Side
from qchess.core.errors import InvalidValueError, QuantumChessError
from qchess.core.piece import ColoredPiece, parse_piece_kind
from qchess.core.position import GameData, QuantumObject, QuantumPosition, Unit
from qchess.core.types import forward, parse_square

_META_RE = re.compile(
    r"turn: (white|black), "
    r"castling: wl (true|false) wr (true|false) bl (true|false) br (true|false), "
    r"enpassant: (false|[a-h][1-8]), "
    r"qubits: w (\S+) b (\S+)"
)
_UNIT_RE = re.compile(r"\(([a-h][1-8]),(-?\d+)/(-?\d+)(?:,([a-z]+))?\)")
_LINK_RE = re.compile(r"<(\d+)-(\d+)>")

# Metadata order: white left, white right, black left, black right.
_CASTLE_ORDER = (
    CastlingRights.WHITE_QUEENSIDE,
    CastlingRights.WHITE_KINGSIDE,
    CastlingRights.BLACK_QUEENSIDE,
    CastlingRights.BLACK_KINGSIDE,
)


# ── Encoding ────────────────────────────────────────────────────────────────


def _format_qubits(amount: float) -> str:
    if math.isinf(amount):
        return "Infinity" if amount > 0 else "-Infinity"
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def _format_bool(flag: bool) -> str:
    return "true" if flag else "false"


def encode_data(data: GameData) -> str:
    """Metadata segment for *data*."""
    flags = [_format_bool(bool(data.castling & right)) for right in _CASTLE_ORDER]
    ep = "false" if data.en_passant is None else data.en_passant.name
    return (
        f"turn: {data.whose_turn}, "
        f"castling: wl {flags[0]} wr {flags[1]} bl {flags[2]} br {flags[3]}, "
        f"enpassant: {ep}, "
        f"qubits: w {_format_qubits(data.white_qubits)} b {_format_qubits(data.black_qubits)}"
    )


def _encode_object(obj: QuantumObject) -> str:
    entries: list[str] = []
    for unit in obj.units:
        text = f"({unit.coord.name},{serialize_fraction(unit.probability)}"
        if unit.coord.promotion is not None:
            text += f",{unit.coord.promotion}"
        entries.append(text + ")")
    for index, unit in enumerate(obj.units):
        entries.extend(f"<{index}-{target}>" for target in unit.entangled_to)
    body = ", ".join(entries)
    return f"{obj.piece.token}:" + (f" {body}" if body else "")


def encode_position(position: QuantumPosition) -> str:
    """Serialise *position*; :func:`decode_position` is its inverse."""
    segments = [encode_data(position.data)]
    segments.extend(_encode_object(obj) for obj in position.objects)
    return "|".join(segments)


# ── Decoding ────────────────────────────────────────────────────────────────


def decode_data(text: str) -> GameData:
    match = _META_RE.fullmatch(text)
    if match is None:
        raise InvalidValueError(f"Invalid metadata segment: {text!r}")
    turn, wl, wr, bl, br, ep, white, black = match.groups()
    castling = CastlingRights.NONE
    for right, flag in zip(_CASTLE_ORDER, (wl, wr, bl, br)):
        if flag == "true":
            castling |= right
    try:
        balances = float(white), float(black)
    except ValueError:
        raise InvalidValueError(f"Invalid qubit balances: {white!r}, {black!r}") from None
    return GameData(
        whose_turn=Side.WHITE if turn == "white" else Side.BLACK,
        castling=castling,
        en_passant=None if ep == "false" else parse_square(ep),
        white_qubits=balances[0],
        black_qubits=balances[1],
    )


def _decode_object(text: str) -> QuantumObject:
    token, sep, body = text.partition(":")
    if not sep:
        raise InvalidValueError(f"Invalid object segment: {text!r}")
    obj = QuantumObject(ColoredPiece.from_token(token))
    body = body.strip()
    if not body:
        return obj
    for entry in body.split(", "):
        unit_match = _UNIT_RE.fullmatch(entry)
        if unit_match is not None:
            square, numerator, denominator, promotion = unit_match.groups()
            coord = parse_square(square)
            if promotion is not None:
                coord = coord.with_promotion(parse_piece_kind(promotion))
            probability = make_fraction(int(numerator), int(denominator))
            obj.units.append(Unit(coord, probability))
            continue
        link_match = _LINK_RE.fullmatch(entry)
        if link_match is None:
            raise InvalidValueError(f"Invalid object entry: {entry!r}")
        source, target = (int(group) for group in link_match.groups())
        if source >= len(obj.units) or target >= len(obj.units):
            raise InvalidValueError(f"Entanglement refers to a missing unit: {entry!r}")
        obj.units[source].entangled_to.append(target)
    return obj


def decode_position(text: str) -> QuantumPosition:
    """Parse the encoding produced by :func:`encode_position`."""
    meta, *objects = text.split("|")
    return QuantumPosition([_decode_object(part) for part in objects], decode_data(meta))


# ── Validation ──────────────────────────────────────────────────────────────


def validate_structure(position: QuantumPosition) -> bool:
    """Whether *position* is a legal game state to start from.

    Checks square uniqueness and entanglement references, balances,
    probabilities, promotion tags, the en passant target and castling flags.
    """
    try:
        position.validate()
    except QuantumChessError:
        return False
    data = position.data
    if not all(balance >= 0 for balance in (data.white_qubits, data.black_qubits)):
        return False

    for obj in position.objects:
        if obj.total_probability() > ONE:
            return False
        for unit in obj.units:
            if unit.probability <= ZERO:
                return False
            promotion = unit.coord.promotion
            if obj.piece.kind == PieceKind.PAWN:
                if unit.coord.y in (1, 8) and promotion is None:
                    return False
            elif promotion is not None:
                return False

    ep = data.en_passant
    if ep is not None:
        if ep.y not in (3, 6):
            return False
        step = forward(data.whose_turn)
        if not any(
            obj.piece.kind == PieceKind.PAWN
            and obj.side == data.whose_turn.opposite
            and any(
                unit.coord.promotion is None
                and unit.coord.x == ep.x
                and unit.coord.y + step == ep.y
                for unit in obj.units
            )
            for obj in position.objects
        ):
            return False

    return (data.castling & position.castle_values()) == data.castling


def is_valid_position_string(text: str) -> bool:
    """Decodes, passes :func:`validate_structure` and re-encodes identically."""
    try:
        position = decode_position(text)
        return validate_structure(position) and encode_position(position) == text
    except QuantumChessError:
        return False


def are_valid_starting_objects(position: QuantumPosition) -> bool:
    try:
        return is_valid_position_string(encode_position(position))
    except QuantumChessError:
        return False


def position_from_string(text: str) -> QuantumPosition:
    """Decode *text*, raising :class:`InvalidValueError` unless it is valid."""
    if not is_valid_position_string(text):
        raise InvalidValueError(f"Invalid position string: {text!r}")
    return decode_position(text)


STARTING_POSITION = encode_position(QuantumPosition.initial())
UNLIMITED_STARTING_POSITION = encode_position(QuantumPosition.initial(unlimited_qubits=True))
