"""Tests for GameState."""

import math

import pytest

from qchess.core.enums import Declaration, Outcome, Side
from qchess.core.errors import InvalidValueError
from qchess.core.move import DeclaredMove, Play, StandardMove
from qchess.core.notation import STARTING_POSITION, UNLIMITED_STARTING_POSITION
from qchess.core.position import QuantumPosition
from qchess.core.random_source import BitSource
from qchess.core.types import parse_square as sq
from qchess.game.interfaces import GamePhase
from qchess.game.settings import GameSettings
from qchess.game.state import GameState

KING_HUNT = (
    "turn: white, castling: wl false wr false bl false br false, "
    "enpassant: false, qubits: w 0 b 0"
    "|kingW: (e1,1/1)|queenW: (d1,1/1)|kingB: (d8,1/1)"
)


def _knight_play(gs: GameState) -> Play:
    found = gs.position.locate(sq("b1"))
    assert found is not None
    return Play(found[0], (DeclaredMove(StandardMove(sq("b1"), sq("c3"))),))


class TestGameStateSetup:
    def test_before_setup(self) -> None:
        gs = GameState()
        assert gs.phase == GamePhase.NOT_STARTED
        assert gs.side_to_move == Side.WHITE
        assert not gs.position.objects

    def test_setup_default(self) -> None:
        gs = GameState()
        gs.setup()
        assert gs.phase == GamePhase.AWAITING_PLAY
        assert gs.start_position == STARTING_POSITION
        assert len(gs.position.objects) == 32
        assert gs.winner is None

    def test_setup_unlimited_qubits(self) -> None:
        gs = GameState(settings=GameSettings(unlimited_qubits=True))
        gs.setup()
        assert gs.start_position == UNLIMITED_STARTING_POSITION

    def test_setup_from_string(self) -> None:
        gs = GameState()
        gs.setup(KING_HUNT)
        assert gs.start_position == KING_HUNT
        assert len(gs.position.objects) == 3

    def test_setup_rejects_invalid_string(self) -> None:
        with pytest.raises(InvalidValueError):
            GameState().setup("turn: white|kingW: (e1,1/1)")

    def test_setup_from_objects(self) -> None:
        start = QuantumPosition.initial(unlimited_qubits=True)
        gs = GameState()
        gs.setup(start)
        assert gs.start_position == UNLIMITED_STARTING_POSITION
        assert gs.position is not start
        assert gs.position.data.white_qubits == math.inf

    def test_setup_rejects_invalid_objects(self) -> None:
        start = QuantumPosition.initial()
        start.data.black_qubits = -1
        gs = GameState()
        with pytest.raises(InvalidValueError):
            gs.setup(start)
        assert gs.phase == GamePhase.NOT_STARTED

    def test_setup_resets(self) -> None:
        gs = GameState(bits=BitSource(), refill_bits=0)
        gs.setup()
        gs.apply_play(_knight_play(gs))
        assert len(gs.history) == 1
        gs.setup()
        assert gs.history == []
        assert gs.side_to_move == Side.WHITE


class TestApplyPlay:
    def test_records_play(self) -> None:
        gs = GameState(bits=BitSource(), refill_bits=0)
        gs.setup()
        play = _knight_play(gs)
        record = gs.apply_play(play)
        assert record.side == Side.WHITE
        assert record.play == play
        assert record.outcome == Outcome.MOVE
        assert not record.game_over
        assert "(c3,1/1)" in record.position_after
        assert gs.history == [record]
        assert gs.side_to_move == Side.BLACK

    def test_refills_bits(self) -> None:
        gs = GameState(refill_bits=64)
        gs.setup()
        gs.apply_play(_knight_play(gs))
        assert gs.bits.remaining() == 64

    def test_king_capture_ends_game(self) -> None:
        gs = GameState(bits=BitSource(), refill_bits=0)
        gs.setup(KING_HUNT)
        capture = DeclaredMove(StandardMove(sq("d1"), sq("d8")), Declaration.NON_LEAPING)
        record = gs.apply_play(Play(1, (capture,)))
        assert record.game_over
        assert gs.is_game_over
        assert gs.winner == Side.WHITE
