"""Tests for the python-chess rules oracle."""

import pytest

from openchessnotation.core.interfaces import RulesOracle
from openchessnotation.rules.oracle import ChessOracle, MovetextLoadError


class TestApply:
    """Tests for single move application."""

    def test_satisfies_protocol(self, oracle):
        assert isinstance(oracle, RulesOracle)

    def test_starting_position_moves(self, oracle):
        moves = oracle.legal_moves()
        assert len(moves) == 20
        assert "e4" in moves
        assert "Nf3" in moves

    def test_legal_move(self, oracle):
        assert oracle.apply("e4") == "e4"
        assert oracle.history() == ["e4"]

    def test_illegal_move_leaves_state(self, oracle):
        fen = oracle.fen
        assert oracle.apply("e5") is None
        assert oracle.apply("Ke2") is None
        assert oracle.apply("garbage") is None
        assert oracle.apply("") is None
        assert oracle.fen == fen
        assert oracle.history() == []

    def test_null_move_rejected(self, oracle):
        assert oracle.apply("--") is None
        assert oracle.history() == []

    def test_canonical_san(self, oracle):
        # Over-disambiguated input is accepted and reported canonically
        assert oracle.apply("Ngf3") == "Nf3"

    def test_check_and_mate_suffixes(self, oracle):
        for san in ["f3", "e5", "g4"]:
            oracle.apply(san)
        assert oracle.apply("Qh4") == "Qh4#"

    def test_ambiguous_move_rejected(self):
        oracle = ChessOracle("6k1/8/8/8/8/8/8/R4RK1 w - - 0 1")
        assert oracle.apply("Rd1") is None
        assert oracle.apply("Rad1") == "Rad1"


class TestCopy:
    """Tests for disposable copies."""

    def test_copy_is_independent(self, oracle):
        oracle.apply("e4")
        trial = oracle.copy()
        assert trial.apply("e5") == "e5"

        assert oracle.history() == ["e4"]
        assert trial.history() == ["e4", "e5"]
        assert oracle.apply("c5") == "c5"


class TestFen:
    """Tests for custom starting positions."""

    def test_custom_start(self):
        oracle = ChessOracle("k7/8/8/2P5/3B4/8/8/K7 w - - 0 1")
        assert "Bf6" in oracle.legal_moves()

    def test_load_from_custom_start(self):
        oracle = ChessOracle("k7/8/8/2P5/3B4/8/8/K7 w - - 0 1")
        assert oracle.load_movetext("1. Bf6 Kb7") == ["Bf6", "Kb7"]

    def test_copy_keeps_custom_start(self):
        oracle = ChessOracle("k7/8/8/2P5/3B4/8/8/K7 w - - 0 1")
        assert oracle.copy().load_movetext("1. Be5") == ["Be5"]

    def test_invalid_fen(self):
        with pytest.raises(ValueError):
            ChessOracle("not a fen")


class TestLoadMovetext:
    """Tests for whole move-text loading."""

    def test_loads_numbered_movetext(self, oracle):
        assert oracle.load_movetext("1. e4 e5 2. Nf3 Nc6") == ["e4", "e5", "Nf3", "Nc6"]
        assert oracle.history() == ["e4", "e5", "Nf3", "Nc6"]

    def test_replaces_previous_state(self, oracle):
        oracle.apply("d4")
        oracle.load_movetext("1. e4")
        assert oracle.history() == ["e4"]

    def test_headers_and_comments(self, oracle):
        text = '[White "A"]\n[Black "B"]\n\n1. e4 {good} e5 (1... c5) 2. Nf3 *'
        assert oracle.load_movetext(text) == ["e4", "e5", "Nf3"]

    def test_illegal_move_raises(self, oracle):
        with pytest.raises(MovetextLoadError):
            oracle.load_movetext("1. e4 e4")
        assert oracle.history() == []

    def test_empty_raises(self, oracle):
        with pytest.raises(MovetextLoadError):
            oracle.load_movetext("")

    def test_null_move_raises(self, oracle):
        with pytest.raises(MovetextLoadError) as excinfo:
            oracle.load_movetext("1. e4 Z0 2. d4 d5")
        assert excinfo.value.token == "--"
        assert oracle.history() == []

    def test_error_carries_message(self, oracle):
        with pytest.raises(MovetextLoadError) as excinfo:
            oracle.load_movetext("1. e4 e4")
        assert excinfo.value.message
