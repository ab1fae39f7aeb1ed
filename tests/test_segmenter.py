"""Tests for move segmentation strategies."""

from openchessnotation.core.models import SegmentationStrategy
from openchessnotation.core.segmenter import (
    count_movetext_tokens,
    flat_stream,
    is_move_shaped,
    is_repairable_shape,
    numbered_pairs,
    segment,
    strip_pgn_metadata,
    token_stream,
)


class TestStripPgnMetadata:
    """Tests for header, comment and variation removal."""

    def test_removes_everything_but_main_line(self):
        text = '[Event "x"]\n1. e4 {best by test} e5 (1... c5 (2. Nf3)) 2. Nf3 ; rest of line'
        assert strip_pgn_metadata(text) == "1. e4 e5 2. Nf3"

    def test_nested_variations(self):
        text = "1. e4 (1. d4 d5 (1... Nf6 2. c4 (2. Nf3))) e5"
        assert strip_pgn_metadata(text) == "1. e4 e5"

    def test_empty(self):
        assert strip_pgn_metadata("") == ""


class TestMoveShape:
    """Tests for syntactic move checks."""

    def test_move_shapes(self):
        for token in ["e4", "Nf3", "exd5", "Nbd7", "R1e2", "e8=Q", "e8Q", "O-O", "O-O-O", "Qh4#"]:
            assert is_move_shaped(token), token

    def test_non_moves(self):
        for token in ["", "x", "12", "hello", "Z9", "B6"]:
            assert not is_move_shaped(token), token

    def test_skeletons_are_repairable(self):
        assert is_repairable_shape("B6")
        assert is_repairable_shape("Bf")
        assert not is_repairable_shape("zz")


class TestNumberedPairs:
    """Tests for move-number driven extraction."""

    def test_basic_pairs(self):
        assert numbered_pairs("1. e4 e5 2. Nf3 Nc6") == ["e4", "e5", "Nf3", "Nc6"]

    def test_compact_numbering(self):
        assert numbered_pairs("1.e4 e5 2.Nf3 Nc6") == ["e4", "e5", "Nf3", "Nc6"]

    def test_black_continuation(self):
        assert numbered_pairs("1. e4 1... e5 2. Nf3") == ["e4", "e5", "Nf3"]

    def test_later_number_overwrites(self):
        assert numbered_pairs("1. e4 e5 1. d4 d5") == ["d4", "d5"]

    def test_numbers_sorted(self):
        assert numbered_pairs("2. Nf3 Nc6 1. e4 e5") == ["e4", "e5", "Nf3", "Nc6"]

    def test_implausible_tokens_dropped(self):
        assert numbered_pairs("1. e4 e5 2. Nf3 zzzz 3. ?? a6") == ["e4", "e5", "Nf3"]

    def test_skeleton_tokens_kept(self):
        assert numbered_pairs("1. e4 e5 2. B6 Nc6") == ["e4", "e5", "B6", "Nc6"]


class TestTokenStream:
    """Tests for whitespace token extraction."""

    def test_drops_numbers_results_and_nags(self):
        assert token_stream("1.e4 e5 2.Nf3 $1 Nc6 3 ... *") == ["e4", "e5", "Nf3", "Nc6"]
        assert token_stream("1. e4 e5 1-0") == ["e4", "e5"]
        assert token_stream("1. e4 e5 10") == ["e4", "e5"]

    def test_keeps_malformed_tokens(self):
        assert token_stream("1. e4 e5 2. Nf3 zzzz") == ["e4", "e5", "Nf3", "zzzz"]

    def test_counts_match_stream(self):
        assert count_movetext_tokens("1. e4 {comment} e5 (1... c5) 2. Nf3") == 3


class TestFlatStream:
    """Tests for pattern-only extraction."""

    def test_ignores_numbering(self):
        assert flat_stream("1.e4 e5 2.Nf3 Nc6") == ["e4", "e5", "Nf3", "Nc6"]

    def test_finds_moves_in_noise(self):
        assert flat_stream("white: e4 ... black: e5 then Nf3+") == ["e4", "e5", "Nf3+"]


class TestSegment:
    """Tests for running every strategy."""

    def test_strategies_in_priority_order(self):
        segments = segment("1. e4 e5 2. Nf3 Nc6")
        strategies = [strategy for strategy, _ in segments]
        assert strategies == [
            SegmentationStrategy.NUMBERED_PAIRS,
            SegmentationStrategy.TOKEN_STREAM,
            SegmentationStrategy.FLAT_STREAM,
        ]

    def test_empty_strategies_left_out(self):
        segments = segment("hello world")
        assert [strategy for strategy, _ in segments] == [SegmentationStrategy.TOKEN_STREAM]
