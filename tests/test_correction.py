"""Tests for OCR error correction strategies."""

from dataclasses import replace

from openchessnotation.config import RecoveryConfig, SubstitutionRule
from openchessnotation.core.correction import CorrectionEngine
from openchessnotation.core.models import SourceTag
from openchessnotation.rules.oracle import ChessOracle


# White bishop d4 blocked towards b6 by its own pawn on c5
BISHOP_FEN = "k7/8/8/2P5/3B4/8/8/K7 w - - 0 1"
# Bishop d4 with f2 also blocked: Bf6 is the only bishop move on the f-file
BISHOP_F_FILE_FEN = "k7/8/8/2P5/3B4/8/5P2/K7 w - - 0 1"
# Rooks a1 and f1 can both reach d1
TWO_ROOKS_FEN = "6k1/8/8/8/8/8/8/R4RK1 w - - 0 1"
# Same with a black knight on d1 to capture
TWO_ROOKS_CAPTURE_FEN = "6k1/8/8/8/8/8/8/R2n1RK1 w - - 0 1"


class TestSkeleton:
    """Tests for completing tokens missing one component."""

    def test_piece_and_rank(self, corrector):
        oracle = ChessOracle(BISHOP_FEN)
        correction = corrector.complete_skeleton("B6", oracle)
        assert correction.san == "Bf6"
        assert correction.source is SourceTag.SKELETON

    def test_piece_and_file_unique(self, corrector):
        oracle = ChessOracle(BISHOP_F_FILE_FEN)
        assert corrector.complete_skeleton("Bf", oracle).san == "Bf6"

    def test_piece_and_file_ambiguous(self, corrector):
        # Bf6 and Bf2 are both legal
        oracle = ChessOracle(BISHOP_FEN)
        assert corrector.complete_skeleton("Bf", oracle) is None

    def test_bare_square_without_pawn(self, corrector):
        oracle = ChessOracle(BISHOP_FEN)
        assert corrector.complete_skeleton("e5", oracle).san == "Be5"

    def test_other_shapes_ignored(self, corrector, oracle):
        assert corrector.complete_skeleton("Nf3x", oracle) is None

    def test_does_not_mutate_oracle(self, corrector):
        oracle = ChessOracle(BISHOP_FEN)
        fen = oracle.fen
        corrector.correct("B6", oracle)
        assert oracle.fen == fen


class TestFuzzy:
    """Tests for edit distance matching."""

    def test_exact_after_stripping_symbols(self, corrector, oracle):
        correction = corrector.match_fuzzy("Nf3x", oracle)
        assert correction.san == "Nf3"
        assert correction.source is SourceTag.FUZZY

    def test_unique_closest(self, corrector, oracle):
        assert corrector.match_fuzzy("Nf33", oracle).san == "Nf3"

    def test_tie_rejected(self, corrector, oracle):
        # Nf3 and f4 are both one edit away
        assert corrector.match_fuzzy("Nf4", oracle) is None

    def test_tie_accepted_when_configured(self, oracle):
        engine = CorrectionEngine(RecoveryConfig(fuzzy_accept_ties=True))
        assert engine.match_fuzzy("Nf4", oracle).san in {"Nf3", "f4"}

    def test_beyond_threshold(self, corrector, oracle):
        assert corrector.match_fuzzy("zzzz", oracle) is None

    def test_zero_read_as_letter_o(self, corrector):
        oracle = ChessOracle("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        assert corrector.match_fuzzy("0-0", oracle).san == "O-O"


class TestDisambiguation:
    """Tests for inserting a missing file or rank."""

    def test_missing_file(self, corrector):
        oracle = ChessOracle(TWO_ROOKS_FEN)
        correction = corrector.complete_disambiguation("Rd1", oracle)
        assert correction.san == "Rad1"
        assert correction.source is SourceTag.DISAMBIGUATED

    def test_missing_file_with_capture(self, corrector):
        oracle = ChessOracle(TWO_ROOKS_CAPTURE_FEN)
        assert corrector.complete_disambiguation("Rxd1", oracle).san == "Raxd1"

    def test_full_chain_prefers_disambiguation_over_tied_fuzzy(self, corrector):
        oracle = ChessOracle(TWO_ROOKS_FEN)
        correction = corrector.correct("Rd1", oracle)
        assert correction.san == "Rad1"
        assert correction.source is SourceTag.DISAMBIGUATED

    def test_not_applicable(self, corrector, oracle):
        assert corrector.complete_disambiguation("e4", oracle) is None


class TestSubstitutions:
    """Tests for character confusion repairs."""

    def test_rank_confusion(self, corrector, oracle):
        correction = corrector.correct("Nf4", oracle)
        assert correction.san == "Nf3"
        assert correction.source is SourceTag.SUBSTITUTION

    def test_custom_table(self, oracle):
        config = replace(RecoveryConfig(), substitutions=(SubstitutionRule("Z", "N"),))
        engine = CorrectionEngine(config)
        assert engine.apply_substitutions("Zf3", oracle).san == "Nf3"

    def test_empty_table(self, oracle):
        engine = CorrectionEngine(RecoveryConfig(substitutions=()))
        assert engine.apply_substitutions("Nf4", oracle) is None

    def test_does_not_mutate_oracle(self, corrector, oracle):
        corrector.apply_substitutions("Nf4", oracle)
        assert oracle.history() == []


class TestUnrecoverable:
    """Tokens nothing can repair."""

    def test_garbage(self, corrector, oracle):
        assert corrector.correct("zzzz", oracle) is None

    def test_ambiguous_skeleton(self, corrector):
        oracle = ChessOracle(BISHOP_FEN)
        assert corrector.correct("Bf", oracle) is None
