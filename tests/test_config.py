"""Tests for recovery and service configuration."""

import dataclasses

import pytest

from openchessnotation.config import (
    DEFAULT_SUBSTITUTIONS,
    RecoveryConfig,
    SubstitutionRule,
    get_config,
)


class TestRecoveryConfig:
    """Tests for pipeline tuning."""

    def test_fuzzy_thresholds(self):
        config = RecoveryConfig()
        assert config.fuzzy_threshold(2) == 2
        assert config.fuzzy_threshold(3) == 2
        assert config.fuzzy_threshold(4) == 3

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RecoveryConfig().fuzzy_accept_ties = True

    def test_default_table(self):
        assert RecoveryConfig().substitutions == DEFAULT_SUBSTITUTIONS


class TestSubstitutionRule:
    """Tests for single confusion rules."""

    def test_global_rank_shift(self):
        rule = SubstitutionRule(r"([a-h])6", r"\g<1>5", count=0)
        assert rule.apply("Nf6xe6") == "Nf5xe5"

    def test_first_occurrence_only(self):
        assert SubstitutionRule("1", "l").apply("R1e1") == "Rle1"

    def test_no_match(self):
        assert SubstitutionRule(r"Na(\d)", r"Ng\g<1>").apply("Nf3") == "Nf3"


class TestServiceConfig:
    """Tests for environment driven settings."""

    def test_defaults(self):
        config = get_config({})
        assert config.openai_api_key is None
        assert config.vision_model == "gpt-4o"
        assert config.ocr_timeout == 30
        assert config.vision_timeout == 60
        assert config.tesseract_cmd is None
        assert not config.vision_available

    def test_environment(self):
        config = get_config(
            {
                "OPENAI_API_KEY": "sk-test",
                "OPENCHESSNOTATION_VISION_MODEL": "gpt-4o-mini",
                "OPENCHESSNOTATION_OCR_TIMEOUT": "5",
                "OPENCHESSNOTATION_VISION_TIMEOUT": "12.5",
                "TESSERACT_CMD": "/opt/tesseract",
            }
        )
        assert config.vision_available
        assert config.vision_model == "gpt-4o-mini"
        assert config.ocr_timeout == 5.0
        assert config.vision_timeout == 12.5
        assert config.tesseract_cmd == "/opt/tesseract"

    def test_empty_api_key(self):
        assert get_config({"OPENAI_API_KEY": ""}).openai_api_key is None
