"""
Configuration for the recovery pipeline and its ingestion services.

Pipeline tuning lives in `RecoveryConfig`, a frozen dataclass passed to the
pipeline explicitly. Service settings are read from the environment:

Environment variables:
  OPENAI_API_KEY                     API key for the vision extraction service
  OPENCHESSNOTATION_VISION_MODEL     Vision model name (default: gpt-4o)
  OPENCHESSNOTATION_OCR_TIMEOUT      OCR timeout in seconds (default: 30)
  OPENCHESSNOTATION_VISION_TIMEOUT   Vision request timeout in seconds (default: 60)
  TESSERACT_CMD                      Path to the tesseract binary (optional)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping


DEFAULT_VISION_MODEL = "gpt-4o"
DEFAULT_OCR_TIMEOUT = 30
DEFAULT_VISION_TIMEOUT = 60


@dataclass(frozen=True)
class SubstitutionRule:
    """
    One single-character confusion typical of handwriting OCR.

    `count` follows `re.sub`: 0 rewrites every occurrence, 1 only the first.
    """

    pattern: str
    replacement: str
    count: int = 1

    def apply(self, token: str) -> str:
        return re.sub(self.pattern, self.replacement, token, count=self.count)


DEFAULT_SUBSTITUTIONS: tuple[SubstitutionRule, ...] = (
    # Rank digits read one off
    SubstitutionRule(r"([a-h])6", r"\g<1>5", count=0),
    SubstitutionRule(r"([a-h])5", r"\g<1>6", count=0),
    SubstitutionRule(r"([a-h])3", r"\g<1>4", count=0),
    SubstitutionRule(r"([a-h])4", r"\g<1>3", count=0),
    SubstitutionRule(r"([a-h])2", r"\g<1>3", count=0),
    SubstitutionRule(r"([a-h])7", r"\g<1>8", count=0),
    SubstitutionRule(r"([a-h])8", r"\g<1>7", count=0),
    # a/g after a piece letter
    SubstitutionRule(r"Na(\d)", r"Ng\g<1>"),
    SubstitutionRule(r"Ng(\d)", r"Na\g<1>"),
    SubstitutionRule(r"Ba(\d)", r"Bg\g<1>"),
    SubstitutionRule(r"Bg(\d)", r"Ba\g<1>"),
    SubstitutionRule(r"Ra(\d)", r"Rg\g<1>"),
    SubstitutionRule(r"Rg(\d)", r"Ra\g<1>"),
    SubstitutionRule(r"Qa(\d)", r"Qg\g<1>"),
    SubstitutionRule(r"Qg(\d)", r"Qa\g<1>"),
    # File letters that look alike
    SubstitutionRule(r"a([1-8])", r"g\g<1>"),
    SubstitutionRule(r"g([1-8])", r"a\g<1>"),
    SubstitutionRule(r"b([1-8])", r"h\g<1>"),
    SubstitutionRule(r"h([1-8])", r"b\g<1>"),
    SubstitutionRule(r"c([1-8])", r"e\g<1>"),
    SubstitutionRule(r"e([1-8])", r"c\g<1>"),
    # Letter l and digit 1
    SubstitutionRule(r"l", "1"),
    SubstitutionRule(r"1", "l"),
)


@dataclass(frozen=True)
class RecoveryConfig:
    """Tuning knobs for the notation recovery pipeline."""

    # Fuzzy matching: tokens up to short_token_length chars allow
    # short_token_max_distance edits, longer ones long_token_max_distance
    short_token_length: int = 3
    short_token_max_distance: int = 2
    long_token_max_distance: int = 3
    fuzzy_accept_ties: bool = False

    substitutions: tuple[SubstitutionRule, ...] = field(default=DEFAULT_SUBSTITUTIONS)

    # Run segmentation attempts on a thread pool
    parallel_attempts: bool = False
    max_workers: int = 3

    # Starting position for every attempt (None = standard start)
    start_fen: str | None = None

    def fuzzy_threshold(self, token_length: int) -> int:
        if token_length > self.short_token_length:
            return self.long_token_max_distance
        return self.short_token_max_distance


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for the OCR engine and the vision extraction service."""

    openai_api_key: str | None
    vision_model: str
    ocr_timeout: float
    vision_timeout: float
    tesseract_cmd: str | None = None

    @property
    def vision_available(self) -> bool:
        return bool(self.openai_api_key)


def get_config(env: Mapping[str, str] | None = None) -> ServiceConfig:
    """
    Load service configuration from environment variables.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        ServiceConfig populated from the environment with defaults applied
    """
    env = env if env is not None else os.environ
    return ServiceConfig(
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        vision_model=env.get("OPENCHESSNOTATION_VISION_MODEL", DEFAULT_VISION_MODEL),
        ocr_timeout=float(env.get("OPENCHESSNOTATION_OCR_TIMEOUT", str(DEFAULT_OCR_TIMEOUT))),
        vision_timeout=float(
            env.get("OPENCHESSNOTATION_VISION_TIMEOUT", str(DEFAULT_VISION_TIMEOUT))
        ),
        tesseract_cmd=env.get("TESSERACT_CMD") or None,
    )
