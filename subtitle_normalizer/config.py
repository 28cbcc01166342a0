"""Configuration constants, environment overrides and .env loading.

WHY: Thresholds (sentence length, pause lengths, segment bounds) are
tuned per project. Hosts read them once from the environment and pass
option records into the stages, so the core never touches os.environ.

HOW: python-dotenv loads the .env file on import. Each constant reads an
environment variable with a typed fallback. The default_*_options()
helpers turn the constants into the option records of core.models.

RULES:
- Every constant can be overridden via an environment variable
- Malformed numeric values raise ValueError naming the variable
- Library code never imports this module; only the CLI and API do
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from subtitle_normalizer.core.models import (
    MisconversionOptions,
    PauseThreshold,
    PunctuationOptions,
    SegmenterOptions,
)

# Load .env from the working directory
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}".format(name, raw)) from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw)) from None


# ---------------------------------------------------------------------------
# Punctuation
# ---------------------------------------------------------------------------

MAX_SENTENCE_LENGTH = _env_int("SUBTITLE_MAX_SENTENCE_LENGTH", 30)
MIN_COMMA_INTERVAL = _env_int("SUBTITLE_MIN_COMMA_INTERVAL", 10)
PAUSE_PERIOD = _env_float("SUBTITLE_PAUSE_PERIOD", 0.8)
PAUSE_COMMA = _env_float("SUBTITLE_PAUSE_COMMA", 0.3)

# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

MIN_SEGMENT_DURATION = _env_float("SUBTITLE_MIN_SEGMENT_DURATION", 60.0)
MAX_SEGMENT_DURATION = _env_float("SUBTITLE_MAX_SEGMENT_DURATION", 300.0)
SEGMENT_PAUSE = _env_float("SUBTITLE_SEGMENT_PAUSE", 2.0)
TOPIC_THRESHOLD = _env_float("SUBTITLE_TOPIC_THRESHOLD", 0.3)
CONTEXT_WINDOW = _env_int("SUBTITLE_CONTEXT_WINDOW", 5)

# ---------------------------------------------------------------------------
# Misconversion detection and analyzer
# ---------------------------------------------------------------------------

MIN_CONFIDENCE = _env_float("SUBTITLE_MIN_CONFIDENCE", 0.7)
DICTIONARY_PATH: Optional[str] = os.getenv("SUBTITLE_DICTIONARY_PATH") or None
MECAB_ARGS = os.getenv("MECAB_ARGS", "")

LOG_LEVEL = os.getenv("SUBTITLE_LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for the CLI and API entry points."""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def default_punctuation_options() -> PunctuationOptions:
    return PunctuationOptions(
        max_sentence_length=MAX_SENTENCE_LENGTH,
        min_comma_interval=MIN_COMMA_INTERVAL,
        pause_threshold=PauseThreshold(period=PAUSE_PERIOD, comma=PAUSE_COMMA),
    )


def default_segmenter_options() -> SegmenterOptions:
    return SegmenterOptions(
        min_segment_duration=MIN_SEGMENT_DURATION,
        max_segment_duration=MAX_SEGMENT_DURATION,
        pause_threshold=SEGMENT_PAUSE,
        topic_similarity_threshold=TOPIC_THRESHOLD,
        context_window_size=CONTEXT_WINDOW,
    )


def default_misconversion_options() -> MisconversionOptions:
    return MisconversionOptions(min_confidence=MIN_CONFIDENCE)
