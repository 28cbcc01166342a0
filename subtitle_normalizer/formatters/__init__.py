"""Output formatter registry.

WHY: The CLI and the API need a single lookup to find a formatter by
name. Adding a format means writing the class and adding one line here.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API responses)
- Values are BaseFormatter subclasses
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import Dict, Type

from subtitle_normalizer.formatters.base import BaseFormatter
from subtitle_normalizer.formatters.plain_text import PlainTextFormatter
from subtitle_normalizer.formatters.segments_json import SegmentsJSONFormatter
from subtitle_normalizer.formatters.srt import SRTFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "srt": SRTFormatter,
    "plain_text": PlainTextFormatter,
    "segments_json": SegmentsJSONFormatter,
}


def get_formatter(key: str) -> BaseFormatter:
    """Instantiate the formatter registered under key.

    Raises:
        ValueError: If no formatter is registered under key.
    """
    try:
        return FORMATTERS[key]()
    except KeyError:
        available = ", ".join(sorted(FORMATTERS))
        raise ValueError("Unknown format '{}'. Available formats: {}".format(key, available)) from None
