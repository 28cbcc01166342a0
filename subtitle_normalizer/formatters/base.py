"""Abstract base formatter, input document and output container.

WHY: Every output format consumes the same normalized captions (and the
segments computed from them) but produces different file content. This
base class keeps a single interface so the CLI and API can run any
formatter generically.

HOW: Document bundles what a formatter may need. BaseFormatter is an ABC
with a ``name`` property and a ``format()`` method. FormatterOutput bundles
a file suffix with its content and MIME type.

RULES:
- ``format()`` returns a list; single-file formatters return one item
- ``suffix`` starts with a hyphen, e.g. ``"-captions.srt"``
- The caller prepends the source filename stem
- Formatters never modify the Document
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Union

from subtitle_normalizer.core.models import Caption, Segment


@dataclass
class Document:
    """Normalized captions plus optional segmentation of one source file."""

    captions: List[Caption]
    segments: List[Segment] = field(default_factory=list)
    source_filename: str = ""


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-captions.srt"`` → ``"interview-captions.srt"``.
        content: The file content.
        media_type: MIME type for the content.
    """

    suffix: str
    content: Union[str, bytes]
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Captions'."""

    @abstractmethod
    def format(self, document: Document) -> List[FormatterOutput]:
        """Render the document into one or more output files."""
