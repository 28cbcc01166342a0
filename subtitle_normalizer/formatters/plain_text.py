"""Plain text transcript formatter.

WHY: Editors need a readable transcript for review and archival: no
timecodes, just the normalized text, one paragraph per segment.

HOW: When the document has segments, each segment becomes one paragraph
(preceded by "【topic】" when a topic label exists). Without segments the
whole transcript is one paragraph. Caption texts are concatenated
directly, Japanese text has no inter-word spaces, and the line breaks
after sentence terminators are kept.

RULES:
- Double newline between paragraphs
- No trailing whitespace on any line
- Output suffix: "-transcript.txt", media type "text/plain"
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from subtitle_normalizer.core.models import Caption
from subtitle_normalizer.formatters.base import BaseFormatter, Document, FormatterOutput


def _paragraph(captions: Sequence[Caption], topic: Optional[str] = None) -> str:
    text = "".join(c.text for c in captions)
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    if topic:
        lines.insert(0, "【{}】".format(topic))
    return "\n".join(lines)


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces segment paragraphs of plain text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, document: Document) -> List[FormatterOutput]:
        if document.segments:
            paragraphs = [_paragraph(s.captions, s.topic) for s in document.segments]
        else:
            paragraphs = [_paragraph(document.captions)]

        content = "\n\n".join(p for p in paragraphs if p)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-transcript.txt",
                content=content,
                media_type="text/plain",
            )
        ]
