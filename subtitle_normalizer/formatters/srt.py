"""SRT caption formatter.

WHY: SRT is what every video editor and player accepts. Normalized
captions already carry their own timing, so one caption becomes one SRT
block.

HOW: Captions are written in order with 1-based indices, an
``HH:MM:SS,mmm --> HH:MM:SS,mmm`` timing line and the caption text.
Line breaks that the punctuation engine inserted after terminators are
kept as SRT line breaks; blank lines inside a caption are dropped since
a blank line ends an SRT block.

RULES:
- Empty captions (after stripping) are skipped; indices stay contiguous
- Output suffix: "-captions.srt", media type "application/x-subrip"
"""

from __future__ import annotations

from typing import List

from subtitle_normalizer.formatters.base import BaseFormatter, Document, FormatterOutput


def seconds_to_srt_time(seconds: float) -> str:
    """Convert seconds to an SRT timestamp: HH:MM:SS,mmm"""
    total_millis = int(round(max(seconds, 0.0) * 1000))
    hours, rest = divmod(total_millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def _caption_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


class SRTFormatter(BaseFormatter):
    """One SRT block per non-empty caption."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    def format(self, document: Document) -> List[FormatterOutput]:
        blocks: List[str] = []
        for caption in document.captions:
            lines = _caption_lines(caption.text)
            if not lines:
                continue
            blocks.append("{index}\n{start} --> {end}\n{text}\n".format(
                index=len(blocks) + 1,
                start=seconds_to_srt_time(caption.start_time),
                end=seconds_to_srt_time(caption.end_time),
                text="\n".join(lines),
            ))
        return [
            FormatterOutput(
                suffix="-captions.srt",
                content="\n".join(blocks),
                media_type="application/x-subrip",
            )
        ]
