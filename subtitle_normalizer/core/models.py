"""Data records shared by every normalization stage.

WHY: The punctuation engine, style converters, misconversion detector and
segmenter all exchange the same handful of values: captions, per-word
timing, analyzer tokens, detector reports and segments. Keeping them as
plain dataclasses in one module gives every stage (and the CLI, API and
formatters) a single, well-typed contract.

HOW: Captions, words and tokens are frozen dataclasses so stages can only
produce new values (copy-on-write via dataclasses.replace). Option records
are regular dataclasses with every field defaulted; callers override only
what they need. Small str-based enums name the closed sets (registers,
candidate types).

RULES:
- All times are float seconds from media start
- Token.position is a 0-based character offset into the analysed text
- Caption.from_dict accepts both camelCase (editor JSON) and snake_case keys
- Caption.to_dict always emits camelCase, the editor's wire shape
- Segment invariants (min/max duration) are enforced by the segmenter,
  not by the dataclass
- Python 3.9 compatible, no slots=True, no match/case
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SentenceStyle(str, enum.Enum):
    """Two-register sentence ending style (常体 / 敬体)."""

    PLAIN = "plain"
    POLITE = "polite"
    UNKNOWN = "unknown"


class HonorificLevel(str, enum.Enum):
    """Four-register speech level used by the speech-style converter.

    RULES:
    - humble: 謙譲語 (いたす, まいる, 申し上げる, ...)
    - polite: 丁寧語 (ます/です forms)
    - respectful: 尊敬語 (なさる, いらっしゃる, ご覧になる, ...)
    - casual: 口語, also the fallback when no marker is found
    """

    HUMBLE = "humble"
    POLITE = "polite"
    RESPECTFUL = "respectful"
    CASUAL = "casual"


class MisconversionType(str, enum.Enum):
    """Category of a misconversion candidate."""

    KANA = "kana"
    KANJI = "kanji"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Analyzer and caption records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Token:
    """One morpheme produced by a Token Source.

    Attributes:
        surface: The text exactly as it appears in the input.
        reading: Canonical reading in katakana ("" when unknown).
        base_form: Dictionary form (falls back to surface when unknown).
        part_of_speech: Top-level part of speech, e.g. "名詞".
        part_of_speech_detail: First sub-category, e.g. "一般", "固有名詞".
        position: 0-based character offset of surface in the input text.
    """

    surface: str
    reading: str
    base_form: str
    part_of_speech: str
    part_of_speech_detail: str
    position: int


@dataclass(frozen=True)
class Word:
    """A single timed word inside a caption."""

    text: str
    start_time: float
    end_time: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Word:
        return cls(
            text=str(data.get("text", "")),
            start_time=float(_pick(data, "startTime", "start_time", default=0.0)),
            end_time=float(_pick(data, "endTime", "end_time", default=0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "startTime": self.start_time, "endTime": self.end_time}


@dataclass(frozen=True)
class Caption:
    """One caption of a transcript.

    WHY: The caller owns captions; every stage returns new Caption values
    so the caller's list is never modified behind its back.

    RULES:
    - start_time < end_time (not validated, caller's responsibility)
    - pause_after is the silence after this caption, in seconds, if known
    - words, when present, are time-ordered and cover the caption text
    """

    id: str
    text: str
    start_time: float
    end_time: float
    pause_after: Optional[float] = None
    words: Optional[Tuple[Word, ...]] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> Caption:
        """Build a Caption from an editor JSON object.

        Missing ids are replaced by the 1-based position in the list so
        that reports can still point at the caption.
        """
        raw_words = data.get("words")
        words = None
        if raw_words is not None:
            words = tuple(Word.from_dict(w) for w in raw_words)
        pause = _pick(data, "pauseAfter", "pause_after", default=None)
        return cls(
            id=str(data.get("id", index + 1)),
            text=str(data.get("text", "")),
            start_time=float(_pick(data, "startTime", "start_time", default=0.0)),
            end_time=float(_pick(data, "endTime", "end_time", default=0.0)),
            pause_after=float(pause) if pause is not None else None,
            words=words,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }
        if self.pause_after is not None:
            out["pauseAfter"] = self.pause_after
        if self.words is not None:
            out["words"] = [w.to_dict() for w in self.words]
        return out


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


# ---------------------------------------------------------------------------
# Stage outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MisconversionCandidate:
    """A span the detector believes may be mis-transcribed.

    Read-only report: it never mutates the caption it was found in.
    """

    start: int
    end: int
    text: str
    type: MisconversionType
    confidence: float
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "type": self.type.value,
            "confidence": self.confidence,
        }
        if self.suggestion is not None:
            out["suggestion"] = self.suggestion
        return out


@dataclass
class Segment:
    """A contiguous, time-bounded run of captions.

    RULES:
    - start_time is the first caption's start, end_time the last caption's end
    - topic is only filled by topic-change segmentation
    """

    start_time: float
    end_time: float
    captions: List[Caption] = field(default_factory=list)
    topic: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "captions": [c.to_dict() for c in self.captions],
        }
        if self.topic is not None:
            out["topic"] = self.topic
        return out


@dataclass(frozen=True)
class ReviewResult:
    """One reviewer finding for a caption."""

    caption_id: str
    original_text: str
    suggested_text: str
    confidence: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "captionId": self.caption_id,
            "originalText": self.original_text,
            "suggestedText": self.suggested_text,
            "confidence": self.confidence,
            "reason": self.reason,
        }


# ---------------------------------------------------------------------------
# Option records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PauseThreshold:
    """Silence lengths (seconds) that force a period or a comma."""

    period: float = 0.8
    comma: float = 0.3


@dataclass
class PunctuationOptions:
    max_sentence_length: int = 30
    min_comma_interval: int = 10
    adjust_spacing: bool = True
    pause_threshold: PauseThreshold = field(default_factory=PauseThreshold)


@dataclass
class HonorificOptions:
    """Options for the plain/polite converter."""

    target_style: SentenceStyle = SentenceStyle.POLITE
    preserve_expressions: Tuple[str, ...] = ()
    preserve_quotations: bool = True


@dataclass
class SpeechStyleOptions:
    """Options for the four-register speech-style converter.

    formality_level >= 0.5 selects the high-formality connective table.
    """

    target_level: HonorificLevel = HonorificLevel.POLITE
    formality_level: float = 0.7
    preserve_expressions: Tuple[str, ...] = ()
    preserve_quotations: bool = True


@dataclass
class MisconversionOptions:
    check_kana: bool = True
    check_kanji: bool = True
    min_confidence: float = 0.7
    use_custom_dictionary: bool = True


@dataclass
class KanaConversionOptions:
    max_kanji_length: int = 3
    convert_numbers: bool = False
    preserve_proper_nouns: bool = True
    target_parts_of_speech: Tuple[str, ...] = ("名詞", "動詞", "形容詞")


@dataclass
class SegmenterOptions:
    min_segment_duration: float = 60.0
    max_segment_duration: float = 300.0
    pause_threshold: float = 2.0
    topic_similarity_threshold: float = 0.3
    context_window_size: int = 5
