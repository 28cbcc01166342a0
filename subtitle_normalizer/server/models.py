"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate the JSON Schema shown
in the /docs UI.

HOW: Each endpoint has a request model carrying the captions plus the
stage options, and a response model. CaptionModel converts to and from
core.models.Caption so endpoints stay thin.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Option defaults equal the defaults of the core option records
- Numeric options are range-checked here (422 on violation)
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from subtitle_normalizer.core.models import (
    Caption,
    HonorificLevel,
    MisconversionCandidate,
    MisconversionType,
    ReviewResult,
    Segment,
    Word,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TargetStyle(str, Enum):
    """Target register for the plain/polite converter."""

    plain = "plain"
    polite = "polite"


class SegmentStrategy(str, Enum):
    pause = "pause"
    topic = "topic"


# ---------------------------------------------------------------------------
# Shared records
# ---------------------------------------------------------------------------


class WordModel(BaseModel):
    text: str = Field(description="Word text as it appears in the caption.")
    start_time: float = Field(description="Word start in seconds.")
    end_time: float = Field(description="Word end in seconds.")


class CaptionModel(BaseModel):
    """One caption with optional pause and word timing."""

    id: str = Field(description="Caption identifier, echoed in every report.")
    text: str = Field(description="Caption text.")
    start_time: float = Field(description="Caption start in seconds.")
    end_time: float = Field(description="Caption end in seconds.")
    pause_after: Optional[float] = Field(
        default=None,
        description="Silence after the caption in seconds, if known.",
    )
    words: Optional[List[WordModel]] = Field(
        default=None,
        description="Per-word timing, in time order.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "id": "1",
                "text": "今日は会議です",
                "start_time": 0.0,
                "end_time": 5.0,
                "pause_after": 2.5,
            }
        ]
    }}

    def to_caption(self) -> Caption:
        words = None
        if self.words is not None:
            words = tuple(Word(w.text, w.start_time, w.end_time) for w in self.words)
        return Caption(
            id=self.id,
            text=self.text,
            start_time=self.start_time,
            end_time=self.end_time,
            pause_after=self.pause_after,
            words=words,
        )

    @classmethod
    def from_caption(cls, caption: Caption) -> CaptionModel:
        words = None
        if caption.words is not None:
            words = [WordModel(text=w.text, start_time=w.start_time, end_time=w.end_time)
                     for w in caption.words]
        return cls(
            id=caption.id,
            text=caption.text,
            start_time=caption.start_time,
            end_time=caption.end_time,
            pause_after=caption.pause_after,
            words=words,
        )


class CaptionsRequest(BaseModel):
    captions: List[CaptionModel] = Field(description="Captions in time order.")

    def to_captions(self) -> List[Caption]:
        return [c.to_caption() for c in self.captions]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class PunctuateRequest(CaptionsRequest):
    """Captions plus punctuation thresholds."""

    max_sentence_length: int = Field(
        default=30, ge=0, description="Force 。 after this many characters without punctuation (0 = off).",
    )
    min_comma_interval: int = Field(
        default=10, ge=0, description="Force 、 after this many characters without punctuation (0 = off).",
    )
    adjust_spacing: bool = Field(
        default=True, description="Strip spaces after punctuation and break lines after 。",
    )
    pause_period: float = Field(default=0.8, ge=0, description="Pause (s) that ends a sentence.")
    pause_comma: float = Field(default=0.3, ge=0, description="Pause (s) that inserts a comma.")


class HonorificRequest(CaptionsRequest):
    target_style: TargetStyle = Field(
        default=TargetStyle.polite, description="Register to convert sentence endings to.",
    )
    preserve_expressions: List[str] = Field(
        default_factory=list, description="Sentences containing any of these are left unchanged.",
    )
    preserve_quotations: bool = Field(
        default=True, description="Leave text inside 「」 and 『』 unchanged.",
    )


class SpeechStyleRequest(CaptionsRequest):
    target_level: HonorificLevel = Field(
        default=HonorificLevel.POLITE, description="Speech level to convert to.",
    )
    formality_level: float = Field(
        default=0.7, ge=0, le=1, description="0..1; 0.5 and above selects formal connectives.",
    )
    preserve_expressions: List[str] = Field(
        default_factory=list, description="Sentences containing any of these are left unchanged.",
    )
    preserve_quotations: bool = Field(
        default=True, description="Leave text inside 「」 and 『』 unchanged.",
    )


class MisconversionRequest(CaptionsRequest):
    check_kana: bool = Field(default=True, description="Flag tokens whose surface differs from the reading.")
    check_kanji: bool = Field(default=True, description="Flag tokens containing kanji.")
    min_confidence: float = Field(default=0.7, ge=0, le=1, description="Minimum confidence to report.")
    use_custom_dictionary: bool = Field(
        default=True, description="Skip terms listed in the server's user dictionary.",
    )


class SegmentRequest(CaptionsRequest):
    strategy: SegmentStrategy = Field(
        default=SegmentStrategy.pause, description="Split at pauses or at topic changes.",
    )
    min_segment_duration: float = Field(default=60.0, ge=0, description="Minimum segment length (s).")
    max_segment_duration: float = Field(default=300.0, gt=0, description="Maximum segment length (s).")
    pause_threshold: float = Field(default=2.0, ge=0, description="Gap (s) that counts as a pause.")
    topic_similarity_threshold: float = Field(
        default=0.3, ge=0, le=1, description="Similarity below which the topic changes.",
    )
    context_window_size: int = Field(default=5, ge=1, description="Captions per comparison window.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CaptionsResponse(BaseModel):
    captions: List[CaptionModel] = Field(description="Converted captions, in input order.")


class CandidateModel(BaseModel):
    start: int = Field(description="Start offset in the caption text.")
    end: int = Field(description="End offset (exclusive).")
    text: str = Field(description="Flagged text.")
    type: MisconversionType = Field(description="kana, kanji or other.")
    confidence: float = Field(description="Confidence between 0 and 1.")
    suggestion: Optional[str] = Field(default=None, description="Suggested replacement, if any.")

    @classmethod
    def from_candidate(cls, candidate: MisconversionCandidate) -> CandidateModel:
        return cls(
            start=candidate.start,
            end=candidate.end,
            text=candidate.text,
            type=candidate.type,
            confidence=candidate.confidence,
            suggestion=candidate.suggestion,
        )


class MisconversionResponse(BaseModel):
    results: Dict[str, List[CandidateModel]] = Field(
        description="Candidates keyed by caption id; captions without findings are omitted.",
    )


class SegmentModel(BaseModel):
    start_time: float = Field(description="Segment start in seconds.")
    end_time: float = Field(description="Segment end in seconds.")
    topic: Optional[str] = Field(default=None, description="Most frequent nouns (topic split only).")
    caption_ids: List[str] = Field(description="Ids of the captions in this segment.")

    @classmethod
    def from_segment(cls, segment: Segment) -> SegmentModel:
        return cls(
            start_time=segment.start_time,
            end_time=segment.end_time,
            topic=segment.topic,
            caption_ids=[c.id for c in segment.captions],
        )


class SegmentsResponse(BaseModel):
    segments: List[SegmentModel] = Field(description="Segments covering every caption once.")


class ReviewModel(BaseModel):
    caption_id: str = Field(description="Caption the finding refers to.")
    original_text: str = Field(description="Caption text as submitted.")
    suggested_text: str = Field(description="Suggested text.")
    confidence: float = Field(description="Confidence between 0 and 1.")
    reason: str = Field(description="Explanation for the editor.")

    @classmethod
    def from_result(cls, result: ReviewResult) -> ReviewModel:
        return cls(
            caption_id=result.caption_id,
            original_text=result.original_text,
            suggested_text=result.suggested_text,
            confidence=result.confidence,
            reason=result.reason,
        )


class ReviewResponse(BaseModel):
    results: List[ReviewModel] = Field(description="Review findings in order.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used by the CLI.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-captions.srt').")


class ErrorResponse(BaseModel):
    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
