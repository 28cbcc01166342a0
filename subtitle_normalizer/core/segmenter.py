"""Segmentation: group an ordered caption list into time-bounded segments.

WHY: Long recordings are edited, exported and chaptered in segments of a
few minutes. Boundaries should fall on long silences or where the
vocabulary changes, never inside a run that is too short to stand on
its own, and never past the maximum length.

HOW: Both strategies walk the captions once, accumulating into the
current run, and ask at each caption whether the run should close:

  split_by_pause         gap to the next caption > pause_threshold
  split_by_topic_change  Jaccard similarity of the keyword sets of the
                         last W captions and the next W captions is
                         below topic_similarity_threshold

A natural boundary (pause or topic) closes the run only if the run
already lasts min_segment_duration; otherwise the captions are carried
forward into the next run. Independently, a run that has reached the
minimum is closed whenever adding the next caption would take it past
max_segment_duration.

RULES:
- Every input caption appears in exactly one segment, in input order
- No segment except the last is shorter than min_segment_duration
- A segment exceeds max_segment_duration only when its run was still
  below the minimum as it crossed the maximum, or when a single caption
  is itself longer than the maximum
- The final run is always emitted, even when shorter than the minimum
- Empty input → []
- Sequential by construction; do not parallelize across captions
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import AbstractSet, List, Optional, Sequence, Set

from subtitle_normalizer.core.models import Caption, Segment, SegmenterOptions
from subtitle_normalizer.core.tokens import TokenSource, tokenize

logger = logging.getLogger(__name__)

KEYWORD_PARTS_OF_SPEECH = ("名詞", "動詞", "形容詞")
TOPIC_SEPARATOR = "、"
MAX_TOPIC_WORDS = 3


# ---------------------------------------------------------------------------
# Similarity helpers
# ---------------------------------------------------------------------------


def jaccard_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """|A ∩ B| / |A ∪ B|, defined as 0.0 when both sets are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


async def extract_keywords(text: str, token_source: TokenSource) -> Set[str]:
    """Base forms of the nouns, verbs and adjectives in text."""
    tokens = await tokenize(token_source, text)
    return {
        t.base_form or t.surface
        for t in tokens
        if t.part_of_speech in KEYWORD_PARTS_OF_SPEECH
    }


async def calculate_topic_similarity(
    text_a: str,
    text_b: str,
    token_source: TokenSource,
) -> float:
    """Keyword Jaccard similarity between two stretches of text."""
    keywords_a, keywords_b = await asyncio.gather(
        extract_keywords(text_a, token_source),
        extract_keywords(text_b, token_source),
    )
    return jaccard_similarity(keywords_a, keywords_b)


async def detect_topic(
    text: str,
    token_source: TokenSource,
    max_words: int = MAX_TOPIC_WORDS,
) -> Optional[str]:
    """Label text with its most frequent nouns, or None if it has none.

    Ties keep first-occurrence order.
    """
    tokens = await tokenize(token_source, text)
    counts = Counter(
        t.base_form or t.surface for t in tokens if t.part_of_speech == "名詞"
    )
    if not counts:
        return None
    return TOPIC_SEPARATOR.join(word for word, _ in counts.most_common(max_words))


# ---------------------------------------------------------------------------
# Run bookkeeping
# ---------------------------------------------------------------------------


def _joined(captions: Sequence[Caption]) -> str:
    return "".join(c.text for c in captions)


def _span(run: Sequence[Caption]) -> float:
    return run[-1].end_time - run[0].start_time


def _make_segment(run: Sequence[Caption], topic: Optional[str] = None) -> Segment:
    return Segment(
        start_time=run[0].start_time,
        end_time=run[-1].end_time,
        captions=list(run),
        topic=topic,
    )


def _exceeds_max(run: Sequence[Caption], following: Caption, opts: SegmenterOptions) -> bool:
    # A run still below the minimum is carried forward even past the maximum.
    if _span(run) < opts.min_segment_duration:
        return False
    return following.end_time - run[0].start_time > opts.max_segment_duration


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def split_by_pause(
    captions: Sequence[Caption],
    options: Optional[SegmenterOptions] = None,
) -> List[Segment]:
    """Split captions at silences longer than pause_threshold.

    Args:
        captions: Time-ordered captions.
        options: Duration bounds and the pause threshold.

    Returns:
        Segments covering every caption exactly once.
    """
    opts = options or SegmenterOptions()
    segments: List[Segment] = []
    run: List[Caption] = []

    for i, caption in enumerate(captions):
        run.append(caption)
        if i + 1 == len(captions):
            segments.append(_make_segment(run))
            break
        following = captions[i + 1]

        if _exceeds_max(run, following, opts):
            segments.append(_make_segment(run))
            run = []
            continue

        gap = following.start_time - caption.end_time
        if gap > opts.pause_threshold and _span(run) >= opts.min_segment_duration:
            segments.append(_make_segment(run))
            run = []

    logger.debug("Pause split: %d captions → %d segments", len(captions), len(segments))
    return segments


async def split_by_topic_change(
    captions: Sequence[Caption],
    token_source: TokenSource,
    options: Optional[SegmenterOptions] = None,
) -> List[Segment]:
    """Split captions where the vocabulary of neighbouring windows drifts.

    HOW: Once the current run holds context_window_size (W) captions, the
    W captions ending at the current one are compared with the W captions
    that follow it. A similarity below topic_similarity_threshold closes
    the run, subject to the minimum-duration gate. Every emitted segment
    is labelled with detect_topic() over its whole text.
    """
    opts = options or SegmenterOptions()
    window = max(1, opts.context_window_size)
    runs: List[List[Caption]] = []
    run: List[Caption] = []

    for i, caption in enumerate(captions):
        run.append(caption)
        if i + 1 == len(captions):
            runs.append(run)
            break
        following = captions[i + 1]

        if _exceeds_max(run, following, opts):
            runs.append(run)
            run = []
            continue

        if len(run) < window or _span(run) < opts.min_segment_duration:
            continue

        before = captions[i + 1 - window:i + 1]
        after = captions[i + 1:i + 1 + window]
        similarity = await calculate_topic_similarity(_joined(before), _joined(after), token_source)
        logger.debug("Topic similarity at caption %d: %.3f", i, similarity)
        if similarity < opts.topic_similarity_threshold:
            runs.append(run)
            run = []

    segments = []
    for closed in runs:
        topic = await detect_topic(_joined(closed), token_source)
        segments.append(_make_segment(closed, topic))

    logger.debug("Topic split: %d captions → %d segments", len(captions), len(segments))
    return segments
