"""Caption-level helpers that run the text stages over a transcript.

WHY: The stages in punctuation.py, style.py, kana.py and
misconversion.py work on one string. Hosts (the CLI, the API) work on
lists of captions and need timing-aware punctuation and per-caption
reports.

HOW: Each helper maps a stage over the captions and returns new Caption
values built with dataclasses.replace. Tokenizing helpers gather the
per-caption coroutines so captions are analysed concurrently.

RULES:
- Input captions are never mutated
- Output order equals input order
- Misconversion reports are keyed by caption id; captions without
  candidates are left out
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Dict, List, Optional, Sequence

from subtitle_normalizer.core import punctuation, style
from subtitle_normalizer.core.kana import convert_kanji_to_hiragana
from subtitle_normalizer.core.misconversion import detect_misconversions
from subtitle_normalizer.core.models import (
    Caption,
    HonorificOptions,
    KanaConversionOptions,
    MisconversionCandidate,
    MisconversionOptions,
    PunctuationOptions,
    SpeechStyleOptions,
)
from subtitle_normalizer.core.tokens import CustomDictionary, TokenSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Punctuation
# ---------------------------------------------------------------------------


def punctuate_caption(caption: Caption, options: Optional[PunctuationOptions] = None) -> Caption:
    """Punctuate one caption using its pause and word timing when present.

    Order: trailing pause, then inner word gaps, then complete().
    """
    opts = options or PunctuationOptions()
    text = caption.text
    if caption.pause_after is not None:
        text = punctuation.complete_with_pause(text, caption.pause_after, opts.pause_threshold)
    if caption.words:
        text = punctuation.complete_with_word_timing(text, caption.words, opts.pause_threshold)
    text = punctuation.complete(text, opts)
    return dataclasses.replace(caption, text=text)


def punctuate_captions(
    captions: Sequence[Caption],
    options: Optional[PunctuationOptions] = None,
) -> List[Caption]:
    return [punctuate_caption(c, options) for c in captions]


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


def convert_caption_honorific(caption: Caption, options: Optional[HonorificOptions] = None) -> Caption:
    return dataclasses.replace(caption, text=style.convert_honorific_style(caption.text, options))


def convert_captions_honorific(
    captions: Sequence[Caption],
    options: Optional[HonorificOptions] = None,
) -> List[Caption]:
    return [convert_caption_honorific(c, options) for c in captions]


def convert_caption_speech_style(
    caption: Caption,
    options: Optional[SpeechStyleOptions] = None,
) -> Caption:
    return dataclasses.replace(caption, text=style.convert_speech_style(caption.text, options))


def convert_captions_speech_style(
    captions: Sequence[Caption],
    options: Optional[SpeechStyleOptions] = None,
) -> List[Caption]:
    return [convert_caption_speech_style(c, options) for c in captions]


# ---------------------------------------------------------------------------
# Tokenizing stages
# ---------------------------------------------------------------------------


async def convert_captions_kanji(
    captions: Sequence[Caption],
    token_source: TokenSource,
    options: Optional[KanaConversionOptions] = None,
) -> List[Caption]:
    """Convert short kanji words to hiragana in every caption."""
    texts = await asyncio.gather(
        *(convert_kanji_to_hiragana(c.text, token_source, options) for c in captions)
    )
    return [dataclasses.replace(c, text=t) for c, t in zip(captions, texts)]


async def detect_caption_misconversions(
    captions: Sequence[Caption],
    token_source: TokenSource,
    options: Optional[MisconversionOptions] = None,
    dictionary: Optional[CustomDictionary] = None,
) -> Dict[str, List[MisconversionCandidate]]:
    """Run the misconversion detector on every caption.

    Returns:
        Mapping caption id → candidates, only for captions with findings.
    """
    reports = await asyncio.gather(
        *(detect_misconversions(c.text, token_source, options, dictionary) for c in captions)
    )
    found = {c.id: report for c, report in zip(captions, reports) if report}
    logger.info("Misconversion check: %d of %d captions flagged", len(found), len(captions))
    return found
