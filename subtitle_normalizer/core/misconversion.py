"""Misconversion detection: flag tokens that were probably mis-transcribed.

WHY: Recognizers often pick the wrong kanji for a homophone or leave a
word in kana where the editor expects kanji. The editor highlights such
spans so a human can check them; it never rewrites them on its own.

HOW: The text is tokenized once. Each token not listed in the user
dictionary gets up to two independent checks:
  kana   surface differs from its reading → candidate with the reading
         as suggestion
  kanji  surface contains a CJK ideograph → candidate without suggestion
Both share the same additive confidence rule (base 0.5, −0.3 for proper
nouns, +0.2 for general common nouns, clamped to [0, 1]); a candidate is
kept when its confidence reaches min_confidence.

RULES:
- Purely advisory: returns reports, never mutates text or captions
- start/end are character offsets into the analysed text
- Tokens whose surface is in the custom dictionary yield no candidates
- Analyzer failures propagate to the caller
"""

from __future__ import annotations

import logging
from typing import List, Optional

from subtitle_normalizer.core.models import (
    MisconversionCandidate,
    MisconversionOptions,
    MisconversionType,
    Token,
)
from subtitle_normalizer.core.rules import CJK_IDEOGRAPH_RE
from subtitle_normalizer.core.tokens import CustomDictionary, TokenSource, tokenize

logger = logging.getLogger(__name__)

PROPER_NOUN = "固有名詞"
NOUN = "名詞"
GENERAL = "一般"

BASE_CONFIDENCE = 0.5
PROPER_NOUN_PENALTY = 0.3
COMMON_NOUN_BONUS = 0.2


def is_proper_noun(token: Token) -> bool:
    return PROPER_NOUN in (token.part_of_speech, token.part_of_speech_detail)


def _score(token: Token) -> float:
    confidence = BASE_CONFIDENCE
    if is_proper_noun(token):
        confidence -= PROPER_NOUN_PENALTY
    if token.part_of_speech == NOUN and token.part_of_speech_detail == GENERAL:
        confidence += COMMON_NOUN_BONUS
    # rounded so that e.g. 0.5 + 0.2 compares equal to a 0.7 threshold
    return round(max(0.0, min(1.0, confidence)), 6)


def kana_confidence(token: Token) -> float:
    """Confidence that a token's kana rendering is wrong."""
    return _score(token)


def kanji_confidence(token: Token) -> float:
    """Confidence that a token's kanji choice is wrong."""
    return _score(token)


def find_candidates(
    tokens: List[Token],
    options: Optional[MisconversionOptions] = None,
    dictionary: Optional[CustomDictionary] = None,
) -> List[MisconversionCandidate]:
    """Run the kana and kanji checks over already tokenized text."""
    opts = options or MisconversionOptions()
    lookup = dictionary if opts.use_custom_dictionary else None
    candidates: List[MisconversionCandidate] = []

    for token in tokens:
        surface = token.surface
        if not surface:
            continue
        if lookup is not None and lookup.contains(surface):
            continue
        start = token.position
        end = start + len(surface)

        if opts.check_kana and token.reading and surface != token.reading:
            confidence = kana_confidence(token)
            if confidence >= opts.min_confidence:
                candidates.append(MisconversionCandidate(
                    start=start,
                    end=end,
                    text=surface,
                    type=MisconversionType.KANA,
                    confidence=confidence,
                    suggestion=token.reading,
                ))

        if opts.check_kanji and CJK_IDEOGRAPH_RE.search(surface):
            confidence = kanji_confidence(token)
            if confidence >= opts.min_confidence:
                candidates.append(MisconversionCandidate(
                    start=start,
                    end=end,
                    text=surface,
                    type=MisconversionType.KANJI,
                    confidence=confidence,
                ))

    return candidates


async def detect_misconversions(
    text: str,
    token_source: TokenSource,
    options: Optional[MisconversionOptions] = None,
    dictionary: Optional[CustomDictionary] = None,
) -> List[MisconversionCandidate]:
    """Tokenize text and report probable misconversions.

    Args:
        text: Caption text to inspect.
        token_source: Analyzer handle used for tokenization.
        options: Which checks to run and the confidence threshold.
        dictionary: User dictionary; consulted only when
                    options.use_custom_dictionary is true.

    Returns:
        Candidates in token order (kana before kanji for the same token).
    """
    if not text:
        return []
    tokens = await tokenize(token_source, text)
    candidates = find_candidates(tokens, options, dictionary)
    logger.debug("Found %d misconversion candidates in %d tokens", len(candidates), len(tokens))
    return candidates
