"""Kanji → hiragana conversion for easy-reading captions.

WHY: Captions for children or learners replace short, hard kanji words
with their readings. The analyzer already knows each token's reading, so
the conversion is a token walk with a handful of filters.

HOW: The text is tokenized; tokens are reassembled using their positions
so that whitespace or characters the analyzer skipped survive unchanged.
A token is replaced by the hiragana form of its reading when every filter
in _should_convert() passes.

RULES:
- Proper nouns are kept when preserve_proper_nouns is set
- Tokens longer than max_kanji_length characters are kept
- Tokens without a reading are kept
- Digits become kanji numerals only when convert_numbers is set
"""

from __future__ import annotations

import logging
from typing import List, Optional

from subtitle_normalizer.core.misconversion import is_proper_noun
from subtitle_normalizer.core.models import KanaConversionOptions, Token
from subtitle_normalizer.core.rules import CJK_IDEOGRAPH_RE
from subtitle_normalizer.core.tokens import TokenSource, tokenize

logger = logging.getLogger(__name__)

_KATAKANA_FIRST = 0x30A1  # ァ
_KATAKANA_LAST = 0x30F6   # ヶ
_KANA_OFFSET = 0x60

_NUMERALS = str.maketrans(
    "0123456789０１２３４５６７８９",
    "〇一二三四五六七八九〇一二三四五六七八九",
)


def katakana_to_hiragana(text: str) -> str:
    """Shift katakana letters to hiragana; other characters pass through."""
    return "".join(
        chr(ord(c) - _KANA_OFFSET) if _KATAKANA_FIRST <= ord(c) <= _KATAKANA_LAST else c
        for c in text
    )


def digits_to_kanji(text: str) -> str:
    """Replace ASCII and full-width digits one by one with kanji numerals."""
    return text.translate(_NUMERALS)


def _should_convert(token: Token, opts: KanaConversionOptions) -> bool:
    if not token.reading:
        return False
    if token.part_of_speech not in opts.target_parts_of_speech:
        return False
    if not CJK_IDEOGRAPH_RE.search(token.surface):
        return False
    if len(token.surface) > opts.max_kanji_length:
        return False
    if opts.preserve_proper_nouns and is_proper_noun(token):
        return False
    return True


def rebuild(text: str, tokens: List[Token], opts: KanaConversionOptions) -> str:
    parts: List[str] = []
    cursor = 0
    for token in tokens:
        if token.position > cursor:
            parts.append(text[cursor:token.position])
        elif token.position < cursor:
            # overlapping token, keep what was already emitted
            continue
        if _should_convert(token, opts):
            parts.append(katakana_to_hiragana(token.reading))
        else:
            parts.append(token.surface)
        cursor = token.position + len(token.surface)
    parts.append(text[cursor:])
    return "".join(parts)


async def convert_kanji_to_hiragana(
    text: str,
    token_source: TokenSource,
    options: Optional[KanaConversionOptions] = None,
) -> str:
    """Replace short kanji words with their hiragana readings."""
    if not text:
        return text
    opts = options or KanaConversionOptions()
    tokens = await tokenize(token_source, text)
    converted = rebuild(text, tokens, opts)
    if opts.convert_numbers:
        converted = digits_to_kanji(converted)
    return converted
