"""Sentence-ending register conversion (常体/敬体 and four-level 敬語).

WHY: Captions from one recording mix registers: an interviewee speaks
casually, a narrator politely. Editors pick one register for the whole
transcript; this module rewrites sentence endings towards it while
leaving quotations and protected expressions alone.

HOW: Both converters share one sentence walk (_convert_sentences):
  1. detect_quotations() finds balanced 「」/『』 spans with a stack
  2. split_sentences() cuts the text after each terminator; a sentence
     whose start offset lies inside a quotation span is copied verbatim
  3. quotations in the middle of any other sentence are swapped for
     opaque placeholders and restored verbatim after conversion
  4. the sentence register is classified by marker patterns
  5. if it differs from the target and no protected expression occurs,
     the sentence is rewritten with the target's RewriteTable
The four-level converter additionally rewrites connectives with the high
or low formality table.

RULES:
- Unknown register → sentence passes through unchanged
- Rewrites never span sentence boundaries
- Converting twice to the same target equals converting once
- Round trips (plain → polite → plain) are lossy and not guaranteed
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Tuple

from subtitle_normalizer.core.models import (
    HonorificLevel,
    HonorificOptions,
    SentenceStyle,
    SpeechStyleOptions,
)
from subtitle_normalizer.core.rules import (
    CLOSE_QUOTES,
    ENDING_TABLES,
    FORMALITY_TABLES,
    HUMBLE_MARKERS_RE,
    OPEN_QUOTES,
    PLAIN_STYLE_RE,
    POLITE_MARKERS_RE,
    POLITE_STYLE_RE,
    RESPECTFUL_MARKERS_RE,
    SPEECH_TABLES,
    TERMINATORS,
)

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

_MASK_OPEN = "\ue000"
_MASK_CLOSE = "\ue001"
_MASK_RE = re.compile("{}(\\d+){}".format(_MASK_OPEN, _MASK_CLOSE))


# ---------------------------------------------------------------------------
# Text structure
# ---------------------------------------------------------------------------


def detect_quotations(text: str) -> List[Span]:
    """Return (start, end) index pairs of balanced quotation brackets.

    Both indices point at the bracket characters themselves (inclusive).
    Closers with nothing open are ignored; openers left unclosed produce
    no span.
    """
    spans: List[Span] = []
    stack: List[int] = []
    for i, char in enumerate(text):
        if char in OPEN_QUOTES:
            stack.append(i)
        elif char in CLOSE_QUOTES and stack:
            spans.append((stack.pop(), i))
    return spans


def split_sentences(text: str) -> List[str]:
    """Split after each terminator, keeping it attached to its sentence.

    "".join(split_sentences(text)) == text for every input.
    """
    sentences: List[str] = []
    start = 0
    for i, char in enumerate(text):
        if char in TERMINATORS:
            sentences.append(text[start:i + 1])
            start = i + 1
    if start < len(text):
        sentences.append(text[start:])
    return sentences


def _outermost(spans: List[Span]) -> List[Span]:
    kept: List[Span] = []
    for start, end in sorted(spans):
        if kept and start <= kept[-1][1]:
            continue
        kept.append((start, end))
    return kept


def _mask_quotations(sentence: str, offset: int, spans: List[Span]) -> Tuple[str, List[str]]:
    # Placeholders use private-use characters, which no table or marker matches.
    # Spans are indices into the full text; `offset` is where `sentence` starts.
    hidden: List[str] = []
    parts: List[str] = []
    cursor = 0
    for start, end in spans:
        lo = max(start - offset, cursor)
        hi = min(end + 1 - offset, len(sentence))
        if lo >= hi:
            continue
        parts.append(sentence[cursor:lo])
        parts.append("{}{}{}".format(_MASK_OPEN, len(hidden), _MASK_CLOSE))
        hidden.append(sentence[lo:hi])
        cursor = hi
    parts.append(sentence[cursor:])
    return "".join(parts), hidden


def _convert_sentences(
    text: str,
    preserve_quotations: bool,
    rewrite: Callable[[str], str],
) -> str:
    if not preserve_quotations:
        return "".join(rewrite(sentence) for sentence in split_sentences(text))

    spans = _outermost(detect_quotations(text))
    parts: List[str] = []
    offset = 0
    for sentence in split_sentences(text):
        start, offset = offset, offset + len(sentence)
        if any(lo <= start <= hi for lo, hi in spans):
            parts.append(sentence)
            continue
        masked, hidden = _mask_quotations(sentence, start, spans)
        converted = rewrite(masked)
        if hidden:
            converted = _MASK_RE.sub(lambda m: hidden[int(m.group(1))], converted)
        parts.append(converted)
    return "".join(parts)


def _is_protected(sentence: str, expressions) -> bool:
    return any(expr and expr in sentence for expr in expressions)


# ---------------------------------------------------------------------------
# Plain / polite
# ---------------------------------------------------------------------------


def detect_sentence_style(sentence: str) -> SentenceStyle:
    """Classify a sentence as polite, plain or unknown.

    Polite markers win over plain ones, so a sentence mixing both is
    treated as polite.
    """
    if POLITE_STYLE_RE.search(sentence):
        return SentenceStyle.POLITE
    if PLAIN_STYLE_RE.search(sentence):
        return SentenceStyle.PLAIN
    return SentenceStyle.UNKNOWN


def convert_honorific_style(text: str, options: Optional[HonorificOptions] = None) -> str:
    """Rewrite sentence endings to the target plain/polite register.

    Args:
        text: Caption text, possibly several sentences.
        options: Target style, protected expressions and quotation switch.

    Returns:
        The converted text.

    Raises:
        ValueError: If the target style is SentenceStyle.UNKNOWN.
    """
    opts = options or HonorificOptions()
    target = SentenceStyle(opts.target_style)
    if target is SentenceStyle.UNKNOWN:
        raise ValueError("target_style must be 'plain' or 'polite'")
    table = ENDING_TABLES[target.value]

    def rewrite(sentence: str) -> str:
        current = detect_sentence_style(sentence)
        if current is SentenceStyle.UNKNOWN or current is target:
            return sentence
        if _is_protected(sentence, opts.preserve_expressions):
            return sentence
        return table.apply(sentence)

    return _convert_sentences(text, opts.preserve_quotations, rewrite)


# ---------------------------------------------------------------------------
# Four-level speech style
# ---------------------------------------------------------------------------


def detect_honorific_level(sentence: str) -> HonorificLevel:
    """Classify a sentence on the humble/respectful/polite/casual scale.

    Precedence: humble, then respectful, then polite; anything else is
    casual.
    """
    if HUMBLE_MARKERS_RE.search(sentence):
        return HonorificLevel.HUMBLE
    if RESPECTFUL_MARKERS_RE.search(sentence):
        return HonorificLevel.RESPECTFUL
    if POLITE_MARKERS_RE.search(sentence):
        return HonorificLevel.POLITE
    return HonorificLevel.CASUAL


def convert_speech_style(text: str, options: Optional[SpeechStyleOptions] = None) -> str:
    """Rewrite verbs and connectives to the target speech level.

    HOW: For each convertible sentence whose level differs from the
    target, the target's verb table is applied, then the formality
    table chosen by formality_level (>= 0.5 → high, else low).
    """
    opts = options or SpeechStyleOptions()
    target = HonorificLevel(opts.target_level)
    verbs = SPEECH_TABLES[target.value]
    formality = FORMALITY_TABLES["high" if opts.formality_level >= 0.5 else "low"]

    def rewrite(sentence: str) -> str:
        if detect_honorific_level(sentence) is target:
            return sentence
        if _is_protected(sentence, opts.preserve_expressions):
            return sentence
        return formality.apply(verbs.apply(sentence))

    converted = _convert_sentences(text, opts.preserve_quotations, rewrite)
    if converted != text:
        logger.debug("Speech style → %s changed %d chars of text", target.value, len(text))
    return converted
