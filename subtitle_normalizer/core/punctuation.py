"""Punctuation completion for raw recognizer captions.

WHY: Speech recognizers emit Japanese captions with little or no
punctuation. Editors need 。 at sentence ends and 、 at natural pauses
before the text can be styled, reviewed or exported. Timing data tells
us where the speaker actually paused; when it is missing, length and
grammar heuristics fill in.

HOW: complete() is a fixed five-step pipeline of regex rewrites:
  1. append 。 when the text has no closing punctuation, turning a
     trailing 、 into 。
  2. force 。 after every run of max_sentence_length plain characters
  3. force 、 after every run of min_comma_interval plain characters
  4. add 、 after grammar connectives (rules.GRAMMAR_RULES)
  5. optionally strip post-punctuation whitespace and break lines after
     sentence terminators
complete_with_pause() and complete_with_word_timing() use silence
lengths and run before complete() in the caption pipeline.

RULES:
- Pure string transforms with no state, no exceptions, empty input unchanged
- A gap or pause exactly at a threshold gets the larger punctuation
- Runs are counted in characters that are neither punctuation nor
  whitespace, so any 、 or 。 already in place restarts the count
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from subtitle_normalizer.core.models import PauseThreshold, PunctuationOptions, Word
from subtitle_normalizer.core.rules import CLOSERS, GRAMMAR_RULES, PUNCTUATION, TERMINATORS

_CLOSERS = re.escape(CLOSERS)
_PUNCT = re.escape(PUNCTUATION)
_TERMS = re.escape(TERMINATORS)

_MISSING_TERMINATOR_RE = re.compile(r"([^{}\s])\s*$".format(_CLOSERS))
_MISSING_COMMA_RE = re.compile(r"([^{}\s])\s*$".format(_PUNCT))
_TRAILING_COMMA_RE = re.compile(r"、(\s*)$")
_SPACE_AFTER_PUNCT_RE = re.compile(r"([{}])\s+".format(_PUNCT))
_TERMINATOR_RE = re.compile(r"([{}])".format(_TERMS))


def _run_pattern(length: int) -> re.Pattern:
    # `length` plain characters followed by at least one more
    return re.compile(r"([^{0}\s]{{{1}}})(?=[^{0}\s])".format(_PUNCT, length))


def complete_with_grammar(text: str) -> str:
    """Insert 、 after conjunctions, closing quotes and connective particles."""
    for rule in GRAMMAR_RULES:
        text = rule.sub(r"\1、", text)
    return text


def complete(text: str, options: Optional[PunctuationOptions] = None) -> str:
    """Complete punctuation in a caption text.

    Args:
        text: Raw caption text.
        options: Length thresholds and spacing switch; defaults apply
                 when omitted.

    Returns:
        The punctuated text. Empty input is returned unchanged.
    """
    if not text:
        return text
    opts = options or PunctuationOptions()

    formatted = _TRAILING_COMMA_RE.sub(r"。\1", text)
    formatted = _MISSING_TERMINATOR_RE.sub(r"\1。", formatted)
    if opts.max_sentence_length > 0:
        formatted = _run_pattern(opts.max_sentence_length).sub(r"\1。", formatted)
    if opts.min_comma_interval > 0:
        formatted = _run_pattern(opts.min_comma_interval).sub(r"\1、", formatted)

    formatted = complete_with_grammar(formatted)

    if opts.adjust_spacing:
        formatted = _SPACE_AFTER_PUNCT_RE.sub(r"\1", formatted)
        formatted = _TERMINATOR_RE.sub("\\1\n", formatted)

    return formatted


def complete_with_pause(
    text: str,
    pause_duration: float,
    thresholds: Optional[PauseThreshold] = None,
) -> str:
    """Close a caption according to the silence that follows it.

    RULES:
    - pause >= period threshold → trailing 。
    - comma threshold <= pause < period threshold → trailing 、
    - shorter pauses, or text already ending in punctuation → unchanged
    """
    if not text:
        return text
    limits = thresholds or PauseThreshold()
    if pause_duration >= limits.period:
        return _MISSING_TERMINATOR_RE.sub(r"\1。", text, count=1)
    if pause_duration >= limits.comma:
        return _MISSING_COMMA_RE.sub(r"\1、", text, count=1)
    return text


def complete_with_word_timing(
    text: str,
    words: Sequence[Word],
    thresholds: Optional[PauseThreshold] = None,
) -> str:
    """Insert punctuation at word boundaries where the speaker paused.

    WHY: Per-word timestamps expose pauses inside a caption that a single
    trailing pause value cannot.

    HOW: Words are located in the text left to right, each search
    starting where the previous word ended, so an insertion always lands
    right after the word it belongs to. For each adjacent pair the gap
    next.start_time - current.end_time decides between 。, 、 or nothing.

    RULES:
    - A word whose text cannot be found is skipped (no insertion)
    - No insertion when punctuation already follows the word
    - The last word never gets punctuation here (complete() handles it)
    """
    if not text or len(words) < 2:
        return text
    limits = thresholds or PauseThreshold()

    result = text
    cursor = 0
    for current, following in zip(words, words[1:]):
        word_text = current.text.strip()
        if not word_text:
            continue
        found = result.find(word_text, cursor)
        if found < 0:
            continue
        pos = found + len(word_text)
        cursor = pos

        gap = following.start_time - current.end_time
        if gap >= limits.period:
            mark = "。"
        elif gap >= limits.comma:
            mark = "、"
        else:
            continue
        if pos < len(result) and result[pos] in PUNCTUATION:
            continue
        result = result[:pos] + mark + result[pos:]
        cursor = pos + 1

    return result
