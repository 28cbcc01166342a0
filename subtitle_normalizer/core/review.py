"""Heuristic transcription review.

Three independent passes over a caption list, each producing
ReviewResult suggestions for a human editor:

  context   a caption sharing no word with its context (itself and
            ±3 captions), or a caption that stops mid-sentence and could be joined
            with the next one
  grammar   missing period after です, a stuttered kana pair, repeated
            punctuation
  mistakes  filler words (えーと, あのー, んー)

Results are advisory and never applied automatically.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Set, Tuple

from subtitle_normalizer.core.models import Caption, ReviewResult

CONTEXT_WINDOW = 3

_WORD_RE = re.compile(r"[一-龯ぁ-んァ-ヶー]{2,}")
_TERMINATED_RE = re.compile(r"[。！？\n]$")

# (pattern, replacement, reason); first match wins per caption.
_GRAMMAR_PATTERNS: Tuple[Tuple[re.Pattern, Callable[[re.Match], str], str], ...] = (
    (
        re.compile(r"です(?!。|か|が|けど|ね|よ)"),
        lambda m: m.group(0) + "。",
        "文末の句点が抜けている可能性があります",
    ),
    (
        re.compile(r"([ぁ-んァ-ン])([ぁ-んァ-ン])\1\2"),
        lambda m: m.group(0)[:2],
        "音声認識による単語の重複が発生している可能性があります",
    ),
    (
        re.compile(r"([、。！？])\1+"),
        lambda m: m.group(1),
        "句読点が重複しています",
    ),
)

_FILLER_RE = re.compile(r"えーと|あのー|んー")
_FILLER_REASON = "フィラー（間投詞）を削除することを推奨します"

_TOPIC_REASON = "前後の文脈と話題が大きく異なっている可能性があります。内容を確認してください。"
_JOIN_REASON = "文が途中で途切れている可能性があります。次のセグメントと結合することを検討してください。"


def _words(text: str) -> Set[str]:
    return set(_WORD_RE.findall(text))


def _contextual_anomaly(captions: Sequence[Caption], index: int) -> Optional[ReviewResult]:
    caption = captions[index]
    start = max(0, index - CONTEXT_WINDOW)
    end = min(len(captions), index + CONTEXT_WINDOW + 1)
    context_words = _words(" ".join(c.text for c in captions[start:end]))
    if context_words and not context_words & _words(caption.text):
        return ReviewResult(caption.id, caption.text, caption.text, 0.7, _TOPIC_REASON)

    if len(caption.text) > 3 and not _TERMINATED_RE.search(caption.text) and index + 1 < end:
        following = captions[index + 1]
        return ReviewResult(
            caption.id, caption.text, caption.text + following.text, 0.6, _JOIN_REASON
        )
    return None


def _grammar_issue(caption: Caption) -> Optional[ReviewResult]:
    for pattern, replace, reason in _GRAMMAR_PATTERNS:
        if pattern.search(caption.text):
            suggested = pattern.sub(replace, caption.text, count=1)
            return ReviewResult(caption.id, caption.text, suggested, 0.8, reason)
    return None


def _common_mistake(caption: Caption) -> Optional[ReviewResult]:
    if _FILLER_RE.search(caption.text):
        return ReviewResult(
            caption.id, caption.text, _FILLER_RE.sub("", caption.text), 0.9, _FILLER_REASON
        )
    return None


def review_transcription(captions: Sequence[Caption]) -> List[ReviewResult]:
    """Run every review pass and return de-duplicated results in order.

    Contextual findings for all captions come first, then the grammar and
    filler findings caption by caption.
    """
    found: List[Optional[ReviewResult]] = [
        _contextual_anomaly(captions, i) for i in range(len(captions))
    ]
    for caption in captions:
        found.append(_grammar_issue(caption))
        found.append(_common_mistake(caption))

    results: List[ReviewResult] = []
    seen = set()
    for result in found:
        if result is None or result in seen:
            continue
        seen.add(result)
        results.append(result)
    return results
