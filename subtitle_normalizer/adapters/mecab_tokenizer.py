"""Adapter: MeCab morphological analyzer as a Token Source.

WHY: The core stages only know the TokenSource protocol. In production
the tokens come from MeCab via mecab-python3; this adapter owns the
Tagger, serialises access to it and maps MeCab's comma-separated feature
strings onto core.models.Token.

HOW: MeCabTokenSource creates one MeCab.Tagger on construction. tokenize()
walks the node list under a lock (a Tagger is not safe to share between
threads, and stages call synchronous sources through asyncio.to_thread).
Each node's feature string is parsed by parse_features(), which accepts
both common dictionary layouts:

  IPADIC  品詞,細分類1,細分類2,細分類3,活用型,活用形,原形,読み,発音
  UniDic  pos1,pos2,pos3,pos4,cType,cForm,lForm,lemma,orth,pron,orthBase,...

Full UniDic carries a kana column with the surface reading; unidic-lite
does not, so inflected words there are read from pron.

RULES:
- "*" in a feature field means unknown and maps to ""
- base_form falls back to the surface when the dictionary has none
- Token.position is found by searching the input from the end of the
  previous token, so skipped whitespace does not shift offsets
- A missing mecab-python3 install or a broken dictionary raises
  TokenizerUnavailableError
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence

from subtitle_normalizer.core.models import Token

logger = logging.getLogger(__name__)

IPADIC_FIELD_COUNT = 9

# UniDic column indices. The 17-column layout (unidic-lite) has no kana
# column; full UniDic puts it at 20.
UNIDIC_C_FORM = 5
UNIDIC_L_FORM = 6
UNIDIC_LEMMA = 7
UNIDIC_PRON = 9
UNIDIC_ORTH_BASE = 10
UNIDIC_KANA = 20


class TokenizerUnavailableError(RuntimeError):
    """MeCab or its dictionary could not be loaded."""


def _field(features: Sequence[str], index: int) -> str:
    if index >= len(features):
        return ""
    value = features[index].strip()
    return "" if value == "*" else value


def _unidic_reading(features: Sequence[str]) -> str:
    kana = _field(features, UNIDIC_KANA)
    if kana:
        return kana
    # lForm is the lemma's reading, which only matches the surface when the
    # word is not inflected. pron writes long vowels as ー.
    if not _field(features, UNIDIC_C_FORM):
        return _field(features, UNIDIC_L_FORM) or _field(features, UNIDIC_PRON)
    return _field(features, UNIDIC_PRON)


def parse_features(surface: str, feature: str, position: int) -> Token:
    """Map one MeCab node onto a Token.

    Args:
        surface: The node's surface string.
        feature: The node's raw feature string.
        position: Character offset of surface in the analysed text.
    """
    features = feature.split(",")
    if len(features) > IPADIC_FIELD_COUNT:
        reading = _unidic_reading(features)
        base_form = _field(features, UNIDIC_ORTH_BASE) or _field(features, UNIDIC_LEMMA)
    else:
        reading = _field(features, 7)
        base_form = _field(features, 6)
    return Token(
        surface=surface,
        reading=reading,
        base_form=base_form or surface,
        part_of_speech=_field(features, 0),
        part_of_speech_detail=_field(features, 1),
        position=position,
    )


class MeCabTokenSource:
    """Synchronous Token Source backed by a single MeCab.Tagger.

    Args:
        tagger_args: Argument string for MeCab.Tagger (e.g. "-r /etc/mecabrc
                     -d /path/to/dic"). Empty means MeCab's defaults.
    """

    def __init__(self, tagger_args: Optional[str] = None) -> None:
        try:
            import MeCab
        except ImportError as exc:
            raise TokenizerUnavailableError(
                "mecab-python3 is not installed. Install with: pip install 'subtitle-normalizer[mecab]'"
            ) from exc
        try:
            self._tagger = MeCab.Tagger(tagger_args or "")
        except RuntimeError as exc:
            raise TokenizerUnavailableError("Failed to initialise MeCab: {}".format(exc)) from exc
        self._lock = threading.Lock()
        logger.info("MeCab initialised (args=%r)", tagger_args or "")

    def tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        cursor = 0
        with self._lock:
            node = self._tagger.parseToNode(text)
            while node:
                surface = node.surface
                if surface:
                    found = text.find(surface, cursor)
                    position = found if found >= 0 else cursor
                    tokens.append(parse_features(surface, node.feature, position))
                    cursor = position + len(surface)
                node = node.next
        return tokens
