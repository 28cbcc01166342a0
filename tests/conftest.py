"""Shared test fixtures for the subtitle_normalizer test suite.

WHY: Every tokenizing stage needs a Token Source, and a real MeCab
install (with a dictionary) is not something the test run can rely on.
A small lookup-table tokenizer gives deterministic tokens for the
handful of words the tests use.

HOW: FakeTokenSource does greedy longest-match over LEXICON, skips
whitespace like MeCab does, and turns unknown characters into
single-character 記号 tokens without a reading. Async and failing
variants cover the other Token Source shapes.

RULES:
- LEXICON values are (reading, base_form, part_of_speech, detail)
- Token positions are exact character offsets into the input
- The fake records every text it was asked to tokenize
"""

from typing import Dict, List, Tuple

import pytest

from subtitle_normalizer.core.models import Caption, Token

LEXICON: Dict[str, Tuple[str, str, str, str]] = {
    "会議": ("カイギ", "会議", "名詞", "一般"),
    "資料": ("シリョウ", "資料", "名詞", "一般"),
    "準備": ("ジュンビ", "準備", "名詞", "サ変接続"),
    "今日": ("キョウ", "今日", "名詞", "副詞可能"),
    "東京": ("トウキョウ", "東京", "名詞", "固有名詞"),
    "田中": ("タナカ", "田中", "名詞", "固有名詞"),
    "野球": ("ヤキュウ", "野球", "名詞", "一般"),
    "試合": ("シアイ", "試合", "名詞", "サ変接続"),
    "予算": ("ヨサン", "予算", "名詞", "一般"),
    "売上": ("ウリアゲ", "売上", "名詞", "一般"),
    "見る": ("ミル", "見る", "動詞", "自立"),
    "大きい": ("オオキイ", "大きい", "形容詞", "自立"),
    "はい": ("ハイ", "はい", "感動詞", ""),
    "です": ("デス", "です", "助動詞", ""),
    "し": ("シ", "する", "動詞", "自立"),
    "まし": ("マシ", "ます", "助動詞", ""),
    "た": ("タ", "た", "助動詞", ""),
    "は": ("ハ", "は", "助詞", "係助詞"),
    "の": ("ノ", "の", "助詞", "連体化"),
    "を": ("ヲ", "を", "助詞", "格助詞"),
    "と": ("ト", "と", "助詞", "並立助詞"),
}

_MAX_KEY = max(len(k) for k in LEXICON)


class FakeTokenSource:
    """Synchronous lookup-table Token Source."""

    def __init__(self, lexicon: Dict[str, Tuple[str, str, str, str]] = None) -> None:
        self.lexicon = dict(LEXICON if lexicon is None else lexicon)
        self.calls: List[str] = []

    def _tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        i = 0
        while i < len(text):
            if text[i].isspace():
                i += 1
                continue
            for size in range(min(_MAX_KEY, len(text) - i), 0, -1):
                surface = text[i:i + size]
                if surface in self.lexicon:
                    reading, base, pos, detail = self.lexicon[surface]
                    tokens.append(Token(surface, reading, base, pos, detail, i))
                    i += size
                    break
            else:
                char = text[i]
                tokens.append(Token(char, "", char, "記号", "一般", i))
                i += 1
        return tokens

    def tokenize(self, text: str) -> List[Token]:
        self.calls.append(text)
        return self._tokenize(text)


class AsyncFakeTokenSource(FakeTokenSource):
    """Same lexicon, but tokenize() is a coroutine."""

    async def tokenize(self, text: str) -> List[Token]:
        self.calls.append(text)
        return self._tokenize(text)


class FailingTokenSource:
    """Token Source whose analyzer was never loaded."""

    def tokenize(self, text: str) -> List[Token]:
        raise RuntimeError("analyzer not loaded")


@pytest.fixture
def token_source():
    return FakeTokenSource()


@pytest.fixture
def async_token_source():
    return AsyncFakeTokenSource()


@pytest.fixture
def failing_token_source():
    return FailingTokenSource()


@pytest.fixture
def meeting_captions():
    """Two captions separated by a 2.5 s silence."""
    return [
        Caption(id="1", text="今日は会議です", start_time=0.0, end_time=5.0),
        Caption(id="2", text="資料を準備しました", start_time=7.5, end_time=12.0),
    ]
