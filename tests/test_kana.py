"""Tests for kanji → hiragana conversion."""

import asyncio

from subtitle_normalizer.core.kana import (
    convert_kanji_to_hiragana,
    digits_to_kanji,
    katakana_to_hiragana,
)
from subtitle_normalizer.core.models import KanaConversionOptions


def _convert(text, source, **overrides):
    return asyncio.run(convert_kanji_to_hiragana(text, source, KanaConversionOptions(**overrides)))


class TestCharacterHelpers:

    def test_katakana_to_hiragana(self):
        assert katakana_to_hiragana("カイギ") == "かいぎ"

    def test_non_katakana_untouched(self):
        assert katakana_to_hiragana("会議ーabc") == "会議ーabc"

    def test_digits_to_kanji(self):
        assert digits_to_kanji("2０2") == "二〇二"


class TestConvert:

    def test_nouns_converted(self, token_source):
        assert _convert("会議の資料", token_source) == "かいぎのしりょう"

    def test_proper_noun_preserved(self, token_source):
        assert _convert("東京の会議", token_source) == "東京のかいぎ"

    def test_proper_noun_converted_when_allowed(self, token_source):
        result = _convert("東京の会議", token_source, preserve_proper_nouns=False)
        assert result == "とうきょうのかいぎ"

    def test_long_words_kept(self, token_source):
        assert _convert("会議の資料", token_source, max_kanji_length=1) == "会議の資料"

    def test_numbers(self, token_source):
        assert _convert("会議は3時", token_source, convert_numbers=True) == "かいぎは三時"

    def test_numbers_left_alone_by_default(self, token_source):
        assert _convert("会議は3時", token_source) == "かいぎは3時"

    def test_whitespace_survives(self, token_source):
        assert _convert("会議 資料", token_source) == "かいぎ しりょう"

    def test_target_parts_of_speech(self, token_source):
        assert _convert("会議の資料", token_source, target_parts_of_speech=("動詞",)) == "会議の資料"

    def test_empty_text(self, token_source):
        assert _convert("", token_source) == ""
        assert token_source.calls == []
