"""Tests for the caption-level pipeline helpers."""

import asyncio

from subtitle_normalizer.core import pipeline
from subtitle_normalizer.core.models import (
    Caption,
    HonorificLevel,
    HonorificOptions,
    SentenceStyle,
    SpeechStyleOptions,
    Word,
)


class TestPunctuateCaptions:

    def test_pause_closes_caption(self):
        caption = Caption("1", "今日は会議です", 0.0, 3.0, pause_after=1.0)
        assert pipeline.punctuate_caption(caption).text == "今日は会議です。\n"

    def test_comma_pause_does_not_double_punctuate(self):
        caption = Caption("1", "今日は晴れ", 0.0, 3.0, pause_after=0.5)
        assert pipeline.punctuate_caption(caption).text == "今日は晴れ。\n"

    def test_word_gaps_used(self):
        words = (Word("今日は", 0.0, 1.0), Word("会議です", 2.0, 3.0))
        caption = Caption("1", "今日は会議です", 0.0, 3.0, words=words)
        assert pipeline.punctuate_caption(caption).text == "今日は。\n会議です。\n"

    def test_input_not_modified(self, meeting_captions):
        before = list(meeting_captions)
        result = pipeline.punctuate_captions(meeting_captions)
        assert meeting_captions == before
        assert [c.id for c in result] == ["1", "2"]
        assert result[0].text != before[0].text


class TestStyleCaptions:

    def test_honorific(self):
        captions = [Caption("1", "雨だ。", 0.0, 1.0), Caption("2", "はい。", 1.0, 2.0)]
        options = HonorificOptions(target_style=SentenceStyle.POLITE)
        result = pipeline.convert_captions_honorific(captions, options)
        assert [c.text for c in result] == ["雨です。", "はい。"]
        assert result[0].start_time == 0.0

    def test_speech_style(self):
        captions = [Caption("1", "明日行く。", 0.0, 1.0)]
        options = SpeechStyleOptions(target_level=HonorificLevel.POLITE)
        result = pipeline.convert_captions_speech_style(captions, options)
        assert result[0].text == "明日行きます。"


class TestTokenizingCaptions:

    def test_kanji_conversion_keeps_order(self, token_source):
        captions = [Caption("1", "会議", 0.0, 1.0), Caption("2", "資料", 1.0, 2.0)]
        result = asyncio.run(pipeline.convert_captions_kanji(captions, token_source))
        assert [(c.id, c.text) for c in result] == [("1", "かいぎ"), ("2", "しりょう")]

    def test_misconversions_keyed_by_caption(self, token_source):
        captions = [Caption("1", "会議", 0.0, 1.0), Caption("2", "はい", 1.0, 2.0)]
        found = asyncio.run(pipeline.detect_caption_misconversions(captions, token_source))
        assert list(found) == ["1"]
        assert len(found["1"]) == 2
