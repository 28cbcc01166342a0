"""Tests for the plain/polite and four-level speech-style converters."""

import pytest

from subtitle_normalizer.core.models import (
    HonorificLevel,
    HonorificOptions,
    SentenceStyle,
    SpeechStyleOptions,
)
from subtitle_normalizer.core.style import (
    convert_honorific_style,
    convert_speech_style,
    detect_honorific_level,
    detect_quotations,
    detect_sentence_style,
    split_sentences,
)

POLITE = HonorificOptions(target_style=SentenceStyle.POLITE)
PLAIN = HonorificOptions(target_style=SentenceStyle.PLAIN)


class TestStructure:

    def test_single_quotation(self):
        assert detect_quotations("彼は「こんにちは」と言った") == [(2, 8)]

    def test_nested_quotations(self):
        assert detect_quotations("「a『b』c」") == [(2, 4), (0, 6)]

    def test_unbalanced_closer_ignored(self):
        assert detect_quotations("」あ「") == []

    def test_split_keeps_terminators(self):
        assert split_sentences("はい。そうです！で") == ["はい。", "そうです！", "で"]

    def test_split_round_trips(self):
        text = "一。二？三"
        assert "".join(split_sentences(text)) == text


class TestSentenceStyle:

    @pytest.mark.parametrize("sentence,expected", [
        ("雨です。", SentenceStyle.POLITE),
        ("雨だ。", SentenceStyle.PLAIN),
        ("資料を準備する。", SentenceStyle.PLAIN),
        ("はい", SentenceStyle.UNKNOWN),
    ])
    def test_detect(self, sentence, expected):
        assert detect_sentence_style(sentence) is expected


class TestHonorificConversion:

    def test_plain_to_polite(self):
        assert convert_honorific_style("今日は晴れだ。", POLITE) == "今日は晴れです。"

    def test_polite_to_plain(self):
        assert convert_honorific_style("明日は雨です。", PLAIN) == "明日は雨だ。"

    def test_past_tense_to_plain(self):
        assert convert_honorific_style("資料を準備しました。", PLAIN) == "資料を準備した。"

    def test_converting_twice_equals_once(self):
        once = convert_honorific_style("今日は晴れだ。資料を準備する。", POLITE)
        assert once == "今日は晴れです。資料を準備します。"
        assert convert_honorific_style(once, POLITE) == once

    def test_unknown_sentence_unchanged(self):
        assert convert_honorific_style("はい。", POLITE) == "はい。"

    def test_quotation_preserved(self):
        text = "「雨だ。」は彼の口癖だ。"
        assert convert_honorific_style(text, POLITE) == text

    def test_sentence_opening_with_quotation_copied(self):
        assert convert_honorific_style("「こんにちは」と言うのだ。", POLITE) == "「こんにちは」と言うのだ。"

    def test_mid_sentence_quotation_masked(self):
        assert convert_honorific_style("彼は「雨だ」と言うのだ。", POLITE) == "彼は「雨だ」と言うのです。"

    def test_terminator_inside_mid_sentence_quotation(self):
        text = "彼は「雨だ。」と言うのだ。"
        assert convert_honorific_style(text, POLITE) == text

    def test_quotation_converted_when_not_preserved(self):
        options = HonorificOptions(target_style=SentenceStyle.POLITE, preserve_quotations=False)
        assert convert_honorific_style("「雨だ。」", options) == "「雨です。」"

    def test_protected_expression(self):
        options = HonorificOptions(preserve_expressions=("晴れ",))
        assert convert_honorific_style("今日は晴れだ。", options) == "今日は晴れだ。"

    def test_unknown_target_rejected(self):
        with pytest.raises(ValueError):
            convert_honorific_style("雨だ。", HonorificOptions(target_style=SentenceStyle.UNKNOWN))

    def test_empty_text(self):
        assert convert_honorific_style("", POLITE) == ""


class TestHonorificLevel:

    @pytest.mark.parametrize("sentence,expected", [
        ("資料を拝見します。", HonorificLevel.HUMBLE),
        ("先生がいらっしゃる。", HonorificLevel.RESPECTFUL),
        ("明日行きます。", HonorificLevel.POLITE),
        ("明日行く。", HonorificLevel.CASUAL),
    ])
    def test_detect(self, sentence, expected):
        assert detect_honorific_level(sentence) is expected


class TestSpeechStyle:

    def test_humble(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.HUMBLE)
        assert convert_speech_style("資料を見る。", options) == "資料を拝見する。"

    def test_respectful(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.RESPECTFUL)
        assert convert_speech_style("先生が来る。", options) == "先生がいらっしゃる。"

    def test_polite(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.POLITE)
        assert convert_speech_style("明日行く。", options) == "明日行きます。"

    def test_casual(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.CASUAL, formality_level=0.2)
        assert convert_speech_style("明日行きます。", options) == "明日行く。"

    def test_high_formality_connective(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.POLITE, formality_level=0.7)
        assert convert_speech_style("行くけど、雨だ。", options) == "行きますけれども、雨だ。"

    def test_low_formality_connective(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.CASUAL, formality_level=0.2)
        result = convert_speech_style("行きますけれども、雨です。", options)
        assert result == "行くけど、雨です。"

    def test_converted_connective_not_rewritten_again(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.HUMBLE)
        assert convert_speech_style("雨ですから行く。", options) == "雨ですからまいる。"

    def test_protected_expression(self):
        options = SpeechStyleOptions(
            target_level=HonorificLevel.HUMBLE, preserve_expressions=("資料",)
        )
        assert convert_speech_style("資料を見る。", options) == "資料を見る。"

    def test_quotation_preserved(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.POLITE)
        assert convert_speech_style("彼は「見る」と言う。", options) == "彼は「見る」と言います。"

    def test_sentence_already_at_target(self):
        options = SpeechStyleOptions(target_level=HonorificLevel.POLITE)
        assert convert_speech_style("明日行きます。", options) == "明日行きます。"

    @pytest.mark.parametrize("level", list(HonorificLevel))
    @pytest.mark.parametrize("formality", [0.2, 0.8])
    def test_converting_twice_equals_once(self, level, formality):
        options = SpeechStyleOptions(target_level=level, formality_level=formality)
        text = "明日行くけど、雨なので見る。資料を見ますから、行きます。じゃあ雨ですから行く。"
        once = convert_speech_style(text, options)
        assert convert_speech_style(once, options) == once
