"""Tests for pause and topic segmentation.

WHY: Segment boundaries drive chapter export, so the duration bounds and
carry-forward behaviour must hold exactly.

HOW: Captions are built with explicit start/end times; topic tests use
the conftest lexicon so keyword sets are known in advance.
"""

import asyncio

import pytest

from subtitle_normalizer.core.models import Caption, SegmenterOptions
from subtitle_normalizer.core.segmenter import (
    calculate_topic_similarity,
    detect_topic,
    extract_keywords,
    jaccard_similarity,
    split_by_pause,
    split_by_topic_change,
)


def _contiguous(texts, length=10.0):
    return [
        Caption(id=str(i), text=text, start_time=i * length, end_time=(i + 1) * length)
        for i, text in enumerate(texts)
    ]


def _ids(segments):
    return [[c.id for c in s.captions] for s in segments]


class TestSimilarity:

    def test_jaccard(self):
        assert jaccard_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_jaccard_empty(self):
        assert jaccard_similarity(set(), set()) == 0.0

    def test_jaccard_identical(self):
        assert jaccard_similarity({"a"}, {"a"}) == 1.0

    def test_keywords_use_base_forms(self, token_source):
        keywords = asyncio.run(extract_keywords("資料を準備しました", token_source))
        assert keywords == {"資料", "準備", "する"}

    def test_topic_similarity(self, token_source):
        similarity = asyncio.run(
            calculate_topic_similarity("野球の試合", "野球の予算", token_source)
        )
        assert similarity == pytest.approx(1 / 3)


class TestDetectTopic:

    def test_most_frequent_nouns(self, token_source):
        assert asyncio.run(detect_topic("会議と資料と会議", token_source)) == "会議、資料"

    def test_no_nouns(self, token_source):
        assert asyncio.run(detect_topic("の", token_source)) is None


class TestSplitByPause:

    def test_long_pause_splits(self, meeting_captions):
        segments = split_by_pause(meeting_captions, SegmenterOptions(min_segment_duration=0))
        assert _ids(segments) == [["1"], ["2"]]
        assert segments[0].start_time == 0.0
        assert segments[0].end_time == 5.0

    def test_short_run_carried_forward(self, meeting_captions):
        segments = split_by_pause(meeting_captions)
        assert _ids(segments) == [["1", "2"]]
        assert segments[0].end_time == 12.0

    def test_carry_forward_until_minimum(self):
        captions = [
            Caption("0", "a", 0.0, 10.0),
            Caption("1", "b", 13.0, 23.0),
            Caption("2", "c", 26.0, 36.0),
            Caption("3", "d", 39.0, 49.0),
        ]
        segments = split_by_pause(captions, SegmenterOptions(min_segment_duration=20))
        assert _ids(segments) == [["0", "1"], ["2", "3"]]

    def test_maximum_duration_enforced(self):
        captions = _contiguous(["x"] * 10)
        options = SegmenterOptions(min_segment_duration=0, max_segment_duration=30)
        segments = split_by_pause(captions, options)
        assert [len(s.captions) for s in segments] == [3, 3, 3, 1]
        assert all(s.duration <= 30 for s in segments)

    def test_short_run_carried_past_maximum(self):
        captions = [Caption("0", "a", 0.0, 10.0), Caption("1", "b", 20.0, 400.0)]
        segments = split_by_pause(captions)
        assert _ids(segments) == [["0", "1"]]
        assert segments[0].end_time == 400.0

    def test_every_caption_once(self):
        captions = _contiguous(["x"] * 7, length=25.0)
        segments = split_by_pause(captions, SegmenterOptions(min_segment_duration=0, max_segment_duration=60))
        flattened = [c.id for s in segments for c in s.captions]
        assert flattened == [c.id for c in captions]

    def test_empty(self):
        assert split_by_pause([]) == []


class TestSplitByTopic:

    def test_topic_change_splits(self, token_source):
        captions = _contiguous(["野球の試合"] * 3 + ["予算と売上"] * 3)
        options = SegmenterOptions(min_segment_duration=0, context_window_size=2)
        segments = asyncio.run(split_by_topic_change(captions, token_source, options))
        assert _ids(segments) == [["0", "1", "2"], ["3", "4", "5"]]
        assert segments[0].topic == "野球、試合"
        assert segments[1].topic == "予算、売上"

    def test_shorter_than_window(self, token_source):
        captions = _contiguous(["会議です", "資料です"])
        segments = asyncio.run(split_by_topic_change(captions, token_source))
        assert _ids(segments) == [["0", "1"]]
        assert segments[0].topic == "会議、資料"

    def test_maximum_duration_enforced(self, token_source):
        captions = _contiguous(["野球の試合"] * 4)
        options = SegmenterOptions(min_segment_duration=0, max_segment_duration=20)
        segments = asyncio.run(split_by_topic_change(captions, token_source, options))
        assert _ids(segments) == [["0", "1"], ["2", "3"]]

    def test_short_run_carried_past_maximum(self, token_source):
        captions = [
            Caption("0", "野球の試合", 0.0, 10.0),
            Caption("1", "予算と売上", 20.0, 400.0),
        ]
        segments = asyncio.run(split_by_topic_change(captions, token_source))
        assert _ids(segments) == [["0", "1"]]

    def test_empty(self, token_source):
        assert asyncio.run(split_by_topic_change([], token_source)) == []

    def test_analyzer_failure_propagates(self, failing_token_source):
        captions = _contiguous(["会議"])
        with pytest.raises(RuntimeError):
            asyncio.run(split_by_topic_change(captions, failing_token_source))
