"""End-to-end tests for the command-line interface.

WHY: The CLI is how editors run the whole chain on a file. These tests
drive main() with explicit argv against a caption file in tmp_path and
inspect the files it writes.

HOW: MeCab is replaced with the conftest FakeTokenSource by patching
cli.MeCabTokenSource, so stages that need tokens run without a real
analyzer.

RULES:
- main() exits with status 1 on any user error
- Output files land next to the input unless --output-dir is given
"""

import json

import pytest

from subtitle_normalizer import cli


@pytest.fixture
def caption_file(tmp_path):
    path = tmp_path / "meeting.json"
    path.write_text(json.dumps([
        {"id": "1", "text": "今日は会議です", "startTime": 0.0, "endTime": 5.0, "pauseAfter": 2.5},
        {"id": "2", "text": "資料を準備しました", "startTime": 7.5, "endTime": 12.0},
    ], ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def fake_mecab(monkeypatch, token_source):
    monkeypatch.setattr(cli, "MeCabTokenSource", lambda args=None: token_source)
    return token_source


class TestMain:

    def test_writes_selected_formats(self, caption_file, capsys):
        cli.main([str(caption_file), "--formats", "srt,segments_json"])
        srt = (caption_file.parent / "meeting-captions.srt").read_text(encoding="utf-8")
        assert srt.startswith("1\n00:00:00,000 --> 00:00:05,000\n今日は会議です。\n")
        chapters = json.loads(
            (caption_file.parent / "meeting-segments.json").read_text(encoding="utf-8")
        )
        assert chapters["source"] == "meeting.json"
        assert len(chapters["segments"]) == 1
        assert "Done!" in capsys.readouterr().err

    def test_all_formats_by_default(self, caption_file):
        cli.main([str(caption_file)])
        names = sorted(p.name for p in caption_file.parent.iterdir())
        assert names == [
            "meeting-captions.srt",
            "meeting-segments.json",
            "meeting-transcript.txt",
            "meeting.json",
        ]

    def test_existing_output_not_overwritten(self, caption_file):
        cli.main([str(caption_file), "--formats", "srt"])
        cli.main([str(caption_file), "--formats", "srt"])
        assert (caption_file.parent / "meeting-captions-2.srt").exists()

    def test_output_dir(self, caption_file, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        cli.main([str(caption_file), "--formats", "plain_text", "--output-dir", str(out)])
        text = (out / "meeting-transcript.txt").read_text(encoding="utf-8")
        assert text == "今日は会議です。\n資料を準備しました。\n"

    def test_plain_style(self, caption_file):
        cli.main([str(caption_file), "--formats", "plain_text", "--style", "plain"])
        text = (caption_file.parent / "meeting-transcript.txt").read_text(encoding="utf-8")
        assert text == "今日は会議だ。\n資料を準備した。\n"

    def test_misconversion_report(self, caption_file, fake_mecab):
        cli.main([str(caption_file), "--formats", "srt", "--check"])
        report = json.loads(
            (caption_file.parent / "meeting-misconversions.json").read_text(encoding="utf-8")
        )
        assert sorted(report) == ["1", "2"]
        assert report["1"][0]["text"] == "会議"

    def test_review_report(self, caption_file):
        cli.main([str(caption_file), "--formats", "srt", "--review"])
        report = json.loads((caption_file.parent / "meeting-review.json").read_text(encoding="utf-8"))
        assert report == []

    def test_kana(self, caption_file, fake_mecab):
        cli.main([str(caption_file), "--formats", "plain_text", "--kana"])
        text = (caption_file.parent / "meeting-transcript.txt").read_text(encoding="utf-8")
        assert "かいぎ" in text

    def test_dictionary_applied(self, caption_file, tmp_path):
        terms = tmp_path / "dict.json"
        terms.write_text(json.dumps(
            [{"term": "資料", "correctText": "書類"}], ensure_ascii=False
        ), encoding="utf-8")
        cli.main([
            str(caption_file), "--formats", "plain_text",
            "--dictionary", str(terms), "--apply-dictionary",
        ])
        text = (caption_file.parent / "meeting-transcript.txt").read_text(encoding="utf-8")
        assert "書類を準備しました。" in text


class TestErrors:

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main([str(tmp_path / "missing.json")])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_unknown_format(self, caption_file, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main([str(caption_file), "--formats", "premiere"])
        assert exc.value.code == 1
        assert "Unknown format" in capsys.readouterr().err

    def test_invalid_caption_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"text": "時間なし"}], ensure_ascii=False), encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            cli.main([str(path)])
        assert exc.value.code == 1
        assert "Invalid caption data" in capsys.readouterr().err

    def test_tokenizer_unavailable(self, caption_file, monkeypatch, capsys):
        def unavailable(args=None):
            raise cli.TokenizerUnavailableError("mecab-python3 is not installed")

        monkeypatch.setattr(cli, "MeCabTokenSource", unavailable)
        with pytest.raises(SystemExit) as exc:
            cli.main([str(caption_file), "--check"])
        assert exc.value.code == 1
        assert "mecab-python3" in capsys.readouterr().err
