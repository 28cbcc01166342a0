"""Command-line interface for the Subtitle Normalizer.

WHY: Editors normalise whole transcript files from the terminal or from
scripts. The CLI wires the stages together behind one command: load a
caption JSON file, punctuate, restyle, segment, check and write the
selected output formats.

HOW: argparse collects the input file and stage switches; the async
pipeline runs via asyncio.run(). MeCab is only started when a stage
needs tokens (kana conversion, topic segmentation, misconversion check).
Status messages go to stderr; output files are saved next to the input
(or to --output-dir) as {stem}{suffix}.

RULES:
- Positional argument: caption JSON file (list, or {"captions": [...]})
- Stage order: dictionary → punctuation → style → speech level → kana →
  segmentation → formatters → reports
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix on conflict
- Errors print "Error: ..." to stderr and exit with status 1
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from subtitle_normalizer import config
from subtitle_normalizer.adapters.mecab_tokenizer import MeCabTokenSource, TokenizerUnavailableError
from subtitle_normalizer.core import pipeline
from subtitle_normalizer.core.models import (
    Caption,
    HonorificLevel,
    HonorificOptions,
    KanaConversionOptions,
    Segment,
    SentenceStyle,
    SpeechStyleOptions,
)
from subtitle_normalizer.core.review import review_transcription
from subtitle_normalizer.core.segmenter import split_by_pause, split_by_topic_change
from subtitle_normalizer.core.tokens import TokenSource
from subtitle_normalizer.dictionary import UserDictionary
from subtitle_normalizer.formatters import FORMATTERS, get_formatter
from subtitle_normalizer.formatters.base import Document, FormatterOutput
from subtitle_normalizer.schemas import load_caption_data

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return {stem}{suffix}, or {stem}{name}-N{ext} if that exists."""
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
    return path


def load_captions(path: Path) -> List[Caption]:
    """Read and validate a caption JSON file.

    Raises:
        CaptionFormatError: If the JSON does not describe captions.
        ValueError: If the file is not valid JSON.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return load_caption_data(data)


def _needs_tokens(args: argparse.Namespace) -> bool:
    return args.kana or args.segment == "topic" or args.check


def _load_dictionary(path: Optional[str]) -> Optional[UserDictionary]:
    if not path:
        return None
    if path.endswith(".json"):
        return UserDictionary.load(path)
    return UserDictionary.from_terms_file(path)


def _report(suffix: str, payload) -> FormatterOutput:
    return FormatterOutput(
        suffix=suffix,
        content=json.dumps(payload, indent=2, ensure_ascii=False),
        media_type="application/json",
    )


async def _run_pipeline(
    args: argparse.Namespace,
    token_source: Optional[TokenSource] = None,
) -> List[Path]:
    """Run every selected stage and save the outputs.

    Returns:
        Paths of the files written, in the order they were saved.
    """
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        raise ValueError("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        formatters = [get_formatter(key) for key in format_keys]
    else:
        formatters = [cls() for cls in FORMATTERS.values()]

    _status("Loading captions...")
    captions = load_captions(input_path)
    _status("  {} captions".format(len(captions)))

    dictionary = _load_dictionary(args.dictionary)
    if dictionary is not None:
        _status("  Dictionary: {} entries".format(len(dictionary)))
        if args.apply_dictionary:
            captions = [dataclasses.replace(c, text=dictionary.apply(c.text)) for c in captions]

    if token_source is None and _needs_tokens(args):
        _status("Starting MeCab...")
        token_source = MeCabTokenSource(args.mecab_args)

    _status("Punctuating...")
    captions = pipeline.punctuate_captions(captions, config.default_punctuation_options())

    preserve = tuple(args.preserve or ())
    if args.style:
        _status("Converting to {} style...".format(args.style))
        captions = pipeline.convert_captions_honorific(
            captions,
            HonorificOptions(target_style=SentenceStyle(args.style), preserve_expressions=preserve),
        )
    if args.speech_level:
        _status("Converting to {} speech level...".format(args.speech_level))
        captions = pipeline.convert_captions_speech_style(
            captions,
            SpeechStyleOptions(
                target_level=HonorificLevel(args.speech_level),
                formality_level=args.formality,
                preserve_expressions=preserve,
            ),
        )
    if args.kana:
        _status("Converting kanji to hiragana...")
        captions = await pipeline.convert_captions_kanji(
            captions, token_source, KanaConversionOptions(convert_numbers=args.convert_numbers)
        )

    segments: List[Segment] = []
    seg_options = config.default_segmenter_options()
    if args.segment == "pause":
        segments = split_by_pause(captions, seg_options)
    elif args.segment == "topic":
        segments = await split_by_topic_change(captions, token_source, seg_options)
    if segments:
        _status("  {} segments".format(len(segments)))

    document = Document(captions=captions, segments=segments, source_filename=input_path.name)
    outputs: List[FormatterOutput] = []
    for formatter in formatters:
        _status("  Running {} formatter...".format(formatter.name))
        outputs.extend(formatter.format(document))

    if args.check:
        _status("Checking for misconversions...")
        found = await pipeline.detect_caption_misconversions(
            captions, token_source, config.default_misconversion_options(), dictionary
        )
        outputs.append(_report(
            "-misconversions.json",
            {cid: [c.to_dict() for c in cands] for cid, cands in found.items()},
        ))
    if args.review:
        _status("Reviewing transcription...")
        outputs.append(_report("-review.json", [r.to_dict() for r in review_transcription(captions)]))

    saved: List[Path] = []
    stem = input_path.stem
    for output in outputs:
        path = _save_output(output, stem, output_dir)
        saved.append(path)
        _status("  Saved: {}".format(path.name))
    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="subtitle_normalizer",
        description="Punctuate, restyle, check and segment Japanese caption files.",
    )
    parser.add_argument("input_file", help="Caption JSON file to normalise.")
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS))),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "--style",
        choices=[SentenceStyle.PLAIN.value, SentenceStyle.POLITE.value],
        default=None,
        help="Convert sentence endings to plain (常体) or polite (敬体) style.",
    )
    parser.add_argument(
        "--speech-level",
        choices=[level.value for level in HonorificLevel],
        default=None,
        help="Convert verbs and connectives to this speech level.",
    )
    parser.add_argument(
        "--formality",
        type=float,
        default=0.7,
        help="Formality for --speech-level, 0..1 (default: %(default)s).",
    )
    parser.add_argument(
        "--preserve",
        action="append",
        default=None,
        help="Expression that blocks style conversion of its sentence. Repeatable.",
    )
    parser.add_argument("--kana", action="store_true", help="Convert short kanji words to hiragana.")
    parser.add_argument(
        "--convert-numbers",
        action="store_true",
        help="With --kana, also write digits as kanji numerals.",
    )
    parser.add_argument(
        "--segment",
        choices=["pause", "topic", "none"],
        default="pause",
        help="Segmentation strategy (default: %(default)s).",
    )
    parser.add_argument("--check", action="store_true", help="Write a misconversion report.")
    parser.add_argument("--review", action="store_true", help="Write a transcription review report.")
    parser.add_argument(
        "--dictionary",
        default=config.DICTIONARY_PATH,
        help="User dictionary (.json) or terms file (.txt).",
    )
    parser.add_argument(
        "--apply-dictionary",
        action="store_true",
        help="Rewrite dictionary terms to their correct text before punctuation.",
    )
    parser.add_argument(
        "--mecab-args",
        default=config.MECAB_ARGS,
        help="Argument string passed to MeCab.Tagger.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m subtitle_normalizer``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    config.configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("CLI arguments: %s", vars(args))
    try:
        saved = asyncio.run(_run_pipeline(args))
    except (ValueError, OSError, TokenizerUnavailableError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    _status("")
    _status("Done! Saved {} file(s)".format(len(saved)))


if __name__ == "__main__":
    main()
