"""JSON schemas for caption input files and segment chapter output.

WHY: Caption files come from editors and other tools; a clear error on a
malformed file beats a KeyError deep in a stage. The chapters JSON is
consumed by other tools, so it is validated before it is written.

HOW: Both schemas are plain dicts (draft 2020-12) checked with
jsonschema.validate(). load_caption_data() wraps validation failures in
CaptionFormatError so the CLI and API can report them uniformly.
"""

from __future__ import annotations

from typing import Any, Dict, List

import jsonschema

from subtitle_normalizer.core.models import Caption

_NUMBER = {"type": "number"}

_WORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["text"],
    "properties": {
        "text": {"type": "string"},
        "startTime": _NUMBER,
        "endTime": _NUMBER,
        "start_time": _NUMBER,
        "end_time": _NUMBER,
    },
}

CAPTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["text"],
    "anyOf": [
        {"required": ["startTime", "endTime"]},
        {"required": ["start_time", "end_time"]},
    ],
    "properties": {
        "id": {"type": ["string", "integer"]},
        "text": {"type": "string"},
        "startTime": _NUMBER,
        "endTime": _NUMBER,
        "start_time": _NUMBER,
        "end_time": _NUMBER,
        "pauseAfter": {"type": ["number", "null"]},
        "pause_after": {"type": ["number", "null"]},
        "words": {"type": ["array", "null"], "items": _WORD_SCHEMA},
    },
}

CAPTION_FILE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "oneOf": [
        {"type": "array", "items": CAPTION_SCHEMA},
        {
            "type": "object",
            "required": ["captions"],
            "properties": {"captions": {"type": "array", "items": CAPTION_SCHEMA}},
        },
    ],
}

SEGMENTS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["source", "segments"],
    "properties": {
        "source": {"type": "string"},
        "segments": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["index", "startTime", "endTime", "captionIds", "text"],
                "properties": {
                    "index": {"type": "integer", "minimum": 1},
                    "startTime": _NUMBER,
                    "endTime": _NUMBER,
                    "topic": {"type": ["string", "null"]},
                    "captionIds": {"type": "array", "items": {"type": "string"}},
                    "text": {"type": "string"},
                },
            },
        },
    },
}


class CaptionFormatError(ValueError):
    """A caption file does not match CAPTION_FILE_SCHEMA."""


def load_caption_data(data: Any) -> List[Caption]:
    """Validate decoded caption JSON and build Caption records.

    Accepts either a bare list of captions or {"captions": [...]}.

    Raises:
        CaptionFormatError: If the data does not match the caption schema.
    """
    try:
        jsonschema.validate(instance=data, schema=CAPTION_FILE_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise CaptionFormatError("Invalid caption data: {}".format(exc.message)) from exc
    items = data["captions"] if isinstance(data, dict) else data
    return [Caption.from_dict(item, index) for index, item in enumerate(items)]
