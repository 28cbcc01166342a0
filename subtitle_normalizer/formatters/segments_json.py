"""Segment chapters JSON formatter.

WHY: Chapter markers and edit decision tools need segment boundaries,
not caption text. This format lists each segment with its time range,
topic label and the ids of the captions it contains.

HOW: Builds one dict per segment, validates the whole document against
schemas.SEGMENTS_SCHEMA with jsonschema and serialises it with
ensure_ascii=False so Japanese stays readable.

RULES:
- Segment indices are 1-based
- A document without segments yields an empty "segments" list
- Schema validation is mandatory; invalid output raises
- Output suffix: "-segments.json", media type "application/json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import jsonschema

from subtitle_normalizer.schemas import SEGMENTS_SCHEMA
from subtitle_normalizer.formatters.base import BaseFormatter, Document, FormatterOutput


class SegmentsJSONFormatter(BaseFormatter):
    """Formatter that writes segment chapters as JSON."""

    @property
    def name(self) -> str:
        return "Segments JSON"

    def format(self, document: Document) -> List[FormatterOutput]:
        """Render segments as chapters JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to SEGMENTS_SCHEMA.
        """
        output: Dict[str, Any] = {
            "source": document.source_filename,
            "segments": [
                {
                    "index": i,
                    "startTime": segment.start_time,
                    "endTime": segment.end_time,
                    "topic": segment.topic,
                    "captionIds": [c.id for c in segment.captions],
                    "text": "".join(c.text for c in segment.captions),
                }
                for i, segment in enumerate(document.segments, start=1)
            ],
        }

        jsonschema.validate(instance=output, schema=SEGMENTS_SCHEMA)

        return [
            FormatterOutput(
                suffix="-segments.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
