"""User dictionary of known terms and their correct spellings.

WHY: Proper nouns, product names and jargon are routinely mis-transcribed
and then flagged again and again by the misconversion detector. Editors
keep a dictionary of such terms: the detector skips them, and apply()
rewrites known wrong spellings (by term or by reading) to the correct
text.

HOW: UserDictionary holds DictionaryEntry records in insertion order.
It persists as a JSON list (camelCase keys, like the editor's export)
and can be seeded from a plain terms file, one term per line.

RULES:
- contains() matches a surface against term or correct_text exactly
- apply() replaces longer terms first, in a single pass, so a
  replacement is never rewritten again by a shorter entry
- Terms files: strip whitespace, skip blank lines and '#' comments
- Entry ids are uuid4 strings unless given explicitly
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class DictionaryEntry:
    """One dictionary term.

    Attributes:
        term: The (wrong or raw) spelling as it appears in transcripts.
        reading: Kana reading; also replaced by apply() when non-empty.
        correct_text: The spelling editors want.
        category: Free-form grouping (e.g. "人名", "製品").
        description: Optional note for editors.
        id: Stable identifier, generated when omitted.
    """

    term: str
    reading: str = ""
    correct_text: str = ""
    category: str = ""
    description: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not self.correct_text:
            self.correct_text = self.term

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DictionaryEntry:
        kwargs: Dict[str, Any] = {
            "term": data["term"],
            "reading": data.get("reading", ""),
            "correct_text": data.get("correctText", data.get("correct_text", "")),
            "category": data.get("category", ""),
            "description": data.get("description"),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "term": self.term,
            "reading": self.reading,
            "correctText": self.correct_text,
            "category": self.category,
        }
        if self.description is not None:
            out["description"] = self.description
        return out

    def matches(self, query: str) -> bool:
        fields = (self.term, self.reading, self.correct_text, self.description or "")
        return any(query in value.lower() for value in fields)


class UserDictionary:
    """An ordered, editable collection of DictionaryEntry records."""

    def __init__(self, entries: Optional[List[DictionaryEntry]] = None) -> None:
        self._entries: List[DictionaryEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> List[DictionaryEntry]:
        return list(self._entries)

    # -- lookup --------------------------------------------------------------

    def contains(self, surface: str) -> bool:
        return any(surface in (e.term, e.correct_text) for e in self._entries)

    def get(self, entry_id: str) -> Optional[DictionaryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(e.category for e in self._entries))

    def by_category(self, category: str) -> List[DictionaryEntry]:
        return [e for e in self._entries if e.category == category]

    def search(self, query: str) -> List[DictionaryEntry]:
        """Case-insensitive substring search over every text field."""
        needle = query.lower()
        return [e for e in self._entries if e.matches(needle)]

    # -- editing -------------------------------------------------------------

    def add(self, entry: DictionaryEntry) -> DictionaryEntry:
        self._entries.append(entry)
        return entry

    def remove(self, entry_id: str) -> bool:
        """Remove the entry with entry_id; False when no such entry exists."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def update(self, entry: DictionaryEntry) -> bool:
        """Replace the entry sharing entry.id; False when none does."""
        for i, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[i] = entry
                return True
        return False

    # -- rewriting -----------------------------------------------------------

    def apply(self, text: str) -> str:
        """Replace every known term or reading with its correct text."""
        replacements: Dict[str, str] = {}
        for entry in sorted(self._entries, key=lambda e: len(e.term), reverse=True):
            for key in (entry.term, entry.reading):
                if key and key not in replacements:
                    replacements[key] = entry.correct_text
        if not replacements:
            return text
        pattern = re.compile(
            "|".join(re.escape(k) for k in sorted(replacements, key=len, reverse=True))
        )
        return pattern.sub(lambda m: replacements[m.group(0)], text)

    # -- persistence ---------------------------------------------------------

    @classmethod
    def load(cls, path: PathLike) -> UserDictionary:
        """Load a dictionary saved by save().

        Raises:
            ValueError: If the file is not a JSON list of entry objects.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("Dictionary file must contain a JSON list: {}".format(path))
        try:
            entries = [DictionaryEntry.from_dict(item) for item in data]
        except (KeyError, TypeError) as exc:
            raise ValueError("Malformed dictionary entry in {}: {}".format(path, exc)) from exc
        logger.info("Loaded %d dictionary entries from %s", len(entries), path)
        return cls(entries)

    def save(self, path: PathLike) -> None:
        Path(path).write_text(
            json.dumps([e.to_dict() for e in self._entries], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    @classmethod
    def from_terms_file(cls, path: PathLike, category: str = "") -> UserDictionary:
        """Build a dictionary from a terms file (one term per line)."""
        terms: List[str] = []
        for line in Path(path).read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            terms.append(stripped)
        return cls([DictionaryEntry(term=t, category=category) for t in terms])
