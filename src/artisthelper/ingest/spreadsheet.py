"""Convert curator spreadsheets exported as CSV into artist records."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence
from urllib.parse import quote

from pydantic import BaseModel

from artisthelper.models import ArtistRecord


logger = logging.getLogger(__name__)

DEFAULT_SOURCE_MAPPING = {
    "name": "Name",
    "group": "Group",
    "rank": "Rank",
    "position": "Position",
    "genre": "Genre",
    "skill_1": "Skill 1",
    "skill_2": "Skill 2",
    "skill_3": "Skill 3",
    "thoughts": "Micks Thoughts are they Good",
    "build": "Skill Build Worthy",
}

# Checked in order; the first match wins. Whole words only, so
# "If nothing better" is never read as "No".
_THOUGHTS_PATTERNS = (
    (re.compile(r"\byes\b", re.IGNORECASE), "Yes"),
    (re.compile(r"\bno\b", re.IGNORECASE), "No"),
    (re.compile(r"\bif nothing better\b", re.IGNORECASE), "If Nothing Better"),
    (re.compile(r"\bbad\b", re.IGNORECASE), "Bad"),
)

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/200x200?text={initial}"


class SourceRow(BaseModel):
    raw_name: str
    raw_group: str = ""
    raw_rank: str = ""
    raw_position: str = ""
    raw_genre: str = ""
    raw_skills: List[str] = []
    raw_thoughts: Optional[str] = None
    raw_build: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "SourceRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return None
            value = row.get(column)
            return value.strip() if value is not None else None

        skills = [extract(key) for key in ("skill_1", "skill_2", "skill_3")]
        return cls(
            raw_name=extract("name") or "",
            raw_group=extract("group") or "",
            raw_rank=extract("rank") or "",
            raw_position=extract("position") or "",
            raw_genre=extract("genre") or "",
            raw_skills=[skill for skill in skills if skill],
            raw_thoughts=extract("thoughts"),
            raw_build=extract("build"),
        )


def normalize_thoughts(text: Optional[str]) -> Optional[str]:
    """Map free-text curator notes onto Yes/No/If Nothing Better/Bad.

    Matching is case-insensitive on whole words. Notes that match none of the
    labels are kept verbatim; blank notes become ``None``.
    """

    if text is None or not text.strip():
        return None
    for pattern, label in _THOUGHTS_PATTERNS:
        if pattern.search(text):
            return label
    return text.strip()


def normalize_build(text: Optional[str]) -> str:
    if text and text.strip().lower() == "yes":
        return "Skill Build"
    return "Standard Build"


def describe(name: str, position: str, group: str) -> str:
    return f"{name} is a talented {position} from {group}."


def placeholder_image(name: str) -> str:
    initial = name[:1] or "A"
    return PLACEHOLDER_IMAGE_URL.format(initial=quote(initial))


def load_source_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[SourceRow]:
    mapping = mapping or DEFAULT_SOURCE_MAPPING
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = [SourceRow.from_mapping(row, mapping) for row in reader]
    return rows


def rows_to_records(rows: Sequence[SourceRow], *, start_id: int = 1) -> List[ArtistRecord]:
    """Build records from source rows, skipping rows without a name."""

    records: List[ArtistRecord] = []
    next_id = start_id
    for row in rows:
        if not row.raw_name:
            logger.warning("Skipping source row without a name: %r", row)
            continue
        records.append(
            ArtistRecord(
                id=next_id,
                name=row.raw_name,
                group=row.raw_group or "No Group",
                rank=row.raw_rank or "Unknown",
                position=row.raw_position or "Unknown",
                genre=row.raw_genre or "Various",
                skills=row.raw_skills[:3],
                rating=None,
                thoughts=normalize_thoughts(row.raw_thoughts),
                build=normalize_build(row.raw_build),
                description=describe(row.raw_name, row.raw_position or "artist", row.raw_group or "No Group"),
                image=placeholder_image(row.raw_name),
            )
        )
        next_id += 1
    return records


def load_records_from_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
    start_id: int = 1,
) -> List[ArtistRecord]:
    return rows_to_records(load_source_csv(path, mapping=mapping), start_id=start_id)
