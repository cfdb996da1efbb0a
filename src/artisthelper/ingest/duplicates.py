"""Detect duplicate ids and names in an artist list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Sequence, Tuple

from artisthelper.models import ArtistRecord


@dataclass(frozen=True)
class DuplicateEntry:
    kind: Literal["id", "name"]
    value: str
    # (first seen, duplicate); names for id clashes, groups for name clashes
    entries: Tuple[str, str]


def find_duplicates(records: Sequence[ArtistRecord]) -> List[DuplicateEntry]:
    """Report repeated ids and case-insensitive repeated names."""

    ids: Dict[int, str] = {}
    names: Dict[str, str] = {}
    duplicates: List[DuplicateEntry] = []

    for record in records:
        if record.id in ids:
            duplicates.append(
                DuplicateEntry(kind="id", value=str(record.id), entries=(ids[record.id], record.name))
            )
        else:
            ids[record.id] = record.name

        lowered = record.name.lower()
        if lowered in names:
            duplicates.append(
                DuplicateEntry(kind="name", value=record.name, entries=(names[lowered], record.group))
            )
        else:
            names[lowered] = record.group

    return duplicates
