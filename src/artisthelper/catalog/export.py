"""Download helpers for the artist catalog."""

from __future__ import annotations

import csv
import json
from io import StringIO
from typing import Sequence

from artisthelper.catalog.scoring import ArtistRow
from artisthelper.models import ArtistRecord
from artisthelper.persistence import record_to_dict


class CatalogExportError(RuntimeError):
    """Raised when the catalog cannot be serialized for download."""


CSV_HEADERS: tuple[str, ...] = (
    "Id",
    "Name",
    "Group",
    "Rank",
    "Position",
    "Genre",
    "Skill 1",
    "Skill 2",
    "Skill 3",
    "Thoughts",
    "Build",
    "Score",
    "Grade",
)


def export_records_to_json(records: Sequence[ArtistRecord]) -> str:
    """Serialize the full list using the dataset's field names."""

    ids = [record.id for record in records]
    if len(ids) != len(set(ids)):
        raise CatalogExportError("artist ids must be unique before export")
    payload = [record_to_dict(record) for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_records_to_csv(rows: Sequence[ArtistRow]) -> str:
    """Convert annotated rows to a CSV table matching the on-screen columns."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)

    for row in rows:
        artist = row.artist
        skills = list(artist.skills) + [""] * (3 - len(artist.skills))
        writer.writerow(
            [
                artist.id,
                artist.name,
                artist.group,
                artist.rank,
                artist.position,
                artist.genre,
                *skills[:3],
                artist.thoughts or "",
                artist.build or "",
                row.score,
                row.grade,
            ]
        )

    return buffer.getvalue()


__all__ = [
    "CSV_HEADERS",
    "CatalogExportError",
    "export_records_to_csv",
    "export_records_to_json",
]
