"""Read and write the JSON artist dataset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from artisthelper.models import ArtistRecord
from artisthelper.persistence import record_to_dict, validate_records


DEFAULT_DATASET_PATH = Path(__file__).resolve().parent.parent / "data" / "artists.json"


def parse_dataset(text: str, *, source: str = "dataset") -> List[ArtistRecord]:
    """Parse a JSON array of artists; invalid entries are skipped and logged."""

    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("artist dataset must be a JSON array")
    return validate_records(data, source=source)


def load_dataset(path: Path | None = None) -> List[ArtistRecord]:
    """Load the dataset file; raises OSError or ValueError on bad input."""

    path = path or DEFAULT_DATASET_PATH
    return parse_dataset(path.read_text(encoding="utf-8"), source=str(path))


def dump_dataset(records: Iterable[ArtistRecord]) -> str:
    payload = [record_to_dict(record) for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_dataset(records: Iterable[ArtistRecord], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_dataset(records), encoding="utf-8")
