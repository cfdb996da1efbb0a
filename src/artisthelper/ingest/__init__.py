"""Input adapters that load and normalize artist data."""

from .dataset import (
    DEFAULT_DATASET_PATH,
    dump_dataset,
    load_dataset,
    parse_dataset,
    write_dataset,
)
from .duplicates import DuplicateEntry, find_duplicates
from .spreadsheet import (
    DEFAULT_SOURCE_MAPPING,
    SourceRow,
    load_records_from_csv,
    load_source_csv,
    normalize_build,
    normalize_thoughts,
    rows_to_records,
)

__all__ = [
    "DEFAULT_DATASET_PATH",
    "DEFAULT_SOURCE_MAPPING",
    "DuplicateEntry",
    "SourceRow",
    "dump_dataset",
    "find_duplicates",
    "load_dataset",
    "load_records_from_csv",
    "load_source_csv",
    "normalize_build",
    "normalize_thoughts",
    "parse_dataset",
    "rows_to_records",
    "write_dataset",
]
