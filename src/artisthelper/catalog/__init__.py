"""Catalog engine: classification, scoring, filtering and session state."""

from .classify import classify_skill, group_skills_by_tier
from .scoring import ArtistRow, annotate, grade_from_score, grade_record, score_record
from .filtering import (
    DEFAULT_RARITY_PREFIX,
    FilterCriteria,
    FilterOptions,
    build_view,
    derive_filter_options,
    filter_records,
    sort_records,
)
from .export import CatalogExportError, export_records_to_csv, export_records_to_json
from .session import (
    ADD_ARTIST_MESSAGE,
    AddArtistMessage,
    CatalogSession,
    InvalidArtistError,
    add_record,
    next_artist_id,
)

__all__ = [
    "ADD_ARTIST_MESSAGE",
    "AddArtistMessage",
    "ArtistRow",
    "CatalogExportError",
    "CatalogSession",
    "DEFAULT_RARITY_PREFIX",
    "FilterCriteria",
    "FilterOptions",
    "InvalidArtistError",
    "add_record",
    "annotate",
    "build_view",
    "classify_skill",
    "derive_filter_options",
    "export_records_to_csv",
    "export_records_to_json",
    "filter_records",
    "grade_from_score",
    "grade_record",
    "group_skills_by_tier",
    "next_artist_id",
    "score_record",
    "sort_records",
]
