"""Helpers for slicing the artist catalog by the table's filter controls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Sequence

from artisthelper.catalog.classify import group_skills_by_tier
from artisthelper.catalog.scoring import ArtistRow, annotate, grade_record
from artisthelper.config import ScoringPolicy, get_policy
from artisthelper.models import ArtistRecord, SkillTier


DEFAULT_RARITY_PREFIX = "UR"


@dataclass(frozen=True)
class FilterCriteria:
    """Filtering configuration for the artist table. Empty values match all."""

    search: str = ""
    genre: str = ""
    position: str = ""
    rank: str = ""
    group: str = ""
    secondary_skill: str = ""
    tertiary_skill: str = ""
    thoughts: str = ""
    thoughts_mode: Literal["exact", "presence"] = "exact"
    build: str = ""
    grade: str = ""

    def is_empty(self) -> bool:
        return not any(
            (
                self.search,
                self.genre,
                self.position,
                self.rank,
                self.group,
                self.secondary_skill,
                self.tertiary_skill,
                self.thoughts,
                self.build,
                self.grade,
            )
        )


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values observed in the catalog for each filter control."""

    genres: List[str] = field(default_factory=list)
    positions: List[str] = field(default_factory=list)
    ranks: List[str] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    secondary_skills: List[str] = field(default_factory=list)
    tertiary_skills: List[str] = field(default_factory=list)
    thoughts: List[str] = field(default_factory=list)
    builds: List[str] = field(default_factory=list)
    skills_by_tier: Dict[SkillTier, List[str]] = field(default_factory=dict)


def _distinct(values: Iterable[str | None]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


def derive_filter_options(
    records: Sequence[ArtistRecord],
    policy: ScoringPolicy | None = None,
) -> FilterOptions:
    """Derive dropdown values from the live list, first-seen order."""

    policy = policy or get_policy()
    return FilterOptions(
        genres=_distinct(r.genre for r in records),
        positions=_distinct(r.position for r in records),
        ranks=_distinct(r.rank for r in records),
        groups=_distinct(r.group for r in records),
        secondary_skills=_distinct(r.secondary_skill for r in records),
        tertiary_skills=_distinct(r.tertiary_skill for r in records),
        thoughts=_distinct(r.thoughts for r in records),
        builds=_distinct(r.build for r in records),
        skills_by_tier=group_skills_by_tier(
            (skill for r in records for skill in r.skills), policy.rules
        ),
    )


def _matches_search(record: ArtistRecord, needle: str) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    if needle in record.name.lower():
        return True
    if record.group and needle in record.group.lower():
        return True
    return any(skill and needle in skill.lower() for skill in record.skills)


def _matches_thoughts(record: ArtistRecord, criteria: FilterCriteria) -> bool:
    if not criteria.thoughts:
        return True
    if criteria.thoughts_mode == "presence":
        if criteria.thoughts == "Yes":
            return bool(record.thoughts)
        if criteria.thoughts == "No":
            return not record.thoughts
        return False
    return record.thoughts == criteria.thoughts


def _passes_criteria(
    record: ArtistRecord,
    criteria: FilterCriteria,
    policy: ScoringPolicy,
) -> bool:
    if not _matches_search(record, criteria.search):
        return False
    if criteria.genre and record.genre != criteria.genre:
        return False
    if criteria.position and record.position != criteria.position:
        return False
    if criteria.rank and record.rank != criteria.rank:
        return False
    if criteria.group and record.group != criteria.group:
        return False
    if criteria.secondary_skill and record.secondary_skill != criteria.secondary_skill:
        return False
    if criteria.tertiary_skill and record.tertiary_skill != criteria.tertiary_skill:
        return False
    if not _matches_thoughts(record, criteria):
        return False
    if criteria.build and criteria.build.lower() not in (record.build or "").lower():
        return False
    if criteria.grade and grade_record(record, policy) != criteria.grade:
        return False
    return True


def filter_records(
    records: Sequence[ArtistRecord],
    criteria: FilterCriteria,
    policy: ScoringPolicy | None = None,
) -> List[ArtistRecord]:
    """Return records passing every active predicate, in input order."""

    policy = policy or get_policy()
    return [record for record in records if _passes_criteria(record, criteria, policy)]


def _text_key(value: str | None) -> tuple[str, str]:
    text = value or ""
    return text.casefold(), text


def _sort_key(record: ArtistRecord, rarity_prefix: str) -> tuple:
    is_rare = bool(rarity_prefix) and (record.rank or "").startswith(rarity_prefix)
    return (
        is_rare,
        _text_key(record.genre),
        _text_key(record.position),
        _text_key(record.name),
        record.id,
    )


def sort_records(
    records: Iterable[ArtistRecord],
    *,
    rarity_prefix: str = DEFAULT_RARITY_PREFIX,
) -> List[ArtistRecord]:
    """Order by rarity flag (rare last), then genre, position and name."""

    return sorted(records, key=lambda r: _sort_key(r, rarity_prefix))


def build_view(
    records: Sequence[ArtistRecord],
    criteria: FilterCriteria | None = None,
    *,
    policy: ScoringPolicy | None = None,
    rarity_prefix: str = DEFAULT_RARITY_PREFIX,
) -> List[ArtistRow]:
    """Filter, sort and annotate records for display."""

    policy = policy or get_policy()
    criteria = criteria or FilterCriteria()
    selected = filter_records(records, criteria, policy)
    return [annotate(record, policy) for record in sort_records(selected, rarity_prefix=rarity_prefix)]


__all__ = [
    "DEFAULT_RARITY_PREFIX",
    "FilterCriteria",
    "FilterOptions",
    "build_view",
    "derive_filter_options",
    "filter_records",
    "sort_records",
]
