"""Score and grade artists from their classified skills."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from artisthelper.catalog.classify import classify_skill
from artisthelper.config import ScoringPolicy, get_policy
from artisthelper.models import ArtistRecord, SkillTier


@dataclass(frozen=True)
class ArtistRow:
    """Artist plus the derived metadata shown in a table row."""

    artist: ArtistRecord
    secondary_tier: Optional[SkillTier]
    tertiary_tier: Optional[SkillTier]
    score: int
    grade: str


def _slot_tier(record: ArtistRecord, slot: int, policy: ScoringPolicy) -> Optional[SkillTier]:
    if slot >= len(record.skills):
        return None
    skill = record.skills[slot]
    if not skill or not skill.strip():
        return None
    return classify_skill(skill, policy.rules)


def score_record(record: ArtistRecord, policy: ScoringPolicy | None = None) -> int:
    """Sum tier points across the policy's scored skill slots."""

    policy = policy or get_policy()
    total = 0
    for slot in policy.scored_slots:
        tier = _slot_tier(record, slot, policy)
        if tier is None:
            continue
        total += policy.tier_points[tier]
    return total


def grade_from_score(score: int, policy: ScoringPolicy | None = None) -> str:
    policy = policy or get_policy()
    for minimum, grade in policy.grade_bands:
        if score >= minimum:
            return grade
    return policy.fallback_grade


def grade_record(record: ArtistRecord, policy: ScoringPolicy | None = None) -> str:
    policy = policy or get_policy()
    return grade_from_score(score_record(record, policy), policy)


def annotate(record: ArtistRecord, policy: ScoringPolicy | None = None) -> ArtistRow:
    policy = policy or get_policy()
    score = score_record(record, policy)
    return ArtistRow(
        artist=record,
        secondary_tier=_slot_tier(record, 1, policy),
        tertiary_tier=_slot_tier(record, 2, policy),
        score=score,
        grade=grade_from_score(score, policy),
    )


__all__ = [
    "ArtistRow",
    "annotate",
    "grade_from_score",
    "grade_record",
    "score_record",
]
