"""Skill classification and scoring rulebooks.

The catalog has gone through several scoring schemes. Each one is kept here as
data so the engine can switch between them without code changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

from artisthelper.models import SkillTier


@dataclass(frozen=True)
class SkillRules:
    """Lower-case text patterns used by the skill classifier."""

    terrible_patterns: Tuple[str, ...]
    # (a, b): text containing both a and b is exempt from Terrible
    terrible_exemptions: Tuple[Tuple[str, str], ...]
    worst_patterns: Tuple[str, ...]
    worst_exemptions: Tuple[str, ...]
    reserved_best: Tuple[str, ...]
    good_patterns: Tuple[str, ...]
    reduction_qualifiers: Tuple[str, ...]
    damage_keyword: str = "damage"


@dataclass(frozen=True)
class ScoringPolicy:
    name: str
    scored_slots: Tuple[int, ...]
    tier_points: Mapping[SkillTier, int]
    # (minimum score, grade), highest band first
    grade_bands: Tuple[Tuple[int, str], ...]
    fallback_grade: str
    rules: SkillRules


DEFAULT_SKILL_RULES = SkillRules(
    terrible_patterns=(
        "/dps",
        "world building guard",
        "damage wg",
        "drive speed",
        "driving speed",
    ),
    terrible_exemptions=(
        ("sec/", "damage"),
        ("200/dps", "defending"),
    ),
    worst_patterns=("gathering speed", "fan capacity"),
    worst_exemptions=("10% rally fan capacity",),
    reserved_best=("50% basic attack damage",),
    good_patterns=("skill damage", "basic attack damage", "basic damage"),
    reduction_qualifiers=("reduc", "taken"),
)


_POLICIES: Dict[str, ScoringPolicy] = {
    "current": ScoringPolicy(
        name="current",
        scored_slots=(1, 2),
        tier_points={
            SkillTier.BEST: 10,
            SkillTier.GOOD: 6,
            SkillTier.OKAY: 3,
            SkillTier.WORST: 0,
            SkillTier.TERRIBLE: -1,
        },
        grade_bands=((14, "S"), (10, "A"), (5, "B"), (0, "C")),
        fallback_grade="F",
        rules=DEFAULT_SKILL_RULES,
    ),
    "legacy": ScoringPolicy(
        name="legacy",
        scored_slots=(0, 1, 2),
        tier_points={
            SkillTier.BEST: 5,
            SkillTier.GOOD: 3,
            SkillTier.OKAY: 1,
            SkillTier.WORST: 0,
            SkillTier.TERRIBLE: -1,
        },
        grade_bands=((10, "S"), (7, "A"), (4, "B"), (1, "C")),
        fallback_grade="F",
        rules=DEFAULT_SKILL_RULES,
    ),
}

DEFAULT_POLICY_NAME = "current"
GRADES = ("S", "A", "B", "C", "F")


def iter_policies() -> Iterable[ScoringPolicy]:
    """Return an iterator of all configured scoring policies."""

    return _POLICIES.values()


def get_policy(name: str = DEFAULT_POLICY_NAME) -> ScoringPolicy:
    """Fetch a policy by name, raising KeyError if missing."""

    key = name.strip().lower()
    if key not in _POLICIES:
        raise KeyError(f"No scoring policy configured for name={name!r}")
    return _POLICIES[key]
