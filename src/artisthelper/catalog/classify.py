"""Rule-based classification of skill descriptions into quality tiers."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from artisthelper.config import DEFAULT_SKILL_RULES, SkillRules
from artisthelper.models import TIER_ORDER, SkillTier


_TIME_BASED_PATTERN = re.compile(r"\bsec\b|\ssec/")


def _normalize(text: str | None) -> str:
    return (text or "").strip().lower()


def _contains_any(text: str, patterns: Iterable[str]) -> bool:
    return any(pattern in text for pattern in patterns)


def _is_reduction(text: str, rules: SkillRules) -> bool:
    return _contains_any(text, rules.reduction_qualifiers)


def is_terrible(text: str, rules: SkillRules = DEFAULT_SKILL_RULES) -> bool:
    t = _normalize(text)
    for first, second in rules.terrible_exemptions:
        if first in t and second in t:
            return False
    return _contains_any(t, rules.terrible_patterns)


def is_worst(text: str, rules: SkillRules = DEFAULT_SKILL_RULES) -> bool:
    t = _normalize(text)
    if is_terrible(t, rules) or _contains_any(t, rules.worst_exemptions):
        return False
    return _contains_any(t, rules.worst_patterns)


def is_good_buff(text: str, rules: SkillRules = DEFAULT_SKILL_RULES) -> bool:
    t = _normalize(text)
    if t in rules.reserved_best or _is_reduction(t, rules):
        return False
    return _contains_any(t, rules.good_patterns)


def is_direct_damage(text: str, rules: SkillRules = DEFAULT_SKILL_RULES) -> bool:
    t = _normalize(text)
    mentions_damage = rules.damage_keyword in t and not _is_reduction(t, rules)
    time_based = bool(_TIME_BASED_PATTERN.search(t))
    return mentions_damage or time_based


def classify_skill(text: str | None, rules: SkillRules = DEFAULT_SKILL_RULES) -> SkillTier:
    """Return the single tier for ``text``; the first matching rule wins."""

    t = _normalize(text)
    if not t:
        return SkillTier.OKAY
    if is_terrible(t, rules):
        return SkillTier.TERRIBLE
    if is_worst(t, rules):
        return SkillTier.WORST
    if t in rules.reserved_best:
        return SkillTier.BEST
    if is_good_buff(t, rules):
        return SkillTier.GOOD
    if is_direct_damage(t, rules):
        return SkillTier.BEST
    return SkillTier.OKAY


def group_skills_by_tier(
    skills: Iterable[str],
    rules: SkillRules = DEFAULT_SKILL_RULES,
) -> Dict[SkillTier, List[str]]:
    """Bucket distinct non-empty skills by tier, preserving first-seen order."""

    grouped: Dict[SkillTier, List[str]] = {tier: [] for tier in TIER_ORDER}
    seen: set[str] = set()
    for skill in skills:
        if not skill or skill in seen:
            continue
        seen.add(skill)
        grouped[classify_skill(skill, rules)].append(skill)
    return grouped
