"""Configuration helpers for skill rules and scoring policies."""

from .scoring import (
    DEFAULT_POLICY_NAME,
    DEFAULT_SKILL_RULES,
    GRADES,
    ScoringPolicy,
    SkillRules,
    get_policy,
    iter_policies,
)

__all__ = [
    "DEFAULT_POLICY_NAME",
    "DEFAULT_SKILL_RULES",
    "GRADES",
    "ScoringPolicy",
    "SkillRules",
    "get_policy",
    "iter_policies",
]
