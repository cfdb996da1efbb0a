import pytest

from artisthelper.config import get_policy, iter_policies
from artisthelper.models import SkillTier


def test_get_policy_defaults_to_current():
    policy = get_policy()
    assert policy.name == "current"
    assert policy.scored_slots == (1, 2)
    assert policy.tier_points[SkillTier.BEST] == 10
    assert policy.tier_points[SkillTier.TERRIBLE] == -1


def test_get_policy_is_case_insensitive():
    assert get_policy(" LEGACY ").name == "legacy"


def test_get_policy_missing_raises():
    with pytest.raises(KeyError):
        get_policy("experimental")


def test_iter_policies_lists_all_rulebooks():
    assert {policy.name for policy in iter_policies()} == {"current", "legacy"}
