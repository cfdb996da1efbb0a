import pytest

from artisthelper.catalog import annotate, grade_from_score, score_record
from artisthelper.config import GRADES, get_policy
from artisthelper.models import SkillTier

from tests._factories import make_artist


def test_good_secondary_and_reserved_tertiary_grade_s():
    record = make_artist(
        skills=["10 sec/1800 Damage", "20% Skill Damage", "50% Basic Attack Damage"]
    )

    row = annotate(record)
    assert row.secondary_tier is SkillTier.GOOD
    assert row.tertiary_tier is SkillTier.BEST
    assert row.score == 16
    assert row.grade == "S"


def test_dps_and_fan_capacity_grade_f():
    record = make_artist(
        skills=["10 sec/1800 Damage", "180/DPS Attacking Enemy Company", "10% Fan Capacity"]
    )

    row = annotate(record)
    assert row.secondary_tier is SkillTier.TERRIBLE
    assert row.tertiary_tier is SkillTier.WORST
    assert row.score == -1
    assert row.grade == "F"


def test_two_best_skills_score_twenty():
    record = make_artist(skills=["x", "30% Damage to Player", "50% Basic Attack Damage"])
    assert score_record(record) == 20
    assert grade_from_score(20) == "S"


def test_primary_slot_is_not_scored():
    with_primary = make_artist(skills=["30% Damage to Player", "", "10% Fan Capacity"])
    assert score_record(with_primary) == 0


def test_empty_and_missing_slots_contribute_nothing():
    assert score_record(make_artist(skills=[])) == 0
    assert score_record(make_artist(skills=["10 sec/1800 Damage", "20% Skill Damage"])) == 6
    row = annotate(make_artist(skills=["10 sec/1800 Damage"]))
    assert row.secondary_tier is None
    assert row.tertiary_tier is None


@pytest.mark.parametrize(
    "score, grade",
    [
        (20, "S"),
        (14, "S"),
        (13, "A"),
        (10, "A"),
        (9, "B"),
        (5, "B"),
        (4, "C"),
        (0, "C"),
        (-1, "F"),
    ],
)
def test_grade_band_lower_bounds_are_inclusive(score, grade):
    assert grade_from_score(score) == grade


def test_grades_always_in_known_set():
    for score in range(-2, 21):
        assert grade_from_score(score) in GRADES


def test_legacy_policy_counts_all_slots():
    legacy = get_policy("legacy")
    record = make_artist(
        skills=["10 sec/1800 Damage", "20% Skill Damage", "50% Basic Attack Damage"]
    )
    assert score_record(record, legacy) == 5 + 3 + 5
    assert grade_from_score(13, legacy) == "S"
    assert grade_from_score(0, legacy) == "F"
