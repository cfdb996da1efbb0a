"""Domain models for the artist catalog."""

from .artist import (
    BUILD_CHOICES,
    NO_GROUP,
    THOUGHTS_CHOICES,
    TIER_ORDER,
    ArtistDraft,
    ArtistRecord,
    SkillTier,
)

__all__ = [
    "ArtistDraft",
    "ArtistRecord",
    "SkillTier",
    "TIER_ORDER",
    "THOUGHTS_CHOICES",
    "BUILD_CHOICES",
    "NO_GROUP",
]
