"""Canonical artist models shared across ingestion, catalog and API layers."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class SkillTier(str, Enum):
    """Quality classification assigned to a single skill description."""

    BEST = "Best"
    GOOD = "Good"
    OKAY = "Okay"
    WORST = "Worst"
    TERRIBLE = "Terrible"


TIER_ORDER = (
    SkillTier.BEST,
    SkillTier.GOOD,
    SkillTier.OKAY,
    SkillTier.WORST,
    SkillTier.TERRIBLE,
)

THOUGHTS_CHOICES = ("Yes", "No", "If Nothing Better", "Bad")
BUILD_CHOICES = ("Skill Build", "Standard Build")
NO_GROUP = "No Group"


class ArtistDraft(BaseModel):
    """Artist payload without an id, as submitted by the add-artist form."""

    name: str = Field(..., min_length=1)
    group: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    rank: str = Field(..., min_length=1)
    skills: List[str] = Field(default_factory=list, max_length=3)
    rating: Optional[float] = None
    thoughts: Optional[str] = None
    build: Optional[str] = None
    description: str = Field(..., min_length=1)
    image: str = ""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class ArtistRecord(ArtistDraft):
    """Catalog entry with its stable id.

    Only ``name`` must be non-empty; stored and bundled entries may leave the
    other text fields blank, which the table renders as-is.
    """

    id: int = Field(..., ge=0)
    group: str = ""
    genre: str = ""
    position: str = ""
    rank: str = ""
    description: str = ""

    @property
    def secondary_skill(self) -> str:
        return self.skills[1] if len(self.skills) > 1 else ""

    @property
    def tertiary_skill(self) -> str:
        return self.skills[2] if len(self.skills) > 2 else ""
