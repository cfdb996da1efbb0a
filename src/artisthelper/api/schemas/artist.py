from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, Field

from artisthelper.models import ArtistDraft


class ArtistResponse(BaseModel):
    id: int
    name: str
    group: str
    genre: str
    position: str
    rank: str
    skills: List[str]
    rating: float | None
    thoughts: str | None
    build: str | None
    description: str
    image: str
    secondary_tier: str | None
    tertiary_tier: str | None
    score: int
    grade: str


class ArtistListResponse(BaseModel):
    total: int
    matched: int
    artists: List[ArtistResponse]


class FilterOptionsResponse(BaseModel):
    genres: List[str]
    positions: List[str]
    ranks: List[str]
    groups: List[str]
    secondary_skills: List[str]
    tertiary_skills: List[str]
    thoughts: List[str]
    builds: List[str]
    skills_by_tier: Dict[str, List[str]]
    grades: List[str]
    next_id: int


class AddArtistRequest(ArtistDraft):
    """JSON body for creating an artist."""


class AddArtistMessagePayload(BaseModel):
    type: str = Field(..., min_length=1)
    artist: dict = Field(default_factory=dict)


class MessageAcceptedResponse(BaseModel):
    accepted: bool
    artist: ArtistResponse | None = None
    detail: str | None = None


class FilterQuery(BaseModel):
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
