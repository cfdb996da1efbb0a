"""Pydantic models for API I/O."""

from .artist import (
    AddArtistMessagePayload,
    AddArtistRequest,
    ArtistListResponse,
    ArtistResponse,
    FilterOptionsResponse,
    FilterQuery,
    MessageAcceptedResponse,
)

__all__ = [
    "AddArtistMessagePayload",
    "AddArtistRequest",
    "ArtistListResponse",
    "ArtistResponse",
    "FilterOptionsResponse",
    "FilterQuery",
    "MessageAcceptedResponse",
]
