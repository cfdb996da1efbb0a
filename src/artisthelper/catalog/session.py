"""Session state for one catalog browser: the artist list plus active filters."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import replace
from typing import TYPE_CHECKING, Any, List, Literal, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError

from artisthelper.catalog.export import export_records_to_csv, export_records_to_json
from artisthelper.catalog.filtering import (
    DEFAULT_RARITY_PREFIX,
    FilterCriteria,
    FilterOptions,
    build_view,
    derive_filter_options,
)
from artisthelper.catalog.scoring import ArtistRow
from artisthelper.config import ScoringPolicy, get_policy
from artisthelper.ingest.dataset import load_dataset
from artisthelper.ingest.duplicates import find_duplicates
from artisthelper.models import ArtistDraft, ArtistRecord
from artisthelper.persistence import ArtistStore

if TYPE_CHECKING:
    from artisthelper.config_loader import CatalogSettings


logger = logging.getLogger(__name__)

ADD_ARTIST_MESSAGE = "ADD_ARTIST"


class InvalidArtistError(ValueError):
    """Raised when an artist payload is refused before it reaches the list."""


class AddArtistMessage(BaseModel):
    """Inbound request from the add-artist surface."""

    type: Literal["ADD_ARTIST"] = ADD_ARTIST_MESSAGE
    artist: ArtistDraft


def next_artist_id(records: Sequence[ArtistRecord]) -> int:
    return max((record.id for record in records), default=0) + 1


def add_record(
    records: Sequence[ArtistRecord],
    payload: ArtistDraft | Mapping[str, Any],
) -> Tuple[List[ArtistRecord], int]:
    """Return a new list with ``payload`` appended under a fresh id.

    The input sequence is left untouched; callers must thread the returned
    list through to later calls or ids will repeat.
    """

    if isinstance(payload, ArtistDraft):
        data = payload.model_dump(exclude={"id"})
    else:
        data = {key: value for key, value in payload.items() if key != "id"}
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidArtistError("artist name must not be empty")

    draft = ArtistDraft.model_validate(data)
    assigned_id = next_artist_id(records)
    record = ArtistRecord(id=assigned_id, **draft.model_dump())
    return [*records, record], assigned_id


class CatalogSession:
    """Owns the artist list for one browser session.

    All reads go through :meth:`view` and :meth:`options`; the only write
    paths are filter updates and :meth:`add`.
    """

    def __init__(
        self,
        records: Sequence[ArtistRecord] = (),
        *,
        store: ArtistStore | None = None,
        policy: ScoringPolicy | None = None,
        rarity_prefix: str = DEFAULT_RARITY_PREFIX,
        criteria: FilterCriteria | None = None,
    ):
        self._records: Tuple[ArtistRecord, ...] = tuple(records)
        self.store = store
        self.policy = policy or get_policy()
        self.rarity_prefix = rarity_prefix
        self.criteria = criteria or FilterCriteria()

    @classmethod
    def open(
        cls,
        settings: "CatalogSettings",
        *,
        store: ArtistStore | None = None,
    ) -> "CatalogSession":
        """Load from the store when it holds a list, else from the dataset."""

        records: Optional[List[ArtistRecord]] = None
        seed_store = False
        if store is not None:
            try:
                records = store.load()
                # an unreadable payload is left in place rather than overwritten
                seed_store = records is None and not store.has_payload()
            except (sqlite3.Error, OSError) as exc:
                logger.warning("Unable to read stored artists: %s", exc)
                records = None
            if records is None:
                logger.info("No stored artist list; falling back to %s", settings.dataset_path)

        if records is None:
            try:
                records = load_dataset(settings.dataset_path)
            except (OSError, ValueError) as exc:
                logger.error("Unable to load artist dataset %s: %s", settings.dataset_path, exc)
                records = []
                seed_store = False

        for entry in find_duplicates(records):
            if entry.kind == "id":
                logger.warning(
                    "Duplicate artist id %s (%s / %s)", entry.value, entry.entries[0], entry.entries[1]
                )

        session = cls(
            records,
            store=store,
            policy=settings.policy,
            rarity_prefix=settings.rarity_prefix,
        )
        if seed_store:
            session.persist()
        return session

    @property
    def records(self) -> Tuple[ArtistRecord, ...]:
        return self._records

    def persist(self) -> bool:
        """Mirror the list to the store; failures are logged, never raised."""

        if self.store is None:
            return False
        try:
            self.store.save(self._records)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Error saving artists to store: %s", exc)
            return False
        return True

    def add(self, payload: ArtistDraft | Mapping[str, Any]) -> ArtistRecord:
        records, assigned_id = add_record(self._records, payload)
        self._records = tuple(records)
        logger.info("Added artist %s with id %s", records[-1].name, assigned_id)
        self.persist()
        return records[-1]

    def handle_message(self, message: AddArtistMessage | Mapping[str, Any]) -> Optional[ArtistRecord]:
        """Apply an inbound message; unknown kinds are ignored."""

        if not isinstance(message, AddArtistMessage):
            if message.get("type") != ADD_ARTIST_MESSAGE:
                logger.debug("Ignoring message of type %r", message.get("type"))
                return None
            try:
                message = AddArtistMessage.model_validate(message)
            except ValidationError as exc:
                raise InvalidArtistError(str(exc)) from exc
        return self.add(message.artist)

    def update_filters(self, **changes: Any) -> FilterCriteria:
        self.criteria = replace(self.criteria, **changes)
        return self.criteria

    def clear_filters(self) -> None:
        self.criteria = FilterCriteria()

    def view(self, criteria: FilterCriteria | None = None) -> List[ArtistRow]:
        return build_view(
            self._records,
            criteria or self.criteria,
            policy=self.policy,
            rarity_prefix=self.rarity_prefix,
        )

    def options(self) -> FilterOptions:
        return derive_filter_options(self._records, self.policy)

    def export_json(self) -> str:
        return export_records_to_json(self._records)

    def export_csv(self, criteria: FilterCriteria | None = None) -> str:
        return export_records_to_csv(self.view(criteria or FilterCriteria()))


__all__ = [
    "ADD_ARTIST_MESSAGE",
    "AddArtistMessage",
    "CatalogSession",
    "InvalidArtistError",
    "add_record",
    "next_artist_id",
]
