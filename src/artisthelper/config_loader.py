"""Runtime settings and persisted filter profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from artisthelper.catalog.filtering import DEFAULT_RARITY_PREFIX, FilterCriteria
from artisthelper.config import DEFAULT_POLICY_NAME, ScoringPolicy, get_policy
from artisthelper.ingest.dataset import DEFAULT_DATASET_PATH
from artisthelper.persistence import DEFAULT_STORE_KEY


logger = logging.getLogger(__name__)

_DATASET_ENV = "ARTISTHELPER_DATASET"
_DB_PATH_ENV = "ARTISTHELPER_DB_PATH"
_STORE_KEY_ENV = "ARTISTHELPER_STORE_KEY"
_POLICY_ENV = "ARTISTHELPER_SCORING_POLICY"
_RARITY_PREFIX_ENV = "ARTISTHELPER_RARITY_PREFIX"


@dataclass(frozen=True)
class CatalogSettings:
    dataset_path: Path = DEFAULT_DATASET_PATH
    db_path: Optional[Path] = None
    store_key: str = DEFAULT_STORE_KEY
    policy_name: str = DEFAULT_POLICY_NAME
    rarity_prefix: str = DEFAULT_RARITY_PREFIX

    @property
    def policy(self) -> ScoringPolicy:
        return get_policy(self.policy_name)

    @classmethod
    def from_env(cls) -> "CatalogSettings":
        dataset = os.getenv(_DATASET_ENV)
        db_path = os.getenv(_DB_PATH_ENV)
        policy_name = os.getenv(_POLICY_ENV, DEFAULT_POLICY_NAME)
        try:
            get_policy(policy_name)
        except KeyError:
            logger.warning(
                "Unknown scoring policy %s; using default %s", policy_name, DEFAULT_POLICY_NAME
            )
            policy_name = DEFAULT_POLICY_NAME
        return cls(
            dataset_path=Path(dataset) if dataset else DEFAULT_DATASET_PATH,
            db_path=Path(db_path) if db_path else None,
            store_key=os.getenv(_STORE_KEY_ENV, DEFAULT_STORE_KEY),
            policy_name=policy_name,
            rarity_prefix=os.getenv(_RARITY_PREFIX_ENV, DEFAULT_RARITY_PREFIX),
        )


@dataclass
class FilterProfile:
    filters: dict = field(default_factory=dict)

    @classmethod
    def from_criteria(cls, criteria: FilterCriteria) -> "FilterProfile":
        return cls(filters={key: value for key, value in asdict(criteria).items() if value})

    def to_criteria(self) -> FilterCriteria:
        known = FilterCriteria.__dataclass_fields__
        return FilterCriteria(**{key: value for key, value in self.filters.items() if key in known})

    @classmethod
    def load(cls, path: Path) -> "FilterProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(filters=data.get("filters", {}))

    def save(self, path: Path) -> None:
        payload = {"filters": self.filters}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
