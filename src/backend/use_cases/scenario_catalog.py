"""Scenario catalog loading.

The catalog is a static JSON (or YAML) document holding a list of scenario
definitions. It is read once at startup and treated as read-only afterwards.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

import yaml

from src.backend.common.models.scenarios import ScenarioDefinition
from src.backend.integrations.xero_errors import ScenarioNotFound

logger = logging.getLogger(__name__)


class ScenarioCatalog:
    def __init__(self, scenarios: list[ScenarioDefinition]) -> None:
        by_id: dict[str, ScenarioDefinition] = {}
        for scenario in scenarios:
            if scenario.id in by_id:
                raise ValueError(f"Duplicate scenario id in catalog: {scenario.id}")
            by_id[scenario.id] = scenario
        self._by_id = by_id

    def __iter__(self) -> Iterator[ScenarioDefinition]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, scenario_id: str) -> ScenarioDefinition:
        try:
            return self._by_id[scenario_id]
        except KeyError:
            raise ScenarioNotFound(scenario_id) from None

    @classmethod
    def from_raw(cls, raw: Any) -> "ScenarioCatalog":
        if not isinstance(raw, list):
            raise ValueError("Scenario catalog must be a list of scenario definitions")
        return cls([ScenarioDefinition.model_validate(item) for item in raw])


def load_scenario_catalog(path: str | Path) -> ScenarioCatalog:
    """Load the catalog from `path`; `.yaml`/`.yml` files are parsed as YAML."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(f) or []
        else:
            raw = json.load(f)

    catalog = ScenarioCatalog.from_raw(raw)
    logger.info(f"Loaded {len(catalog)} scenarios from {path}")
    return catalog
