"""Datasource configuration loading and lookup."""

import logging
from pathlib import Path

import yaml

from app.errors import DatasourceNotFoundError
from app.models.datasource import Datasource, DatasourcesConfig

logger = logging.getLogger(__name__)


def load_datasources_config(config_path: str | Path) -> DatasourcesConfig:
    """Load datasource configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Datasources config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return DatasourcesConfig.model_validate(data)


class DatasourceStore:
    """Read-only lookup of configured datasources by id."""

    def __init__(self, config: DatasourcesConfig):
        self._datasources: dict[str, Datasource] = {}

        for ds in config.datasources:
            if ds.id in self._datasources:
                logger.warning(f"Duplicate datasource id '{ds.id}', keeping the last one")
            self._datasources[ds.id] = ds

        logger.info(f"Datasource store initialized with {len(self._datasources)} datasource(s)")

    @property
    def datasources(self) -> list[Datasource]:
        return list(self._datasources.values())

    def get(self, datasource_id: str) -> Datasource:
        """Return an enabled datasource or raise DatasourceNotFoundError."""
        ds = self._datasources.get(datasource_id)
        if ds is None or not ds.enabled:
            raise DatasourceNotFoundError(datasource_id)
        return ds
