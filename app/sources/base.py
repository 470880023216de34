"""Base class for datasource adapters."""

from abc import ABC, abstractmethod
from typing import Any

from app.models.datasource import Datasource


class BaseSource(ABC):
    """Abstract base class for datasource adapters.

    An adapter is bound to one datasource record and translates that
    datasource's raw payloads into canonical event fields.
    """

    def __init__(self, datasource: Datasource):
        self._datasource = datasource

    @property
    def datasource(self) -> Datasource:
        return self._datasource

    @property
    @abstractmethod
    def name(self) -> str:
        """Datasource type this adapter handles."""
        ...

    @abstractmethod
    def check(self) -> bool:
        """Whether the datasource is usable."""
        ...

    @abstractmethod
    def map_fields(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Rewrite a raw payload into canonical event field names."""
        ...

    @abstractmethod
    def generate_fingerprint(
        self, payload: dict[str, Any], datasource_id: str, fault_center_id: str
    ) -> str:
        """Derive the dedup key for a raw payload."""
        ...
