"""Base remote source interface and document parsing."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import ValidationError as PydanticValidationError

from runebook_core.errors import RemoteUnavailable
from runebook_core.schemas import SeedDataFile, VersionDescriptor


def parse_version_document(payload: str | bytes, origin: str) -> VersionDescriptor:
    try:
        return VersionDescriptor.from_json(payload)
    except PydanticValidationError as exc:
        raise RemoteUnavailable(f"Invalid version document from {origin}: {exc}") from exc


def parse_dataset_document(payload: str | bytes, origin: str) -> SeedDataFile:
    try:
        return SeedDataFile.from_json(payload)
    except PydanticValidationError as exc:
        raise RemoteUnavailable(f"Invalid dataset document from {origin}: {exc}") from exc


class BaseRemoteSource(ABC):
    """Abstract interface for places the item dataset is published."""

    source_id: str

    def __init__(self, source_id: str) -> None:
        self.source_id = source_id
        self._metrics = {
            "version_fetches": 0,
            "dataset_fetches": 0,
            "errors": 0,
        }

    @abstractmethod
    def fetch_version(self) -> VersionDescriptor:
        """Fetch the lightweight version descriptor."""

    @abstractmethod
    def fetch_dataset(self) -> SeedDataFile:
        """Fetch the full dataset document."""

    @abstractmethod
    def get_source_info(self) -> dict[str, object]:
        """Return metadata about where data is fetched from."""

    def get_metrics(self) -> dict[str, object]:
        return dict(self._metrics)
