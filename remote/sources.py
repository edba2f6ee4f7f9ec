"""Remote source implementations."""

from __future__ import annotations

import http.client
import logging
import time
import urllib.parse
import urllib.request
from collections.abc import Mapping, Sequence
from pathlib import Path

from runebook_core.errors import RemoteUnavailable
from runebook_core.schemas import NewItem, RemoteSourceConfig, SeedDataFile, VersionDescriptor

from .base import BaseRemoteSource, parse_dataset_document, parse_version_document


logger = logging.getLogger(__name__)


def _cache_busted(url: str) -> str:
    separator = "&" if urllib.parse.urlsplit(url).query else "?"
    return f"{url}{separator}t={int(time.time() * 1000)}"


class HttpRemoteSource(BaseRemoteSource):
    """Fetches ``db_version.json`` and ``data.json`` relative to a base URL."""

    _base_url: str
    _version_path: str
    _dataset_path: str
    _timeout_seconds: float | None

    def __init__(
        self,
        base_url: str,
        version_path: str = "db_version.json",
        dataset_path: str = "data.json",
        timeout_seconds: float | None = None,
        source_id: str = "http",
    ) -> None:
        super().__init__(source_id=source_id)
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._version_path = version_path
        self._dataset_path = dataset_path
        self._timeout_seconds = timeout_seconds

    @property
    def version_url(self) -> str:
        return urllib.parse.urljoin(self._base_url, self._version_path)

    @property
    def dataset_url(self) -> str:
        return urllib.parse.urljoin(self._base_url, self._dataset_path)

    def _get(self, url: str) -> bytes:
        request = urllib.request.Request(url, headers={"Accept": "application/json"})
        kwargs: dict[str, float] = {}
        if self._timeout_seconds is not None:
            kwargs["timeout"] = self._timeout_seconds
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                return response.read()
        except (OSError, ValueError, http.client.HTTPException) as exc:
            self._metrics["errors"] += 1
            raise RemoteUnavailable(f"Failed to fetch {url}: {exc}") from exc

    def fetch_version(self) -> VersionDescriptor:
        self._metrics["version_fetches"] += 1
        url = _cache_busted(self.version_url)
        return parse_version_document(self._get(url), url)

    def fetch_dataset(self) -> SeedDataFile:
        self._metrics["dataset_fetches"] += 1
        url = self.dataset_url
        logger.info("Downloading %s ...", url)
        return parse_dataset_document(self._get(url), url)

    def get_source_info(self) -> dict[str, object]:
        return {
            "source_id": self.source_id,
            "source_type": "http",
            "version_url": self.version_url,
            "dataset_url": self.dataset_url,
            "timeout_seconds": self._timeout_seconds,
        }


class DirectorySource(BaseRemoteSource):
    """Reads the published documents from a local directory."""

    directory: Path

    def __init__(
        self,
        directory: str | Path,
        version_path: str = "db_version.json",
        dataset_path: str = "data.json",
        source_id: str = "directory",
    ) -> None:
        super().__init__(source_id=source_id)
        self.directory = Path(directory)
        self._version_path = version_path
        self._dataset_path = dataset_path

    def _read(self, relative: str) -> bytes:
        path = self.directory / relative
        try:
            return path.read_bytes()
        except OSError as exc:
            self._metrics["errors"] += 1
            raise RemoteUnavailable(f"Failed to read {path}: {exc}") from exc

    def fetch_version(self) -> VersionDescriptor:
        self._metrics["version_fetches"] += 1
        path = self.directory / self._version_path
        return parse_version_document(self._read(self._version_path), str(path))

    def fetch_dataset(self) -> SeedDataFile:
        self._metrics["dataset_fetches"] += 1
        path = self.directory / self._dataset_path
        return parse_dataset_document(self._read(self._dataset_path), str(path))

    def get_source_info(self) -> dict[str, object]:
        return {
            "source_id": self.source_id,
            "source_type": "directory",
            "directory": str(self.directory),
            "version_path": self._version_path,
            "dataset_path": self._dataset_path,
        }


class StaticRemoteSource(BaseRemoteSource):
    """Deterministic in-memory source for offline tests and demos.

    ``version=None`` makes the version check fail; ``dataset_error`` makes
    the dataset download fail with that message.
    """

    def __init__(
        self,
        version: int | None,
        items: Sequence[NewItem | Mapping[str, object]] = (),
        dataset_version: int | None = None,
        dataset_error: str | None = None,
        source_id: str = "static",
    ) -> None:
        super().__init__(source_id=source_id)
        self.version = version
        self.items = [
            item if isinstance(item, NewItem) else NewItem.from_dict(item) for item in items
        ]
        self.dataset_version = dataset_version
        self.dataset_error = dataset_error

    def fetch_version(self) -> VersionDescriptor:
        self._metrics["version_fetches"] += 1
        if self.version is None:
            self._metrics["errors"] += 1
            raise RemoteUnavailable("Version document not published")
        return VersionDescriptor(version=self.version)

    def fetch_dataset(self) -> SeedDataFile:
        self._metrics["dataset_fetches"] += 1
        if self.dataset_error is not None:
            self._metrics["errors"] += 1
            raise RemoteUnavailable(self.dataset_error)
        version = self.dataset_version if self.dataset_version is not None else self.version or 0
        return SeedDataFile(version=version, items=list(self.items))

    def get_source_info(self) -> dict[str, object]:
        return {
            "source_id": self.source_id,
            "source_type": "static",
            "version": self.version,
            "items": len(self.items),
        }


def create_source(config: RemoteSourceConfig) -> BaseRemoteSource:
    source_type = config.source_type.lower()
    if source_type == "http":
        if not config.base_url:
            raise ValueError("base_url is required for an http remote source")
        return HttpRemoteSource(
            base_url=config.base_url,
            version_path=config.version_path,
            dataset_path=config.dataset_path,
            timeout_seconds=config.timeout_seconds,
        )
    if source_type == "directory":
        if not config.directory:
            raise ValueError("directory is required for a directory remote source")
        return DirectorySource(
            directory=config.directory,
            version_path=config.version_path,
            dataset_path=config.dataset_path,
        )
    raise ValueError(f"Unsupported remote source type: {config.source_type}")
