"""Persistence layer: the network map as a single JSON file.

The whole document is the unit of durability: every load reads the full
file and every save rewrites it. A missing file is not an error (an empty
map is returned and nothing is written); a corrupt file is logged and
replaced in memory by an empty map.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from netmap.errors import StorageError
from netmap.models import DEFAULT_VERSION, NetworkMap, utc_now

logger = logging.getLogger(__name__)


class NetworkMapStorage:
    """Load/save the network map document at a fixed path."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        """Resolved location of the map file (for diagnostics)."""
        return self._path

    def _ensure_dir(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create directory {self._path.parent}: {e}") from e

    def load(self) -> NetworkMap:
        """Read the document, or return a fresh empty one if absent/corrupt."""
        self._ensure_dir()

        if not self._path.exists():
            return NetworkMap.empty()

        try:
            raw = self._path.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read network map {self._path}: {e}") from e

        try:
            return NetworkMap.from_dict(json.loads(raw.decode("utf-8")))
        except (ValueError, TypeError) as e:
            logger.warning("Error loading network map %s, starting empty: %s", self._path, e)
            return NetworkMap.empty()

    def save(self, network_map: NetworkMap) -> None:
        """Stamp metadata and overwrite the file with the full document."""
        self._ensure_dir()

        network_map.metadata.last_modified = utc_now()
        if not network_map.metadata.version:
            network_map.metadata.version = DEFAULT_VERSION

        data = json.dumps(network_map.to_dict(), indent=2, ensure_ascii=False)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(data, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write network map {self._path}: {e}") from e

        logger.debug(
            "Saved network map: %s (%d resources)", self._path, len(network_map.resources)
        )
