"""Persistence utilities for the household ledger core."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import StorageReadError

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "transactions"
CATEGORIES_KEY = "categories"


class JSONStorage:
    """File-based key-value store holding one JSON array per key.

    Reads never raise: a missing or malformed entry yields the supplied
    default. Writes go through a temporary file and an atomic rename so a
    later ``load`` sees either the old or the new collection, never a mix.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    def load(self, key: str, default: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        try:
            return self._read(key)
        except StorageReadError as exc:
            if self.path_for(key).exists():
                logger.warning("Falling back to defaults for %r: %s", key, exc)
            else:
                logger.debug("No stored data for %r, using defaults", key)
            return copy.deepcopy(default) if default is not None else []

    def save(self, key: str, records: Iterable[Dict[str, Any]]) -> bool:
        """Replace the stored collection; returns ``False`` if the write failed."""
        path = self.path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(list(records), handle, indent=2, ensure_ascii=False)
                handle.write("\n")
                handle.flush()
            # Use replace for atomic move on POSIX.
            temp_path.replace(path)
        except (OSError, TypeError, ValueError):
            logger.exception("Unable to write %s", path)
            return False
        return True

    def _read(self, key: str) -> List[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            raise StorageReadError(f"{path} does not exist")
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StorageReadError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise StorageReadError(f"Unable to read from {path}") from exc

        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise StorageReadError(f"Expected a list of objects in {path}")
        return payload

    @property
    def base_path(self) -> Path:
        return self._base_path
