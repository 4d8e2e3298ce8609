"""
Local match cache.

A single JSON file under a fixed, well-known key: one match per device.
Writes go through a temporary file and an atomic rename so a crash never
leaves a half-written cache behind.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rrgolf.config import settings
from rrgolf.errors import CorruptStateError, PersistenceError

logger = logging.getLogger(__name__)


class LocalMatchCache:
    """
    Fast, synchronous store for the device's current match.

    Usage:
        cache = LocalMatchCache()
        cache.save(record)
        record = cache.load()   # None when nothing is cached
    """

    def __init__(self, directory: Optional[Path] = None, key: Optional[str] = None):
        self.directory = Path(directory or settings.local_cache_dir)
        self.key = key or settings.local_cache_key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> Optional[dict[str, Any]]:
        """
        Return the cached match document, or None if nothing is cached.

        Raises:
            CorruptStateError: the file exists but is not a cache envelope
            PersistenceError: the file could not be read
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Failed to read local cache {self.path}: {exc}") from exc

        try:
            envelope = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptStateError(f"Local cache is not valid JSON: {exc}") from exc

        if not isinstance(envelope, dict) or "match_data" not in envelope:
            raise CorruptStateError("Local cache has no match_data")
        return envelope["match_data"]

    def save(self, match_data: dict[str, Any]) -> None:
        envelope = {
            "match_data": match_data,
            "updated_at": datetime.utcnow().isoformat(),
        }
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(envelope), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Failed to write local cache {self.path}: {exc}") from exc

    def delete(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Failed to clear local cache {self.path}: {exc}") from exc

    def exists(self) -> bool:
        return self.path.is_file()
