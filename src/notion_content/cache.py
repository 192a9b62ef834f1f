"""On-disk JSON cache for Notion query results and block trees.

One file per key (``<key>.json``) under the cache directory. In production
builds every entry is trusted until the directory is removed by hand; in
interactive/dev mode entries older than the TTL are treated as missing.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable

from notion_content.utils import DEFAULT_CACHE_DIR, is_production_mode

logger = logging.getLogger(__name__)

# 5 minutes in dev, ignored in production builds
CACHE_TTL = 5 * 60


def query_cache_key(data_source_id: str) -> str:
    """Cache key for a data source query result set."""
    return f"db-{data_source_id}"


def blocks_cache_key(block_id: str) -> str:
    """Cache key for a resolved block forest."""
    return f"blocks-{block_id}"


class DiskCache:
    """Key-value store of JSON payloads with mode-dependent staleness.

    Attributes:
        cache_dir: Directory holding the ``<key>.json`` files.
        ttl: Freshness window in seconds (dev mode only).
        production: If True, entries never go stale.
    """

    def __init__(
        self,
        cache_dir: str | Path = DEFAULT_CACHE_DIR,
        ttl: float = CACHE_TTL,
        production: bool | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache. The directory is created on first use.

        Args:
            cache_dir: Storage directory.
            ttl: Freshness window in seconds for dev mode.
            production: Force the build policy on or off. Defaults to the
                NOTION_SYNC_MODE environment setting.
            clock: Returns the current time in epoch seconds.
        """
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self.production = is_production_mode() if production is None else production
        self._clock = clock

    def _ensure_dir(self) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """Return the file path backing a key."""
        return self.cache_dir / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Return the cached value for key, or None if absent or stale.

        Raises:
            OSError: On filesystem errors other than a missing entry.
            json.JSONDecodeError: If the entry is not valid JSON.
        """
        self._ensure_dir()
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"Cache miss: {key}")
            return None

        if not self.production:
            age = self._clock() - path.stat().st_mtime
            if age > self.ttl:
                logger.debug(f"Cache stale: {key} ({age:.0f}s old)")
                return None

        logger.debug(f"Cache hit: {key}")
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry atomically.

        The payload is written to a temporary file in the cache directory and
        renamed over the target, so readers never see a partial entry.

        Raises:
            OSError: On filesystem errors.
            TypeError: If value is not JSON-serializable.
        """
        self._ensure_dir()
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            # Remove the partial temp file, then re-raise
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        # Staleness is measured from this clock, not the filesystem's
        now = self._clock()
        os.utime(path, (now, now))
        logger.debug(f"Cache write: {key}")
