"""
Disk tier of the response cache.

Raw JSON response bodies are kept in a small SQLite table next to the
config file, so a fresh session can show the last pages without waiting on
the API. Entries expire after the same TTL as the memory cache. Storage
failures are logged and treated as misses.
"""

import json
import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from ..config.constants import CACHE_TTL_SECONDS
from ..config.settings import get_cache_path

logger = logging.getLogger(__name__)


class PersistentCache:
    """TTL cache of JSON bodies backed by SQLite."""

    def __init__(
        self,
        db_path: Path,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.db_path = db_path
        self.ttl = ttl
        self._clock = clock

        db_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS responses (
                    key TEXT PRIMARY KEY,
                    body TEXT NOT NULL,
                    expires_at REAL NOT NULL
                )
                """
            )
        db_path.chmod(0o600)
        logger.debug("Opened response cache at %s", db_path)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=1.0)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """The cached body for key, or None if missing, expired or unreadable."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT body, expires_at FROM responses WHERE key = ?", (key,)
                ).fetchone()
                if row is None:
                    return None
                body, expires_at = row
                if self._clock() > expires_at:
                    conn.execute("DELETE FROM responses WHERE key = ?", (key,))
                    logger.debug("Disk cache expired: %s", key)
                    return None
        except sqlite3.Error as e:
            logger.warning(f"Disk cache read failed for {key}: {e}")
            return None

        try:
            value = json.loads(body)
        except ValueError as e:
            logger.warning(f"Disk cache entry {key} is corrupt: {e}")
            return None
        logger.debug("Disk cache hit: %s", key)
        return value if isinstance(value, dict) else None

    def set(self, key: str, body: Dict[str, Any]) -> None:
        try:
            data = json.dumps(body)
        except (TypeError, ValueError) as e:
            logger.warning(f"Not caching {key}: {e}")
            return
        try:
            with self._connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO responses (key, body, expires_at) VALUES (?, ?, ?)",
                    (key, data, self._clock() + self.ttl),
                )
        except sqlite3.Error as e:
            logger.warning(f"Disk cache write failed for {key}: {e}")

    def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        try:
            with self._connection() as conn:
                count = conn.execute("DELETE FROM responses").rowcount
        except sqlite3.Error as e:
            logger.warning(f"Disk cache clear failed: {e}")
            return 0
        logger.debug("Cleared %d entries from disk cache", count)
        return count

    def cleanup(self) -> int:
        """Remove expired entries. Returns the number removed."""
        try:
            with self._connection() as conn:
                count = conn.execute(
                    "DELETE FROM responses WHERE expires_at < ?", (self._clock(),)
                ).rowcount
        except sqlite3.Error as e:
            logger.warning(f"Disk cache cleanup failed: {e}")
            return 0
        if count:
            logger.debug("Removed %d expired disk cache entries", count)
        return count


def open_persistent_cache(db_path: Optional[Path] = None) -> Optional[PersistentCache]:
    """Open the disk cache, or None (memory only) when it cannot be opened."""
    db_path = db_path or get_cache_path()
    try:
        cache = PersistentCache(db_path)
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Disk cache unavailable at {db_path}, using memory only: {e}")
        return None
    cache.cleanup()
    return cache
