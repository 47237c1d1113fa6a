"""Read-through cache for repository documents.

One backing store serves two freshness policies: ``default`` honours the
configured TTL, ``no-ttl`` treats every entry as expired so the caller
re-fetches and writes the fresh document back for the default policy to
reuse. The store lives in memory and can additionally be persisted as one
JSON file per entry.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..common.logging_utils import extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachePolicy:
    """Freshness policy; ``ttl`` of None means entries are always stale."""

    name: str
    ttl: Optional[float]


@dataclass
class CacheEntry:
    """A cached document and the time it was fetched."""

    body: str
    fetched_at: float

    def is_fresh(self, policy: CachePolicy, now: float) -> bool:
        """Check the entry's age against ``policy``."""
        if policy.ttl is None:
            return False
        return now - self.fetched_at < policy.ttl


class MetadataCache:
    """Document cache shared by the default and no-ttl policies."""

    def __init__(
        self,
        ttl: float,
        cache_dir: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            ttl: Time-to-live in seconds for the default policy.
            cache_dir: Optional directory to persist entries in.
            clock: Time source, seconds since the epoch.
        """
        self.default_policy = CachePolicy("default", ttl)
        self.no_ttl_policy = CachePolicy("no-ttl", None)
        self._cache_dir = cache_dir
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        if cache_dir:
            os.makedirs(cache_dir, exist_ok=True)

    async def get(self, url: str, policy: CachePolicy) -> Optional[str]:
        """Return the cached body for ``url`` when fresh under ``policy``."""
        with self._lock:
            entry = self._entries.get(url)
        if entry is None and self._cache_dir:
            entry = await asyncio.to_thread(self._read_entry, url)
            if entry is not None:
                with self._lock:
                    self._entries.setdefault(url, entry)

        if entry is not None and entry.is_fresh(policy, self._clock()):
            with self._lock:
                self._hits += 1
            if is_debug_enabled(logger):
                logger.debug("Metadata cache hit", extra=extra_context(
                    event="cache_hit", component="cache", action="get",
                    target=safe_url(url), outcome=policy.name,
                ))
            return entry.body

        with self._lock:
            self._misses += 1
        return None

    async def put(self, url: str, body: str) -> None:
        """Store ``body`` for ``url``; concurrent writers race, the last wins."""
        entry = CacheEntry(body=body, fetched_at=self._clock())
        with self._lock:
            self._entries[url] = entry
        if self._cache_dir:
            await asyncio.to_thread(self._write_entry, url, entry)

    async def discard(self, url: str) -> None:
        """Forget the entry for ``url``, including its persisted copy."""
        with self._lock:
            self._entries.pop(url, None)
        if self._cache_dir:
            await asyncio.to_thread(self._remove_entry, url)

    def clear(self) -> None:
        """Drop in-memory entries; persisted files are left to the caller."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "total_entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "default_ttl": self.default_policy.ttl,
                "persistent": bool(self._cache_dir),
            }

    def _entry_path(self, url: str) -> str:
        assert self._cache_dir is not None
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return os.path.join(self._cache_dir, f"{digest}.json")

    def _read_entry(self, url: str) -> Optional[CacheEntry]:
        path = self._entry_path(url)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if data.get("url") != url:
                return None
            return CacheEntry(body=data["body"], fetched_at=float(data["fetched_at"]))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            # A corrupt entry is treated as a miss and overwritten on the next put.
            logger.warning("Ignoring unreadable cache entry %s: %s", path, exc)
            return None

    def _remove_entry(self, url: str) -> None:
        path = self._entry_path(url)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Failed to remove cache entry %s: %s", path, exc)

    def _write_entry(self, url: str, entry: CacheEntry) -> None:
        path = self._entry_path(url)
        payload = {"url": url, "fetched_at": entry.fetched_at, "body": entry.body}
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self._cache_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.warning("Failed to persist cache entry %s: %s", path, exc)
