"""Caching layers for catalog sources."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import ValidationError

from image_mapper.catalog.client import CatalogSource, utcnow
from image_mapper.config import CACHE_FILE
from image_mapper.errors import CacheCorruptError, CacheWriteError
from image_mapper.models import CatalogSnapshot

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class MemoryCachingCatalog(CatalogSource):
    """Serves the last snapshot from memory until it is older than the cache duration.

    The freshness check and the refresh run under one lock, so concurrent
    callers share a single delegate fetch per staleness window. A failed
    refresh leaves the previous snapshot in place.
    """

    def __init__(
        self,
        cache_duration: timedelta,
        source: CatalogSource,
        clock: Clock = utcnow,
    ) -> None:
        self.cache_duration = cache_duration
        self._source = source
        self._clock = clock
        # Guarded by _lock
        self._snapshot: CatalogSnapshot | None = None
        self._lock = asyncio.Lock()

    async def fetch(self) -> CatalogSnapshot:
        async with self._lock:
            if self._snapshot is not None and self._is_fresh(self._snapshot):
                logger.debug("Using in-memory catalog snapshot")
                return self._snapshot

            snapshot = await self._source.fetch()
            self._snapshot = snapshot
            return snapshot

    def _is_fresh(self, snapshot: CatalogSnapshot) -> bool:
        return self._clock() - snapshot.fetched_at < self.cache_duration


class FileCachingCatalog(CatalogSource):
    """Caches snapshots in a JSON file so they survive across processes.

    The file is the only state: nothing is kept in memory between calls.
    Calls are serialized within a process; separate processes racing on
    the same file are last-writer-wins. File I/O runs in a worker thread.
    """

    def __init__(
        self,
        cache_duration: timedelta,
        source: CatalogSource,
        cache_dir: Path,
        clock: Clock = utcnow,
    ) -> None:
        self.cache_duration = cache_duration
        self.cache_dir = Path(cache_dir)
        self._source = source
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / CACHE_FILE

    async def fetch(self) -> CatalogSnapshot:
        async with self._lock:
            cached = await asyncio.to_thread(self._read)
            if cached is not None and self._clock() - cached.fetched_at < self.cache_duration:
                logger.debug(f"Using cached catalog from {self.cache_file}")
                return cached

            if cached is None:
                logger.info("No cached catalog found, fetching from remote...")
            else:
                logger.info("Cached catalog is stale, fetching from remote...")

            snapshot = await self._source.fetch()
            await asyncio.to_thread(self._write, snapshot)
            return snapshot

    def _read(self) -> CatalogSnapshot | None:
        """Read the cached snapshot, or None when there isn't one.

        Raises:
            CacheCorruptError: If the file exists but isn't a valid snapshot
        """
        try:
            data = self.cache_file.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheCorruptError(f"reading cache file: {e}") from e

        try:
            return CatalogSnapshot.model_validate_json(data)
        except ValidationError as e:
            raise CacheCorruptError(
                f"unmarshaling cache file {self.cache_file}: {e}"
            ) from e

    def _write(self, snapshot: CatalogSnapshot) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheWriteError(f"creating cache directory: {e}") from e

        try:
            self.cache_file.write_text(snapshot.to_json(), encoding="utf-8")
        except OSError as e:
            raise CacheWriteError(f"writing cache file: {e}") from e

        logger.debug(f"Wrote {len(snapshot.repos)} repositories to {self.cache_file}")
