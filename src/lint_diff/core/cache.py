"""Result cache layered on top of the Engine.

Runs are deterministic for a given repository, revision pair, scope and
exclusion list, so finished results can be reused for repeated queries
(for example the same pull request rendered in two formats). The cache
sits outside the engine; the engine itself keeps no state between runs.

The cache lives in memory, so it only pays off for library callers that
keep one CachingEngine alive across runs, such as a review bot or a web
hook handler. The lint-diff command runs once per process and uses a
plain Engine.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog
from cachetools import TTLCache

from lint_diff.core.engine import Engine
from lint_diff.models.result import CorrelationResult
from lint_diff.utils.logging import LogEventNames

log = structlog.get_logger()

CacheKey = tuple[str, str, str, str, tuple[str, ...] | None]


class CachingEngine:
    """Engine wrapper that memoizes successful runs.

    Failed runs are never cached.

    Example:
        cached = CachingEngine(engine, repository="my-theme", ttl=3600)
        result = await cached.run("100", "105")
        result = await cached.run("100", "105")  # served from cache
    """

    def __init__(
        self,
        engine: Engine,
        repository: str,
        ttl: int = 3600,
        maxsize: int = 128,
    ) -> None:
        """Initialize the caching engine.

        Args:
            engine: Engine performing the actual runs
            repository: Repository identifier used in cache keys
            ttl: Time-to-live of cached results in seconds
            maxsize: Maximum number of cached results
        """
        self._engine = engine
        self._repository = repository
        self._cache: TTLCache[CacheKey, CorrelationResult] = TTLCache(
            maxsize=maxsize,
            ttl=ttl,
        )
        self._lock = asyncio.Lock()

    def _key(
        self,
        old_revision: str,
        new_revision: str,
        scope: str,
        excluded_extensions: Sequence[str] | None,
    ) -> CacheKey:
        excluded = tuple(excluded_extensions) if excluded_extensions is not None else None
        return (self._repository, old_revision, new_revision, scope, excluded)

    async def run(
        self,
        old_revision: str,
        new_revision: str,
        scope: str = "",
        excluded_extensions: Sequence[str] | None = None,
        nocache: bool = False,
    ) -> CorrelationResult:
        """Return a cached result or delegate to the wrapped engine.

        Args:
            old_revision: Revision before the change
            new_revision: Revision after the change
            scope: Directory within the repository
            excluded_extensions: Path suffixes to skip
            nocache: Neither read nor populate the cache

        Returns:
            CorrelationResult from cache or a fresh run
        """
        if nocache:
            log.debug(
                LogEventNames.CACHE_BYPASSED,
                old_revision=old_revision,
                new_revision=new_revision,
            )
            return await self._engine.run(old_revision, new_revision, scope, excluded_extensions)

        key = self._key(old_revision, new_revision, scope, excluded_extensions)

        async with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            log.debug(LogEventNames.CACHE_HIT, old_revision=old_revision, new_revision=new_revision)
            return cached

        log.debug(LogEventNames.CACHE_MISS, old_revision=old_revision, new_revision=new_revision)
        result = await self._engine.run(old_revision, new_revision, scope, excluded_extensions)

        async with self._lock:
            self._cache[key] = result

        return result

    def clear(self) -> None:
        """Drop all cached results."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
