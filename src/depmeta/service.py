"""Artifact metadata service: published versions and homepage URLs of dependencies.

Every remote failure degrades to an empty result with a DEBUG log, so one
unreachable repository never aborts a batch.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from yarl import URL

from .common.logging_utils import Timer, extra_context, is_debug_enabled
from .config import MetadataConfig
from .constants import ArtifactType, Constants
from .models import ScopedDependencies, ScopedDependency
from .resolution.cache import CachePolicy, MetadataCache
from .resolution.resolver import HttpMetadataResolver, MetadataResolver
from .resolution.types import Dependency as NativeDependency
from .resolution.types import Module, Repository
from .translate import convert
from .urls import select_url
from .version import Version, sort_versions

logger = logging.getLogger(__name__)

DESCRIPTOR_TYPES = frozenset({ArtifactType.POM, ArtifactType.IVY})


class ArtifactMetadataService:
    """Looks up versions and artifact URLs through a metadata resolver."""

    def __init__(
        self,
        resolver: MetadataResolver,
        cache: MetadataCache,
        *,
        max_parent_depth: int = Constants.MAX_PARENT_DEPTH,
        max_concurrency: int = Constants.MAX_CONCURRENCY,
    ):
        """Initialize the service.

        Args:
            resolver: Metadata-resolution capability.
            cache: Cache whose policies select normal or fresh reads.
            max_parent_depth: Maximum number of parent projects consulted.
            max_concurrency: Maximum concurrent lookups in batch operations.
        """
        self._resolver = resolver
        self._cache = cache
        self._max_parent_depth = max_parent_depth
        self._max_concurrency = max(1, max_concurrency)

    async def close(self) -> None:
        await self._resolver.close()

    async def __aenter__(self) -> "ArtifactMetadataService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def get_versions(self, dependency: ScopedDependency) -> List[Version]:
        """Published versions, ascending, served from cache within the TTL."""
        return await self._get_versions(dependency, self._cache.default_policy)

    async def get_versions_fresh(self, dependency: ScopedDependency) -> List[Version]:
        """Published versions, ascending, always re-queried."""
        return await self._get_versions(dependency, self._cache.no_ttl_policy)

    async def _get_versions(self, dependency: ScopedDependency, policy: CachePolicy) -> List[Version]:
        native, repositories = convert(dependency)
        with Timer() as t:
            try:
                available = await self._resolver.list_versions(native.module, repositories, policy)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.debug(
                    "Failed to get versions of %s", native, exc_info=exc,
                    extra=extra_context(
                        event="anomaly", component="service", action="get_versions",
                        dependency=str(dependency.value), outcome="error",
                    ),
                )
                return []
        versions = sort_versions(available)
        if is_debug_enabled(logger):
            logger.debug("Versions resolved", extra=extra_context(
                event="function_exit", component="service", action="get_versions",
                dependency=str(dependency.value), count=len(versions),
                outcome=policy.name, duration_ms=t.duration_ms(),
            ))
        return versions

    async def get_artifact_url(self, dependency: ScopedDependency) -> Optional[URL]:
        """SCM URL or homepage of the dependency, falling back to its parents."""
        native, repositories = convert(dependency)
        return await self._get_artifact_url(native, repositories)

    async def _get_artifact_url(
        self, dependency: NativeDependency, repositories: List[Repository]
    ) -> Optional[URL]:
        current = dependency
        visited: Set[Tuple[Module, str]] = set()
        for depth in range(self._max_parent_depth + 1):
            visited.add(current.module_version)
            try:
                result = await self._resolver.fetch([current], repositories, DESCRIPTOR_TYPES)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.debug(
                    "Failed to fetch artifacts of %s", current, exc_info=exc,
                    extra=extra_context(
                        event="anomaly", component="service", action="get_artifact_url",
                        dependency=str(dependency), depth=depth, outcome="error",
                    ),
                )
                return None

            project = result.project(current.module_version)
            if project is None:
                return None
            url = select_url(project.info)
            if url is not None:
                return url
            if project.parent is None:
                return None

            module, version = project.parent
            if (module, version) in visited:
                logger.debug("Parent cycle at %s:%s", module, version, extra=extra_context(
                    event="anomaly", component="service", action="get_artifact_url",
                    dependency=str(dependency), depth=depth, outcome="cycle",
                ))
                return None
            current = NativeDependency(module, version, transitive=False)

        logger.debug("Parent chain of %s exceeds %d levels", dependency, self._max_parent_depth,
                     extra=extra_context(
                         event="anomaly", component="service", action="get_artifact_url",
                         dependency=str(dependency), outcome="max_depth",
                     ))
        return None

    async def get_artifact_id_url_mapping(
        self, dependencies: Union[ScopedDependencies, Iterable[ScopedDependency]]
    ) -> Dict[str, URL]:
        """Map artifact names to URLs; dependencies without a URL are left out."""
        if isinstance(dependencies, ScopedDependencies):
            scoped = dependencies.sequence()
        else:
            scoped = list(dependencies)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def lookup(dependency: ScopedDependency) -> Tuple[str, Optional[URL]]:
            async with semaphore:
                return dependency.value.artifact_id.name, await self.get_artifact_url(dependency)

        results = await asyncio.gather(*(lookup(dependency) for dependency in scoped))
        return {name: url for name, url in results if url is not None}


def create_service(config: Optional[MetadataConfig] = None) -> ArtifactMetadataService:
    """Build a service backed by the HTTP resolver from ``config``."""
    config = config or MetadataConfig()
    cache = MetadataCache(ttl=config.cache_ttl, cache_dir=config.cache_dir)
    resolver = HttpMetadataResolver(
        cache,
        timeout=config.request_timeout,
        retries=config.http_retries,
        user_agent=config.user_agent,
    )
    return ArtifactMetadataService(
        resolver,
        cache,
        max_parent_depth=config.max_parent_depth,
        max_concurrency=config.max_concurrency,
    )
