"""Metadata resolution over Maven-layout and Ivy-pattern repositories.

``MetadataResolver`` is the narrow interface the service depends on;
``HttpMetadataResolver`` is the default implementation. It lists versions
and fetches POM / ivy.xml descriptors through the shared document cache.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Collection, Dict, List, Optional, Protocol, Sequence

import aiohttp

from ..common import http_client
from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import ArtifactType, Constants
from ..errors import DepmetaError, FetchError, ResolutionError
from .cache import CachePolicy, MetadataCache
from .descriptors import parse_ivy, parse_maven_metadata, parse_pom
from .types import Dependency, FetchResult, IvyRepo, MavenRepo, Module, Project, Repository

logger = logging.getLogger(__name__)


class MetadataResolver(Protocol):
    """Capability the service configures and calls."""

    async def list_versions(
        self,
        module: Module,
        repositories: Sequence[Repository],
        policy: Optional[CachePolicy] = None,
    ) -> List[str]:
        ...

    async def fetch(
        self,
        dependencies: Sequence[Dependency],
        repositories: Sequence[Repository],
        artifact_types: Collection[ArtifactType],
        policy: Optional[CachePolicy] = None,
    ) -> FetchResult:
        ...

    async def close(self) -> None:
        ...


def maven_module_dir(module: Module) -> str:
    """Directory (and file prefix) of a module in a Maven layout.

    sbt plugins are published with ``_<scalaVersion>_<sbtVersion>`` appended.
    """
    attributes = module.attribute_map
    scala_version = attributes.get("scalaVersion")
    sbt_version = attributes.get("sbtVersion")
    if scala_version and sbt_version:
        return f"{module.name}_{scala_version}_{sbt_version}"
    return module.name


def maven_module_url(repo: MavenRepo, module: Module) -> str:
    group_path = module.organization.replace(".", "/")
    return f"{repo.root}/{group_path}/{maven_module_dir(module)}"


def maven_pom_url(repo: MavenRepo, module: Module, version: str) -> str:
    name = maven_module_dir(module)
    return f"{maven_module_url(repo, module)}/{version}/{name}-{version}.pom"


def ivy_variables(module: Module, version: Optional[str] = None) -> Dict[str, str]:
    variables = dict(module.attribute_map)
    variables.update({
        "organisation": module.organization,
        "organization": module.organization,
        "module": module.name,
        "type": "ivy",
        "artifact": "ivy",
        "ext": "xml",
    })
    if version is not None:
        variables["revision"] = version
    return variables


class HttpMetadataResolver:
    """Resolver reading repositories over http(s) and file URLs."""

    def __init__(
        self,
        cache: MetadataCache,
        *,
        timeout: float = Constants.REQUEST_TIMEOUT,
        retries: int = Constants.HTTP_RETRY_MAX,
        user_agent: str = Constants.USER_AGENT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the resolver.

        Args:
            cache: Document cache shared by both freshness policies.
            timeout: Total per-request timeout in seconds.
            retries: Attempts per document before giving up.
            user_agent: User-Agent header sent with every request.
            session: Optional externally owned session.
        """
        self.cache = cache
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._retries = retries
        self._user_agent = user_agent
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
            )
            self._owns_session = True

    async def close(self) -> None:
        """Close the HTTP session if this resolver opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "HttpMetadataResolver":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _document(self, url: str, policy: CachePolicy, context: str) -> Optional[str]:
        """Read a document through the cache; None when it does not exist."""
        cached = await self.cache.get(url, policy)
        if cached is not None:
            return cached
        await self.start()
        assert self._session is not None
        body = await http_client.fetch_text(self._session, url, context=context, retries=self._retries)
        if body is not None:
            await self.cache.put(url, body)
        elif policy.ttl is None:
            # Fresh miss: drop the stale entry.
            await self.cache.discard(url)
        return body

    async def _listing(self, url: str, policy: CachePolicy, context: str) -> Optional[List[str]]:
        if urllib.parse.urlsplit(url).scheme.lower() == "file":
            await self.start()
            assert self._session is not None
            return await http_client.list_directory(self._session, url, context=context)
        if not url.endswith("/"):
            url = f"{url}/"
        html = await self._document(url, policy, context)
        if html is None:
            return None
        return http_client.parse_directory_listing(html)

    async def _repository_versions(
        self, module: Module, repo: Repository, policy: CachePolicy
    ) -> Optional[List[str]]:
        if isinstance(repo, MavenRepo):
            url = f"{maven_module_url(repo, module)}/{Constants.MAVEN_METADATA_FILE}"
            text = await self._document(url, policy, "maven")
            return None if text is None else parse_maven_metadata(text)
        prefix = repo.pattern.revision_prefix(ivy_variables(module))
        if prefix is None:
            raise ResolutionError(f"cannot list revisions with pattern {repo.pattern.source!r}")
        return await self._listing(prefix, policy, "ivy")

    async def list_versions(
        self,
        module: Module,
        repositories: Sequence[Repository],
        policy: Optional[CachePolicy] = None,
    ) -> List[str]:
        """Union of the versions every repository lists for ``module``.

        Raises:
            ResolutionError: if nothing was listed and a repository failed.
        """
        policy = policy or self.cache.default_policy
        found: List[str] = []
        listed = False
        errors: List[str] = []
        for repo in repositories:
            try:
                versions = await self._repository_versions(module, repo, policy)
            except DepmetaError as exc:
                errors.append(str(exc))
                continue
            if versions is None:
                continue
            listed = True
            for version in versions:
                if version not in found:
                    found.append(version)

        if is_debug_enabled(logger):
            logger.debug("Listed versions", extra=extra_context(
                event="function_exit", component="resolver", action="list_versions",
                target=str(module), count=len(found), outcome=policy.name,
            ))
        if not listed and errors:
            raise ResolutionError(f"no versions for {module}: {'; '.join(errors)}")
        return found

    async def _fetch_descriptor(
        self,
        dependency: Dependency,
        repo: Repository,
        artifact_types: Collection[ArtifactType],
        policy: CachePolicy,
    ) -> Optional[Project]:
        module, version = dependency.module_version
        if isinstance(repo, MavenRepo):
            if ArtifactType.POM not in artifact_types:
                return None
            text = await self._document(maven_pom_url(repo, module, version), policy, "maven")
            return None if text is None else parse_pom(text, module, version)
        if ArtifactType.IVY not in artifact_types:
            return None
        url = repo.pattern.substitute(ivy_variables(module, version))
        text = await self._document(url, policy, "ivy")
        return None if text is None else parse_ivy(text, module, version)

    async def fetch(
        self,
        dependencies: Sequence[Dependency],
        repositories: Sequence[Repository],
        artifact_types: Collection[ArtifactType],
        policy: Optional[CachePolicy] = None,
    ) -> FetchResult:
        """Fetch descriptors; the first repository holding one wins.

        Only the given dependencies are fetched; transitive dependencies are
        never followed.

        Raises:
            ResolutionError: if a dependency's descriptor is not available.
        """
        policy = policy or self.cache.default_policy
        result = FetchResult()
        for dependency in dependencies:
            errors: List[str] = []
            project = None
            for repo in repositories:
                try:
                    project = await self._fetch_descriptor(dependency, repo, artifact_types, policy)
                except (FetchError, ResolutionError) as exc:
                    errors.append(str(exc))
                    continue
                if project is not None:
                    break
            if project is None:
                reason = "; ".join(errors) if errors else "not found"
                raise ResolutionError(f"{dependency}: {reason}")
            result.projects[dependency.module_version] = project
            if is_debug_enabled(logger):
                logger.debug("Fetched descriptor", extra=extra_context(
                    event="function_exit", component="resolver", action="fetch",
                    target=str(dependency), outcome="success",
                ))
        return result
