"""Fakes and builders shared by depmeta tests."""

from typing import Dict, List, Optional, Tuple

from depmeta.errors import ResolutionError
from depmeta.models import ArtifactId, Dependency, MavenRepository, ScopedDependency
from depmeta.resolution.types import FetchResult, Info, Module, Project

CENTRAL = MavenRepository("public", "https://repo.example.com/maven2/")
CENTRAL_ROOT = "https://repo.example.com/maven2"


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRemote:
    """Stand-in for http_client.fetch_text serving documents by URL.

    A value that is an exception instance is raised instead of returned;
    unknown URLs behave like HTTP 404.
    """

    def __init__(self, documents: Optional[Dict[str, object]] = None):
        self.documents = dict(documents or {})
        self.requests: List[str] = []

    async def __call__(self, session, url, *, context, retries=3):
        self.requests.append(url)
        document = self.documents.get(url)
        if isinstance(document, Exception):
            raise document
        return document


class FakeResolver:
    """In-memory MetadataResolver keyed by (module, version)."""

    def __init__(self, projects=None, versions=None, fail=None):
        self.projects: Dict[Tuple[Module, str], Project] = dict(projects or {})
        self.versions: Dict[Module, List[str]] = dict(versions or {})
        self.fail = fail
        self.fetched: List[Tuple[Module, str]] = []
        self.listed: List[Tuple[Module, object]] = []
        self.closed = False

    async def list_versions(self, module, repositories, policy=None):
        self.listed.append((module, policy))
        if self.fail is not None:
            raise self.fail
        return list(self.versions.get(module, []))

    async def fetch(self, dependencies, repositories, artifact_types, policy=None):
        result = FetchResult()
        for dependency in dependencies:
            self.fetched.append(dependency.module_version)
            if self.fail is not None:
                raise self.fail
            project = self.projects.get(dependency.module_version)
            if project is None:
                raise ResolutionError(f"{dependency}: not found")
            result.projects[dependency.module_version] = project
        return result

    async def close(self):
        self.closed = True


def make_dependency(group: str, artifact: str, version: str, **attributes) -> Dependency:
    return Dependency(group, ArtifactId(artifact), version, attributes)


def scoped(group: str, artifact: str, version: str, resolvers=(CENTRAL,)) -> ScopedDependency:
    return ScopedDependency(make_dependency(group, artifact, version), resolvers)


def project(group: str, artifact: str, version: str, homepage: str = "",
            scm_url: Optional[str] = None, parent: Optional[Tuple[str, str, str]] = None) -> Project:
    parent_ref = None
    if parent is not None:
        parent_ref = (Module(parent[0], parent[1]), parent[2])
    return Project(
        module=Module(group, artifact),
        version=version,
        parent=parent_ref,
        info=Info(homepage=homepage, scm_url=scm_url),
    )


def projects_by_key(*items: Project) -> Dict[Tuple[Module, str], Project]:
    return {(p.module, p.version): p for p in items}


