"""Resolver-native types: modules, dependencies, repositories and projects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from .ivy_pattern import IvyPattern


@dataclass(frozen=True)
class Module:
    """Organization, name and extra attributes of a published module."""
    organization: str
    name: str
    attributes: Tuple[Tuple[str, str], ...] = ()

    @property
    def attribute_map(self) -> Dict[str, str]:
        return dict(self.attributes)

    def __str__(self) -> str:
        return f"{self.organization}:{self.name}"


@dataclass(frozen=True)
class Dependency:
    """A module at a given version."""
    module: Module
    version: str
    transitive: bool = True

    @property
    def module_version(self) -> Tuple[Module, str]:
        return self.module, self.version

    def __str__(self) -> str:
        return f"{self.module}:{self.version}"


@dataclass(frozen=True)
class MavenRepo:
    """Maven-layout repository root."""
    root: str

    def __post_init__(self):
        object.__setattr__(self, "root", self.root.rstrip("/"))


@dataclass(frozen=True)
class IvyRepo:
    """Ivy repository; the same pattern serves descriptors and artifacts."""
    pattern: IvyPattern


Repository = Union[MavenRepo, IvyRepo]


@dataclass(frozen=True)
class Info:
    """Descriptive fields of a project; ``homepage`` is empty when absent."""
    homepage: str = ""
    scm_url: Optional[str] = None


@dataclass(frozen=True)
class Project:
    """Resolved descriptor of one (module, version)."""
    module: Module
    version: str
    parent: Optional[Tuple[Module, str]] = None
    info: Info = field(default_factory=Info)


@dataclass
class FetchResult:
    """Outcome of a descriptor fetch, indexed by (module, version)."""
    projects: Dict[Tuple[Module, str], Project] = field(default_factory=dict)

    def project(self, module_version: Tuple[Module, str]) -> Optional[Project]:
        return self.projects.get(module_version)
