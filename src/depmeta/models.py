"""Data models for dependency coordinates and the repositories that host them."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class ArtifactId:
    """Artifact name plus the optional cross-build name (e.g. ``cats-core_2.13``)."""
    name: str
    maybe_cross_name: Optional[str] = None

    @property
    def cross_name(self) -> str:
        """Name as published in the repository."""
        return self.maybe_cross_name or self.name


@dataclass(frozen=True)
class Dependency:
    """A single published library unit identified by group, artifact and version."""
    group_id: str
    artifact_id: ArtifactId
    version: str
    attributes: Tuple[Tuple[str, str], ...] = field(default=())

    def __post_init__(self):
        # Accept any mapping and store it as a sorted tuple so instances stay hashable.
        attributes = self.attributes
        if isinstance(attributes, Mapping):
            attributes = attributes.items()
        object.__setattr__(self, "attributes", tuple(sorted(dict(attributes).items())))

    @property
    def attribute_map(self) -> Dict[str, str]:
        """Return a copy of the extra attributes."""
        return dict(self.attributes)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id.cross_name}:{self.version}"


@dataclass(frozen=True)
class MavenRepository:
    """Maven-layout repository rooted at ``location``."""
    name: str
    location: str


@dataclass(frozen=True)
class IvyRepository:
    """Ivy repository described by an artifact ``pattern``."""
    name: str
    pattern: str


Resolver = Union[MavenRepository, IvyRepository]


@dataclass(frozen=True)
class ScopedDependency:
    """A dependency paired with the resolvers that should be consulted for it."""
    value: Dependency
    resolvers: Tuple[Resolver, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "resolvers", tuple(self.resolvers))


@dataclass(frozen=True)
class ScopedDependencies:
    """Dependencies sharing one resolver list."""
    values: Tuple[Dependency, ...]
    resolvers: Tuple[Resolver, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "resolvers", tuple(self.resolvers))

    def sequence(self) -> List[ScopedDependency]:
        """Split into one ScopedDependency per dependency."""
        return [ScopedDependency(value, self.resolvers) for value in self.values]

    def __iter__(self) -> Iterator[ScopedDependency]:
        return iter(self.sequence())

    def __len__(self) -> int:
        return len(self.values)
