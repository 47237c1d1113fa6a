"""depmeta - published versions and homepage URLs of JVM dependencies."""

from .config import MetadataConfig, load_config
from .models import (
    ArtifactId,
    Dependency,
    IvyRepository,
    MavenRepository,
    Resolver,
    ScopedDependencies,
    ScopedDependency,
)
from .service import ArtifactMetadataService, create_service
from .version import Version

__all__ = [
    "ArtifactId",
    "ArtifactMetadataService",
    "Dependency",
    "IvyRepository",
    "MavenRepository",
    "MetadataConfig",
    "Resolver",
    "ScopedDependencies",
    "ScopedDependency",
    "Version",
    "create_service",
    "load_config",
]
