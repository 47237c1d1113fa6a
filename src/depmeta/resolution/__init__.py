"""Default metadata-resolution capability: listing versions and fetching descriptors."""

from .cache import CacheEntry, CachePolicy, MetadataCache
from .ivy_pattern import IvyPattern
from .resolver import HttpMetadataResolver, MetadataResolver
from .types import Dependency, FetchResult, Info, IvyRepo, MavenRepo, Module, Project, Repository

__all__ = [
    "CacheEntry",
    "CachePolicy",
    "MetadataCache",
    "IvyPattern",
    "HttpMetadataResolver",
    "MetadataResolver",
    "Dependency",
    "FetchResult",
    "Info",
    "IvyRepo",
    "MavenRepo",
    "Module",
    "Project",
    "Repository",
]
