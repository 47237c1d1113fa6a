"""Translation from caller-side coordinates and resolvers to resolver-native types."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from .common.logging_utils import extra_context
from .errors import PatternParseError
from .models import Dependency, IvyRepository, MavenRepository, Resolver, ScopedDependency
from .resolution import types as native
from .resolution.ivy_pattern import IvyPattern

logger = logging.getLogger(__name__)


def to_module(dependency: Dependency) -> native.Module:
    """Module under the dependency's cross-build name."""
    return native.Module(
        organization=dependency.group_id,
        name=dependency.artifact_id.cross_name,
        attributes=dependency.attributes,
    )


def to_native_dependency(dependency: Dependency) -> native.Dependency:
    """Translate a coordinate; only direct metadata is ever needed."""
    return native.Dependency(to_module(dependency), dependency.version, transitive=False)


def to_repository(resolver: Resolver) -> Union[native.Repository, str]:
    """Translate a resolver, returning an error message when it cannot be used."""
    if isinstance(resolver, MavenRepository):
        return native.MavenRepo(resolver.location)
    if isinstance(resolver, IvyRepository):
        try:
            return native.IvyRepo(IvyPattern.parse(resolver.pattern))
        except PatternParseError as exc:
            return str(exc)
    return f"unsupported resolver type {type(resolver).__name__}"


def convert_resolver(resolver: Resolver) -> Optional[native.Repository]:
    """Translate a resolver; failures are logged and yield None."""
    result = to_repository(resolver)
    if isinstance(result, str):
        logger.error("Failed to convert %s: %s", resolver, result, extra=extra_context(
            event="translation_error", component="translate", action="convert_resolver",
            resolver=getattr(resolver, "name", None), outcome="dropped",
        ))
        return None
    return result


def convert(scoped: ScopedDependency) -> Tuple[native.Dependency, List[native.Repository]]:
    """Translate a scoped dependency into a native dependency and repositories."""
    repositories = []
    for resolver in scoped.resolvers:
        repository = convert_resolver(resolver)
        if repository is not None:
            repositories.append(repository)
    return to_native_dependency(scoped.value), repositories
