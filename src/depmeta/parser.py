"""Token parsing for coordinates and resolver specs given on the command line."""

from typing import Dict, Optional, Tuple

from .errors import ConfigError
from .models import ArtifactId, Dependency, IvyRepository, MavenRepository


def split_assignment(token: str) -> Tuple[str, str]:
    """Split ``NAME=VALUE`` on the leftmost ``=``.

    Raises:
        ConfigError: if either side is empty.
    """
    name, sep, value = token.partition("=")
    if not sep or not name.strip() or not value.strip():
        raise ConfigError(f"expected NAME=VALUE, got {token!r}")
    return name.strip(), value.strip()


def parse_attributes(tokens: Optional[list]) -> Dict[str, str]:
    """Parse repeated ``key=value`` attribute tokens; later keys win."""
    attributes: Dict[str, str] = {}
    for token in tokens or []:
        key, value = split_assignment(token)
        attributes[key] = value
    return attributes


def parse_coordinate(token: str, attributes: Optional[Dict[str, str]] = None) -> Dependency:
    """Parse ``group:artifact:version`` or ``group:artifact:crossName:version``.

    Raises:
        ConfigError: if the token does not have three or four non-empty parts.
    """
    parts = [part.strip() for part in token.strip().split(":")]
    if len(parts) not in (3, 4) or not all(parts):
        raise ConfigError(
            f"invalid coordinate {token!r}; expected group:artifact:version"
        )
    if len(parts) == 3:
        group_id, name, version = parts
        artifact_id = ArtifactId(name)
    else:
        group_id, name, cross_name, version = parts
        artifact_id = ArtifactId(name, cross_name)
    return Dependency(group_id, artifact_id, version, attributes or {})


def parse_maven_resolver(token: str) -> MavenRepository:
    """Parse ``NAME=URL``."""
    name, location = split_assignment(token)
    return MavenRepository(name, location)


def parse_ivy_resolver(token: str) -> IvyRepository:
    """Parse ``NAME=PATTERN``; the pattern itself is validated on use."""
    name, pattern = split_assignment(token)
    return IvyRepository(name, pattern)
