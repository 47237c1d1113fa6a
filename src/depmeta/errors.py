"""Exception types raised inside depmeta.

None of these escape the public ArtifactMetadataService operations; they
mark the seams where failures are converted into empty results.
"""


class DepmetaError(Exception):
    """Base class for depmeta errors."""


class ConfigError(DepmetaError, ValueError):
    """Invalid configuration value."""


class PatternParseError(DepmetaError, ValueError):
    """Malformed Ivy repository pattern."""


class FetchError(DepmetaError):
    """A repository document could not be retrieved."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ResolutionError(DepmetaError):
    """Metadata could not be resolved from any configured repository."""
