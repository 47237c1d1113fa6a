"""Runtime configuration: defaults, YAML file, environment and CLI overrides."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .constants import Constants
from .errors import ConfigError

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": 1,
    "s": 1,
    "sec": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
}

ENV_OVERRIDES = {
    "DEPMETA_CACHE_TTL": "cache_ttl",
    "DEPMETA_CACHE_DIR": "cache_dir",
    "DEPMETA_MAX_PARENT_DEPTH": "max_parent_depth",
    "DEPMETA_REQUEST_TIMEOUT": "request_timeout",
    "DEPMETA_MAX_CONCURRENCY": "max_concurrency",
}


def parse_duration(value: Union[str, int, float]) -> float:
    """Parse seconds from a number or a string such as ``"2h"`` or ``"30min"``.

    Raises:
        ConfigError: for negative, malformed or unknown-unit values.
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        match = _DURATION_RE.match(str(value))
        if not match or match.group(2).lower() not in _DURATION_UNITS:
            raise ConfigError(f"invalid duration {value!r}")
        seconds = float(match.group(1)) * _DURATION_UNITS[match.group(2).lower()]
    if seconds < 0:
        raise ConfigError(f"duration must not be negative: {value!r}")
    return seconds


def _positive_int(name: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    if number < 1:
        raise ConfigError(f"{name} must be at least 1, got {number}")
    return number


@dataclass
class MetadataConfig:
    """Configuration consumed when building the metadata service."""

    cache_ttl: float = Constants.CACHE_TTL_SEC
    cache_dir: Optional[str] = None
    max_parent_depth: int = Constants.MAX_PARENT_DEPTH
    request_timeout: float = Constants.REQUEST_TIMEOUT
    max_concurrency: int = Constants.MAX_CONCURRENCY
    http_retries: int = Constants.HTTP_RETRY_MAX
    user_agent: str = Constants.USER_AGENT

    def __post_init__(self):
        self.cache_ttl = parse_duration(self.cache_ttl)
        self.request_timeout = parse_duration(self.request_timeout)
        self.max_parent_depth = _positive_int("max_parent_depth", self.max_parent_depth)
        self.max_concurrency = _positive_int("max_concurrency", self.max_concurrency)
        self.http_retries = _positive_int("http_retries", self.http_retries)
        if self.cache_dir is not None:
            self.cache_dir = os.path.expanduser(str(self.cache_dir))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MetadataConfig":
        """Create config from a mapping; unknown keys are ignored with a warning."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            values[name] = value
        return cls(**values)

    def with_env(self, env: Optional[Mapping[str, str]] = None) -> "MetadataConfig":
        """Return a copy with ``DEPMETA_*`` environment overrides applied."""
        env = os.environ if env is None else env
        overrides = {
            attr: env[var] for var, attr in ENV_OVERRIDES.items() if env.get(var, "").strip()
        }
        return replace(self, **overrides) if overrides else self

    def with_args(self, args: Any) -> "MetadataConfig":
        """Return a copy with CLI overrides applied.

        Args:
            args: Parsed CLI arguments namespace.
        """
        overrides: Dict[str, Any] = {}
        if getattr(args, "CACHE_TTL", None) is not None:
            overrides["cache_ttl"] = args.CACHE_TTL
        if getattr(args, "CACHE_DIR", None):
            overrides["cache_dir"] = args.CACHE_DIR
        if getattr(args, "MAX_PARENT_DEPTH", None) is not None:
            overrides["max_parent_depth"] = args.MAX_PARENT_DEPTH
        if getattr(args, "MAX_CONCURRENCY", None) is not None:
            overrides["max_concurrency"] = args.MAX_CONCURRENCY
        if getattr(args, "REQUEST_TIMEOUT", None) is not None:
            overrides["request_timeout"] = args.REQUEST_TIMEOUT
        return replace(self, **overrides) if overrides else self

    @classmethod
    def from_args(cls, args: Any) -> "MetadataConfig":
        """Create config from CLI arguments, honouring ``--config`` and the environment."""
        return load_config(getattr(args, "CONFIG", None)).with_args(args)


def load_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> MetadataConfig:
    """Load configuration: defaults, then the YAML file, then the environment.

    The file may hold the settings at the top level or under a ``depmeta``
    section.

    Raises:
        ConfigError: if the file cannot be read or holds invalid values.
    """
    data: Mapping[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigError(f"cannot read config file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config file {path} must contain a mapping")
        section = loaded.get("depmeta", loaded)
        if not isinstance(section, dict):
            raise ConfigError(f"'depmeta' section of {path} must be a mapping")
        data = section
    return MetadataConfig.from_mapping(data).with_env(env)
