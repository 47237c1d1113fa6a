"""Shared fixtures for depmeta tests."""

from unittest.mock import MagicMock

import pytest

from depmeta.resolution.cache import MetadataCache
from depmeta.resolution.resolver import HttpMetadataResolver
from fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MetadataCache(ttl=3600, clock=clock)


@pytest.fixture
def http_resolver(cache):
    """HttpMetadataResolver with a dummy session; patch fetch_text to serve documents."""
    return HttpMetadataResolver(cache, retries=1, session=MagicMock())
