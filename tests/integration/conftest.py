"""Fixtures for integration tests."""

from collections.abc import AsyncGenerator, Iterator

import pytest
from aioresponses import aioresponses as aioresponses_cls

from conformance_harness.hosts.python import PythonHost, PythonHostConfig

RESOURCE_BASE_URL = "http://web-platform.test:8000"


@pytest.fixture
def aioresponses() -> Iterator[aioresponses_cls]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mock:
        yield mock


@pytest.fixture
def host_config() -> PythonHostConfig:
    """Create host configuration pointing at the test origin."""
    return PythonHostConfig(resource_base_url=RESOURCE_BASE_URL)


@pytest.fixture
async def host(
    host_config: PythonHostConfig, aioresponses: aioresponses_cls
) -> AsyncGenerator[PythonHost, None]:
    """Create host with managed session."""
    async with PythonHost.from_config(host_config) as impl:
        yield impl
