"""Python host implementation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp

from conformance_harness.hosts.base import Host, ResponseType
from conformance_harness.hosts.python.classifier import classify_python_value
from conformance_harness.hosts.python.config import PythonHostConfig
from conformance_harness.hosts.python.values import Blob
from conformance_harness.models.kinds import ValueKind

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class PythonHost(Host):
    """Host backed by native Python values and an HTTP resource server."""

    config: PythonHostConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: PythonHostConfig
    ) -> AsyncGenerator["PythonHost", None]:
        """Create host with managed session lifecycle."""
        async with aiohttp.ClientSession(
            base_url=config.resource_base_url,
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        ) as session:
            yield cls(config=config, session=session)

    def classify(self, value: object) -> ValueKind:
        """Classify native Python values and host blobs."""
        return classify_python_value(value)

    async def fetch(
        self, path: str, response_type: ResponseType = "arraybuffer"
    ) -> bytes | Blob | str:
        """Fetch a resource and return it in the requested shape."""
        log.debug("Fetching resource: path=%s, response_type=%s", path, response_type)

        async with self.session.get(path) as response:
            if response.status != 200:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to fetch resource {path}: {response.status} {text}"
                )
            data = await response.read()
            content_type = response.headers.get("Content-Type", "")

        if response_type == "blob":
            return Blob(data=data, type=content_type)
        if response_type == "text":
            return data.decode("utf-8", errors="replace")
        return data
