"""Host manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from conformance_harness.hosts.base import Host


@dataclass(frozen=True, kw_only=True)
class HostManifest[ConfigT: BaseModel, HostT: Host]:
    """Manifest describing a host plugin.

    Holds the host's configuration class and a factory that opens the host
    for the duration of a run.
    """

    config_cls: type[ConfigT]
    host_factory: Callable[[ConfigT], AbstractAsyncContextManager[HostT]]
