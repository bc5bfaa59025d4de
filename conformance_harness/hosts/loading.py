"""Host discovery through the ``conformance_harness.hosts`` entry-point group."""

import logging
from importlib.metadata import EntryPoint, entry_points
from typing import Any

from conformance_harness.hosts.manifest import HostManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "conformance_harness.hosts"


class HostNotFoundError(LookupError):
    """No registered host matches the requested key."""

    def __init__(self, key: str, available: list[str]) -> None:
        self.key = key
        self.available = available
        names = ", ".join(available) or "none"
        super().__init__(f"Unknown host {key!r}; registered hosts: {names}")


def _registered() -> dict[str, EntryPoint]:
    # Keys are matched case-insensitively; the first registration wins.
    hosts: dict[str, EntryPoint] = {}
    for entry in entry_points(group=ENTRY_POINT_GROUP):
        hosts.setdefault(entry.name.lower(), entry)
    return hosts


def available_hosts() -> list[str]:
    """Return the registered host keys, sorted."""
    return sorted(_registered())


def load_host_manifest(key: str) -> HostManifest[Any, Any]:
    """Load the manifest of the host registered under ``key``.

    Args:
        key: Host key, matched case-insensitively (e.g., "python" or "Python")

    Returns:
        The host manifest

    Raises:
        HostNotFoundError: If no host is registered under ``key``
        TypeError: If the entry point does not resolve to a HostManifest

    """
    hosts = _registered()
    entry = hosts.get(key.strip().lower())
    if entry is None:
        raise HostNotFoundError(key, sorted(hosts))

    manifest = entry.load()
    if not isinstance(manifest, HostManifest):
        raise TypeError(
            f"Entry point {entry.value!r} for host {entry.name!r} "
            f"is a {type(manifest).__name__}, not a HostManifest"
        )
    log.debug("Loaded host %s from %s", entry.name, entry.value)
    return manifest
