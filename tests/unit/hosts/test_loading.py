"""Tests for host loading module."""

from importlib.metadata import EntryPoint
from unittest.mock import patch

import pytest

from conformance_harness.hosts.loading import (
    ENTRY_POINT_GROUP,
    HostNotFoundError,
    available_hosts,
    load_host_manifest,
)
from conformance_harness.hosts.python import python_host_manifest

PYTHON_ENTRY = EntryPoint(
    name="python",
    value="conformance_harness.hosts.python:python_host_manifest",
    group=ENTRY_POINT_GROUP,
)


def test_load_host_manifest_returns_manifest() -> None:
    """Loads host manifest by key."""
    manifest = load_host_manifest("python")

    assert manifest is python_host_manifest


def test_load_host_manifest_ignores_case() -> None:
    """Host keys match regardless of case and surrounding whitespace."""
    assert load_host_manifest(" Python ") is python_host_manifest


def test_load_host_manifest_raises_for_unknown_host() -> None:
    """Raises HostNotFoundError naming the registered hosts in order."""
    entries = [
        EntryPoint(name="servo", value="servo_host:manifest", group=ENTRY_POINT_GROUP),
        PYTHON_ENTRY,
    ]

    with (
        patch("conformance_harness.hosts.loading.entry_points", return_value=entries),
        pytest.raises(HostNotFoundError) as exc_info,
    ):
        load_host_manifest("unknown-host")

    assert exc_info.value.key == "unknown-host"
    assert exc_info.value.available == ["python", "servo"]
    assert str(exc_info.value) == (
        "Unknown host 'unknown-host'; registered hosts: python, servo"
    )


def test_load_host_manifest_rejects_non_manifest() -> None:
    """An entry point that does not resolve to a HostManifest is an error."""
    entries = [EntryPoint(name="broken", value="json:dumps", group=ENTRY_POINT_GROUP)]

    with (
        patch("conformance_harness.hosts.loading.entry_points", return_value=entries),
        pytest.raises(TypeError, match="not a HostManifest"),
    ):
        load_host_manifest("broken")


def test_available_hosts_lists_builtin_python_host() -> None:
    """The built-in host is registered through the entry-point group."""
    assert "python" in available_hosts()


def test_available_hosts_deduplicates_case_variants() -> None:
    """Hosts registered under case variants of one key are listed once."""
    entries = [
        PYTHON_ENTRY,
        EntryPoint(name="PYTHON", value="other:manifest", group=ENTRY_POINT_GROUP),
    ]

    with patch(
        "conformance_harness.hosts.loading.entry_points", return_value=entries
    ):
        assert available_hosts() == ["python"]
        assert load_host_manifest("PYTHON") is python_host_manifest
