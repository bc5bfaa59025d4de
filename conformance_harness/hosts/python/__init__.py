"""Python host module."""

from conformance_harness.hosts.python.classifier import classify_python_value
from conformance_harness.hosts.python.config import PythonHostConfig
from conformance_harness.hosts.python.host import PythonHost
from conformance_harness.hosts.python.manifest import python_host_manifest
from conformance_harness.hosts.python.values import UNDEFINED, Blob, File

__all__ = [
    "UNDEFINED",
    "Blob",
    "File",
    "PythonHost",
    "PythonHostConfig",
    "classify_python_value",
    "python_host_manifest",
]
