"""Python host manifest."""

from conformance_harness.hosts.manifest import HostManifest
from conformance_harness.hosts.python.config import PythonHostConfig
from conformance_harness.hosts.python.host import PythonHost

python_host_manifest = HostManifest(
    config_cls=PythonHostConfig,
    host_factory=PythonHost.from_config,
)
