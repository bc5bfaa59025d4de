"""Load test suites from Python files.

A suite is a module defining ``register(harness, host)``, plain or async,
which declares its tests on the harness.
"""

import importlib.util
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from conformance_harness.hosts.base import Host
from conformance_harness.runtime import Harness

log = logging.getLogger(__name__)

type RegisterFn = Callable[[Harness, Host], object]


@dataclass(frozen=True, kw_only=True)
class Suite:
    """A loaded suite file."""

    name: str
    path: Path
    register: RegisterFn

    async def declare(self, harness: Harness, host: Host) -> None:
        """Declare the suite's tests, awaiting ``register`` if it is async."""
        outcome = self.register(harness, host)
        if inspect.isawaitable(outcome):
            await outcome


def load_suite(path: Path) -> Suite:
    """Import a suite file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be imported or has no register()

    """
    if not path.is_file():
        raise FileNotFoundError(f"Suite file not found: {path}")

    module_name = f"conformance_suite_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import suite {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ValueError(f"Failed to import suite {path}: {exc}") from exc

    register = getattr(module, "register", None)
    if not callable(register):
        raise ValueError(f"Suite {path} does not define a callable register()")

    log.debug("Loaded suite %s from %s", path.stem, path)
    return Suite(name=path.stem, path=path, register=register)
