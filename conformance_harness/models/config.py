"""Models for harness configuration loaded from harness.yaml files."""

import re
from typing import Literal

from pydantic import Field, field_validator

from conformance_harness.models.base import Model

type TimeoutTag = Literal["normal", "long"]

DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str | float) -> float:
    """Convert a duration such as ``"500ms"``, ``"10s"`` or ``"5m"`` to seconds.

    Bare numbers are taken as seconds.

    Raises:
        ValueError: If the value is not a non-negative duration

    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        if value < 0:
            raise ValueError(f"Duration must not be negative: {value!r}")
        return float(value)

    match = DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return float(amount) * DURATION_UNITS[unit or "s"]


class HarnessConfig(Model):
    """Timeout policy and run settings for a harness."""

    default_timeout: str = Field(
        default="10s", description="Timeout for async and promise tests"
    )
    long_timeout: str = Field(
        default="60s", description="Timeout for tests tagged as long-running"
    )
    timeout_multiplier: float = Field(
        default=1.0, gt=0, description="Scale applied to every timeout"
    )
    harness_timeout: str | None = Field(
        default=None,
        description="Upper bound for the whole run (None means no bound)",
    )

    @field_validator("default_timeout", "long_timeout", "harness_timeout")
    @classmethod
    def _check_duration(cls, value: str | None) -> str | None:
        if value is not None:
            parse_duration(value)
        return value

    def resolve_timeout(self, timeout: TimeoutTag | float | None = None) -> float:
        """Return the timeout in seconds for a test.

        Args:
            timeout: ``"normal"`` (or None) for the default timeout, ``"long"``
                for the extended one, or an explicit number of seconds

        Returns:
            The timeout in seconds, scaled by ``timeout_multiplier``

        """
        if timeout is None or timeout == "normal":
            seconds = parse_duration(self.default_timeout)
        elif timeout == "long":
            seconds = parse_duration(self.long_timeout)
        else:
            seconds = parse_duration(timeout)
        return seconds * self.timeout_multiplier

    def resolve_harness_timeout(self) -> float | None:
        """Return the whole-run timeout in seconds, if one is configured."""
        if self.harness_timeout is None:
            return None
        return parse_duration(self.harness_timeout) * self.timeout_multiplier
