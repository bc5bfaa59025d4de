"""Observable issuance and settlement order for overlapping operations."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from conformance_harness.errors import HarnessMisuseError


@dataclass(kw_only=True, eq=False)
class OrderLog:
    """Records the order operations were issued in and the order they settled.

    The log never reorders anything: ``settle`` is meant to be called from the
    completion callback itself, so ``settled`` is the delivery order.
    """

    _issued: list[str] = field(default_factory=list)
    _settled: list[int] = field(default_factory=list)

    def issue(self, label: str | None = None) -> int:
        """Record a new operation and return its issuance ordinal."""
        ordinal = len(self._issued)
        self._issued.append(label if label is not None else str(ordinal))
        return ordinal

    def settle(self, ordinal: int) -> int:
        """Record that operation ``ordinal`` settled.

        Returns:
            The settlement position (0 for the first operation to settle)

        Raises:
            HarnessMisuseError: If the ordinal was never issued or already settled

        """
        if not 0 <= ordinal < len(self._issued):
            raise HarnessMisuseError(f"Operation {ordinal} was never issued")
        if ordinal in self._settled:
            raise HarnessMisuseError(f"Operation {ordinal} already settled")
        self._settled.append(ordinal)
        return len(self._settled) - 1

    @property
    def issued(self) -> Sequence[str]:
        return tuple(self._issued)

    @property
    def settled(self) -> Sequence[int]:
        return tuple(self._settled)

    @property
    def pending(self) -> Sequence[int]:
        """Ordinals issued but not yet settled, in issuance order."""
        done = set(self._settled)
        return tuple(i for i in range(len(self._issued)) if i not in done)

    def in_issue_order(self) -> bool:
        """Whether everything settled so far settled in issuance order."""
        return self._settled == list(range(len(self._settled)))
