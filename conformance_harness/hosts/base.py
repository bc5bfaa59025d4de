"""Abstract base class for host platforms that tests run against."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

from conformance_harness.models.kinds import ValueKind

type ResponseType = Literal["arraybuffer", "blob", "text"]


@dataclass(frozen=True, kw_only=True)
class Host(ABC):
    """A platform whose APIs the tests exercise.

    The harness only needs two things from it: a classification of runtime
    values for ``assert_class_of``, and access to test resources.
    """

    @abstractmethod
    def classify(self, value: object) -> ValueKind:
        """Return the kind of a runtime value.

        Args:
            value: Any value produced by a host API

        Returns:
            One of the recognised value kinds

        """

    @abstractmethod
    async def fetch(
        self, path: str, response_type: ResponseType = "arraybuffer"
    ) -> object:
        """Fetch a test resource.

        Args:
            path: Resource path relative to the host's resource root
            response_type: How the body is returned, as with XHR's responseType

        Returns:
            The body as raw bytes, a host blob value, or text

        """
