"""Host value types that have no direct Python builtin counterpart."""

from dataclasses import dataclass
from typing import Final, final


@final
class Undefined:
    """The absent value, distinct from ``None`` (which classifies as null)."""

    _instance: "Undefined | None" = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Final = Undefined()


@dataclass(frozen=True, kw_only=True)
class Blob:
    """Immutable binary data with a MIME type."""

    data: bytes = b""
    type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    async def array_buffer(self) -> bytes:
        return self.data

    async def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def slice(
        self, start: int = 0, end: int | None = None, content_type: str = ""
    ) -> "Blob":
        """Return a new blob over ``data[start:end]``.

        Negative offsets count from the end, as with list slicing.
        """
        return Blob(data=self.data[start:end], type=content_type)


@dataclass(frozen=True, kw_only=True)
class File(Blob):
    """A named blob."""

    name: str
    last_modified: float = 0.0
