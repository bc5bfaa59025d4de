"""Tests for host value types."""

from conformance_harness.hosts.python import UNDEFINED, Blob, File
from conformance_harness.hosts.python.values import Undefined
from conformance_harness.testing.factories import BlobFactory


def test_undefined_is_singleton() -> None:
    """Undefined has a single falsy instance."""
    assert Undefined() is UNDEFINED
    assert not UNDEFINED
    assert repr(UNDEFINED) == "undefined"


async def test_blob_reads() -> None:
    """Blob exposes size, bytes and text."""
    blob = Blob(data="héllo".encode(), type="text/plain")

    assert blob.size == 6
    assert await blob.array_buffer() == "héllo".encode()
    assert await blob.text() == "héllo"


def test_blob_slice() -> None:
    """Slicing returns a new blob with the given type."""
    blob = BlobFactory.build(data=b"0123456789")

    part = blob.slice(2, -2, "application/octet-stream")

    assert part.data == b"234567"
    assert part.type == "application/octet-stream"
    assert blob.size == 10


def test_file_is_a_blob() -> None:
    """File carries a name on top of blob data."""
    file = File(data=b"abc", type="image/png", name="yellow.png")

    assert isinstance(file, Blob)
    assert file.name == "yellow.png"
    assert file.size == 3
