"""Classification of Python runtime values into value kinds."""

import array
import datetime
import re
from collections.abc import Mapping, Sequence, Set

from conformance_harness.hosts.python.values import Blob, File, Undefined
from conformance_harness.models.kinds import ValueKind

# Checked in order; subclasses must come before their bases.
KIND_TABLE: Sequence[tuple[type | tuple[type, ...], ValueKind]] = (
    (Undefined, "undefined"),
    (type(None), "null"),
    (bool, "boolean"),
    ((int, float), "number"),
    (str, "string"),
    (File, "file"),
    (Blob, "blob"),
    (bytes, "array-buffer"),
    ((bytearray, memoryview, array.array), "typed-array"),
    (BaseException, "error"),
    ((datetime.datetime, datetime.date), "date"),
    (re.Pattern, "regexp"),
    ((list, tuple), "array"),
    (dict, "object"),
    (Mapping, "map"),
    (Set, "set"),
)


def classify_python_value(value: object) -> ValueKind:
    """Return the value kind of a Python object."""
    for types, kind in KIND_TABLE:
        if isinstance(value, types):
            return kind
    if callable(value):
        return "function"
    return "object"
