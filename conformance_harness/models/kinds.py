"""Closed set of runtime value kinds recognised by ``assert_class_of``."""

from collections.abc import Callable
from typing import Literal, get_args

type ValueKind = Literal[
    "undefined",
    "null",
    "boolean",
    "number",
    "string",
    "array",
    "object",
    "function",
    "error",
    "date",
    "regexp",
    "map",
    "set",
    "array-buffer",
    "typed-array",
    "blob",
    "file",
]

VALUE_KINDS: frozenset[str] = frozenset(get_args(ValueKind.__value__))

type Classifier = Callable[[object], ValueKind]


def is_value_kind(tag: str) -> bool:
    """Check whether ``tag`` names a recognised value kind."""
    return tag in VALUE_KINDS
