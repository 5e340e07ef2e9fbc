"""Named constraints checked after a value has been coerced.

A constraint is a predicate plus a human-readable failure message. The
message is a ``str.format`` template and may use ``{value}``, ``{limit}``
and ``{length}``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from fieldcheck.exceptions import SchemaError
from fieldcheck.models.report import ErrorEntry, ErrorKind
from fieldcheck.schema.types import NUMERIC_TYPES, SCALAR_TYPES, SIZED_TYPES, TEXT_TYPES, FieldType


@dataclass(frozen=True, eq=False)
class Constraint:
    """A named predicate a coerced value must satisfy."""

    name: str
    predicate: Callable[[Any], bool]
    message: str
    limit: Any = None
    applies_to: frozenset[FieldType] | None = None  # None means any type

    def supports(self, kind: FieldType) -> bool:
        return self.applies_to is None or kind in self.applies_to

    def check(self, value: Any, path: str) -> ErrorEntry | None:
        if self.predicate(value):
            return None
        return ErrorEntry(
            path=path,
            kind=ErrorKind.CONSTRAINT_ERROR,
            message=self.describe(value),
            value=value,
            constraint=self.name,
        )

    def describe(self, value: Any) -> str:
        length = len(value) if hasattr(value, "__len__") else None
        return self.message.format(value=value, limit=_limit_text(self.limit), length=length)


def _limit_text(limit: Any) -> str:
    if isinstance(limit, (int, float)) and not isinstance(limit, bool) and limit == 0:
        return "zero"
    return str(limit)


# --- Numeric ---


def greater_than(limit) -> Constraint:
    _require_number(limit, "greater_than")
    return Constraint(
        name="greater_than",
        predicate=lambda v: v > limit,
        message="{value} should be greater than {limit}",
        limit=limit,
        applies_to=NUMERIC_TYPES,
    )


def greater_or_equal(limit) -> Constraint:
    _require_number(limit, "greater_or_equal")
    return Constraint(
        name="greater_or_equal",
        predicate=lambda v: v >= limit,
        message="{value} should be greater than or equal to {limit}",
        limit=limit,
        applies_to=NUMERIC_TYPES,
    )


def less_than(limit) -> Constraint:
    _require_number(limit, "less_than")
    return Constraint(
        name="less_than",
        predicate=lambda v: v < limit,
        message="{value} should be less than {limit}",
        limit=limit,
        applies_to=NUMERIC_TYPES,
    )


def less_or_equal(limit) -> Constraint:
    _require_number(limit, "less_or_equal")
    return Constraint(
        name="less_or_equal",
        predicate=lambda v: v <= limit,
        message="{value} should be less than or equal to {limit}",
        limit=limit,
        applies_to=NUMERIC_TYPES,
    )


# --- Length ---


def min_length(limit: int) -> Constraint:
    _require_count(limit, "min_length")
    return Constraint(
        name="min_length",
        predicate=lambda v: len(v) >= limit,
        message="length {length} is below min_length {limit}",
        limit=limit,
        applies_to=SIZED_TYPES,
    )


def max_length(limit: int) -> Constraint:
    _require_count(limit, "max_length")
    return Constraint(
        name="max_length",
        predicate=lambda v: len(v) <= limit,
        message="length {length} exceeds max_length {limit}",
        limit=limit,
        applies_to=SIZED_TYPES,
    )


# --- Text ---


def pattern(regex: str) -> Constraint:
    if not isinstance(regex, str):
        raise SchemaError(f"pattern must be a string, got {regex!r}")
    try:
        compiled = re.compile(regex)
    except re.error as e:
        raise SchemaError(f"pattern '{regex}' is not a valid regular expression: {e}") from e
    return Constraint(
        name="pattern",
        predicate=lambda v: compiled.match(v) is not None,
        message="'{value}' does not match pattern '{limit}'",
        limit=regex,
        applies_to=TEXT_TYPES,
    )


# --- Membership ---


def one_of(choices) -> Constraint:
    if isinstance(choices, (str, bytes, Mapping)) or not isinstance(choices, Iterable):
        raise SchemaError(f"one_of choices must be a list of values, got {choices!r}")
    allowed = tuple(choices)
    if not allowed:
        raise SchemaError("one_of requires at least one choice")
    return Constraint(
        name="one_of",
        predicate=lambda v: v in allowed,
        message="{value!r} not in allowed values {limit}",
        limit=list(allowed),
        applies_to=SCALAR_TYPES,
    )


def _require_number(limit, name: str):
    if not isinstance(limit, (int, float)) or isinstance(limit, bool):
        raise SchemaError(f"{name} limit must be a number, got {limit!r}")


def _require_count(limit, name: str):
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
        raise SchemaError(f"{name} limit must be a non-negative integer, got {limit!r}")


# Factories by name, used by schema definition files.
BUILTIN_CONSTRAINTS: dict[str, Callable[[Any], Constraint]] = {
    "greater_than": greater_than,
    "greater_or_equal": greater_or_equal,
    "less_than": less_than,
    "less_or_equal": less_or_equal,
    "min_length": min_length,
    "max_length": max_length,
    "pattern": pattern,
    "one_of": one_of,
}
