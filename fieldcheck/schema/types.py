"""Declared field types and per-type coercion.

Coercion is strict: a value is only accepted when it already has the
declared shape. The only conversions are an integral float to int
(30.0 -> 30) and an int to float for float fields. Nested mappings and
sequences are rebuilt from their validated parts.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from fieldcheck.exceptions import SchemaError
from fieldcheck.models.report import ErrorEntry, ErrorKind

if TYPE_CHECKING:
    from fieldcheck.schema.schema import Schema

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+")

# Returned by coerce_value when the raw value could not be coerced.
INVALID = object()


class FieldType(Enum):
    INTEGER = "integer"
    STRING = "string"
    FLOAT = "float"
    BOOLEAN = "boolean"
    EMAIL = "email"
    NESTED = "nested"
    SEQUENCE = "sequence"


SCALAR_TYPES = frozenset(
    {FieldType.INTEGER, FieldType.STRING, FieldType.FLOAT, FieldType.BOOLEAN, FieldType.EMAIL}
)
NUMERIC_TYPES = frozenset({FieldType.INTEGER, FieldType.FLOAT})
TEXT_TYPES = frozenset({FieldType.STRING, FieldType.EMAIL})
SIZED_TYPES = frozenset({FieldType.STRING, FieldType.EMAIL, FieldType.SEQUENCE})


@dataclass(frozen=True)
class TypeSpec:
    """A declared type: a scalar kind, a nested schema, or a sequence of TypeSpec."""

    kind: FieldType
    schema: Schema | None = None
    item: TypeSpec | None = None

    def __post_init__(self):
        if self.kind == FieldType.NESTED and self.schema is None:
            raise SchemaError("nested type requires a schema")
        if self.kind == FieldType.SEQUENCE and self.item is None:
            raise SchemaError("sequence type requires an item type")
        if self.kind in SCALAR_TYPES and (self.schema is not None or self.item is not None):
            raise SchemaError(f"scalar type '{self.kind.value}' takes no schema or item type")

    @property
    def label(self) -> str:
        if self.kind == FieldType.NESTED:
            return self.schema.name
        if self.kind == FieldType.SEQUENCE:
            return f"list[{self.item.label}]"
        return self.kind.value


INTEGER = TypeSpec(FieldType.INTEGER)
STRING = TypeSpec(FieldType.STRING)
FLOAT = TypeSpec(FieldType.FLOAT)
BOOLEAN = TypeSpec(FieldType.BOOLEAN)
EMAIL = TypeSpec(FieldType.EMAIL)


def nested(schema: Schema) -> TypeSpec:
    return TypeSpec(FieldType.NESTED, schema=schema)


def sequence_of(item) -> TypeSpec:
    return TypeSpec(FieldType.SEQUENCE, item=as_type_spec(item))


def as_type_spec(declared) -> TypeSpec:
    """Normalise a declared type.

    Accepts a TypeSpec, a scalar FieldType, a scalar type name
    ("integer", "email", ...) or a Schema (treated as a nested type).
    """
    from fieldcheck.schema.schema import Schema

    if isinstance(declared, TypeSpec):
        return declared
    if isinstance(declared, Schema):
        return nested(declared)
    if isinstance(declared, str):
        try:
            declared = FieldType(declared)
        except ValueError:
            raise SchemaError(f"unknown declared type '{declared}'") from None
    if isinstance(declared, FieldType):
        if declared not in SCALAR_TYPES:
            raise SchemaError(
                f"type '{declared.value}' needs a parameter; use nested() or sequence_of()"
            )
        return TypeSpec(declared)
    raise SchemaError(f"unknown declared type {declared!r}")


def join_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def index_path(prefix: str, index: int) -> str:
    return f"{prefix}[{index}]"


def coerce_value(spec: TypeSpec, raw: Any, path: str, entries: list[ErrorEntry]) -> Any:
    """Coerce ``raw`` to ``spec``, appending any failures to ``entries``.

    Returns the coerced value, or INVALID when coercion failed.
    """
    kind = spec.kind

    if kind == FieldType.INTEGER:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        return _type_error(spec, raw, path, entries)

    if kind == FieldType.FLOAT:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
        return _type_error(spec, raw, path, entries)

    if kind == FieldType.STRING:
        if isinstance(raw, str):
            return raw
        return _type_error(spec, raw, path, entries)

    if kind == FieldType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        return _type_error(spec, raw, path, entries)

    if kind == FieldType.EMAIL:
        if not isinstance(raw, str):
            return _type_error(spec, raw, path, entries)
        if not EMAIL_PATTERN.fullmatch(raw):
            entries.append(
                ErrorEntry(
                    path=path,
                    kind=ErrorKind.TYPE_ERROR,
                    message=f"'{raw}' is not a valid email address",
                    value=raw,
                )
            )
            return INVALID
        return raw

    if kind == FieldType.NESTED:
        if not isinstance(raw, Mapping):
            return _type_error(spec, raw, path, entries, expected=f"{spec.label} mapping")
        from fieldcheck.engine import collect_record

        values, nested_entries = collect_record(spec.schema, raw, prefix=path)
        if nested_entries:
            entries.extend(nested_entries)
            return INVALID
        return values

    if kind == FieldType.SEQUENCE:
        if not isinstance(raw, (list, tuple)):
            return _type_error(spec, raw, path, entries)
        items = []
        failed = False
        for i, item in enumerate(raw):
            value = coerce_value(spec.item, item, index_path(path, i), entries)
            if value is INVALID:
                failed = True
            else:
                items.append(value)
        return INVALID if failed else items

    raise SchemaError(f"unsupported declared type '{kind.value}'")


def _type_error(spec: TypeSpec, raw: Any, path: str, entries: list[ErrorEntry], expected=None):
    entries.append(
        ErrorEntry(
            path=path,
            kind=ErrorKind.TYPE_ERROR,
            message=f"expected {expected or spec.label}, got {type(raw).__name__}",
            value=raw,
        )
    )
    return INVALID
