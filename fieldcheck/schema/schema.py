"""Schema: a named, ordered, immutable collection of field descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from fieldcheck.exceptions import RecordValidationError, SchemaError
from fieldcheck.models.report import ValidationResult
from fieldcheck.schema.field import FieldDescriptor


@dataclass(frozen=True, eq=False)
class Schema:
    """A named record type.

    Field order is declaration order, and it is the order in which fields
    are validated and errors reported.
    """

    name: str
    fields: tuple[FieldDescriptor, ...]

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError(f"schema name must be a non-empty string, got {self.name!r}")

        fields = tuple(self.fields)
        seen: set[str] = set()
        for f in fields:
            if not isinstance(f, FieldDescriptor):
                raise SchemaError(f"schema '{self.name}': {f!r} is not a FieldDescriptor")
            if f.name in seen:
                raise SchemaError(f"schema '{self.name}': duplicate field name '{f.name}'")
            seen.add(f.name)
        object.__setattr__(self, "fields", fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, fields={self.field_names!r})"

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldDescriptor:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def validate(self, record: Mapping) -> ValidationResult:
        """Validate a record with the default engine."""
        from fieldcheck.engine import default_engine

        return default_engine.run(self, record)

    def parse(self, record: Mapping) -> dict:
        """Validate a record and return it, raising RecordValidationError on failure."""
        result = self.validate(record)
        if not result.passed:
            raise RecordValidationError(self.name, result.report)
        return result.record
