"""Validation engine and the per-field pipeline.

The pipeline for each field is fixed:

1. presence / default resolution
2. coercion to the declared type
3. constraints (all of them, failures collected)
4. post-validators (in order, first failure stops the chain)

A step only runs when every earlier step succeeded, so constraints always
see a correctly-typed value and post-validators a constraint-clean one.
The engine visits every field of the schema and never stops at the first
failing field.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fieldcheck.log import get_logger
from fieldcheck.models.report import ErrorEntry, ErrorKind, ErrorReport, ValidationResult
from fieldcheck.schema.field import FieldDescriptor
from fieldcheck.schema.schema import Schema
from fieldcheck.schema.types import join_path

logger = get_logger(__name__)


def run_pipeline(
    field: FieldDescriptor, record: Mapping, path: str, schema_name: str
) -> tuple[Any, list[ErrorEntry]]:
    """Run one field through the pipeline.

    Returns (value, entries); the value is meaningful only when entries is empty.
    """
    if field.name not in record:
        if field.is_required:
            return None, [
                ErrorEntry(
                    path=path,
                    kind=ErrorKind.MISSING_FIELD,
                    message=f"field required by {schema_name}",
                )
            ]
        # Defaults are used verbatim.
        return field.resolve_default(), []

    raw = record[field.name]
    if raw is None and field.nullable:
        return None, []

    value, entries = field.coerce(raw, path)
    if entries:
        return None, entries

    entries = field.check_constraints(value, path)
    if entries:
        return None, entries

    value, entry = field.run_post_validators(value, path)
    if entry is not None:
        return None, [entry]

    return value, []


def collect_record(schema: Schema, record: Mapping, prefix: str = "") -> tuple[dict, list[ErrorEntry]]:
    """Validate every field of ``schema`` against ``record``.

    Paths are prefixed with ``prefix`` so nested schemas report
    ``parent.child``. Returns the validated values and all entries found.
    """
    values: dict[str, Any] = {}
    entries: list[ErrorEntry] = []
    for field in schema.fields:
        value, field_entries = run_pipeline(field, record, join_path(prefix, field.name), schema.name)
        if field_entries:
            entries.extend(field_entries)
        else:
            values[field.name] = value
    return values, entries


class ValidationEngine:
    """Validates input records against schemas.

    Stateless: a single engine may be shared between threads.
    """

    def run(self, schema: Schema, record: Mapping) -> ValidationResult:
        if not isinstance(schema, Schema):
            raise TypeError(f"expected a Schema, got {type(schema).__name__}")

        if not isinstance(record, Mapping):
            entry = ErrorEntry(
                path="",
                kind=ErrorKind.TYPE_ERROR,
                message=f"expected {schema.name} mapping, got {type(record).__name__}",
                value=record,
            )
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("record_rejected", schema=schema.name, reason="not_a_mapping")
            return ValidationResult(schema_name=schema.name, report=ErrorReport([entry]))

        values, entries = collect_record(schema, record)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "record_validated",
                schema=schema.name,
                fields=len(schema.fields),
                errors=len(entries),
            )
        if entries:
            return ValidationResult(schema_name=schema.name, report=ErrorReport(entries))
        return ValidationResult(schema_name=schema.name, record=values)


default_engine = ValidationEngine()


def run(schema: Schema, record: Mapping) -> ValidationResult:
    """Validate ``record`` against ``schema`` with the default engine."""
    return default_engine.run(schema, record)
