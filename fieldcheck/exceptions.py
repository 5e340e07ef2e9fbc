"""Exceptions raised by fieldcheck.

Validation failures are never raised by the engine; they are collected into
an ErrorReport. The exceptions here cover programmer errors detected while
building a schema, and the opt-in ``Schema.parse`` convenience.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fieldcheck.models.report import ErrorReport


class SchemaError(ValueError):
    """A schema or field definition is malformed."""


class RecordValidationError(ValueError):
    """A record failed validation in ``Schema.parse``."""

    def __init__(self, schema_name: str, report: ErrorReport):
        self.schema_name = schema_name
        self.report = report
        super().__init__(f"{schema_name}: {len(report)} validation error(s)\n{report.render()}")
