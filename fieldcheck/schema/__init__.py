"""Schema building blocks: declared types, constraints, fields and schemas."""

from fieldcheck.schema.constraints import (
    BUILTIN_CONSTRAINTS,
    Constraint,
    greater_or_equal,
    greater_than,
    less_or_equal,
    less_than,
    max_length,
    min_length,
    one_of,
    pattern,
)
from fieldcheck.schema.field import MISSING, FieldDescriptor, PostValidator, post_validator
from fieldcheck.schema.schema import Schema
from fieldcheck.schema.types import (
    BOOLEAN,
    EMAIL,
    FLOAT,
    INTEGER,
    STRING,
    FieldType,
    TypeSpec,
    nested,
    sequence_of,
)

__all__ = [
    "BOOLEAN",
    "BUILTIN_CONSTRAINTS",
    "EMAIL",
    "FLOAT",
    "INTEGER",
    "MISSING",
    "STRING",
    "Constraint",
    "FieldDescriptor",
    "FieldType",
    "PostValidator",
    "Schema",
    "TypeSpec",
    "greater_or_equal",
    "greater_than",
    "less_or_equal",
    "less_than",
    "max_length",
    "min_length",
    "nested",
    "one_of",
    "pattern",
    "post_validator",
    "sequence_of",
]
