"""fieldcheck: declarative record validation with full error reports.

Build a Schema from FieldDescriptors, then validate input mappings:

    from fieldcheck import FieldDescriptor, Schema, INTEGER, STRING, greater_than

    user = Schema("User", [
        FieldDescriptor("name", STRING),
        FieldDescriptor("age", INTEGER, constraints=[greater_than(0)]),
    ])
    result = user.validate({"name": "John", "age": -1})
    print(result.report.render())
"""

__version__ = "0.3.0"

from fieldcheck.engine import ValidationEngine, default_engine, run
from fieldcheck.exceptions import RecordValidationError, SchemaError
from fieldcheck.models.report import ErrorEntry, ErrorKind, ErrorReport, ValidationResult
from fieldcheck.schema import (
    BOOLEAN,
    EMAIL,
    FLOAT,
    INTEGER,
    MISSING,
    STRING,
    Constraint,
    FieldDescriptor,
    FieldType,
    PostValidator,
    Schema,
    TypeSpec,
    greater_or_equal,
    greater_than,
    less_or_equal,
    less_than,
    max_length,
    min_length,
    nested,
    one_of,
    pattern,
    post_validator,
    sequence_of,
)

__all__ = [
    "BOOLEAN",
    "EMAIL",
    "FLOAT",
    "INTEGER",
    "MISSING",
    "STRING",
    "Constraint",
    "ErrorEntry",
    "ErrorKind",
    "ErrorReport",
    "FieldDescriptor",
    "FieldType",
    "PostValidator",
    "RecordValidationError",
    "Schema",
    "SchemaError",
    "TypeSpec",
    "ValidationEngine",
    "ValidationResult",
    "default_engine",
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
    "run",
    "sequence_of",
]
