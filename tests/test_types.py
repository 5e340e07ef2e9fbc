"""Tests for declared types and coercion."""

import pytest

from fieldcheck.exceptions import SchemaError
from fieldcheck.models.report import ErrorKind
from fieldcheck.schema.field import FieldDescriptor
from fieldcheck.schema.schema import Schema
from fieldcheck.schema.types import (
    BOOLEAN,
    EMAIL,
    FLOAT,
    INTEGER,
    STRING,
    FieldType,
    TypeSpec,
    as_type_spec,
    nested,
    sequence_of,
)


def _coerce(declared, raw):
    return FieldDescriptor("f", declared).coerce(raw)


ADDRESS = Schema(
    "Address",
    [
        FieldDescriptor("street", STRING),
        FieldDescriptor("zip", STRING),
    ],
)


# --- Integer ---


def test_integer_accepts_int():
    assert _coerce(INTEGER, 5) == (5, [])


def test_integer_accepts_integral_float():
    value, entries = _coerce(INTEGER, 30.0)
    assert entries == []
    assert value == 30
    assert type(value) is int


def test_integer_rejects_fractional_float():
    _, entries = _coerce(INTEGER, 30.5)
    assert len(entries) == 1
    assert entries[0].kind == ErrorKind.TYPE_ERROR
    assert entries[0].message == "expected integer, got float"
    assert entries[0].value == 30.5


def test_integer_rejects_bool_and_string():
    for raw in (True, "30"):
        _, entries = _coerce(INTEGER, raw)
        assert [e.kind for e in entries] == [ErrorKind.TYPE_ERROR]


# --- Float / string / boolean ---


def test_float_widens_int():
    value, entries = _coerce(FLOAT, 3)
    assert entries == []
    assert value == 3.0
    assert type(value) is float


def test_float_rejects_bool():
    _, entries = _coerce(FLOAT, False)
    assert entries[0].message == "expected float, got bool"


def test_string_only_accepts_str():
    assert _coerce(STRING, "John") == ("John", [])
    _, entries = _coerce(STRING, 42)
    assert entries[0].message == "expected string, got int"


def test_boolean_only_accepts_bool():
    assert _coerce(BOOLEAN, False) == (False, [])
    _, entries = _coerce(BOOLEAN, 1)
    assert entries[0].kind == ErrorKind.TYPE_ERROR


# --- Email ---


def test_email_accepts_local_at_domain():
    assert _coerce(EMAIL, "john@example.com") == ("john@example.com", [])
    assert _coerce(EMAIL, "root@localhost") == ("root@localhost", [])


def test_email_rejects_malformed():
    for raw in ("not-an-email", "a@@b", "john doe@example.com", "@example.com", "john@"):
        _, entries = _coerce(EMAIL, raw)
        assert len(entries) == 1, raw
        assert entries[0].kind == ErrorKind.TYPE_ERROR
        assert "valid email" in entries[0].message


def test_email_rejects_non_string():
    _, entries = _coerce(EMAIL, 12)
    assert entries[0].message == "expected email, got int"


# --- Sequences ---


def test_sequence_accepts_list_and_tuple():
    assert _coerce(sequence_of(STRING), ["a", "b"]) == (["a", "b"], [])
    assert _coerce(sequence_of(STRING), ("a", "b")) == (["a", "b"], [])


def test_sequence_rejects_string():
    _, entries = _coerce(sequence_of(STRING), "abc")
    assert entries[0].message == "expected list[string], got str"


def test_sequence_reports_each_bad_item_with_index():
    _, entries = FieldDescriptor("scores", sequence_of(INTEGER)).coerce([1, "x", 2, None])
    assert [e.path for e in entries] == ["scores[1]", "scores[3]"]
    assert all(e.kind == ErrorKind.TYPE_ERROR for e in entries)


def test_sequence_of_sequences():
    value, entries = _coerce(sequence_of(sequence_of(INTEGER)), [[1, 2], [3.0]])
    assert entries == []
    assert value == [[1, 2], [3]]


# --- Nested ---


def test_nested_rejects_non_mapping():
    _, entries = FieldDescriptor("address", nested(ADDRESS)).coerce("12 Main St")
    assert entries[0].path == "address"
    assert entries[0].message == "expected Address mapping, got str"


def test_nested_returns_validated_mapping():
    value, entries = FieldDescriptor("address", ADDRESS).coerce({"street": "Main", "zip": "12345"})
    assert entries == []
    assert value == {"street": "Main", "zip": "12345"}


# --- Declaring types ---


def test_as_type_spec_accepts_names_and_schemas():
    assert as_type_spec("integer") == INTEGER
    assert as_type_spec(FieldType.EMAIL) == EMAIL
    assert as_type_spec(ADDRESS) == nested(ADDRESS)


def test_unknown_type_name_is_schema_error():
    with pytest.raises(SchemaError, match="unknown declared type 'decimal'"):
        FieldDescriptor("price", "decimal")


def test_parameterised_kinds_need_parameters():
    with pytest.raises(SchemaError):
        as_type_spec(FieldType.NESTED)
    with pytest.raises(SchemaError):
        TypeSpec(FieldType.NESTED)
    with pytest.raises(SchemaError):
        TypeSpec(FieldType.SEQUENCE)


def test_labels():
    assert sequence_of(nested(ADDRESS)).label == "list[Address]"
    assert sequence_of("email").label == "list[email]"
