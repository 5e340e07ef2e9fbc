"""Tests for error entries, reports and results."""

from fieldcheck.models.report import ErrorEntry, ErrorKind, ErrorReport, ValidationResult


def _make_report() -> ErrorReport:
    return ErrorReport(
        [
            ErrorEntry("name", ErrorKind.MISSING_FIELD, "field required by User"),
            ErrorEntry("age", ErrorKind.CONSTRAINT_ERROR, "-1 should be greater than zero", -1, "greater_than"),
            ErrorEntry("address.zip", ErrorKind.TYPE_ERROR, "expected string, got int", 12345),
            ErrorEntry("age", ErrorKind.VALUE_ERROR, "too old", 200),
        ]
    )


def test_entry_render():
    entry = ErrorEntry("age", ErrorKind.CONSTRAINT_ERROR, "-1 should be greater than zero", -1)
    assert entry.render() == "age: -1 should be greater than zero [kind=ConstraintError]"


def test_report_render_one_line_per_entry():
    assert _make_report().render().splitlines() == [
        "name: field required by User [kind=MissingField]",
        "age: -1 should be greater than zero [kind=ConstraintError]",
        "address.zip: expected string, got int [kind=TypeError]",
        "age: too old [kind=ValueError]",
    ]


def test_empty_report():
    report = ErrorReport()
    assert report.passed
    assert len(report) == 0
    assert report.render() == ""
    assert report.to_list() == []


def test_report_queries():
    report = _make_report()
    assert not report.passed
    assert report.paths == ["name", "age", "address.zip"]
    assert [e.kind for e in report.for_path("age")] == [ErrorKind.CONSTRAINT_ERROR, ErrorKind.VALUE_ERROR]
    assert [e.path for e in report.by_kind(ErrorKind.TYPE_ERROR)] == ["address.zip"]
    assert report[0].kind == ErrorKind.MISSING_FIELD


def test_report_is_read_only():
    entries = [ErrorEntry("a", ErrorKind.TYPE_ERROR, "x")]
    report = ErrorReport(entries)
    entries.append(ErrorEntry("b", ErrorKind.TYPE_ERROR, "y"))
    assert len(report) == 1
    assert isinstance(report.entries, tuple)
    assert not hasattr(report, "append")


def test_report_equality():
    assert _make_report() == _make_report()
    assert _make_report() != ErrorReport()


def test_to_list():
    data = _make_report().to_list()
    assert data[1] == {
        "path": "age",
        "kind": "ConstraintError",
        "message": "-1 should be greater than zero",
        "value": -1,
        "constraint": "greater_than",
    }
    assert "constraint" not in data[0]


def test_result_summary():
    failed = ValidationResult(schema_name="User", report=_make_report())
    assert failed.summary() == "[FAIL] User: 4 error(s)"
    assert len(failed.errors) == 4

    passed = ValidationResult(schema_name="User", record={"name": "Ada"})
    assert passed.passed
    assert passed.summary() == "[PASS] User: 0 error(s)"
