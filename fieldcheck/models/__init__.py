"""Result and error report models."""

from fieldcheck.models.report import ErrorEntry, ErrorKind, ErrorReport, ValidationResult

__all__ = ["ErrorEntry", "ErrorKind", "ErrorReport", "ValidationResult"]
