"""Error report models.

An ErrorReport is the ordered, read-only list of every failure found while
validating one record. Entries appear in field-declaration order; entries
from nested schemas and sequences appear at the position of their parent
field, in the order the engine visited them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

# Rendered in place of the empty path of an entry about the record itself.
ROOT_PATH = "__root__"


class ErrorKind(Enum):
    """The four kinds of validation failure."""

    MISSING_FIELD = "MissingField"  # Required field absent, no default
    TYPE_ERROR = "TypeError"  # Coercion to the declared type failed
    CONSTRAINT_ERROR = "ConstraintError"  # A named constraint predicate failed
    VALUE_ERROR = "ValueError"  # A post-validator rejected the value


@dataclass(frozen=True)
class ErrorEntry:
    """A single validation failure."""

    path: str  # Dotted path, with [i] for sequence items (e.g. "addresses[0].zip")
    kind: ErrorKind
    message: str
    value: Any = None  # The offending input value
    constraint: str | None = None  # Constraint or post-validator name, when relevant

    def render(self) -> str:
        return f"{self.path or ROOT_PATH}: {self.message} [kind={self.kind.value}]"

    def to_dict(self) -> dict:
        data = {
            "path": self.path,
            "kind": self.kind.value,
            "message": self.message,
            "value": self.value,
        }
        if self.constraint:
            data["constraint"] = self.constraint
        return data


class ErrorReport:
    """Read-only ordered sequence of ErrorEntry."""

    __slots__ = ("_entries",)

    def __init__(self, entries=()):
        self._entries: tuple[ErrorEntry, ...] = tuple(entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ErrorReport):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"ErrorReport({list(self._entries)!r})"

    @property
    def passed(self) -> bool:
        return not self._entries

    @property
    def entries(self) -> tuple[ErrorEntry, ...]:
        return self._entries

    @property
    def paths(self) -> list[str]:
        """Distinct failing paths, in report order."""
        seen: dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.path, None)
        return list(seen)

    def for_path(self, path: str) -> list[ErrorEntry]:
        return [e for e in self._entries if e.path == path]

    def by_kind(self, kind: ErrorKind) -> list[ErrorEntry]:
        return [e for e in self._entries if e.kind == kind]

    def render(self) -> str:
        """One line per entry: ``<path>: <message> [kind=<kind>]``."""
        return "\n".join(entry.render() for entry in self._entries)

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one record against a schema.

    ``record`` is set only when the report is empty.
    """

    schema_name: str
    record: dict | None = None
    report: ErrorReport = field(default_factory=ErrorReport)

    @property
    def passed(self) -> bool:
        return self.report.passed

    @property
    def errors(self) -> list[ErrorEntry]:
        return list(self.report)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {self.schema_name}: {len(self.report)} error(s)"
