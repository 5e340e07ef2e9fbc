"""Field descriptors: one declared field of a schema.

A descriptor owns the three per-field steps of the pipeline: coercion,
constraints and post-validators. Presence and default resolution happen in
the engine, which decides whether the pipeline runs at all.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable

from fieldcheck.exceptions import SchemaError
from fieldcheck.models.report import ErrorEntry, ErrorKind
from fieldcheck.schema.constraints import Constraint
from fieldcheck.schema.types import INVALID, TypeSpec, as_type_spec, coerce_value


class _Missing:
    """Sentinel for "no value" (absent input or no default)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING: Any = _Missing()


@dataclass(frozen=True)
class PostValidator:
    """A named function applied after constraints pass.

    The function receives the current value and returns the (possibly
    transformed) value. It signals rejection by raising ValueError or
    AssertionError; the exception message becomes the entry message.
    """

    name: str
    func: Callable[[Any], Any]

    def __call__(self, value: Any) -> Any:
        return self.func(value)


def post_validator(name: str | None = None):
    """Decorator turning a function into a named PostValidator."""

    def wrap(func: Callable[[Any], Any]) -> PostValidator:
        return PostValidator(name=name or func.__name__, func=func)

    return wrap


def _as_post_validator(fn) -> PostValidator:
    if isinstance(fn, PostValidator):
        return fn
    if not callable(fn):
        raise SchemaError(f"post-validator {fn!r} is not callable")
    return PostValidator(name=getattr(fn, "__name__", repr(fn)), func=fn)


@dataclass(frozen=True, eq=False)
class FieldDescriptor:
    """Declares a field's type, default, constraints and post-validators."""

    name: str
    type: TypeSpec
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None
    constraints: tuple[Constraint, ...] = ()
    post_validators: tuple[PostValidator, ...] = ()
    nullable: bool = False
    description: str = ""

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError(f"field name must be a non-empty string, got {self.name!r}")
        if self.default is not MISSING and self.default_factory is not None:
            raise SchemaError(f"field '{self.name}' cannot declare both default and default_factory")
        if self.default_factory is not None and not callable(self.default_factory):
            raise SchemaError(f"field '{self.name}' default_factory is not callable")

        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "type", as_type_spec(self.type))
        object.__setattr__(self, "constraints", tuple(self.constraints))
        object.__setattr__(
            self, "post_validators", tuple(_as_post_validator(v) for v in self.post_validators)
        )

        for constraint in self.constraints:
            if not isinstance(constraint, Constraint):
                raise SchemaError(f"field '{self.name}': {constraint!r} is not a Constraint")
            if not constraint.supports(self.type.kind):
                raise SchemaError(
                    f"field '{self.name}': constraint '{constraint.name}' "
                    f"does not apply to type '{self.type.label}'"
                )

        if self.default is None:
            object.__setattr__(self, "nullable", True)
        elif self.default is not MISSING:
            _, entries = self.coerce(self.default)
            if entries:
                raise SchemaError(
                    f"field '{self.name}': default {self.default!r} is invalid: {entries[0].message}"
                )

    @property
    def is_required(self) -> bool:
        return self.default is MISSING and self.default_factory is None

    def resolve_default(self) -> Any:
        """Return a fresh copy of the default, or MISSING if there is none."""
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default)

    def coerce(self, raw: Any, path: str | None = None) -> tuple[Any, list[ErrorEntry]]:
        """Coerce a raw value to the declared type.

        Returns (value, entries). A non-empty entry list means coercion
        failed and the value is unusable.
        """
        entries: list[ErrorEntry] = []
        value = coerce_value(self.type, raw, path or self.name, entries)
        if value is INVALID:
            return None, entries
        return value, entries

    def check_constraints(self, value: Any, path: str | None = None) -> list[ErrorEntry]:
        """Run every constraint in order and collect all failures."""
        path = path or self.name
        entries = []
        for constraint in self.constraints:
            entry = constraint.check(value, path)
            if entry is not None:
                entries.append(entry)
        return entries

    def run_post_validators(self, value: Any, path: str | None = None) -> tuple[Any, ErrorEntry | None]:
        """Run post-validators in order, stopping at the first rejection."""
        for validator in self.post_validators:
            try:
                value = validator(value)
            except (ValueError, AssertionError) as e:
                return None, ErrorEntry(
                    path=path or self.name,
                    kind=ErrorKind.VALUE_ERROR,
                    message=_first_line(e) or f"rejected by {validator.name}",
                    value=value,
                    constraint=validator.name,
                )
        return value, None


def _first_line(exc: Exception) -> str:
    lines = str(exc).strip().splitlines()
    return lines[0].strip() if lines else ""
