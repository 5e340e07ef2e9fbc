"""Schema definition files.

A definition file is YAML (JSON also parses as YAML) describing one or more
schemas:

    root: User
    schemas:
      Address:
        fields:
          - {name: zip, type: string, constraints: [{pattern: "^[0-9]{5}$"}]}
      User:
        fields:
          - {name: name, type: string}
          - {name: age, type: integer, constraints: [{greater_than: 0}]}
          - {name: tags, type: "list[string]", default: []}
          - {name: address, type: Address}
          - {name: slug, type: string, validators: ["mypkg.checks:lowercase"]}

A file holding a single schema may skip the ``schemas`` mapping and give
``name`` and ``fields`` at the top level.
"""

from __future__ import annotations

import importlib
import re
from pathlib import Path

import yaml

from fieldcheck.exceptions import SchemaError
from fieldcheck.schema.constraints import BUILTIN_CONSTRAINTS, Constraint
from fieldcheck.schema.field import FieldDescriptor, PostValidator
from fieldcheck.schema.schema import Schema
from fieldcheck.schema.types import FieldType, TypeSpec, as_type_spec, nested, sequence_of

FIELD_KEYS = {"name", "type", "default", "nullable", "description", "constraints", "validators"}
LIST_TYPE = re.compile(r"^list\[(?P<item>.+)\]$")
SCALAR_NAMES = {t.value for t in FieldType} - {FieldType.NESTED.value, FieldType.SEQUENCE.value}


def load_schemas(path: str | Path) -> dict[str, Schema]:
    """Load every schema defined in a file, keyed by name."""
    return build_schemas(_read_yaml(path))


def load_schema(path: str | Path, name: str | None = None) -> Schema:
    """Load one schema from a file.

    Picks ``name`` if given, else the document's ``root``, else the only
    schema in the file.
    """
    data = _read_yaml(path)
    schemas = build_schemas(data)
    return select_schema(schemas, name or data.get("root"))


def select_schema(schemas: dict[str, Schema], name: str | None = None) -> Schema:
    if name:
        if name not in schemas:
            raise SchemaError(f"schema '{name}' is not defined (available: {', '.join(schemas)})")
        return schemas[name]
    if len(schemas) == 1:
        return next(iter(schemas.values()))
    raise SchemaError(
        f"file defines {len(schemas)} schemas ({', '.join(schemas)}); "
        f"declare 'root' or choose one by name"
    )


def build_schemas(data: dict) -> dict[str, Schema]:
    """Build schemas from an already-parsed definition document."""
    if not isinstance(data, dict):
        raise SchemaError("schema definition must be a mapping")

    if "schemas" in data:
        definitions = data["schemas"]
    elif "fields" in data:
        definitions = {data.get("name") or "Record": {"fields": data["fields"]}}
    else:
        raise SchemaError("schema definition needs a 'schemas' mapping or top-level 'fields'")

    if not isinstance(definitions, dict) or not definitions:
        raise SchemaError("'schemas' must be a non-empty mapping of name to definition")

    builder = _SchemaBuilder(definitions)
    return {name: builder.build(name) for name in definitions}


def load_records(path: str | Path) -> list:
    """Read a record file holding one mapping or a list of mappings."""
    with open(path) as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    raise ValueError(f"{path}: expected a mapping or a list of mappings, got {type(data).__name__}")


def import_validator(ref: str) -> PostValidator:
    """Resolve a ``module:function`` reference to a PostValidator."""
    if not isinstance(ref, str):
        raise SchemaError(f"validator reference must be a string, got {ref!r}")
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise SchemaError(f"validator reference '{ref}' must look like 'module:function'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaError(f"cannot import validator module '{module_name}': {e}") from e
    func = getattr(module, attr, None)
    if func is None:
        raise SchemaError(f"module '{module_name}' has no attribute '{attr}'")
    if isinstance(func, PostValidator):
        return func
    if not callable(func):
        raise SchemaError(f"validator '{ref}' is not callable")
    return PostValidator(name=attr, func=func)


def _read_yaml(path: str | Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise SchemaError(f"{path}: schema definition must be a mapping")
    return data


class _SchemaBuilder:
    """Builds schemas on demand so definitions may reference each other in any order."""

    def __init__(self, definitions: dict):
        self.definitions = definitions
        self._built: dict[str, Schema] = {}
        self._building: list[str] = []

    def build(self, name: str) -> Schema:
        if name in self._built:
            return self._built[name]
        if name in self._building:
            chain = " -> ".join([*self._building, name])
            raise SchemaError(f"schema reference cycle: {chain}")

        definition = self.definitions[name]
        if not isinstance(definition, dict) or not isinstance(definition.get("fields"), list):
            raise SchemaError(f"schemas.{name}: definition needs a 'fields' list")

        self._building.append(name)
        try:
            fields = [
                self._build_field(spec, f"schemas.{name}.fields[{i}]")
                for i, spec in enumerate(definition["fields"])
            ]
        finally:
            self._building.pop()

        schema = Schema(name, fields)
        self._built[name] = schema
        return schema

    def _build_field(self, spec, location: str) -> FieldDescriptor:
        if not isinstance(spec, dict):
            raise SchemaError(f"{location}: field definition must be a mapping")
        unknown = set(spec) - FIELD_KEYS
        if unknown:
            raise SchemaError(f"{location}: unknown key(s) {sorted(unknown)}")
        if "type" not in spec:
            raise SchemaError(f"{location}: missing 'type'")

        declared = self._resolve_type(spec["type"], f"{location}.type")
        constraints = [
            _build_constraint(c, f"{location}.constraints[{i}]")
            for i, c in enumerate(spec.get("constraints") or [])
        ]
        validators = []
        for i, ref in enumerate(spec.get("validators") or []):
            try:
                validators.append(import_validator(ref))
            except SchemaError as e:
                raise SchemaError(f"{location}.validators[{i}]: {e}") from e

        nullable = spec.get("nullable", False)
        if not isinstance(nullable, bool):
            raise SchemaError(f"{location}.nullable: expected true or false, got {nullable!r}")

        kwargs = {}
        if "default" in spec:
            kwargs["default"] = spec["default"]

        try:
            return FieldDescriptor(
                name=spec.get("name"),
                type=declared,
                constraints=constraints,
                post_validators=validators,
                nullable=nullable,
                description=spec.get("description", ""),
                **kwargs,
            )
        except SchemaError as e:
            raise SchemaError(f"{location}: {e}") from e

    def _resolve_type(self, declared, location: str) -> TypeSpec:
        if not isinstance(declared, str):
            raise SchemaError(f"{location}: type must be a string, got {declared!r}")
        declared = declared.strip()

        match = LIST_TYPE.match(declared)
        if match:
            return sequence_of(self._resolve_type(match.group("item"), location))
        if declared in SCALAR_NAMES:
            return as_type_spec(declared)
        if declared in self.definitions:
            return nested(self.build(declared))
        raise SchemaError(f"{location}: unknown declared type '{declared}'")


def _build_constraint(spec, location: str) -> Constraint:
    if not isinstance(spec, dict) or len(spec) != 1:
        raise SchemaError(f"{location}: constraint must be a single-key mapping like {{max_length: 10}}")
    name, arg = next(iter(spec.items()))
    factory = BUILTIN_CONSTRAINTS.get(name)
    if factory is None:
        raise SchemaError(
            f"{location}: unknown constraint '{name}' (known: {', '.join(sorted(BUILTIN_CONSTRAINTS))})"
        )
    try:
        return factory(arg)
    except SchemaError as e:
        raise SchemaError(f"{location}: {e}") from e
