"""fieldcheck CLI: validate record files against schema definition files."""

import json
import sys

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fieldcheck import __version__
from fieldcheck.config import get_settings
from fieldcheck.exceptions import SchemaError
from fieldcheck.log import configure_logging, get_logger

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

EXIT_INVALID_RECORD = 1
EXIT_BAD_INPUT = 2
LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: FIELDCHECK_LOG_LEVEL or warning)",
)
@click.option("--log-json/--no-log-json", default=None, help="Emit logs as JSON")
def main(log_level: str | None, log_json: bool | None):
    """fieldcheck: declarative record validation.

    Define schemas in a YAML file, then check records against them and get
    every failure reported at once.
    """
    settings = get_settings()
    try:
        configure_logging(
            level=log_level or settings.log_level,
            json=settings.log_json if log_json is None else log_json,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--schema", "-s", "schema_name", default=None, help="Schema to validate against")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def validate(schema_file: str, record_file: str, schema_name: str | None, as_json: bool):
    """Validate the records in RECORD_FILE against a schema from SCHEMA_FILE.

    RECORD_FILE holds a single mapping or a list of mappings (YAML or JSON).
    Exits with status 1 if any record fails.
    """
    from fieldcheck.loader import load_records, load_schema

    try:
        schema = load_schema(schema_file, schema_name)
    except SchemaError as e:
        err_console.print(f"[red]Invalid schema file:[/] {escape(str(e))}")
        sys.exit(EXIT_BAD_INPUT)

    try:
        records = load_records(record_file)
    except (yaml.YAMLError, ValueError) as e:
        err_console.print(f"[red]Failed to parse records:[/] {escape(str(e))}")
        sys.exit(EXIT_BAD_INPUT)

    logger.info("validating", schema=schema.name, records=len(records), source=record_file)
    results = [schema.validate(record) for record in records]
    failed = sum(1 for r in results if not r.passed)

    if as_json:
        payload = []
        for i, result in enumerate(results):
            item = {"index": i, "passed": result.passed}
            if result.passed:
                item["record"] = result.record
            else:
                item["errors"] = result.report.to_list()
            payload.append(item)
        click.echo(json.dumps(payload, indent=2, default=str))
    else:
        console.print(f"\n[bold blue]fieldcheck[/] — {schema.name}: {record_file}\n")
        for i, result in enumerate(results):
            if result.passed:
                console.print(f"  [green]PASS[/] record {i}")
                continue
            console.print(f"  [red]FAIL[/] record {i} ({len(result.report)} error(s))")
            for entry in result.report:
                console.print(f"    [red]x[/] {escape(entry.render())}", highlight=False, soft_wrap=True)

        status = "[green]Valid![/]" if not failed else f"[red]{failed} of {len(results)} record(s) invalid[/]"
        console.print(f"\n{status}")

    if failed:
        sys.exit(EXIT_INVALID_RECORD)


# ── Describe ─────────────────────────────────────────────────────────


@main.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--schema", "-s", "schema_name", default=None, help="Schema to describe")
def describe(schema_file: str, schema_name: str | None):
    """Print the fields of a schema from SCHEMA_FILE."""
    from fieldcheck.loader import load_schemas, select_schema

    try:
        schemas = load_schemas(schema_file)
        if schema_name:
            selected = [select_schema(schemas, schema_name)]
        else:
            selected = list(schemas.values())
    except SchemaError as e:
        err_console.print(f"[red]Invalid schema file:[/] {escape(str(e))}")
        sys.exit(EXIT_BAD_INPUT)

    for schema in selected:
        table = Table(title=f"{schema.name} ({len(schema)} fields)")
        table.add_column("Field", style="cyan")
        table.add_column("Type")
        table.add_column("Required", justify="center")
        table.add_column("Constraints")
        table.add_column("Validators")

        for field in schema:
            if field.is_required:
                required = "[green]Y[/]"
            else:
                required = f"[dim]default={escape(repr(field.resolve_default()))}[/]"
            constraints = escape(", ".join(f"{c.name}={c.limit}" for c in field.constraints))
            validators = ", ".join(v.name for v in field.post_validators)
            type_label = field.type.label + ("?" if field.nullable else "")
            table.add_row(field.name, type_label, required, constraints, validators)

        console.print(table)


if __name__ == "__main__":
    main()
