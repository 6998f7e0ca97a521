"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from MetaCPANClient.cli.commands import GetCommand, ReverseDependenciesCommand, SearchCommand
from MetaCPANClient.cli.runner import CommandRunner
from MetaCPANClient.config import load_config_with_defaults
from MetaCPANClient.config.app import DEFAULT_CONFIG_PATH
from MetaCPANClient.entities.registry import supported_kinds

_KIND_CHOICE = click.Choice(supported_kinds(), case_sensitive=False)


@click.group(help="MetaCPANClient: look up and search MetaCPAN records.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file (merged over config/default.yml).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()
    ctx.obj = load_config_with_defaults(config_path)


@cli.command("get")
@click.argument("kind", type=_KIND_CHOICE)
@click.argument("record_id")
@click.pass_context
def get_cmd(ctx: click.Context, kind: str, record_id: str) -> None:
    """Fetch one record of KIND by its id."""
    CommandRunner(ctx.obj).run(ctx.command.name, GetCommand(kind=kind.lower(), record_id=record_id))


@cli.command("search")
@click.argument("kind", type=_KIND_CHOICE)
@click.option(
    "-f",
    "--field",
    "fields",
    multiple=True,
    metavar="FIELD=VALUE",
    help="Field match; repeat to AND several. '*' in VALUE makes a wildcard.",
)
@click.option("--spec", "spec_json", default=None, help="Full search spec as JSON.")
@click.option(
    "--limit",
    type=int,
    default=None,
    help="Maximum records to print (defaults to output.max_results).",
)
@click.pass_context
def search_cmd(
    ctx: click.Context,
    kind: str,
    fields: tuple[str, ...],
    spec_json: str | None,
    limit: int | None,
) -> None:
    """Search records of KIND."""
    spec = build_cli_spec(fields, spec_json)
    max_results = limit if limit is not None else ctx.obj.output.max_results
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        SearchCommand(kind=kind.lower(), spec=spec, max_results=max_results),
    )


@cli.command("revdeps")
@click.argument("module_name")
@click.pass_context
def revdeps_cmd(ctx: click.Context, module_name: str) -> None:
    """List distributions whose latest release requires MODULE_NAME."""
    CommandRunner(ctx.obj).run(ctx.command.name, ReverseDependenciesCommand(module_name=module_name))


def build_cli_spec(fields: tuple[str, ...], spec_json: str | None) -> dict[str, Any]:
    """Combine ``--field`` pairs and a ``--spec`` document into one spec mapping.

    Raises:
        click.BadParameter: If a pair or the JSON document is malformed.
    """
    simple: dict[str, str] = {}
    for item in fields:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected FIELD=VALUE, got {item!r}", param_hint="--field")
        simple[name.strip()] = value

    parsed: Any = None
    if spec_json is not None:
        try:
            parsed = json.loads(spec_json)
        except ValueError as error:
            raise click.BadParameter(f"invalid JSON: {error}", param_hint="--spec") from error
        if not isinstance(parsed, dict):
            raise click.BadParameter("spec must be a JSON object", param_hint="--spec")

    if parsed is not None and simple:
        return {"all": [parsed, simple]}
    if parsed is not None:
        return parsed
    if simple:
        return simple
    raise click.UsageError("search needs at least one --field or a --spec")
