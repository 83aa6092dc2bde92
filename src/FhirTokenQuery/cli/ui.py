"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from dotenv import load_dotenv

from FhirTokenQuery.cli.runner import CommandRunner
from FhirTokenQuery.config import DEFAULT_CONFIG_PATH, load_config_with_defaults


@click.group(help="FhirTokenQuery: compile FHIR token search values into Elasticsearch queries.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the default config.",
)
@click.option(
    "--defaults",
    "default_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the default YAML config.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path, default_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()

    ctx.obj = load_config_with_defaults(config_path, default_path=default_path)


@cli.command("compile")
@click.argument("resource_type")
@click.argument("path")
@click.argument("value")
@click.option("--modifier", default=None, help="Token search modifier (without the colon).")
@click.option(
    "--keyword-sub-fields",
    "use_keyword",
    type=click.BOOL,
    default=None,
    help="Override compiler.use_keyword_sub_fields (true/false).",
)
@click.option("--compact", is_flag=True, help="Print JSON on a single line.")
@click.pass_context
def compile_cmd(
    ctx: click.Context,
    resource_type: str,
    path: str,
    value: str,
    modifier: str | None,
    use_keyword: bool | None,
    compact: bool,
) -> None:
    """Compile VALUE (e.g. `system|code`) for RESOURCE_TYPE.PATH and print the query."""
    runner = CommandRunner(ctx.obj)
    query = runner.run_compile(
        ctx.command.name,
        resource_type=resource_type,
        path=path,
        raw_value=value,
        modifier=modifier,
        use_keyword_sub_fields=use_keyword,
    )
    click.echo(_dump(query, compact))


@cli.command("lookup")
@click.argument("resource_type")
@click.argument("path")
@click.option("--compact", is_flag=True, help="Print JSON on a single line.")
@click.pass_context
def lookup_cmd(ctx: click.Context, resource_type: str, path: str, compact: bool) -> None:
    """Print the token type tags known for RESOURCE_TYPE.PATH."""
    runner = CommandRunner(ctx.obj)
    result = runner.run_lookup(ctx.command.name, resource_type=resource_type, path=path)
    click.echo(_dump(result, compact))


def _dump(payload: object, compact: bool) -> str:
    if compact:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(payload, ensure_ascii=False, indent=2)
