"""Runtime engine commands — ls, resolve, select, remove."""

from __future__ import annotations

import sys
from typing import Optional

import click

from rtalias.cli_helpers import _load_inventory, _parse_formats_option, fail
from rtalias.inventory import ENGINES_ENV_VAR
from rtalias.runtime import (
    AliasField,
    UserInputError,
    construct_display_info,
    filter_display_info,
    generate_full_alias,
    plan_remove,
    plan_select,
    plan_select_latest,
    reject_versioned_latest,
    resolve_alias,
    resolve_alias_for_model_formats,
    resolve_latest_alias,
    resolve_unique_alias,
    sort_display_info,
)
from rtalias.runtime.selection import SelectionChange, require_alias_or_latest


def register(cli: click.Group) -> None:
    cli.add_command(runtime)


@click.group()
@click.option(
    "--engines",
    "engines_path",
    default=None,
    envvar=ENGINES_ENV_VAR,
    type=click.Path(dir_okay=False),
    help="Engine inventory snapshot (JSON). Defaults to ~/.rtalias/engines.json.",
)
@click.pass_context
def runtime(ctx: click.Context, engines_path: Optional[str]) -> None:
    """Manage installed runtime engines."""
    ctx.ensure_object(dict)
    ctx.obj["engines_path"] = engines_path


# ---------------------------------------------------------------------------
# rtalias runtime ls
# ---------------------------------------------------------------------------


@runtime.command("ls")
@click.option("--full", is_flag=True, help="Show full aliases.")
@click.option(
    "--for",
    "formats",
    default=None,
    help="Comma-separated model formats to filter by (case-insensitive).",
)
@click.pass_context
def list_engines(ctx: click.Context, full: bool, formats: Optional[str]) -> None:
    """List installed LLM engines.

    \b
    Examples:
        rtalias runtime ls
        rtalias runtime ls --full
        rtalias runtime ls --for gguf
    """
    model_formats = _parse_formats_option(formats)
    inventory = _load_inventory(ctx.obj["engines_path"])

    rows = construct_display_info(inventory.engines, inventory.selections)
    if not rows:
        click.echo("No runtimes found.")
        return

    rows = sort_display_info(rows)
    if model_formats is not None:
        try:
            rows = filter_display_info(rows, model_formats)
        except UserInputError as exc:
            fail(str(exc))

    aliases = [row.full_alias if full else row.minimal_alias for row in rows]
    width = max(len("LLM ENGINE"), *(len(a) for a in aliases))
    click.echo(f"{'LLM ENGINE':<{width}s}    {'SELECTED':^8s}    MODEL FORMAT")
    for alias, row in zip(aliases, rows):
        mark = "✓" if row.is_selected else ""
        formats_str = ", ".join(row.supported_model_formats)
        click.echo(f"{alias:<{width}s}    {mark:^8s}    {formats_str}")


# ---------------------------------------------------------------------------
# rtalias runtime resolve
# ---------------------------------------------------------------------------


@runtime.command("resolve")
@click.argument("alias")
@click.option("--for", "formats", default=None, help="Required model formats.")
@click.option("--unique", is_flag=True, help="Fail unless exactly one engine matches.")
@click.option("--latest", is_flag=True, help="Pick the newest matching version.")
@click.pass_context
def resolve(
    ctx: click.Context,
    alias: str,
    formats: Optional[str],
    unique: bool,
    latest: bool,
) -> None:
    """Show which engines ALIAS refers to."""
    if unique and latest:
        fail("--unique and --latest are mutually exclusive.")
    model_formats = _parse_formats_option(formats)
    inventory = _load_inventory(ctx.obj["engines_path"])

    try:
        if latest:
            single = resolve_latest_alias(inventory.engines, alias, model_formats)
            reject_versioned_latest(alias, single.fields)
            matches, fields = [single.engine], single.fields
        elif unique:
            single = resolve_unique_alias(inventory.engines, alias, model_formats)
            matches, fields = [single.engine], single.fields
        else:
            if model_formats is not None:
                result = resolve_alias_for_model_formats(
                    inventory.engines, alias, model_formats
                )
            else:
                result = resolve_alias(inventory.engines, alias)
            matches, fields = list(result.engines), result.fields
    except UserInputError as exc:
        fail(str(exc))

    field_names = ", ".join(f.value for f in AliasField if f in fields)
    click.echo(f"Alias {alias} ({field_names}) matches:")
    for engine in matches:
        click.echo(f"  {generate_full_alias(engine).alias}")


# ---------------------------------------------------------------------------
# rtalias runtime select llm-engine
# ---------------------------------------------------------------------------


@runtime.group()
def select() -> None:
    """Select installed runtime engines."""


def _echo_changes(changes: list[SelectionChange]) -> None:
    for change in changes:
        if change.already_selected:
            click.echo(f"Already selected {change.full_alias} for {change.model_format}")
        else:
            click.echo(f"Would select {change.full_alias} for {change.model_format}")


@select.command("llm-engine")
@click.argument("alias", required=False, default=None)
@click.option("--latest", is_flag=True, help="Select the latest version.")
@click.option(
    "--for",
    "formats",
    default=None,
    help="Comma-separated list of model format filters (case-insensitive).",
)
@click.pass_context
def select_llm_engine(
    ctx: click.Context, alias: Optional[str], latest: bool, formats: Optional[str]
) -> None:
    """Select an LLM engine by ALIAS for one or more model formats.

    Without ALIAS, --latest moves every current selection to the newest
    installed version of the same engine.

    \b
    Examples:
        rtalias runtime select llm-engine llama.cpp-cuda@1.50.2
        rtalias runtime select llm-engine llama.cpp-cuda --latest --for gguf
        rtalias runtime select llm-engine --latest
    """
    try:
        require_alias_or_latest(alias, latest)
    except UserInputError as exc:
        fail(str(exc))

    model_formats = _parse_formats_option(formats)
    inventory = _load_inventory(ctx.obj["engines_path"])

    try:
        if alias is None:
            changes = plan_select_latest(
                inventory.engines, inventory.selections, model_formats
            )
        else:
            changes = plan_select(
                inventory.engines,
                inventory.selections,
                alias,
                latest=latest,
                model_formats=model_formats,
            )
    except UserInputError as exc:
        fail(str(exc))

    if not changes:
        click.echo("Nothing to select.")
        return
    _echo_changes(changes)


# ---------------------------------------------------------------------------
# rtalias runtime remove
# ---------------------------------------------------------------------------


@runtime.command("remove")
@click.argument("specifier")
@click.pass_context
def remove(ctx: click.Context, specifier: str) -> None:
    """Show which engines SPECIFIER (name or name@version) would remove."""
    inventory = _load_inventory(ctx.obj["engines_path"])
    targets = plan_remove(inventory.engines, specifier)
    if not targets:
        click.echo(f"No installed runtime extensions found matching: {specifier}")
        click.echo("")
        click.echo("Use 'rtalias runtime ls' to see installed runtime extensions.")
        sys.exit(1)

    for engine in targets:
        click.echo(f"Would remove {engine.name}@{engine.version}")
