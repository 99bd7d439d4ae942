"""
rtalias command-line interface.

Usage::

    rtalias runtime ls
    rtalias runtime ls --full --for gguf
    rtalias runtime resolve llama.cpp-cuda --latest
    rtalias runtime select llm-engine llama.cpp-cuda@1.50.2 --for gguf
    rtalias runtime select llm-engine --latest
    rtalias runtime remove llama.cpp-win-x86_64-avx2@1.50.2
"""

from __future__ import annotations

import click

from rtalias import __version__
from rtalias.cli_helpers import WELCOME_MESSAGE, configure_logging


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rtalias")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """rtalias — list, resolve, and select local inference engine builds."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(WELCOME_MESSAGE)


# ---------------------------------------------------------------------------
# Register command modules
# ---------------------------------------------------------------------------

from rtalias.commands import runtime  # noqa: E402

for _mod in [runtime]:
    _mod.register(main)
