"""Shared helpers for CLI commands.

Kept out of cli.py so command modules can import them without circular
imports.
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn, Optional

import click

from rtalias.inventory import Inventory, InventoryError, load_inventory
from rtalias.runtime.errors import UserInputError
from rtalias.runtime.formats import parse_model_format_names

_logger = logging.getLogger(__name__)

WELCOME_MESSAGE = """\
rtalias — short names for local inference engine builds.

  rtalias runtime ls                     List installed engines
  rtalias runtime resolve llama.cpp-cuda Show what an alias matches
  rtalias runtime select llm-engine ...  Plan a format selection
  rtalias runtime remove <name>          Plan an engine removal

Run `rtalias --help` for all options.
"""


def fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_inventory(path: Optional[str]) -> Inventory:
    """Load the engine snapshot, exiting with a message on failure."""
    try:
        return load_inventory(path)
    except InventoryError as exc:
        fail(str(exc))


def _parse_formats_option(value: Optional[str]) -> Optional[set[str]]:
    """Parse a ``--for gguf,mlx`` value; None when the option was omitted."""
    if value is None:
        return None
    try:
        return set(parse_model_format_names(value))
    except UserInputError as exc:
        fail(str(exc))


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
        _logger.debug("Verbose logging enabled")
