"""Engine inventory snapshots.

The serving daemon's engine list and format selections are exported as a
JSON document::

    {
      "engines": [{"name": "...", "version": "1.50.2", "engine": "llama.cpp", ...}],
      "selections": {"GGUF": {"name": "...", "version": "1.50.2"}}
    }

``selections`` may also use the daemon's list shape,
``[{"name": ..., "version": ..., "modelFormatNames": ["GGUF"]}]``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from .runtime._types import EngineDescriptor, EngineSpecifier
from .versions import InvalidVersionError, parse_version

logger = logging.getLogger(__name__)

ENGINES_ENV_VAR = "RTALIAS_ENGINES"
DEFAULT_ENGINES_PATH = "~/.rtalias/engines.json"


class InventoryError(ValueError):
    """Raised when an inventory snapshot cannot be read or parsed."""


@dataclass
class Inventory:
    engines: list[EngineDescriptor] = field(default_factory=list)
    selections: dict[str, EngineSpecifier] = field(default_factory=dict)


def default_inventory_path() -> str:
    """Snapshot path from ``RTALIAS_ENGINES``, else ``~/.rtalias/engines.json``."""
    return os.path.expanduser(os.environ.get(ENGINES_ENV_VAR) or DEFAULT_ENGINES_PATH)


def _parse_selections(raw: Any) -> dict[str, EngineSpecifier]:
    selections: dict[str, EngineSpecifier] = {}
    if raw is None:
        return selections
    if isinstance(raw, dict):
        for model_format, spec in raw.items():
            selections[model_format] = EngineSpecifier(spec["name"], spec["version"])
        return selections
    for entry in raw:
        spec = EngineSpecifier(entry["name"], entry["version"])
        for model_format in entry.get("modelFormatNames", entry.get("model_formats", [])):
            selections[model_format] = spec
    return selections


def parse_inventory(data: Any) -> Inventory:
    """Build an :class:`Inventory` from decoded snapshot JSON."""
    if isinstance(data, list):
        data = {"engines": data}
    if not isinstance(data, dict):
        raise InventoryError("Inventory snapshot must be a JSON object or list")

    try:
        engines = [EngineDescriptor.from_dict(e) for e in data.get("engines", [])]
        selections = _parse_selections(data.get("selections"))
    except (KeyError, TypeError, AttributeError) as exc:
        raise InventoryError(f"Malformed inventory snapshot: {exc!r}") from exc

    seen: set[str] = set()
    for engine in engines:
        try:
            parse_version(engine.version)
        except InvalidVersionError as exc:
            raise InventoryError(f"Engine {engine.name}: {exc}") from exc
        if engine.engine_key in seen:
            raise InventoryError(
                f"Duplicate engine {engine.name}@{engine.version} in inventory"
            )
        seen.add(engine.engine_key)
    return Inventory(engines=engines, selections=selections)


def load_inventory(path: Optional[str] = None) -> Inventory:
    """Read a snapshot from ``path`` (default: :func:`default_inventory_path`)."""
    path = path or default_inventory_path()
    if not os.path.exists(path):
        raise InventoryError(
            f"No engine inventory found at {path}. "
            f"Pass --engines or set {ENGINES_ENV_VAR}."
        )
    with open(path) as f:
        raw = f.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InventoryError(f"Invalid JSON in {path}: {exc}") from exc

    inventory = parse_inventory(data)
    logger.debug(
        "Loaded %d engine(s) and %d selection(s) from %s",
        len(inventory.engines),
        len(inventory.selections),
        path,
    )
    return inventory
