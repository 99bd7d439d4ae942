"""Plans for the select and remove commands.

Nothing here talks to the serving daemon: each function returns what the
command would change, given an engine inventory and the current
``format -> engine`` selections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Mapping, Optional, Sequence

from ..versions import find_latest_version
from ._types import AliasField, EngineDescriptor, EngineSpecifier
from .errors import UserInputError, VersionedLatestAliasError
from .resolution import resolve_latest_alias, resolve_unique_alias

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionChange:
    """Selecting ``engine`` for ``model_format``."""

    engine: EngineSpecifier
    model_format: str
    already_selected: bool = False
    previous_version: Optional[str] = None

    @property
    def full_alias(self) -> str:
        return f"{self.engine.name}-{self.engine.version}"


def reject_versioned_latest(alias: str, fields: AbstractSet[AliasField]) -> None:
    """Refuse an alias that pins a version when the newest one was asked for."""
    if AliasField.VERSION in fields:
        # "llama.cpp-metal@1.0.0 --latest" would quietly pick 1.0.0.
        raise VersionedLatestAliasError(alias)


def plan_select(
    engines: Sequence[EngineDescriptor],
    selections: Mapping[str, EngineSpecifier],
    alias: str,
    latest: bool = False,
    model_formats: Optional[AbstractSet[str]] = None,
) -> list[SelectionChange]:
    """Select the engine ``alias`` names for each requested format.

    Without ``model_formats`` the engine is selected for every format it
    supports. With ``latest`` the newest matching version wins, and a
    version-qualified alias is rejected.
    """
    if latest:
        resolution = resolve_latest_alias(engines, alias, model_formats)
        reject_versioned_latest(alias, resolution.fields)
    else:
        resolution = resolve_unique_alias(engines, alias, model_formats)

    choice = resolution.engine
    if model_formats is not None:
        targets = [f for f in sorted(model_formats) if f in choice.supported_model_formats]
    else:
        targets = list(choice.supported_model_formats)

    changes = []
    for model_format in targets:
        current = selections.get(model_format)
        changes.append(
            SelectionChange(
                engine=choice.specifier,
                model_format=model_format,
                already_selected=current == choice.specifier,
                previous_version=current.version if current is not None else None,
            )
        )
    logger.debug("Planned %d selection change(s) for %r", len(changes), alias)
    return changes


def plan_select_latest(
    engines: Sequence[EngineDescriptor],
    selections: Mapping[str, EngineSpecifier],
    model_formats: Optional[AbstractSet[str]] = None,
) -> list[SelectionChange]:
    """Move every current selection to the newest installed version of its engine."""
    changes = []
    for model_format, current in selections.items():
        if model_formats is not None and model_format not in model_formats:
            continue
        newest = find_latest_version(e for e in engines if e.name == current.name)
        if newest is None:
            logger.warning(
                "Selected engine %s for %s is not installed; skipping",
                current.name,
                model_format,
            )
            continue
        changes.append(
            SelectionChange(
                engine=newest.specifier,
                model_format=model_format,
                already_selected=newest.version == current.version,
                previous_version=current.version,
            )
        )
    return changes


def specifier_has_version(specifier: str) -> bool:
    return "@" in specifier


def plan_remove(
    engines: Sequence[EngineDescriptor], specifier: str
) -> list[EngineDescriptor]:
    """Engines matched by ``name@version`` (one build) or ``name`` (all versions)."""
    if specifier_has_version(specifier):
        name, version = specifier.split("@", 1)
        return [e for e in engines if e.name == name and e.version == version]
    return [e for e in engines if e.name == specifier]


def require_alias_or_latest(alias: Optional[str], latest: bool) -> None:
    if alias is None and not latest:
        raise UserInputError("Must specify at least one of [alias] or --latest")
