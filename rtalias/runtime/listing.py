"""Listing view — display aliases for every installed engine.

Minimal aliases are computed per family. Two families can still land on
the same string, so a final pass over the whole listing swaps every
colliding alias for the engine's full alias.
"""

from __future__ import annotations

import functools
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import AbstractSet, Iterable, Mapping

from ..versions import compare_versions
from ._types import EngineDescriptor, EngineSpecifier
from .errors import UserInputError
from .grouping import AliasGroup

logger = logging.getLogger(__name__)


@dataclass
class EngineDisplayInfo:
    """One row of the engine listing."""

    engine: EngineDescriptor
    minimal_alias: str
    full_alias: str
    supported_model_formats: list[str] = field(default_factory=list)
    selected_model_formats: list[str] = field(default_factory=list)

    @property
    def is_selected(self) -> bool:
        return bool(self.selected_model_formats)


def invert_selections(selections: Mapping[str, EngineSpecifier]) -> dict[str, list[str]]:
    """Map ``format -> engine`` selections to ``engine_key -> [formats]``."""
    inverted: dict[str, list[str]] = {}
    for model_format, specifier in selections.items():
        inverted.setdefault(specifier.engine_key, []).append(model_format)
    return inverted


def resolve_duplicate_minimal_aliases(infos: list[EngineDisplayInfo]) -> None:
    """Replace every alias that appears more than once with its full alias.

    Mutates ``infos`` in place.
    """
    counts = Counter(info.minimal_alias for info in infos)
    for info in infos:
        occurrences = counts[info.minimal_alias]
        if occurrences >= 2:
            logger.warning(
                "Found %d display aliases set to %s. Falling back to %s",
                occurrences,
                info.minimal_alias,
                info.full_alias,
            )
            info.minimal_alias = info.full_alias


def construct_display_info(
    engines: Iterable[EngineDescriptor],
    selections: Mapping[str, EngineSpecifier],
) -> list[EngineDisplayInfo]:
    """Build listing rows with collision-free minimal aliases."""
    selected_by_key = invert_selections(selections)
    infos = [
        EngineDisplayInfo(
            engine=entry.engine,
            minimal_alias=entry.minimal_alias,
            full_alias=entry.full_alias,
            supported_model_formats=list(entry.engine.supported_model_formats),
            selected_model_formats=selected_by_key.get(entry.engine.engine_key, []),
        )
        for group in AliasGroup.create_groups(engines)
        for entry in group.get_engines_with_minimal_aliases()
    ]
    resolve_duplicate_minimal_aliases(infos)
    return infos


def _compare_rows(a: EngineDisplayInfo, b: EngineDisplayInfo) -> int:
    if a.engine.name != b.engine.name:
        return -1 if a.engine.name < b.engine.name else 1
    # Newest first within a name
    return compare_versions(b.engine.version, a.engine.version)


def sort_display_info(infos: Iterable[EngineDisplayInfo]) -> list[EngineDisplayInfo]:
    """Sort by engine name, then by version, latest first."""
    return sorted(infos, key=functools.cmp_to_key(_compare_rows))


def filter_display_info(
    infos: Iterable[EngineDisplayInfo], model_formats: AbstractSet[str]
) -> list[EngineDisplayInfo]:
    """Keep rows whose engine supports any of ``model_formats``.

    Selection markers are narrowed to the requested formats.
    """
    rows = []
    for info in infos:
        if not any(f in model_formats for f in info.supported_model_formats):
            continue
        rows.append(
            EngineDisplayInfo(
                engine=info.engine,
                minimal_alias=info.minimal_alias,
                full_alias=info.full_alias,
                supported_model_formats=info.supported_model_formats,
                selected_model_formats=[
                    f for f in info.selected_model_formats if f in model_formats
                ],
            )
        )
    if not rows:
        raise UserInputError(
            f'No LLM Engines support the "{", ".join(sorted(model_formats))}" '
            "model format(s)."
        )
    return rows
