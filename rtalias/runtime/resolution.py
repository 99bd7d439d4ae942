"""Alias resolution across all engine families.

Usage::

    from rtalias.runtime.resolution import resolve_unique_alias

    result = resolve_unique_alias(engines, "llama.cpp-cuda@1.50.2", {"GGUF"})
    result.engine.name   # "llama.cpp-win-x86_64-nvidia-cuda-avx2"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional

from ..versions import find_latest_version
from ._types import AliasField, EngineDescriptor, sorted_fields
from .errors import (
    AliasConflictError,
    AliasNotFoundError,
    AmbiguousAliasError,
    IncompatibleModelFormatError,
    LatestAliasNameConflictError,
)
from .generator import generate_full_alias
from .grouping import AliasGroup, AliasMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasResolution:
    """All engines an alias matched, and the fields the alias is made of."""

    engines: tuple[EngineDescriptor, ...]
    fields: frozenset[AliasField]


@dataclass(frozen=True)
class UniqueAliasResolution:
    """A single engine picked by an alias."""

    engine: EngineDescriptor
    fields: frozenset[AliasField]


def _format_fields(fields: Iterable[AliasField]) -> str:
    return ", ".join(f.value for f in sorted_fields(fields))


def resolve_alias(engines: Iterable[EngineDescriptor], alias: str) -> AliasResolution:
    """Resolve ``alias`` to every matching engine.

    Raises
    ------
    AliasNotFoundError
        If no engine has ``alias`` among its aliases.
    AliasConflictError
        If matches disagree on which fields make up ``alias``.
    """
    all_matches: list[AliasMatch] = []
    for group in AliasGroup.create_groups(engines):
        all_matches.extend(group.resolve(alias))

    if not all_matches:
        raise AliasNotFoundError(alias)

    first_fields = all_matches[0].matched_alias.fields
    for match in all_matches[1:]:
        if match.matched_alias.fields != first_fields:
            raise AliasConflictError(
                f'Component conflict for alias "{alias}": '
                f"existing components [{_format_fields(first_fields)}] "
                f"differ from new components "
                f"[{_format_fields(match.matched_alias.fields)}]"
            )

    logger.debug("Alias %r matched %d engine(s)", alias, len(all_matches))
    return AliasResolution(
        engines=tuple(m.engine for m in all_matches), fields=first_fields
    )


def resolve_alias_for_model_formats(
    engines: Iterable[EngineDescriptor],
    alias: str,
    model_formats: AbstractSet[str],
) -> AliasResolution:
    """Like :func:`resolve_alias`, keeping engines that support every format."""
    resolution = resolve_alias(engines, alias)
    compatible = tuple(e for e in resolution.engines if e.supports_all(model_formats))
    if not compatible:
        raise IncompatibleModelFormatError(alias, sorted(model_formats))
    return AliasResolution(engines=compatible, fields=resolution.fields)


def _resolve(
    engines: Iterable[EngineDescriptor],
    alias: str,
    model_formats: Optional[AbstractSet[str]],
) -> AliasResolution:
    if model_formats is not None:
        return resolve_alias_for_model_formats(engines, alias, model_formats)
    return resolve_alias(engines, alias)


def resolve_unique_alias(
    engines: Iterable[EngineDescriptor],
    alias: str,
    model_formats: Optional[AbstractSet[str]] = None,
) -> UniqueAliasResolution:
    """Resolve ``alias`` to exactly one engine.

    Raises AmbiguousAliasError listing the full alias of every candidate
    when more than one engine matches.
    """
    resolution = _resolve(engines, alias, model_formats)
    if len(resolution.engines) != 1:
        raise AmbiguousAliasError(
            alias, [generate_full_alias(e).alias for e in resolution.engines]
        )
    return UniqueAliasResolution(engine=resolution.engines[0], fields=resolution.fields)


def resolve_latest_alias(
    engines: Iterable[EngineDescriptor],
    alias: str,
    model_formats: Optional[AbstractSet[str]] = None,
) -> UniqueAliasResolution:
    """Resolve ``alias`` to the newest version among its matches.

    All matches must share one engine name. Callers in "latest" mode must
    reject version-qualified aliases themselves.
    """
    resolution = _resolve(engines, alias, model_formats)

    names = list(dict.fromkeys(e.name for e in resolution.engines))
    if len(names) > 1:
        raise LatestAliasNameConflictError(alias, names)

    latest = find_latest_version(resolution.engines)
    assert latest is not None
    return UniqueAliasResolution(engine=latest, fields=resolution.fields)
