"""Alias groups — per-family minimality and resolution.

Engines are grouped by family. Within a group, the *minimum components*
are the fields whose values differ between members; a display alias must
contain all of them (plus the version) to be unambiguous in the family.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Optional, Sequence, TypeVar, Union

from ._types import ALL_ALIAS_FIELDS, AliasField, BuiltAlias, EngineDescriptor
from .generator import AliasGenerator, generate_full_alias, get_generator

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_K = TypeVar("_K", bound=Hashable)

FieldValue = Union[str, Sequence[str], None]

_FIELD_EXTRACTORS: dict[AliasField, Callable[[EngineDescriptor], FieldValue]] = {
    AliasField.FAMILY: lambda e: e.family,
    AliasField.PLATFORM: lambda e: e.platform,
    AliasField.CPU_ARCHITECTURE: lambda e: e.cpu_architecture,
    AliasField.GPU_FRAMEWORK: lambda e: e.gpu_framework,
    AliasField.CPU_INSTRUCTION_SET_EXTENSIONS: lambda e: e.cpu_instruction_set_extensions,
    AliasField.VERSION: lambda e: e.version,
}


@dataclass(frozen=True)
class AliasMatch:
    """An engine together with the alias of it that matched a query."""

    engine: EngineDescriptor
    matched_alias: BuiltAlias


@dataclass(frozen=True)
class MinimalAliasEntry:
    """Display aliases for one engine."""

    engine: EngineDescriptor
    minimal_alias: str
    full_alias: str


def group_by(items: Iterable[_T], key: Callable[[_T], _K]) -> dict[_K, list[_T]]:
    """Group items by key, keeping first-seen key order."""
    groups: dict[_K, list[_T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def _normalize(value: FieldValue) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.lower()
    return ",".join(sorted(value)).lower()


def has_variation(values: Iterable[FieldValue]) -> bool:
    """True if the values differ, ignoring case and list order."""
    return len({_normalize(v) for v in values}) > 1


def select_minimal_alias(
    aliases: Iterable[BuiltAlias], minimum_fields: Iterable[AliasField]
) -> Optional[BuiltAlias]:
    """Fewest-field alias that contains every field in ``minimum_fields``."""
    required = frozenset(minimum_fields)
    for alias in sorted(aliases, key=lambda a: len(a.fields)):
        if required <= alias.fields:
            return alias
    return None


class AliasGroup:
    """Engines of one family plus the generator that names them."""

    def __init__(
        self,
        family: str,
        engines: Sequence[EngineDescriptor],
        generator: AliasGenerator,
    ) -> None:
        self.family = family
        self.engines = list(engines)
        self.generator = generator
        self.minimum_components = self.compute_minimum_components()

    def __repr__(self) -> str:
        return f"AliasGroup(family={self.family!r}, engines={len(self.engines)})"

    def compute_minimum_components(self) -> frozenset[AliasField]:
        """Fields that vary across the group, always including the version."""
        if not self.engines:
            return frozenset({AliasField.VERSION})

        varying = {
            f
            for f in ALL_ALIAS_FIELDS
            if has_variation(_FIELD_EXTRACTORS[f](e) for e in self.engines)
        }
        # Display names always carry a version.
        varying.add(AliasField.VERSION)
        return frozenset(varying)

    def generate_aliases_for_engine(self, engine: EngineDescriptor) -> list[BuiltAlias]:
        return self.generator.generate_all_aliases(engine)

    def select_minimal_alias(self, aliases: Iterable[BuiltAlias]) -> Optional[BuiltAlias]:
        return select_minimal_alias(aliases, self.minimum_components)

    def resolve(self, target_alias: str) -> list[AliasMatch]:
        """Every (engine, alias) pair in the group whose alias equals ``target_alias``.

        Unversioned aliases may match several engines.
        """
        matches: list[AliasMatch] = []
        for engine in self.engines:
            aliases = self.generate_aliases_for_engine(engine)
            # Full aliases are accepted too, matching `ls --full` output
            aliases.append(generate_full_alias(engine))
            for alias in aliases:
                if alias.alias == target_alias:
                    matches.append(AliasMatch(engine=engine, matched_alias=alias))
        return matches

    def get_engines_with_minimal_aliases(self) -> list[MinimalAliasEntry]:
        entries = []
        for engine in self.engines:
            minimal = self.select_minimal_alias(self.generate_aliases_for_engine(engine))
            full_alias = generate_full_alias(engine).alias
            entries.append(
                MinimalAliasEntry(
                    engine=engine,
                    minimal_alias=minimal.alias if minimal is not None else full_alias,
                    full_alias=full_alias,
                )
            )
        return entries

    @classmethod
    def create_groups(cls, engines: Iterable[EngineDescriptor]) -> list[AliasGroup]:
        """One group per engine family, in order of first appearance."""
        groups = [
            cls(family, members, get_generator(family))
            for family, members in group_by(engines, lambda e: e.family).items()
        ]
        logger.debug("Built %d alias group(s): %s", len(groups), groups)
        return groups
