"""Alias generation — render short, typable aliases for engine builds.

An alias is built from a subset of an engine's descriptive fields::

    llama.cpp                        {family}
    llama.cpp-cuda                   {family, gpu_framework}
    llama.cpp-win-x86_64-cuda-avx2   all non-version fields
    llama.cpp-cuda@1.50.2            {family, gpu_framework, version}
    llama.cpp-win-x86_64-nvidia-cuda-avx2-1.50.2   full alias (name-version)

Family-specific behaviour (forced fields, display renames) lives in
``GENERATOR_STRATEGIES`` rather than in subclasses.

Usage::

    from rtalias.runtime.generator import get_generator

    generator = get_generator(engine.family)
    for built in generator.generate_all_aliases(engine):
        print(built.alias)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ._types import (
    ALL_ALIAS_FIELDS,
    AliasConfig,
    AliasField,
    BuiltAlias,
    EngineDescriptor,
)

logger = logging.getLogger(__name__)

F = AliasField


class MissingAliasComponentError(ValueError):
    """A requested alias field has no value in the engine descriptor."""

    def __init__(self, field: AliasField, message: str) -> None:
        super().__init__(f"Missing {field.value} in engine manifest: {message}")
        self.field = field


class EngineFamilyMismatchError(RuntimeError):
    """A family-specific generator received an engine of another family."""


# ---------------------------------------------------------------------------
# Family strategies
# ---------------------------------------------------------------------------

ComponentSets = tuple[frozenset[AliasField], ...]


def _sets(*groups: Iterable[AliasField]) -> ComponentSets:
    return tuple(frozenset(g) for g in groups)


# Chosen so most users only see family + gpu framework, unless they have
# incompatible builds installed side by side.
DEFAULT_COMPONENT_SETS: ComponentSets = _sets(
    [F.FAMILY],
    [F.FAMILY, F.GPU_FRAMEWORK],
    [F.FAMILY, F.GPU_FRAMEWORK, F.PLATFORM],
    [F.FAMILY, F.GPU_FRAMEWORK, F.PLATFORM, F.CPU_ARCHITECTURE],
    [
        F.FAMILY,
        F.GPU_FRAMEWORK,
        F.PLATFORM,
        F.CPU_ARCHITECTURE,
        F.CPU_INSTRUCTION_SET_EXTENSIONS,
    ],
)

# llama.cpp always shows the gpu framework ("cpu" when there is none).
GPU_FORCED_COMPONENT_SETS: ComponentSets = tuple(
    s for s in DEFAULT_COMPONENT_SETS if F.GPU_FRAMEWORK in s
)


def _rename_family(expected: str, display: str) -> Callable[[str], str]:
    def mapper(family: str) -> str:
        if family != expected:
            raise EngineFamilyMismatchError(f"Unexpected engine name: {family}")
        return display

    return mapper


@dataclass(frozen=True)
class GeneratorStrategy:
    """Per-family knobs for alias generation."""

    base_component_sets: ComponentSets = DEFAULT_COMPONENT_SETS
    map_family: Optional[Callable[[str], str]] = None


DEFAULT_STRATEGY = GeneratorStrategy()

GENERATOR_STRATEGIES: dict[str, GeneratorStrategy] = {
    "llama.cpp": GeneratorStrategy(base_component_sets=GPU_FORCED_COMPONENT_SETS),
    "mlx-llm": GeneratorStrategy(map_family=_rename_family("mlx-llm", "mlx-engine")),
}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class AliasGenerator:
    """Builds aliases for engines of one family."""

    def __init__(
        self,
        strategy: GeneratorStrategy = DEFAULT_STRATEGY,
        config: Optional[AliasConfig] = None,
    ) -> None:
        self.strategy = strategy
        self.config = config or AliasConfig()

    def get_base_alias_component_sets(self) -> list[frozenset[AliasField]]:
        """Field sets of increasing specificity, without version variants."""
        return list(self.strategy.base_component_sets)

    def get_alias_component_sets(self) -> list[frozenset[AliasField]]:
        """Every base set followed by its versioned variant."""
        all_sets: list[frozenset[AliasField]] = []
        for base in self.get_base_alias_component_sets():
            all_sets.append(base)
            if F.VERSION not in base:
                all_sets.append(base | {F.VERSION})
        return all_sets

    def map_family_name(self, family: str) -> str:
        if self.strategy.map_family is None:
            return family
        return self.strategy.map_family(family)

    def _render_field(self, engine: EngineDescriptor, field: AliasField) -> str:
        if field is F.FAMILY:
            return self.map_family_name(engine.family)
        if field is F.PLATFORM:
            return engine.platform
        if field is F.CPU_ARCHITECTURE:
            return engine.cpu_architecture
        if field is F.GPU_FRAMEWORK:
            return engine.gpu_framework or "cpu"
        if field is F.CPU_INSTRUCTION_SET_EXTENSIONS:
            if not engine.cpu_instruction_set_extensions:
                raise MissingAliasComponentError(
                    field, "CPU instruction set extensions are empty or undefined"
                )
            return "_".join(engine.cpu_instruction_set_extensions)
        raise ValueError(f"Cannot render {field} as an alias component")

    def build_alias_string(
        self, engine: EngineDescriptor, fields: Iterable[AliasField]
    ) -> str:
        """Render ``fields`` of ``engine`` in canonical order, lower-cased.

        Raises MissingAliasComponentError if a requested field has no value.
        """
        wanted = frozenset(fields)
        parts = [
            self._render_field(engine, f)
            for f in ALL_ALIAS_FIELDS
            if f in wanted and f is not F.VERSION
        ]
        alias = self.config.delimiter.join(parts)
        if F.VERSION in wanted:
            alias = alias + self.config.version_delimiter + engine.version
        return alias.lower()

    def generate_alias(
        self, engine: EngineDescriptor, fields: Iterable[AliasField]
    ) -> Optional[BuiltAlias]:
        """Build one alias, or None if the engine lacks a requested field."""
        wanted = frozenset(fields)
        try:
            return BuiltAlias(alias=self.build_alias_string(engine, wanted), fields=wanted)
        except MissingAliasComponentError as exc:
            logger.debug("Skipping alias for %s: %s", engine.name, exc)
            return None

    def generate_all_aliases(self, engine: EngineDescriptor) -> list[BuiltAlias]:
        """All aliases for ``engine``, least specific first."""
        aliases = []
        for components in self.get_alias_component_sets():
            built = self.generate_alias(engine, components)
            if built is not None:
                aliases.append(built)
        return aliases


def get_generator(family: str, config: Optional[AliasConfig] = None) -> AliasGenerator:
    """Return a generator configured for ``family`` (default strategy if unknown)."""
    strategy = GENERATOR_STRATEGIES.get(family, DEFAULT_STRATEGY)
    return AliasGenerator(strategy, config)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def generate_full_alias(engine: EngineDescriptor) -> BuiltAlias:
    """``name-version`` alias, unique for every engine.

    Uses ``-`` before the version (not ``@``) so it never looks like a
    generated short alias.
    """
    return BuiltAlias(
        alias=f"{engine.name}-{engine.version}", fields=frozenset({F.VERSION})
    )


def generate_alias(
    engine: EngineDescriptor, fields: Iterable[AliasField]
) -> Optional[BuiltAlias]:
    """Build one alias for ``engine`` using its family's generator."""
    return get_generator(engine.family).generate_alias(engine, fields)


def generate_all_aliases(engine: EngineDescriptor) -> list[BuiltAlias]:
    """All candidate aliases for ``engine`` using its family's generator."""
    return get_generator(engine.family).generate_all_aliases(engine)
