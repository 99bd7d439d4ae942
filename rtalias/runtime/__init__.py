"""Runtime engine aliases — generate, list, and resolve short engine names.

Usage::

    from rtalias.runtime import construct_display_info, resolve_unique_alias

    rows = construct_display_info(engines, selections)
    engine = resolve_unique_alias(engines, "llama.cpp-cuda").engine
"""

from ._types import (
    ALL_ALIAS_FIELDS,
    AliasConfig,
    AliasField,
    BuiltAlias,
    EngineDescriptor,
    EngineSpecifier,
)
from .errors import (
    AliasConflictError,
    AliasNotFoundError,
    AmbiguousAliasError,
    IncompatibleModelFormatError,
    LatestAliasNameConflictError,
    UserInputError,
    VersionedLatestAliasError,
)
from .formats import MODEL_FORMAT_NAMES, parse_model_format_names
from .generator import (
    AliasGenerator,
    EngineFamilyMismatchError,
    GeneratorStrategy,
    MissingAliasComponentError,
    generate_alias,
    generate_all_aliases,
    generate_full_alias,
    get_generator,
)
from .grouping import AliasGroup, AliasMatch, MinimalAliasEntry, has_variation
from .listing import (
    EngineDisplayInfo,
    construct_display_info,
    filter_display_info,
    invert_selections,
    resolve_duplicate_minimal_aliases,
    sort_display_info,
)
from .resolution import (
    AliasResolution,
    UniqueAliasResolution,
    resolve_alias,
    resolve_alias_for_model_formats,
    resolve_latest_alias,
    resolve_unique_alias,
)
from .selection import (
    SelectionChange,
    plan_remove,
    plan_select,
    plan_select_latest,
    reject_versioned_latest,
)

__all__ = [
    "ALL_ALIAS_FIELDS",
    "AliasConfig",
    "AliasConflictError",
    "AliasField",
    "AliasGenerator",
    "AliasGroup",
    "AliasMatch",
    "AliasNotFoundError",
    "AliasResolution",
    "AmbiguousAliasError",
    "BuiltAlias",
    "EngineDescriptor",
    "EngineDisplayInfo",
    "EngineFamilyMismatchError",
    "EngineSpecifier",
    "GeneratorStrategy",
    "IncompatibleModelFormatError",
    "LatestAliasNameConflictError",
    "MODEL_FORMAT_NAMES",
    "MinimalAliasEntry",
    "MissingAliasComponentError",
    "SelectionChange",
    "UniqueAliasResolution",
    "UserInputError",
    "VersionedLatestAliasError",
    "construct_display_info",
    "filter_display_info",
    "generate_alias",
    "generate_all_aliases",
    "generate_full_alias",
    "get_generator",
    "has_variation",
    "invert_selections",
    "parse_model_format_names",
    "plan_remove",
    "plan_select",
    "plan_select_latest",
    "reject_versioned_latest",
    "resolve_alias",
    "resolve_alias_for_model_formats",
    "resolve_duplicate_minimal_aliases",
    "resolve_latest_alias",
    "resolve_unique_alias",
    "sort_display_info",
]
