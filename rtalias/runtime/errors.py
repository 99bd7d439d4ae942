"""Errors raised while resolving runtime engine aliases.

``UserInputError`` and its subclasses are expected outcomes: the user typed
an alias that matches nothing, too much, or the wrong thing, and should
re-type a more specific one. ``AliasConflictError`` means alias generation
itself is broken.
"""

from __future__ import annotations

from typing import Iterable


class UserInputError(ValueError):
    """The user supplied an alias or option that cannot be honoured."""


class AliasNotFoundError(UserInputError):
    def __init__(self, alias: str) -> None:
        super().__init__(f"Alias not found: {alias}")
        self.alias = alias


class IncompatibleModelFormatError(UserInputError):
    def __init__(self, alias: str, model_formats: Iterable[str]) -> None:
        self.alias = alias
        self.model_formats = list(model_formats)
        super().__init__(
            f"Alias '{alias}' does not match any engines that are compatible "
            f"with model format(s) [{','.join(self.model_formats)}]."
        )


class AmbiguousAliasError(UserInputError):
    def __init__(self, alias: str, candidates: Iterable[str]) -> None:
        self.alias = alias
        self.candidates = list(candidates)
        super().__init__(
            f"Alias '{alias}' is ambiguous. "
            f"Options are [{','.join(self.candidates)}]."
        )


class LatestAliasNameConflictError(UserInputError):
    def __init__(self, alias: str, engine_names: Iterable[str]) -> None:
        self.alias = alias
        self.engine_names = list(engine_names)
        super().__init__(
            f"Latest alias '{alias}' cannot disambiguate between engine names "
            f"[{','.join(self.engine_names)}]."
        )


class VersionedLatestAliasError(UserInputError):
    def __init__(self, alias: str) -> None:
        super().__init__(f"Cannot specify a version alias with --latest: {alias}")
        self.alias = alias


class AliasConflictError(RuntimeError):
    """Two matches for the same alias string were built from different fields."""
