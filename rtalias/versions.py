"""Version comparison for runtime engine builds.

Engine versions are strict ``MAJOR.MINOR.PATCH`` strings and are ordered
numerically, never lexicographically (``1.10.0`` > ``1.9.0``).

Usage::

    from rtalias.versions import compare_versions, find_latest_version

    compare_versions("1.50.2", "1.50.10")   # -> -1
    find_latest_version(engines)            # item with the highest .version
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, TypeVar

NUM_VERSION_COMPONENTS = 3
_VERSION_RE = re.compile(r"\d+(\.\d+){2}")


class InvalidVersionError(ValueError):
    """Raised when a version string is not ``MAJOR.MINOR.PATCH``."""


class _Versioned(Protocol):
    version: str


_T = TypeVar("_T", bound=_Versioned)


def parse_version(version: str) -> tuple[int, ...]:
    """Split a ``MAJOR.MINOR.PATCH`` string into integer components."""
    if not _VERSION_RE.fullmatch(version):
        raise InvalidVersionError(
            f'Invalid version format: "{version}". '
            "Expected MAJOR.MINOR.PATCH with numbers only."
        )
    return tuple(int(part) for part in version.split("."))


def compare_versions(a: str, b: str) -> int:
    """Return 1 if ``a`` is newer than ``b``, -1 if older, 0 if equal."""
    parts_a = parse_version(a)
    parts_b = parse_version(b)

    for i in range(NUM_VERSION_COMPONENTS):
        if parts_a[i] > parts_b[i]:
            return 1
        if parts_a[i] < parts_b[i]:
            return -1
    return 0


def find_latest_version(items: Iterable[_T]) -> Optional[_T]:
    """Return the item with the highest ``version``, or None if empty.

    Ties keep the first item seen.
    """
    candidate: Optional[_T] = None
    for item in items:
        if candidate is None or compare_versions(item.version, candidate.version) > 0:
            candidate = item
    return candidate
