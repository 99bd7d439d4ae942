"""
rtalias — short, typable aliases for local inference engine builds.

The alias engine lives in :mod:`rtalias.runtime`; the ``rtalias`` command
wraps it for listing, resolving, and planning engine selections.
"""

from __future__ import annotations

__version__ = "0.3.0"
