"""Concrete module source implementations."""

from readmegen.strategies.sources.local import LocalModuleSource

__all__ = [
    "LocalModuleSource",
]
