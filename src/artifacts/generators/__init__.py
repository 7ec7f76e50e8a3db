"""Artifact generators for autodef."""

from artifacts.generators.autoloads import AutoloadsGenerator
from artifacts.generators.base import ArtifactResult, RenderedArtifact
from artifacts.generators.packages import PackagesGenerator, cache_state

__all__ = [
    "ArtifactResult",
    "AutoloadsGenerator",
    "PackagesGenerator",
    "RenderedArtifact",
    "cache_state",
]
