"""Module enablement and path classification."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.models.sources import ModuleOrigin

if TYPE_CHECKING:
    from rules.config import AutodefConfig


@dataclass(frozen=True)
class Layout:
    """Resolved declaration directories of a workspace."""

    root: Path
    core_dir: Path
    modules_dir: Path
    private_dir: Path
    packages_dir: Path

    @classmethod
    def from_config(cls, root: Path, config: AutodefConfig) -> Layout:
        resolved = root.resolve()
        return cls(
            root=resolved,
            core_dir=resolved / config.core_dir,
            modules_dir=resolved / config.modules_dir,
            private_dir=resolved / config.private_dir,
            packages_dir=resolved / config.packages_dir,
        )


class ModuleRegistry:
    """Answers whether a feature module is enabled in the current build."""

    def __init__(self, enabled: dict[str, list[str]] | None = None) -> None:
        self._enabled: dict[str, frozenset[str]] = {
            category: frozenset(names) for category, names in (enabled or {}).items()
        }

    def is_enabled(self, category: str, name: str) -> bool:
        return name in self._enabled.get(category, frozenset())

    def origin_enabled(self, origin: ModuleOrigin) -> bool:
        """Core and private declarations are always enabled."""
        if origin.kind != "module":
            return True
        return self.is_enabled(origin.category or "", origin.name or "")


def _relative_parts(path: Path, directory: Path) -> tuple[str, ...] | None:
    try:
        return path.relative_to(directory).parts
    except ValueError:
        return None


def classify_path(path: Path, layout: Layout) -> ModuleOrigin:
    """Classify a declaration file into the module it belongs to.

    First match wins: core directory, then ``modules/<category>/<name>/``,
    then everything else counts as private.
    """
    if _relative_parts(path, layout.core_dir) is not None:
        return ModuleOrigin.core()

    parts = _relative_parts(path, layout.modules_dir)
    if parts is not None and len(parts) >= 3:
        return ModuleOrigin.module(parts[0], parts[1])

    return ModuleOrigin.private()


__all__ = ["Layout", "ModuleRegistry", "classify_path"]
