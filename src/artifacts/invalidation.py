"""Staleness checks for generated artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def _mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def _any_newer(paths: Iterable[Path], threshold: float) -> bool:
    for path in paths:
        mtime = _mtime(path)
        if mtime is not None and mtime > threshold:
            return True
    return False


def needs_rebuild(
    target: Path,
    sources: Iterable[Path],
    config_files: Iterable[Path] = (),
    *,
    forced: bool = False,
    environment_changed: bool = False,
) -> bool:
    """Decide whether ``target`` must be regenerated.

    Conditions are checked cheapest first and the check stops at the first
    one that holds. Missing config files are ignored; a missing target is
    always stale. Has no side effects.
    """
    if forced:
        return True

    target_mtime = _mtime(target)
    if target_mtime is None:
        return True

    if environment_changed:
        return True

    if _any_newer(config_files, target_mtime):
        return True

    return _any_newer(sources, target_mtime)


__all__ = ["needs_rebuild"]
