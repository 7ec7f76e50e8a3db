"""Artifact generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.generators import ArtifactResult
    from rules.config import AutodefConfig


def generate_all_artifacts(
    *,
    root: Path,
    target: str = "all",
    force: bool = False,
    environment_changed: bool = False,
    out_dir: Path | None = None,
    config: AutodefConfig | None = None,
) -> dict[str, ArtifactResult]:
    """Generate artifacts via lazy import to avoid package import cycles."""
    from artifacts.write import generate_all_artifacts as _generate_all_artifacts

    return _generate_all_artifacts(
        root=root,
        target=target,
        force=force,
        environment_changed=environment_changed,
        out_dir=out_dir,
        config=config,
    )


__all__ = ["generate_all_artifacts"]
