"""Shared rebuild-or-activate step for artifact generators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.guard import activate_artifact, compile_and_load, discard_artifact
from artifacts.invalidation import needs_rebuild
from artifacts.utils import _stage_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path
    from types import ModuleType

    from contract.artifacts import ArtifactSpec
    from rules.config import AutodefConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedArtifact:
    """Artifact text plus counts for reporting."""

    text: str
    declaration_count: int = 0
    stub_count: int = 0


@dataclass(frozen=True)
class ArtifactResult:
    """Outcome of one generator run."""

    name: str
    path: Path
    rebuilt: bool
    declaration_count: int = 0
    stub_count: int = 0
    module: ModuleType | None = None


def rebuild_or_activate(
    spec: ArtifactSpec,
    target: Path,
    *,
    sources: Iterable[Path],
    config_files: Iterable[Path],
    config: AutodefConfig,
    render: Callable[[], RenderedArtifact],
    force: bool = False,
    environment_changed: bool = False,
) -> ArtifactResult:
    """Regenerate ``target`` if stale, otherwise load the cached artifact.

    Raises:
        CompileFailure: If the regenerated artifact does not compile or load.
    """
    if not needs_rebuild(
        target,
        sources,
        config_files,
        forced=force,
        environment_changed=environment_changed,
    ):
        logger.debug("%s is up to date", target)
        module = activate_artifact(
            target, module_name=spec.module_name, debug=config.debug
        )
        return ArtifactResult(name=spec.name, path=target, rebuilt=False, module=module)

    logger.info("Regenerating %s", target)
    rendered = render()

    if not config.preserve_previous:
        discard_artifact(target)

    staged = _stage_text(target, rendered.text)
    module = compile_and_load(
        staged,
        target,
        module_name=spec.module_name,
        debug=config.debug,
        preserve_previous=config.preserve_previous,
    )

    logger.info(
        "Generated %s (%d declarations, %d stubs)",
        target,
        rendered.declaration_count,
        rendered.stub_count,
    )
    return ArtifactResult(
        name=spec.name,
        path=target,
        rebuilt=True,
        declaration_count=rendered.declaration_count,
        stub_count=rendered.stub_count,
        module=module,
    )


__all__ = ["ArtifactResult", "RenderedArtifact", "rebuild_or_activate"]
