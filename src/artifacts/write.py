from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.environment import capture_environment, enumerate_packages
from artifacts.errors import CompileFailure, InvalidTargetError
from artifacts.generators import AutoloadsGenerator, PackagesGenerator
from contract.artifacts import ARTIFACT_SPECS
from rules.config import load_config, resolve_output_dir
from rules.modules import Layout

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.generators import ArtifactResult
    from artifacts.models.environment import EnvironmentSnapshot
    from packages.installed import PackageInfo
    from rules.config import AutodefConfig

logger = logging.getLogger(__name__)

ALL_TARGETS = "all"


def _selected(target: str) -> list[str]:
    if target == ALL_TARGETS:
        return list(ARTIFACT_SPECS)
    if target not in ARTIFACT_SPECS:
        choices = ", ".join([*ARTIFACT_SPECS, ALL_TARGETS])
        msg = f"Unknown target {target!r} (expected one of: {choices})"
        raise InvalidTargetError(msg)
    return [target]


def _prepare(
    root: Path,
    out_dir: Path | None,
    config: AutodefConfig | None,
) -> tuple[AutodefConfig, Path, list[PackageInfo], EnvironmentSnapshot]:
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    layout = Layout.from_config(root, config)
    packages = enumerate_packages(layout.packages_dir)
    snapshot = capture_environment(layout, config, packages)
    return config, out_dir, packages, snapshot


def generate_autoloads(
    root: Path,
    *,
    out_dir: Path | None = None,
    config: AutodefConfig | None = None,
    force: bool = False,
    environment_changed: bool = False,
) -> ArtifactResult:
    """Regenerate (or activate) the declaration-aggregation artifact."""
    config, out_dir, _, snapshot = _prepare(root, out_dir, config)
    return AutoloadsGenerator().generate(
        root,
        out_dir,
        config=config,
        snapshot=snapshot,
        force=force,
        environment_changed=environment_changed,
    )


def generate_packages(
    root: Path,
    *,
    out_dir: Path | None = None,
    config: AutodefConfig | None = None,
    force: bool = False,
    environment_changed: bool = False,
) -> ArtifactResult:
    """Regenerate (or activate) the package-bundle artifact."""
    config, out_dir, packages, snapshot = _prepare(root, out_dir, config)
    return PackagesGenerator().generate(
        root,
        out_dir,
        config=config,
        snapshot=snapshot,
        packages=packages,
        force=force,
        environment_changed=environment_changed,
    )


def generate_all_artifacts(
    *,
    root: Path,
    target: str = ALL_TARGETS,
    force: bool = False,
    environment_changed: bool = False,
    out_dir: Path | None = None,
    config: AutodefConfig | None = None,
) -> dict[str, ArtifactResult]:
    """Generate the selected artifacts for a workspace.

    Args:
        root: Workspace root
        target: ``"autoloads"``, ``"packages"`` or ``"all"``
        force: Regenerate even if the artifacts are up to date
        environment_changed: The caller knows the environment changed since
            the last build (e.g. the interpreter was upgraded)
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration; loaded from ``autodef.toml`` if absent

    Returns:
        Mapping of artifact name to its result.

    Raises:
        InvalidTargetError: If ``target`` names no artifact.
        CompileFailure: The first compile failure, after every selected
            artifact has been attempted.
    """
    names = _selected(target)
    config, out_dir, packages, snapshot = _prepare(root, out_dir, config)

    generators: dict[str, Any] = {
        "autoloads": AutoloadsGenerator(),
        "packages": PackagesGenerator(),
    }

    results: dict[str, ArtifactResult] = {}
    failures: list[CompileFailure] = []
    for name in names:
        try:
            results[name] = generators[name].generate(
                root,
                out_dir,
                config=config,
                snapshot=snapshot,
                packages=packages,
                force=force,
                environment_changed=environment_changed,
            )
        except CompileFailure as exc:
            failures.append(exc)

    if failures:
        raise failures[0]
    return results


def render_artifacts(
    *,
    root: Path,
    out_dir: Path,
    config: AutodefConfig | None = None,
) -> list[Path]:
    """Write the text of every artifact to ``out_dir`` without compiling."""
    config, out_dir, packages, snapshot = _prepare(root, out_dir, config)
    layout = Layout.from_config(root, config)
    out_dir.mkdir(parents=True, exist_ok=True)

    rendered = {
        "autoloads": AutoloadsGenerator().render(layout, config, snapshot),
        "packages": PackagesGenerator().render(snapshot, packages),
    }

    paths: list[Path] = []
    for name, artifact in rendered.items():
        path = out_dir / ARTIFACT_SPECS[name].filename
        path.write_text(artifact.text, encoding="utf-8", newline="")
        paths.append(path)
    return paths
