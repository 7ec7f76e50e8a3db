"""Package-bundle artifact generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.assemble import assemble
from artifacts.generators.base import RenderedArtifact, rebuild_or_activate
from artifacts.resolve import PathResolver, rewrite_references
from artifacts.utils import _literal
from contract.artifacts import PACKAGES_SPEC
from packages.installed import DESCRIPTOR_FILENAME, package_directories
from rules.modules import Layout

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.generators.base import ArtifactResult
    from artifacts.models.environment import EnvironmentSnapshot
    from packages.installed import PackageInfo
    from rules.config import AutodefConfig

logger = logging.getLogger(__name__)


def cache_state(snapshot: EnvironmentSnapshot) -> str:
    """Render the statement that restores cached process-wide values on load."""
    return f"__state__ = restore_state({_literal(snapshot.state_payload())})"


class PackagesGenerator:
    """Generates packages.py by concatenating per-package autoload files."""

    spec = PACKAGES_SPEC

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return self.spec.name

    def candidates(self, layout: Layout, packages: list[PackageInfo]) -> list[Path]:
        """Files whose change invalidates the bundle.

        The packages directory itself is included so that installing or
        removing a package is noticed.
        """
        paths: list[Path] = [layout.packages_dir]
        paths.extend(
            directory / DESCRIPTOR_FILENAME
            for directory in package_directories(layout.packages_dir)
        )
        paths.extend(package.autoloads_path for package in packages)
        return paths

    def render(
        self,
        snapshot: EnvironmentSnapshot,
        packages: list[PackageInfo],
    ) -> RenderedArtifact:
        """Concatenate activated packages' autoload files into one text."""
        resolver = PathResolver()
        chunks: list[str] = []

        for package in sorted(packages, key=lambda p: p.name):
            if package.name in snapshot.disabled_packages:
                logger.debug("Package %s is disabled", package.name)
                continue

            path = package.autoloads_path
            if not path.is_file():
                logger.warning(
                    "Package %s has no autoload file %s", package.name, path.name
                )
                continue

            text = path.read_text(encoding="utf-8")
            chunks.append(
                f"# {package.name} {package.descriptor.version}\n"
                + rewrite_references(text, resolver, snapshot.search_path)
            )

        text = assemble(
            self.spec,
            chunks,
            prelude=[self.spec.prelude],
            cached_state=cache_state(snapshot),
        )
        return RenderedArtifact(text=text, declaration_count=len(chunks))

    def generate(
        self,
        root: Path,
        out_dir: Path,
        **kwargs: Any,
    ) -> ArtifactResult:
        """Regenerate packages.py if stale, otherwise activate it."""
        config: AutodefConfig = kwargs["config"]
        snapshot: EnvironmentSnapshot = kwargs["snapshot"]
        packages: list[PackageInfo] = kwargs.get("packages", [])
        force: bool = kwargs.get("force", False)
        environment_changed: bool = kwargs.get("environment_changed", False)

        layout = Layout.from_config(root, config)

        return rebuild_or_activate(
            self.spec,
            out_dir / self.spec.filename,
            sources=self.candidates(layout, packages),
            config_files=config.config_files(layout.root),
            config=config,
            render=lambda: self.render(snapshot, packages),
            force=force,
            environment_changed=environment_changed,
        )


__all__ = ["PackagesGenerator", "cache_state"]
