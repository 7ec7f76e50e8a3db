"""Capture of the environment snapshot threaded through a generation."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from artifacts.errors import MissingDescriptorError
from artifacts.models.environment import EnvironmentSnapshot
from packages.installed import PackageInfo, load_descriptor, package_directories

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import AutodefConfig
    from rules.modules import Layout

logger = logging.getLogger(__name__)


def enumerate_packages(packages_dir: Path) -> list[PackageInfo]:
    """List installed packages with a usable descriptor.

    Packages without one are reported and skipped.
    """
    packages: list[PackageInfo] = []
    for directory in package_directories(packages_dir):
        try:
            descriptor = load_descriptor(directory)
        except MissingDescriptorError as exc:
            logger.warning("Skipping package %s", exc)
            continue
        packages.append(
            PackageInfo(
                name=descriptor.name, directory=directory, descriptor=descriptor
            )
        )
    return packages


def capture_environment(
    layout: Layout,
    config: AutodefConfig,
    packages: list[PackageInfo],
) -> EnvironmentSnapshot:
    """Compute the snapshot once; later stages only read from it."""
    disabled = frozenset(config.packages.disabled)
    activated = [package for package in packages if package.name not in disabled]

    search_path = [
        str(directory)
        for directory in (layout.core_dir, layout.private_dir)
        if directory.is_dir()
    ]
    search_path.extend(str(package.directory) for package in activated)

    file_handlers: dict[str, str] = {}
    for package in activated:
        for extension, handler in package.descriptor.handlers.items():
            file_handlers.setdefault(extension, handler)

    doc_paths = [
        str(package.docs_path) for package in activated if package.docs_path.is_dir()
    ]

    return EnvironmentSnapshot(
        platform=sys.platform,
        search_path=tuple(search_path),
        file_handlers=file_handlers,
        doc_paths=tuple(doc_paths),
        disabled_packages=disabled,
        activated_packages=tuple(package.name for package in activated),
    )


__all__ = ["capture_environment", "enumerate_packages"]
