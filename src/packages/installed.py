"""Installed package enumeration.

Each package lives in its own directory under the packages directory and
describes itself with a ``package.toml``::

    name = "magit"
    version = "3.3.0"
    autoloads = "magit-autoloads.py"   # optional

    [handlers]
    ".magit" = "magit_mode"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from artifacts.errors import MissingDescriptorError

DESCRIPTOR_FILENAME = "package.toml"


class PackageDescriptor(BaseModel):
    """Metadata an installed package ships in its ``package.toml``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    version: str = Field(default="0")
    autoloads: str | None = Field(
        default=None,
        description="Generated autoload file name (default: <name>-autoloads.py)",
    )
    handlers: dict[str, str] = Field(
        default_factory=dict,
        description="File extension -> handler associations",
    )
    docs: str = Field(default="docs", description="Documentation directory")

    @property
    def autoloads_file(self) -> str:
        return self.autoloads or f"{self.name}-autoloads.py"


@dataclass(frozen=True)
class PackageInfo:
    """An installed package directory and its descriptor."""

    name: str
    directory: Path
    descriptor: PackageDescriptor

    @property
    def autoloads_path(self) -> Path:
        return self.directory / self.descriptor.autoloads_file

    @property
    def docs_path(self) -> Path:
        return self.directory / self.descriptor.docs


def load_descriptor(directory: Path) -> PackageDescriptor:
    """Load the descriptor of the package in ``directory``.

    Raises:
        MissingDescriptorError: If the descriptor is absent or invalid.
    """
    path = directory / DESCRIPTOR_FILENAME
    if not path.is_file():
        msg = f"{directory.name}: no {DESCRIPTOR_FILENAME}"
        raise MissingDescriptorError(msg)

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"{directory.name}: unreadable {DESCRIPTOR_FILENAME}: {e}"
        raise MissingDescriptorError(msg) from e

    try:
        return PackageDescriptor.model_validate(data)
    except ValidationError as e:
        msg = f"{directory.name}: invalid {DESCRIPTOR_FILENAME}: {e}"
        raise MissingDescriptorError(msg) from e


def package_directories(packages_dir: Path) -> list[Path]:
    """Return installed package directories sorted by name."""
    if not packages_dir.is_dir():
        return []
    return sorted(
        (
            path
            for path in packages_dir.iterdir()
            if path.is_dir() and not path.is_symlink() and not path.name.startswith(".")
        ),
        key=lambda p: p.name,
    )


__all__ = [
    "DESCRIPTOR_FILENAME",
    "PackageDescriptor",
    "PackageInfo",
    "load_descriptor",
    "package_directories",
]
