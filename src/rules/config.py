from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "autodef.toml"


class PackagesConfig(BaseModel):
    """Configuration for the package bundle."""

    model_config = ConfigDict(extra="forbid")

    disabled: list[str] = Field(
        default_factory=list,
        description="Installed packages that must not be activated",
    )


class AutodefConfig(BaseModel):
    """Configuration for autodef artifact generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".autodef",
        description="Output directory for generated artifacts",
    )
    core_dir: str = Field(
        default="core/autoload",
        description="Directory holding core declaration files",
    )
    modules_dir: str = Field(
        default="modules",
        description="Directory holding <category>/<name> feature modules",
    )
    private_dir: str = Field(
        default="private/autoload",
        description="Directory holding user-override declaration files",
    )
    packages_dir: str = Field(
        default="packages",
        description="Directory holding installed packages",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for declaration files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    debug: bool = Field(
        default=False,
        description="Load artifacts from source instead of compiled form",
    )
    preserve_previous: bool = Field(
        default=False,
        description="Keep the previous artifact when a rebuild fails to compile",
    )
    watch: list[str] = Field(
        default_factory=list,
        description="Extra files whose changes invalidate every artifact",
    )
    modules: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Enabled modules: category -> list of module names",
    )
    packages: PackagesConfig = Field(
        default_factory=PackagesConfig,
        description="Package bundle settings",
    )

    @field_validator("modules", mode="before")
    @classmethod
    def validate_modules(cls, v: Any) -> Any:
        """Validate that enabled modules are a mapping of category -> names.

        Note: this runs in `mode="before"` so we can report a clear error
        message using the raw TOML values.
        """

        if v is None:
            return {}

        if not isinstance(v, dict):
            msg = "modules must be a mapping of category -> list of names"
            raise TypeError(msg)

        for category, names in v.items():
            if not isinstance(names, list) or not all(
                isinstance(name, str) for name in names
            ):
                msg = f"modules.{category} must be a list of module names"
                raise TypeError(msg)
            if "/" in category or any("/" in name for name in names):
                msg = f"modules.{category} entries must not contain '/'"
                raise ValueError(msg)

        return v

    def config_files(self, root: Path) -> list[Path]:
        """Files whose modification invalidates every artifact."""
        files = [root / CONFIG_FILENAME]
        files.extend(root / name for name in self.watch)
        return files


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the workspace root.

    The config output_dir must be a non-empty relative path that remains
    within the workspace root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the workspace root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the workspace root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the workspace root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> AutodefConfig:
    """Load configuration from autodef.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return AutodefConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AutodefConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
