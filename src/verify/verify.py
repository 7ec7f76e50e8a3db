"""Up-to-date verification for autodef artifacts."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from artifacts.write import render_artifacts


@dataclass(frozen=True)
class UpToDateResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)


def verify_up_to_date(*, root: Path, artifacts_dir: Path) -> UpToDateResult:
    """Verify that the artifacts on disk match a fresh rendering.

    Renders the text of every artifact into a temporary directory, without
    compiling or loading it, and compares it byte-for-byte against the
    artifacts directory. Compiled forms and backups are not compared.

    Args:
        root: Workspace root.
        artifacts_dir: Directory containing existing artifacts to verify.

    Returns:
        UpToDateResult with ok status and lists of missing and mismatched
        artifact file names.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    missing: list[str] = []
    mismatches: list[str] = []
    with tempfile.TemporaryDirectory() as temp_dir:
        rendered = render_artifacts(root=root, out_dir=Path(temp_dir))
        for regenerated_path in sorted(rendered):
            original_path = artifacts_dir / regenerated_path.name
            if not original_path.is_file():
                missing.append(regenerated_path.name)
            elif not filecmp.cmp(original_path, regenerated_path, shallow=False):
                mismatches.append(regenerated_path.name)

    ok = not missing and not mismatches
    return UpToDateResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
    )
