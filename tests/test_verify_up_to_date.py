from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from artifacts.write import generate_all_artifacts
from contract.artifacts import AUTOLOADS_PY, PACKAGES_PY
from verify.verify import UpToDateResult, verify_up_to_date

_FIXTURE = Path(__file__).parent / "fixtures" / "mini_workspace"


def _copy_workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    shutil.copytree(_FIXTURE, root)
    return root


def test_verify_requires_artifacts_dir(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_up_to_date(root=root, artifacts_dir=missing_dir)


def test_verify_rejects_file_as_artifacts_dir(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_up_to_date(root=root, artifacts_dir=not_a_dir)


def test_freshly_generated_artifacts_verify(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=root, out_dir=artifacts_dir)

    result = verify_up_to_date(root=root, artifacts_dir=artifacts_dir)

    assert result == UpToDateResult(ok=True)


def test_missing_and_mismatched_artifacts_reported(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=root, out_dir=artifacts_dir)

    (artifacts_dir / PACKAGES_PY).unlink()
    (root / "core" / "autoload" / "core_lib.py").write_text(
        "# @autodef\ndef greet(name):\n    return name\n", encoding="utf-8"
    )

    result = verify_up_to_date(root=root, artifacts_dir=artifacts_dir)

    assert result == UpToDateResult(
        ok=False,
        mismatches=(AUTOLOADS_PY,),
        missing=(PACKAGES_PY,),
    )


def test_verify_does_not_touch_artifacts(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=root, out_dir=artifacts_dir)
    before = {
        path.name: path.stat().st_mtime_ns for path in artifacts_dir.iterdir()
    }

    verify_up_to_date(root=root, artifacts_dir=artifacts_dir)

    after = {path.name: path.stat().st_mtime_ns for path in artifacts_dir.iterdir()}
    assert after == before
