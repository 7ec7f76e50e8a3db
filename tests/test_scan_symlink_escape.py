from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from rules.config import AutodefConfig
from rules.modules import Layout
from scan.files import _build_gitignore_matcher, discover_candidates, files_in

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_files_in_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    core_dir = repo_root / "core" / "autoload"
    core_dir.mkdir(parents=True)
    (core_dir / "module.py").write_text("print('ok')\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "leak.py").write_text("print('leak')\n", encoding="utf-8")

    symlink_dir = core_dir / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = [
        path.relative_to(repo_root).as_posix()
        for path in files_in(core_dir, "**/*.py", root=repo_root)
    ]

    assert "core/autoload/module.py" in results
    assert "core/autoload/linked/leak.py" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_discover_candidates_skips_symlinked_module_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    (repo_root / "modules" / "lang").mkdir(parents=True)

    external_module = tmp_path / "external" / "python"
    external_module.mkdir(parents=True)
    (external_module / "autoload.py").write_text("x = 1\n", encoding="utf-8")
    (repo_root / "modules" / "lang" / "python").symlink_to(
        external_module, target_is_directory=True
    )

    layout = Layout.from_config(repo_root, AutodefConfig())

    assert discover_candidates(layout) == []


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "core").mkdir()
    (repo_root / "core" / "module.py").write_text("print('ok')\n", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "core/module.py\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "core" / "module.py")) is False
