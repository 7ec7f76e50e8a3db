from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

import pytest

import runtime
from artifacts.environment import capture_environment, enumerate_packages
from artifacts.generators import cache_state
from artifacts.write import generate_packages
from contract.artifacts import PACKAGES_PY
from rules.config import load_config
from rules.modules import Layout

_FIXTURE = Path(__file__).parent / "fixtures" / "mini_workspace"


def _copy_workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    shutil.copytree(_FIXTURE, root)
    return root


def _bump(path: Path, reference: Path) -> None:
    mtime = reference.stat().st_mtime + 10
    os.utime(path, (mtime, mtime))


def _artifact(root: Path) -> Path:
    return root / ".autodef" / PACKAGES_PY


def test_enumerate_packages_skips_missing_descriptor(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    root = _copy_workspace(tmp_path)

    with caplog.at_level(logging.WARNING):
        packages = enumerate_packages(root / "packages")

    assert [package.name for package in packages] == ["demo", "legacy"]
    assert "broken: no package.toml" in caplog.text


def test_capture_environment(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    (root / "packages" / "demo" / "docs").mkdir()
    config = load_config(root)
    layout = Layout.from_config(root, config)

    snapshot = capture_environment(
        layout, config, enumerate_packages(layout.packages_dir)
    )

    assert snapshot.search_path == (
        str(layout.core_dir),
        str(layout.private_dir),
        str(layout.packages_dir / "demo"),
    )
    assert snapshot.file_handlers == {".demo": "demo_mode"}
    assert snapshot.doc_paths == (str(layout.packages_dir / "demo" / "docs"),)
    assert snapshot.disabled_packages == frozenset({"legacy"})
    assert snapshot.activated_packages == ("demo",)


def test_first_handler_for_an_extension_wins(tmp_path: Path) -> None:
    root = tmp_path / "workspace"
    for name in ("alpha", "beta"):
        package_dir = root / "packages" / name
        package_dir.mkdir(parents=True)
        (package_dir / "package.toml").write_text(
            f'name = "{name}"\n\n[handlers]\n".txt" = "{name}_mode"\n',
            encoding="utf-8",
        )
    config = load_config(root)
    layout = Layout.from_config(root, config)

    snapshot = capture_environment(
        layout, config, enumerate_packages(layout.packages_dir)
    )

    assert snapshot.file_handlers == {".txt": "alpha_mode"}


def test_bundle_concatenates_activated_packages(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)

    result = generate_packages(root)

    text = _artifact(root).read_text(encoding="utf-8")
    demo_file = str((root / "packages" / "demo" / "demo.py").resolve())
    assert result.rebuilt is True
    assert result.declaration_count == 1
    assert "# demo 1.0" in text
    assert f'demo_run = autoload("demo_run", {demo_file!r})' in text
    assert "legacy" not in text.split("__state__")[0]
    assert "legacy_run" not in text
    assert "Author:" not in text
    assert "from __future__" not in text
    assert "Local Variables" not in text
    assert "lexical-binding" not in text

    module = result.module
    assert module is not None
    assert module.demo_run() == "demo"
    assert runtime.get("demo_run", "package") == "demo"


def test_bundle_restores_cached_state(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)

    result = generate_packages(root)

    module = result.module
    assert module is not None
    assert module.__state__["activated_packages"] == ["demo"]
    assert module.__state__["disabled_packages"] == ["legacy"]
    assert module.__state__["file_handlers"] == {".demo": "demo_mode"}
    assert runtime.STATE == module.__state__


def test_cache_state_is_a_python_literal(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    config = load_config(root)
    layout = Layout.from_config(root, config)
    snapshot = capture_environment(
        layout, config, enumerate_packages(layout.packages_dir)
    )

    statement = cache_state(snapshot)

    assert statement.startswith("__state__ = restore_state({")
    namespace: dict[str, object] = {"restore_state": lambda state: state}
    exec(statement, namespace)  # noqa: S102
    assert namespace["__state__"] == snapshot.state_payload()


def test_missing_autoload_file_is_reported(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    root = _copy_workspace(tmp_path)
    (root / "packages" / "demo" / "demo-autoloads.py").unlink()

    with caplog.at_level(logging.WARNING):
        result = generate_packages(root)

    assert result.declaration_count == 0
    assert "Package demo has no autoload file demo-autoloads.py" in caplog.text


def test_installing_a_package_invalidates_bundle(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    generate_packages(root)
    artifact = _artifact(root)
    assert generate_packages(root).rebuilt is False

    new_package = root / "packages" / "extra"
    new_package.mkdir()
    (new_package / "package.toml").write_text('name = "extra"\n', encoding="utf-8")
    (new_package / "extra-autoloads.py").write_text(
        'extra_run = autoload("extra_run", "extra")\n', encoding="utf-8"
    )
    _bump(root / "packages", artifact)

    result = generate_packages(root)

    assert result.rebuilt is True
    assert "# extra 0" in artifact.read_text(encoding="utf-8")


def test_editing_a_package_autoload_file_invalidates_bundle(tmp_path: Path) -> None:
    root = _copy_workspace(tmp_path)
    generate_packages(root)
    artifact = _artifact(root)

    autoloads = root / "packages" / "demo" / "demo-autoloads.py"
    _bump(autoloads, artifact)

    assert generate_packages(root).rebuilt is True
