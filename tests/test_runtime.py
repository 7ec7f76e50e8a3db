from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest

import runtime

if TYPE_CHECKING:
    from pathlib import Path


def test_autoload_loads_file_on_first_call(tmp_path: Path) -> None:
    source = tmp_path / "tools.py"
    source.write_text(
        "CALLS = []\n\n\ndef tool(x, y=2):\n    CALLS.append(x)\n    return x + y\n",
        encoding="utf-8",
    )

    proxy = runtime.autoload("tool", str(source), "Add things.")

    assert proxy.__doc__ == "Add things."
    assert runtime.get("tool", "file") == str(source)
    assert proxy(1) == 3
    assert proxy(1, y=5) == 6
    assert proxy.resolve().__module__.startswith("_autodef_tools_")


def test_autoload_of_unknown_file_fails_only_when_called(tmp_path: Path) -> None:
    proxy = runtime.autoload("ghost", str(tmp_path / "missing.py"))

    with pytest.raises(FileNotFoundError):
        proxy()


def test_ignore_accepts_anything() -> None:
    assert runtime.ignore() is None
    assert runtime.ignore(1, 2, key="value") is None


def test_put_and_get_symbol_properties() -> None:
    runtime.put("runtime_test_symbol", "module", (":lang", "rust"))

    assert runtime.get("runtime_test_symbol", "module") == (":lang", "rust")
    assert runtime.get("runtime_test_symbol", "missing", "default") == "default"


def test_restore_state_extends_search_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(sys, "path", list(sys.path))
    state = {"search_path": [str(tmp_path)], "activated_packages": ["demo"]}

    assert runtime.restore_state(state) == state
    assert str(tmp_path) in sys.path
    assert runtime.STATE["activated_packages"] == ["demo"]

    runtime.restore_state(state)
    assert sys.path.count(str(tmp_path)) == 1
