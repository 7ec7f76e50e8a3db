"""Runtime support imported by generated artifacts.

Artifacts only ever call ``autoload``, ``ignore``, ``put`` and
``restore_state``; everything else here is for tooling that inspects what
an artifact registered.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

SYMBOL_PROPERTIES: dict[str, dict[str, Any]] = {}
STATE: dict[str, Any] = {}

_LOADED: dict[str, ModuleType] = {}


def ignore(*args: Any, **kwargs: Any) -> None:
    """Accept any arguments and do nothing."""
    del args, kwargs


def put(symbol: str, prop: str, value: Any) -> None:
    """Record a property of a symbol (declaring file, module, ...)."""
    SYMBOL_PROPERTIES.setdefault(symbol, {})[prop] = value


def get(symbol: str, prop: str, default: Any = None) -> Any:
    return SYMBOL_PROPERTIES.get(symbol, {}).get(prop, default)


def _load_file(reference: str) -> ModuleType:
    cached = _LOADED.get(reference)
    if cached is not None:
        return cached

    path = Path(reference)
    if not path.is_absolute():
        # Unresolved at generation time; let the import system find it.
        module = importlib.import_module(reference)
    else:
        path_hash = hashlib.sha1(reference.encode("utf-8")).hexdigest()[:16]
        module_name = f"_autodef_{path.stem}_{path_hash}"
        spec = importlib.util.spec_from_file_location(module_name, reference)
        if spec is None or spec.loader is None:
            msg = f"Cannot create module spec for {reference}"
            raise ImportError(msg)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception:
            sys.modules.pop(module_name, None)
            raise

    _LOADED[reference] = module
    return module


class Autoload:
    """A callable that loads its defining file on first use."""

    def __init__(self, symbol: str, file: str, doc: str | None, kind: str) -> None:
        self.symbol = symbol
        self.file = file
        self.kind = kind
        self.__doc__ = doc
        self.__name__ = symbol

    def resolve(self) -> Any:
        return getattr(_load_file(self.file), self.symbol)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.resolve()(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<autoload {self.kind} {self.symbol} from {self.file}>"


def autoload(
    symbol: str,
    file: str,
    doc: str | None = None,
    kind: str = "function",
) -> Autoload:
    """Bind ``symbol`` to a lazy proxy for its definition in ``file``."""
    put(symbol, "file", file)
    return Autoload(symbol, file, doc, kind)


def restore_state(state: dict[str, Any]) -> dict[str, Any]:
    """Restore cached process-wide values captured at generation time."""
    for entry in state.get("search_path", []):
        if entry not in sys.path:
            sys.path.append(entry)
    STATE.clear()
    STATE.update(state)
    return state


__all__ = [
    "STATE",
    "SYMBOL_PROPERTIES",
    "Autoload",
    "autoload",
    "get",
    "ignore",
    "put",
    "restore_state",
]
