"""Utility functions for artifact generation."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Mapping


def _stage_text(target: Path, content: str) -> Path:
    """Write ``content`` to a temporary file next to ``target``.

    The caller renames the staged file into place (or discards it); staging
    in the same directory keeps that rename atomic.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
        mode="w",
        encoding="utf-8",
        newline="",
        delete=False,
        dir=str(target.parent),
        prefix=target.name + ".",
        suffix=".tmp",
    )
    staged = Path(handle.name)
    try:
        with handle:
            handle.write(content)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    return staged


def _literal(payload: Mapping[str, object]) -> str:
    """Render string/list/dict data as a Python literal.

    JSON restricted to strings, lists and objects is valid Python syntax;
    orjson keeps the output sorted and stable.
    """
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(dict(payload), option=opts).decode("utf-8")
