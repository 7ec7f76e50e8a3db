"""Compile-with-rollback protocol for generated artifacts.

An artifact is staged next to its target, compiled, and loaded from the
staged compiled form. Only when all of that succeeds are the text and then
the compiled form renamed into place, so the compiled form is never newer
than a broken text form. On failure the staged text is kept as a ``.bk``
backup and the artifact is left absent.
"""

from __future__ import annotations

import importlib.util
import logging
import marshal
import os
import py_compile
import sys
from pathlib import Path
from types import CodeType, ModuleType

from artifacts.errors import CompileFailure
from contract.artifacts import BACKUP_SUFFIX, COMPILED_SUFFIX

logger = logging.getLogger(__name__)

_PYC_HEADER_SIZE = 16


def compiled_path(target: Path) -> Path:
    """``autoloads.py`` -> ``autoloads.pyc``."""
    return target.with_suffix(COMPILED_SUFFIX)


def backup_path(target: Path) -> Path:
    """``autoloads.py`` -> ``autoloads.py.bk``."""
    return target.with_name(target.name + BACKUP_SUFFIX)


def _module_code(path: Path, *, compiled: bool) -> CodeType:
    data = path.read_bytes()
    if not compiled:
        return compile(data, str(path), "exec", dont_inherit=True)

    if data[:4] != importlib.util.MAGIC_NUMBER:
        msg = f"Bad magic number in {path}"
        raise ImportError(msg)
    try:
        code = marshal.loads(data[_PYC_HEADER_SIZE:])
    except (EOFError, ValueError, TypeError) as exc:
        msg = f"Corrupt compiled data in {path}"
        raise ImportError(msg) from exc
    if not isinstance(code, CodeType):
        msg = f"Non-code object in {path}"
        raise ImportError(msg)
    return code


def load_artifact(
    path: Path,
    module_name: str,
    *,
    compiled: bool,
    origin: Path | None = None,
) -> ModuleType:
    """Execute an artifact and register it in ``sys.modules``.

    The module is removed again if executing it raises.
    """
    return _exec_artifact(
        _module_code(path, compiled=compiled), module_name, origin or path
    )


def _exec_artifact(code: CodeType, module_name: str, origin: Path) -> ModuleType:
    module = ModuleType(module_name)
    module.__file__ = str(origin)

    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)  # noqa: S102
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def discard_artifact(target: Path) -> None:
    """Delete an artifact and its compiled form, if present."""
    target.unlink(missing_ok=True)
    compiled_path(target).unlink(missing_ok=True)


def _rollback(
    staged: Path,
    staged_compiled: Path,
    target: Path,
    *,
    preserve_previous: bool,
) -> Path:
    backup = backup_path(target)
    os.replace(staged, backup)
    staged_compiled.unlink(missing_ok=True)
    if not preserve_previous:
        discard_artifact(target)
    return backup


def compile_and_load(
    staged: Path,
    target: Path,
    *,
    module_name: str,
    debug: bool = False,
    preserve_previous: bool = False,
) -> ModuleType:
    """Compile a staged artifact, load it, and move it into place.

    Args:
        staged: Fully written artifact text next to ``target``
        target: Final artifact path
        module_name: Name the loaded artifact is registered under
        debug: Load the source form instead of the compiled form
        preserve_previous: On failure, leave an existing ``target`` alone

    Returns:
        The loaded artifact module.

    Raises:
        CompileFailure: If compiling or loading fails. The staged text is
            moved to ``<target>.bk`` and the artifact is absent afterwards
            (unless ``preserve_previous``).
    """
    staged_compiled = staged.with_name(staged.name + "c")

    try:
        py_compile.compile(
            str(staged),
            cfile=str(staged_compiled),
            dfile=str(target),
            doraise=True,
        )
        module = load_artifact(
            staged if debug else staged_compiled,
            module_name,
            compiled=not debug,
            origin=target,
        )
    except Exception as exc:
        backup = _rollback(
            staged,
            staged_compiled,
            target,
            preserve_previous=preserve_previous,
        )
        logger.error(
            "Failed to compile %s; the attempted text was saved to %s",
            target.name,
            backup,
        )
        raise CompileFailure(target.name, backup, str(exc)) from exc

    os.replace(staged, target)
    os.replace(staged_compiled, compiled_path(target))
    return module


def activate_artifact(
    target: Path,
    *,
    module_name: str,
    debug: bool = False,
) -> ModuleType:
    """Load an up-to-date artifact without regenerating it.

    The compiled form is used when it is at least as new as the text. A
    compiled form written by another interpreter, or one that is corrupt,
    is skipped in favour of the text.
    """
    compiled = compiled_path(target)
    code: CodeType | None = None
    if (
        not debug
        and compiled.is_file()
        and compiled.stat().st_mtime >= target.stat().st_mtime
    ):
        try:
            code = _module_code(compiled, compiled=True)
        except ImportError as exc:
            logger.warning("Ignoring unusable compiled artifact: %s", exc)

    if code is None:
        code = _module_code(target, compiled=False)
    return _exec_artifact(code, module_name, target)


__all__ = [
    "activate_artifact",
    "backup_path",
    "compile_and_load",
    "compiled_path",
    "discard_artifact",
    "load_artifact",
]
