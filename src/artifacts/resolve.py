"""Resolution of bare file references to absolute paths."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

# autoload("symbol", "reference", ...) -> group "ref" is the file argument.
_AUTOLOAD_CALL = re.compile(
    r"""(?P<head>\bautoload\(\s*(?P<q1>['"])[^'"\n]+(?P=q1)\s*,\s*)"""
    r"""(?P<q2>['"])(?P<ref>[^'"\n]+)(?P=q2)"""
)


class PathResolver:
    """Resolves bare references like ``"helpers"`` or ``"pkg.helpers"``.

    Results are memoized by reference for the lifetime of the resolver, so
    one instance should be used per generation pass. A reference that
    cannot be found is returned unchanged and resolved lazily at load time.
    """

    def __init__(self) -> None:
        self._cache: dict[str, str] = {}

    def resolve(self, reference: str, search_paths: Sequence[str | Path]) -> str:
        cached = self._cache.get(reference)
        if cached is not None:
            return cached

        resolved = self._lookup(reference, search_paths)
        self._cache[reference] = resolved
        return resolved

    @staticmethod
    def _lookup(reference: str, search_paths: Sequence[str | Path]) -> str:
        if Path(reference).is_absolute():
            return reference

        stem = reference[:-3] if reference.endswith(".py") else reference
        parts = stem.split(".")
        # Only bare dotted names are looked up; anything else is left as given.
        if not all(parts) or any(sep in stem for sep in ("/", "\\")):
            return reference
        relative = Path(*parts)
        for directory in search_paths:
            base = Path(directory)
            for candidate in (
                base / relative.with_suffix(".py"),
                base / relative / "__init__.py",
            ):
                if candidate.is_file():
                    return str(candidate.resolve())
        return reference

    def __len__(self) -> int:
        return len(self._cache)


def rewrite_references(
    text: str,
    resolver: PathResolver,
    search_paths: Sequence[str | Path],
) -> str:
    """Rewrite the file argument of every ``autoload(...)`` call in ``text``."""

    def _replace(match: re.Match[str]) -> str:
        resolved = resolver.resolve(match.group("ref"), search_paths)
        return f"{match.group('head')}{resolved!r}"

    return _AUTOLOAD_CALL.sub(_replace, text)


__all__ = ["PathResolver", "rewrite_references"]
