"""File scanning utilities for autodef declaration sources."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from artifacts.errors import PredicateError
from artifacts.models.sources import SourceFile
from contract.artifacts import (
    PREDICATE_HEAD_BYTES,
    PREDICATE_HEAD_LINES,
    PREDICATE_MARKER,
)
from rules.modules import classify_path
from scan.predicate import evaluate_predicate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from rules.modules import Layout
    from scan.predicate import PredicateContext

logger = logging.getLogger(__name__)


def _should_include_file(
    path: Path,
    root: Path,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, root):
        return False

    try:
        rel_path = path.relative_to(root)
    except ValueError:
        return False

    rel_path_str = rel_path.as_posix()

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def files_in(
    directory: Path,
    pattern: str,
    *,
    root: Path,
    gitignore_matches: Callable[[str], bool] | None = None,
    exclude_patterns: list[str] | None = None,
) -> Iterator[Path]:
    """Find files matching ``pattern`` under ``directory``.

    Args:
        directory: Directory to search; a missing directory yields nothing
        pattern: ``Path.glob`` pattern relative to ``directory``
        root: Workspace root; files outside it (via symlinks) are skipped
        gitignore_matches: Optional matcher for ignored paths
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern (relative to ``root``) are excluded

    Yields:
        Path objects sorted lexicographically by relative path for
        deterministic ordering.
    """
    if not directory.is_dir():
        return

    matched_files = [
        path
        for path in directory.glob(pattern)
        if _should_include_file(path, root, gitignore_matches, exclude_patterns)
    ]

    matched_files.sort(key=lambda p: p.relative_to(root).as_posix())

    yield from matched_files


def discover_candidates(
    layout: Layout,
    *,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> list[Path]:
    """List every candidate declaration file, in generation order.

    Core files come first, then each module's ``autoload.py`` followed by
    its ``autoload/`` directory (enabled or not), then private overrides.
    """
    root = layout.root
    gitignore_matches = _build_gitignore_matcher(
        root,
        nested_gitignore=nested_gitignore,
    )

    def listing(directory: Path, pattern: str) -> Iterator[Path]:
        return files_in(
            directory,
            pattern,
            root=root,
            gitignore_matches=gitignore_matches,
            exclude_patterns=exclude_patterns,
        )

    candidates: list[Path] = list(listing(layout.core_dir, "**/*.py"))

    if layout.modules_dir.is_dir():
        module_dirs = sorted(
            path
            for path in layout.modules_dir.glob("*/*")
            if path.is_dir() and not path.is_symlink()
        )
        for module_dir in module_dirs:
            candidates.extend(listing(module_dir, "autoload.py"))
            candidates.extend(listing(module_dir / "autoload", "**/*.py"))

    candidates.extend(listing(layout.private_dir, "**/*.py"))

    seen: set[Path] = set()
    unique: list[Path] = []
    for path in candidates:
        if path not in seen:
            seen.add(path)
            unique.append(path)
    return unique


def read_predicate(path: Path) -> str | None:
    """Return the ``@if`` predicate from the head of a file, if any.

    Only the first few hundred bytes are read.
    """
    with path.open("rb") as handle:
        head = handle.read(PREDICATE_HEAD_BYTES)

    text = head.decode("utf-8", errors="replace")
    for line in text.splitlines()[:PREDICATE_HEAD_LINES]:
        match = PREDICATE_MARKER.match(line)
        if match:
            return match.group("predicate")
    return None


def scan_sources(
    candidates: list[Path],
    layout: Layout,
    context: PredicateContext,
) -> list[SourceFile]:
    """Filter candidates by their inclusion predicate and classify them.

    A file whose predicate is false, or cannot be interpreted, is reported
    and left out; scanning continues with the next file.
    """
    sources: list[SourceFile] = []

    for path in candidates:
        relative_path = path.relative_to(layout.root).as_posix()
        predicate = read_predicate(path)

        if predicate is not None:
            try:
                included = evaluate_predicate(predicate, context.bind(path))
            except PredicateError as exc:
                logger.warning(
                    "Ignoring %s: bad @if predicate (%s)", relative_path, exc
                )
                continue
            if not included:
                logger.info("Excluding %s (@if %s)", relative_path, predicate)
                continue

        sources.append(
            SourceFile(
                path=str(path.resolve()),
                relative_path=relative_path,
                mtime=path.stat().st_mtime,
                origin=classify_path(path, layout),
                predicate=predicate,
            )
        )

    return sources


__all__ = [
    "_should_include_file",
    "discover_candidates",
    "files_in",
    "read_predicate",
    "scan_sources",
]
