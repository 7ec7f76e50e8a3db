"""Assembly of artifact text from header, prelude and declaration chunks."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from contract.artifacts import END_OF_FORMS

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contract.artifacts import ArtifactSpec

# Lines that stop the artifact from compiling, or only mean something at
# the top of the file they were written in.
_DIRECTIVE_LINE = re.compile(
    r"""^(?:
        \s*from\s+__future__\s+import\b.*
      | \#!.*
      | \s*\#.*-\*-.*-\*-.*
      | \s*\#\s*(?:vim?|ex):.*
    )$""",
    re.VERBOSE,
)

# Comment-only lines written for authors and editors.
_AUTHOR_LINE = re.compile(
    r"^\s*#\s*(?:Author|Maintainer|Copyright|Created|Modified|Version|URL|"
    r"Homepage|Keywords|Package-Requires)s?\s*:.*$",
    re.IGNORECASE,
)

_LOCAL_VARIABLES_START = re.compile(r"^\s*#\s*Local Variables:\s*$")
_LOCAL_VARIABLES_END = re.compile(r"^\s*#\s*End:\s*$")


def clean_chunk(text: str) -> str:
    """Strip file-local directives and author comments from ``text``."""
    kept: list[str] = []
    in_local_variables = False

    for line in text.splitlines():
        if in_local_variables:
            if _LOCAL_VARIABLES_END.match(line):
                in_local_variables = False
            continue
        if _LOCAL_VARIABLES_START.match(line):
            in_local_variables = True
            continue
        if line.strip() == END_OF_FORMS:
            continue
        if _DIRECTIVE_LINE.match(line) or _AUTHOR_LINE.match(line):
            continue
        kept.append(line)

    while kept and not kept[0].strip():
        kept.pop(0)
    while kept and not kept[-1].strip():
        kept.pop()
    return "\n".join(kept)


class ArtifactWriter:
    """Builds the text of one artifact in memory.

    Artifacts whose spec carries an end-of-forms marker keep it as the last
    line; every chunk is inserted immediately before it. Chunks are never
    reordered.
    """

    def __init__(self, spec: ArtifactSpec, prelude: Sequence[str] = ()) -> None:
        self._spec = spec
        self._lines: list[str] = spec.header().splitlines()
        for statement in prelude:
            self._lines.extend(statement.splitlines())
        self._lines.append("")
        if spec.end_marker:
            self._lines.append(END_OF_FORMS)

    def _marker_index(self) -> int:
        return len(self._lines) - 1 - self._lines[::-1].index(END_OF_FORMS)

    def insert(self, chunk: str) -> None:
        cleaned = clean_chunk(chunk)
        if not cleaned:
            return
        block = [*cleaned.splitlines(), ""]
        if self._spec.end_marker:
            position = self._marker_index()
            self._lines[position:position] = block
        else:
            self._lines.extend(block)

    def render(self) -> str:
        lines = list(self._lines)
        while not self._spec.end_marker and lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines) + "\n"


def assemble(
    spec: ArtifactSpec,
    chunks: Iterable[str],
    *,
    prelude: Sequence[str] = (),
    cached_state: str | None = None,
) -> str:
    """Concatenate header, prelude, optional cached state and chunks."""
    statements = [*prelude]
    if cached_state is not None:
        statements.append(cached_state)

    writer = ArtifactWriter(spec, prelude=statements)
    for chunk in chunks:
        writer.insert(chunk)
    return writer.render()


__all__ = ["ArtifactWriter", "assemble", "clean_chunk"]
