"""Artifact contract definitions.

Filenames, header lines and markers shared by the writer, the compile guard
and the generators. Changing any of these changes every generated artifact.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

AUTOLOADS_PY = "autoloads.py"
PACKAGES_PY = "packages.py"

COMPILED_SUFFIX = ".pyc"
BACKUP_SUFFIX = ".bk"

MODE_LINE = "# -*- mode: python; coding: utf-8 -*-"
END_OF_FORMS = "# autodef: end of forms"

# Markers recognized in source files.
EXPORT_MARKER = re.compile(r"^#\s*@autodef\b[ \t]*(?P<override>[^\n]*?)[ \t]*$")
PREDICATE_MARKER = re.compile(r"^#\s*@if\s+(?P<predicate>.+?)\s*$")

PREDICATE_HEAD_BYTES = 256
PREDICATE_HEAD_LINES = 3

# Generated bookkeeping calls the runtime through these private names, so an
# exported symbol called ``put``, ``ignore`` or ``autoload`` cannot rebind them.
RUNTIME_AUTOLOAD = "_autodef_autoload"
RUNTIME_IGNORE = "_autodef_ignore"
RUNTIME_PUT = "_autodef_put"
_RUNTIME_IMPORT = (
    "from runtime import autoload, ignore, put\n"
    f"from runtime import autoload as {RUNTIME_AUTOLOAD}, "
    f"ignore as {RUNTIME_IGNORE}, put as {RUNTIME_PUT}"
)


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for a generated artifact."""

    name: str
    filename: str
    module_name: str
    producer: str
    prelude: str
    end_marker: bool

    def header(self) -> str:
        """Return the fixed header stamp (mode line, notice, blank line)."""
        return (
            f"{MODE_LINE}\n"
            f"# Generated by autodef {self.producer}. DO NOT EDIT.\n"
            "\n"
        )


AUTOLOADS_SPEC = ArtifactSpec(
    name="autoloads",
    filename=AUTOLOADS_PY,
    module_name="autodef_autoloads",
    producer="generate_autoloads",
    prelude=_RUNTIME_IMPORT,
    end_marker=True,
)

PACKAGES_SPEC = ArtifactSpec(
    name="packages",
    filename=PACKAGES_PY,
    module_name="autodef_packages",
    producer="generate_packages",
    prelude=_RUNTIME_IMPORT + "\nfrom runtime import restore_state",
    end_marker=False,
)

ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    AUTOLOADS_SPEC.name: AUTOLOADS_SPEC,
    PACKAGES_SPEC.name: PACKAGES_SPEC,
}
