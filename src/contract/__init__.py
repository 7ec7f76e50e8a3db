"""Stable artifact contract surface for autodef.

Generated artifacts, the runtime and the CLI agree on these names. Treat the
exports as the authoritative boundary between generation and loading.
"""

from contract.artifacts import (
    ARTIFACT_SPECS,
    AUTOLOADS_PY,
    AUTOLOADS_SPEC,
    BACKUP_SUFFIX,
    COMPILED_SUFFIX,
    END_OF_FORMS,
    PACKAGES_PY,
    PACKAGES_SPEC,
    ArtifactSpec,
)

__all__ = [
    "ARTIFACT_SPECS",
    "AUTOLOADS_PY",
    "AUTOLOADS_SPEC",
    "BACKUP_SUFFIX",
    "COMPILED_SUFFIX",
    "END_OF_FORMS",
    "PACKAGES_PY",
    "PACKAGES_SPEC",
    "ArtifactSpec",
]
