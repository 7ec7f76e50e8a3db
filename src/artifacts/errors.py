"""Exception hierarchy for autodef artifact generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class AutodefError(Exception):
    """Base class for errors raised while generating artifacts."""


class InvalidTargetError(AutodefError, ValueError):
    """Raised when asked to generate something other than a known artifact."""


class MissingDescriptorError(AutodefError):
    """Raised when an installed package has no resolvable descriptor."""


class StubSynthesisError(AutodefError):
    """Raised when a single declaration cannot be parsed or stubbed."""

    def __init__(self, symbol: str | None, reason: str) -> None:
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"{symbol or '<anonymous>'}: {reason}")


class PredicateError(AutodefError, ValueError):
    """Raised when an ``@if`` predicate falls outside the supported subset."""


class CompileFailure(AutodefError):
    """Raised when an assembled artifact fails to compile or load.

    The artifact is absent afterwards; ``backup`` holds the text that failed.
    """

    def __init__(self, artifact: str, backup: Path | None, cause: str) -> None:
        self.artifact = artifact
        self.backup = backup
        self.cause = cause
        super().__init__(f"Failed to compile {artifact}: {cause}")


__all__ = [
    "AutodefError",
    "CompileFailure",
    "InvalidTargetError",
    "MissingDescriptorError",
    "PredicateError",
    "StubSynthesisError",
]
