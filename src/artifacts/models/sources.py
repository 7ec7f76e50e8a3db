"""Source file models.

A source file is discovered by the scanner, classified into the module it
belongs to, and read by the extractor. Both models are immutable.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OriginKind = Literal["core", "private", "module"]


class ModuleOrigin(BaseModel):
    """Which logical feature a source file or declaration belongs to."""

    model_config = ConfigDict(frozen=True)

    kind: OriginKind
    category: str | None = None
    name: str | None = None

    @classmethod
    def core(cls) -> ModuleOrigin:
        return cls(kind="core")

    @classmethod
    def private(cls) -> ModuleOrigin:
        return cls(kind="private")

    @classmethod
    def module(cls, category: str, name: str) -> ModuleOrigin:
        return cls(kind="module", category=category, name=name)

    @property
    def label(self) -> str:
        """Human readable label, e.g. ``:lang python``."""
        if self.kind == "module":
            return f":{self.category} {self.name}"
        return f":{self.kind}"

    def as_tuple(self) -> tuple[str, str | None]:
        if self.kind == "module":
            return (f":{self.category}", self.name)
        return (f":{self.kind}", None)


class SourceFile(BaseModel):
    """A candidate declaration file that passed its inclusion predicate."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Absolute, resolved file path")
    relative_path: str = Field(description="POSIX path relative to the root")
    mtime: float
    origin: ModuleOrigin
    predicate: str | None = Field(
        default=None, description="Raw @if predicate text, if any"
    )


__all__ = ["ModuleOrigin", "OriginKind", "SourceFile"]
