"""Environment snapshot captured once per generation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EnvironmentSnapshot(BaseModel):
    """Process-wide values that are expensive to recompute.

    Captured once when a generation starts and threaded through the
    pipeline; never read back from ambient state mid-generation.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    search_path: tuple[str, ...] = ()
    file_handlers: dict[str, str] = Field(default_factory=dict)
    doc_paths: tuple[str, ...] = ()
    disabled_packages: frozenset[str] = frozenset()
    activated_packages: tuple[str, ...] = ()

    def state_payload(self) -> dict[str, object]:
        """Return the cacheable values in a deterministic, literal-only form."""
        return {
            "search_path": list(self.search_path),
            "file_handlers": dict(sorted(self.file_handlers.items())),
            "doc_paths": list(self.doc_paths),
            "disabled_packages": sorted(self.disabled_packages),
            "activated_packages": list(self.activated_packages),
        }


__all__ = ["EnvironmentSnapshot"]
