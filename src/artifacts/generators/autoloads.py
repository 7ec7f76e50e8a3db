"""Declaration-aggregation artifact generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.assemble import assemble
from artifacts.extract import DeclarationExtractor
from artifacts.generators.base import RenderedArtifact, rebuild_or_activate
from artifacts.resolve import PathResolver
from artifacts.serialize import is_stub, serialize_declaration
from contract.artifacts import AUTOLOADS_SPEC
from rules.modules import Layout, ModuleRegistry
from scan.files import discover_candidates, scan_sources
from scan.predicate import PredicateContext

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.generators.base import ArtifactResult
    from artifacts.models.declarations import Declaration
    from artifacts.models.environment import EnvironmentSnapshot
    from rules.config import AutodefConfig

logger = logging.getLogger(__name__)


def _unique_declarations(
    batches: list[tuple[str, list[Declaration]]],
) -> list[Declaration]:
    """Flatten per-file batches, keeping the first declaration of a symbol."""
    seen: dict[str, str] = {}
    declarations: list[Declaration] = []
    for relative_path, batch in batches:
        for declaration in batch:
            symbol = declaration.symbol
            if symbol is not None:
                if symbol in seen:
                    logger.warning(
                        "Duplicate autodef %s in %s (already defined in %s)",
                        symbol,
                        relative_path,
                        seen[symbol],
                    )
                    continue
                seen[symbol] = relative_path
            declarations.append(declaration)
    return declarations


class AutoloadsGenerator:
    """Generates autoloads.py from ``# @autodef`` forms across the workspace."""

    spec = AUTOLOADS_SPEC

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return self.spec.name

    def candidates(self, layout: Layout, config: AutodefConfig) -> list[Path]:
        return discover_candidates(
            layout,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )

    def render(
        self,
        layout: Layout,
        config: AutodefConfig,
        snapshot: EnvironmentSnapshot,
        candidates: list[Path] | None = None,
    ) -> RenderedArtifact:
        """Scan, extract and assemble the artifact text without writing it."""
        if candidates is None:
            candidates = self.candidates(layout, config)

        registry = ModuleRegistry(config.modules)
        context = PredicateContext(
            file=layout.root,
            platform=snapshot.platform,
            is_enabled=registry.is_enabled,
        )
        sources = scan_sources(candidates, layout, context)

        extractor = DeclarationExtractor(PathResolver(), snapshot.search_path)
        batches = [
            (
                source.relative_path,
                extractor.extract(source, registry.origin_enabled(source.origin)),
            )
            for source in sources
        ]
        declarations = _unique_declarations(batches)

        text = assemble(
            self.spec,
            (serialize_declaration(declaration) for declaration in declarations),
            prelude=[self.spec.prelude],
        )
        return RenderedArtifact(
            text=text,
            declaration_count=len(declarations),
            stub_count=sum(1 for declaration in declarations if is_stub(declaration)),
        )

    def generate(
        self,
        root: Path,
        out_dir: Path,
        **kwargs: Any,
    ) -> ArtifactResult:
        """Regenerate autoloads.py if stale, otherwise activate it."""
        config: AutodefConfig = kwargs["config"]
        snapshot: EnvironmentSnapshot = kwargs["snapshot"]
        force: bool = kwargs.get("force", False)
        environment_changed: bool = kwargs.get("environment_changed", False)

        layout = Layout.from_config(root, config)
        candidates = self.candidates(layout, config)

        return rebuild_or_activate(
            self.spec,
            out_dir / self.spec.filename,
            sources=candidates,
            config_files=config.config_files(layout.root),
            config=config,
            render=lambda: self.render(layout, config, snapshot, candidates),
            force=force,
            environment_changed=environment_changed,
        )


__all__ = ["AutoloadsGenerator"]
