"""Declaration extraction from tagged source files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.errors import StubSynthesisError
from artifacts.models.declarations import (
    AliasDeclaration,
    FunctionDeclaration,
    OtherDeclaration,
)
from artifacts.resolve import rewrite_references
from artifacts.stubs import synthesize_stub
from parse.ast_forms import read_alias, read_function, validate_override
from parse.treesitter_forms import extract_tagged_forms_from_file

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.declarations import Declaration
    from artifacts.models.sources import SourceFile
    from artifacts.resolve import PathResolver
    from parse.treesitter_forms import TaggedForm

logger = logging.getLogger(__name__)


class DeclarationExtractor:
    """Turns the tagged forms of one file into declarations.

    Precedence for a tagged form:

    - enabled module: the full declaration, whether or not an override is
      present;
    - disabled module with an override: the override statement verbatim;
    - disabled module without an override: a synthesized stub, except for
      forms that are not functions or aliases, which are dropped.
    """

    def __init__(self, resolver: PathResolver, search_paths: Sequence[str]) -> None:
        self._resolver = resolver
        self._search_paths = search_paths

    def extract(self, source: SourceFile, enabled: bool) -> list[Declaration]:
        declarations: list[Declaration] = []
        for form in extract_tagged_forms_from_file(Path(source.path)):
            try:
                declaration = self._declaration_for(form, source, enabled)
            except StubSynthesisError as exc:
                logger.warning(
                    "Skipping %s (%s:%d): %s",
                    exc.symbol or "<form>",
                    source.relative_path,
                    form.line,
                    exc.reason,
                )
                continue
            if declaration is not None:
                declarations.append(declaration)
        return declarations

    def _rewrite(self, text: str) -> str:
        return rewrite_references(text, self._resolver, self._search_paths)

    def _declaration_for(
        self,
        form: TaggedForm,
        source: SourceFile,
        enabled: bool,
    ) -> Declaration | None:
        if not enabled and form.override is not None:
            return OtherDeclaration(
                symbol=form.symbol,
                text=self._rewrite(validate_override(form.override, form.symbol)),
                origin=source.origin,
                enabled=False,
                file=source.path,
            )

        if not enabled and form.shape == "other":
            return None

        if form.has_error:
            raise StubSynthesisError(form.symbol, "syntax error in tagged form")

        declaration = self._full_declaration(form, source, enabled)
        if enabled:
            return declaration
        return synthesize_stub(declaration)

    def _full_declaration(
        self,
        form: TaggedForm,
        source: SourceFile,
        enabled: bool,
    ) -> Declaration:
        if form.shape == "function":
            function = read_function(form.text, form.symbol)
            return FunctionDeclaration(
                symbol=function.name,
                parameters=function.parameters,
                documentation=function.docstring,
                is_async=function.is_async,
                origin=source.origin,
                enabled=enabled,
                file=source.path,
            )

        if form.shape == "alias":
            alias = read_alias(form.text, form.symbol)
            return AliasDeclaration(
                symbol=alias.name,
                target=alias.target,
                origin=source.origin,
                enabled=enabled,
                file=source.path,
            )

        return OtherDeclaration(
            symbol=form.symbol,
            text=self._rewrite(form.text),
            origin=source.origin,
            enabled=enabled,
            file=source.path,
        )


__all__ = ["DeclarationExtractor"]
