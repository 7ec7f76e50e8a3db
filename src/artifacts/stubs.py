"""Stub synthesis for declarations of disabled modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.errors import StubSynthesisError
from artifacts.models.declarations import (
    AliasDeclaration,
    FunctionDeclaration,
    MacroDeclaration,
    OtherDeclaration,
    Parameter,
)
from parse.ast_forms import is_literal

if TYPE_CHECKING:
    from artifacts.models.declarations import Declaration
    from artifacts.models.sources import ModuleOrigin

IGNORE = "ignore"


def stub_documentation(origin: ModuleOrigin, documentation: str | None) -> str:
    """Prefix documentation with the reason the declaration does nothing."""
    notice = f"THIS DOES NOTHING BECAUSE {origin.label} IS DISABLED"
    if documentation:
        return f"{notice}\n\n{documentation}"
    return notice


def _inert_parameter(param: Parameter) -> Parameter:
    # Non-literal defaults refer to names that do not exist in the artifact.
    if param.default is None or is_literal(param.default):
        return param
    return param.model_copy(update={"default": "None"})


def synthesize_stub(declaration: Declaration) -> Declaration:
    """Return the inert stand-in for a declaration of a disabled module.

    Functions become macros with the same parameter list; aliases are bound
    to ``ignore``. Both keep callers working without loading anything.

    Raises:
        StubSynthesisError: For forms that have no stand-in.
    """
    documentation = stub_documentation(declaration.origin, declaration.documentation)

    if isinstance(declaration, (FunctionDeclaration, MacroDeclaration)):
        if not declaration.symbol:
            raise StubSynthesisError(None, "function without a name")
        return MacroDeclaration(
            symbol=declaration.symbol,
            parameters=tuple(_inert_parameter(p) for p in declaration.parameters),
            documentation=documentation,
            origin=declaration.origin,
            enabled=False,
            file=declaration.file,
            is_async=declaration.is_async,
        )

    if isinstance(declaration, AliasDeclaration):
        return AliasDeclaration(
            symbol=declaration.symbol,
            target=IGNORE,
            documentation=documentation,
            origin=declaration.origin,
            enabled=False,
            file=declaration.file,
        )

    if isinstance(declaration, OtherDeclaration):
        raise StubSynthesisError(
            declaration.symbol, "only functions and aliases can be stubbed"
        )

    msg = f"Unknown declaration kind: {declaration!r}"
    raise TypeError(msg)


__all__ = ["IGNORE", "stub_documentation", "synthesize_stub"]
