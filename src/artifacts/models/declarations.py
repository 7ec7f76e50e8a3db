"""Declaration models.

A declaration is one exported top-level form. It is a tagged variant keyed
on ``kind``; each variant has its own serializer in ``artifacts.serialize``.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from artifacts.models.sources import ModuleOrigin  # noqa: TC001

ParameterKind = Literal[
    "positional_only",
    "positional",
    "var_positional",
    "keyword_only",
    "var_keyword",
]


class Parameter(BaseModel):
    """A single formal parameter of a function declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ParameterKind
    default: str | None = Field(
        default=None, description="Default value source text, if any"
    )


class _DeclarationBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str | None
    parameters: tuple[Parameter, ...] = ()
    documentation: str | None = None
    origin: ModuleOrigin
    enabled: bool
    file: str = Field(description="Resolved path of the declaring file")


class FunctionDeclaration(_DeclarationBase):
    """A ``def`` or ``async def`` loaded lazily from its file."""

    kind: Literal["function"] = "function"
    is_async: bool = False


class MacroDeclaration(_DeclarationBase):
    """An inert stand-in with the call shape of a disabled function."""

    kind: Literal["macro"] = "macro"
    is_async: bool = Field(
        default=False, description="Stand-in for an ``async def``; awaitable"
    )


class AliasDeclaration(_DeclarationBase):
    """``name = dotted.name``; disabled aliases are bound to ``ignore``."""

    kind: Literal["alias"] = "alias"
    target: str


class OtherDeclaration(_DeclarationBase):
    """Any other exported form, emitted verbatim."""

    kind: Literal["other"] = "other"
    text: str


Declaration = Annotated[
    Union[
        FunctionDeclaration,
        MacroDeclaration,
        AliasDeclaration,
        OtherDeclaration,
    ],
    Field(discriminator="kind"),
]

__all__ = [
    "AliasDeclaration",
    "Declaration",
    "FunctionDeclaration",
    "MacroDeclaration",
    "OtherDeclaration",
    "Parameter",
    "ParameterKind",
]
