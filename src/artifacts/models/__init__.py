"""Model namespace for autodef records."""

from artifacts.models.declarations import (
    AliasDeclaration,
    Declaration,
    FunctionDeclaration,
    MacroDeclaration,
    OtherDeclaration,
    Parameter,
)
from artifacts.models.environment import EnvironmentSnapshot
from artifacts.models.sources import ModuleOrigin, SourceFile

__all__ = [
    "AliasDeclaration",
    "Declaration",
    "EnvironmentSnapshot",
    "FunctionDeclaration",
    "MacroDeclaration",
    "ModuleOrigin",
    "OtherDeclaration",
    "Parameter",
    "SourceFile",
]
