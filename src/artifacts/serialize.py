"""Serializers turning declarations into artifact source text.

Each declaration kind has exactly one serializer. Stubs (macros and
disabled aliases) are preceded by two ``put`` bookkeeping records naming
the declaring file and module. Generated code reaches the runtime through
its private aliases only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models.declarations import (
    AliasDeclaration,
    FunctionDeclaration,
    MacroDeclaration,
    OtherDeclaration,
)
from artifacts.stubs import IGNORE
from contract.artifacts import RUNTIME_AUTOLOAD, RUNTIME_IGNORE, RUNTIME_PUT

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.declarations import Declaration, Parameter

_INDENT = "    "


def format_parameters(parameters: Sequence[Parameter]) -> str:
    """Render a parameter list, including ``/`` and bare ``*`` separators."""
    parts: list[str] = []
    star_emitted = False

    for position, param in enumerate(parameters):
        if param.kind == "keyword_only" and not star_emitted:
            parts.append("*")
            star_emitted = True

        if param.kind == "var_positional":
            parts.append(f"*{param.name}")
            star_emitted = True
        elif param.kind == "var_keyword":
            parts.append(f"**{param.name}")
        elif param.default is not None:
            parts.append(f"{param.name}={param.default}")
        else:
            parts.append(param.name)

        following = parameters[position + 1] if position + 1 < len(parameters) else None
        if param.kind == "positional_only" and (
            following is None or following.kind != "positional_only"
        ):
            parts.append("/")

    return ", ".join(parts)


def _needs_repr(text: str) -> bool:
    if '"""' in text or "\\" in text or text.endswith('"'):
        return True
    return any(not char.isprintable() and char not in "\n\t" for char in text)


def docstring_literal(text: str, indent: str = _INDENT) -> str:
    """Quote ``text`` as a docstring, falling back to ``repr`` when unsafe."""
    if _needs_repr(text):
        return repr(text)
    lines = text.splitlines()
    if len(lines) <= 1:
        return f'"""{text}"""'
    body = "\n".join(f"{indent}{line}" if line else "" for line in lines[1:])
    return f'"""{lines[0]}\n{body}\n{indent}"""'


def _bookkeeping(declaration: Declaration) -> list[str]:
    symbol = declaration.symbol
    return [
        f"{RUNTIME_PUT}({symbol!r}, 'file', {declaration.file!r})",
        f"{RUNTIME_PUT}({symbol!r}, 'module', {declaration.origin.as_tuple()!r})",
    ]


def _serialize_function(declaration: FunctionDeclaration) -> str:
    return (
        f"{declaration.symbol} = {RUNTIME_AUTOLOAD}("
        f"{declaration.symbol!r}, {declaration.file!r}, "
        f"{declaration.documentation!r}, 'function')"
    )


def _serialize_macro(declaration: MacroDeclaration) -> str:
    lines = _bookkeeping(declaration)
    lines.append("")
    lines.append("")
    keyword = "async def" if declaration.is_async else "def"
    signature = format_parameters(declaration.parameters)
    lines.append(f"{keyword} {declaration.symbol}({signature}):")
    if declaration.documentation:
        lines.append(_INDENT + docstring_literal(declaration.documentation))
    names = [param.name for param in declaration.parameters]
    if names:
        lines.append(f"{_INDENT}del {', '.join(names)}")
    else:
        lines.append(f"{_INDENT}pass")
    return "\n".join(lines)


def _serialize_alias(declaration: AliasDeclaration) -> str:
    if declaration.enabled:
        return (
            f"{declaration.symbol} = {RUNTIME_AUTOLOAD}("
            f"{declaration.symbol!r}, {declaration.file!r}, "
            f"{declaration.documentation!r}, 'alias')"
        )
    lines = _bookkeeping(declaration)
    target = RUNTIME_IGNORE if declaration.target == IGNORE else declaration.target
    lines.append(f"{declaration.symbol} = {target}")
    return "\n".join(lines)


def serialize_declaration(declaration: Declaration) -> str:
    """Render one declaration as artifact source text (no trailing newline)."""
    if isinstance(declaration, FunctionDeclaration):
        return _serialize_function(declaration)
    if isinstance(declaration, MacroDeclaration):
        return _serialize_macro(declaration)
    if isinstance(declaration, AliasDeclaration):
        return _serialize_alias(declaration)
    if isinstance(declaration, OtherDeclaration):
        return declaration.text.rstrip()

    msg = f"Unknown declaration kind: {declaration!r}"
    raise TypeError(msg)


def is_stub(declaration: Declaration) -> bool:
    """Return True for stand-ins of disabled declarations."""
    if isinstance(declaration, MacroDeclaration):
        return True
    return isinstance(declaration, AliasDeclaration) and not declaration.enabled


__all__ = [
    "docstring_literal",
    "format_parameters",
    "is_stub",
    "serialize_declaration",
]
