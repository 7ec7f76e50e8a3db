"""AST-based reading of tagged forms: signatures, docstrings and overrides."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from artifacts.errors import StubSynthesisError
from artifacts.models.declarations import Parameter


@dataclass(frozen=True)
class FunctionShape:
    """Name, parameters and docstring of a function definition."""

    name: str
    parameters: tuple[Parameter, ...]
    docstring: str | None
    is_async: bool = False


@dataclass(frozen=True)
class AliasShape:
    """Target and docstring-less binding of ``name = dotted.name``."""

    name: str
    target: str


def _default_texts(
    defaults: list[ast.expr], count: int
) -> list[str | None]:
    """Right-align positional defaults against ``count`` parameters."""
    padding: list[str | None] = [None] * (count - len(defaults))
    return padding + [ast.unparse(default) for default in defaults]


def _parameters(arguments: ast.arguments) -> tuple[Parameter, ...]:
    positional = [*arguments.posonlyargs, *arguments.args]
    defaults = _default_texts(list(arguments.defaults), len(positional))

    params: list[Parameter] = []
    for position, arg in enumerate(positional):
        kind = (
            "positional_only"
            if position < len(arguments.posonlyargs)
            else "positional"
        )
        params.append(Parameter(name=arg.arg, kind=kind, default=defaults[position]))

    if arguments.vararg is not None:
        params.append(Parameter(name=arguments.vararg.arg, kind="var_positional"))

    for arg, default in zip(arguments.kwonlyargs, arguments.kw_defaults, strict=True):
        params.append(
            Parameter(
                name=arg.arg,
                kind="keyword_only",
                default=None if default is None else ast.unparse(default),
            )
        )

    if arguments.kwarg is not None:
        params.append(Parameter(name=arguments.kwarg.arg, kind="var_keyword"))

    return tuple(params)


def _parse_single(text: str, symbol: str | None) -> ast.stmt:
    try:
        module = ast.parse(text)
    except SyntaxError as exc:
        raise StubSynthesisError(symbol, f"malformed form: {exc.msg}") from exc
    if len(module.body) != 1:
        raise StubSynthesisError(symbol, "expected a single top-level statement")
    return module.body[0]


def read_function(text: str, symbol: str | None = None) -> FunctionShape:
    """Read a (possibly decorated) ``def`` or ``async def``.

    Raises:
        StubSynthesisError: If the text is not a single function definition.
    """
    node = _parse_single(text, symbol)
    if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        raise StubSynthesisError(symbol, "expected a function definition")
    return FunctionShape(
        name=node.name,
        parameters=_parameters(node.args),
        docstring=ast.get_docstring(node),
        is_async=isinstance(node, ast.AsyncFunctionDef),
    )


def read_alias(text: str, symbol: str | None = None) -> AliasShape:
    """Read ``name = dotted.name``.

    Raises:
        StubSynthesisError: If the text is not a simple alias assignment.
    """
    node = _parse_single(text, symbol)
    if not (
        isinstance(node, ast.Assign)
        and len(node.targets) == 1
        and isinstance(node.targets[0], ast.Name)
        and isinstance(node.value, (ast.Name, ast.Attribute))
    ):
        raise StubSynthesisError(symbol, "expected 'name = dotted.name'")
    return AliasShape(name=node.targets[0].id, target=ast.unparse(node.value))


def validate_override(text: str, symbol: str | None = None) -> str:
    """Return the override statement text if it parses as Python.

    Raises:
        StubSynthesisError: If the override cannot be read.
    """
    try:
        ast.parse(text)
    except SyntaxError as exc:
        raise StubSynthesisError(symbol, f"unreadable override: {exc.msg}") from exc
    return text


def is_literal(text: str) -> bool:
    """Return True if a default value's source text is a plain literal."""
    try:
        ast.literal_eval(text)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return False
    return True


__all__ = [
    "AliasShape",
    "FunctionShape",
    "is_literal",
    "read_alias",
    "read_function",
    "validate_override",
]
