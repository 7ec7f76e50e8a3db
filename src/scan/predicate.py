"""Interpreter for ``# @if`` file-inclusion predicates.

Predicates are parsed with :mod:`ast` and interpreted over a closed subset:
boolean literals, ``not``/``and``/``or`` and three checks taking string
literals::

    # @if enabled("lang", "python") and not platform("win")
    # @if file_exists("../vendor/helper.py")

Nothing is ever evaluated with ``eval``.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.errors import PredicateError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class PredicateContext:
    """Values a predicate may consult, bound to one declaring file."""

    file: Path
    platform: str
    is_enabled: Callable[[str, str], bool]

    def bind(self, file: Path) -> PredicateContext:
        return PredicateContext(
            file=file, platform=self.platform, is_enabled=self.is_enabled
        )


def _string_args(call: ast.Call, expected: int) -> list[str]:
    name = call.func.id if isinstance(call.func, ast.Name) else "<call>"
    if call.keywords or len(call.args) != expected:
        msg = f"{name}() takes exactly {expected} string argument(s)"
        raise PredicateError(msg)
    values: list[str] = []
    for arg in call.args:
        if not (isinstance(arg, ast.Constant) and isinstance(arg.value, str)):
            msg = f"{name}() arguments must be string literals"
            raise PredicateError(msg)
        values.append(arg.value)
    return values


def _check_enabled(call: ast.Call, context: PredicateContext) -> bool:
    category, name = _string_args(call, 2)
    return context.is_enabled(category.lstrip(":"), name)


def _check_platform(call: ast.Call, context: PredicateContext) -> bool:
    (name,) = _string_args(call, 1)
    return context.platform.startswith(name)


def _check_file_exists(call: ast.Call, context: PredicateContext) -> bool:
    (relative,) = _string_args(call, 1)
    return (context.file.parent / relative).exists()


_CHECKS: dict[str, Callable[[ast.Call, PredicateContext], bool]] = {
    "enabled": _check_enabled,
    "platform": _check_platform,
    "file_exists": _check_file_exists,
}


def _interpret(node: ast.AST, context: PredicateContext) -> bool:
    if isinstance(node, ast.Constant) and isinstance(node.value, bool):
        return node.value

    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
        return not _interpret(node.operand, context)

    if isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            return all(_interpret(value, context) for value in node.values)
        return any(_interpret(value, context) for value in node.values)

    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
        check = _CHECKS.get(node.func.id)
        if check is not None:
            return check(node, context)
        msg = f"Unknown predicate check '{node.func.id}'"
        raise PredicateError(msg)

    msg = f"Unsupported predicate expression: {ast.unparse(node)}"
    raise PredicateError(msg)


def evaluate_predicate(text: str, context: PredicateContext) -> bool:
    """Evaluate a predicate string.

    Raises:
        PredicateError: If the text is not valid Python or uses anything
            outside the supported subset.
    """
    try:
        tree = ast.parse(text.strip(), mode="eval")
    except SyntaxError as exc:
        msg = f"Invalid predicate syntax: {exc.msg}"
        raise PredicateError(msg) from exc
    return _interpret(tree.body, context)


__all__ = ["PredicateContext", "evaluate_predicate"]
