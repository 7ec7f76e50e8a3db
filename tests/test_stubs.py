from __future__ import annotations

import ast
import asyncio

import pytest

import runtime
from artifacts.errors import StubSynthesisError
from artifacts.models.declarations import (
    AliasDeclaration,
    FunctionDeclaration,
    MacroDeclaration,
    OtherDeclaration,
    Parameter,
)
from artifacts.models.sources import ModuleOrigin
from artifacts.serialize import (
    docstring_literal,
    format_parameters,
    is_stub,
    serialize_declaration,
)
from artifacts.stubs import stub_documentation, synthesize_stub
from contract.artifacts import AUTOLOADS_SPEC

_ORIGIN = ModuleOrigin.module("lang", "rust")
_FILE = "/ws/modules/lang/rust/autoload.py"


def _function(
    *parameters: Parameter, doc: str | None = "Build it."
) -> FunctionDeclaration:
    return FunctionDeclaration(
        symbol="cargo_build",
        parameters=parameters,
        documentation=doc,
        origin=_ORIGIN,
        enabled=False,
        file=_FILE,
    )


def _parse_function(text: str) -> ast.FunctionDef:
    module = ast.parse(text)
    (node,) = [stmt for stmt in module.body if isinstance(stmt, ast.FunctionDef)]
    return node


def test_function_stub_keeps_parameter_list() -> None:
    parameters = (
        Parameter(name="a", kind="positional_only"),
        Parameter(name="b", kind="positional", default="1"),
        Parameter(name="rest", kind="var_positional"),
        Parameter(name="flag", kind="keyword_only", default="'x'"),
        Parameter(name="options", kind="var_keyword"),
    )

    stub = synthesize_stub(_function(*parameters))

    assert isinstance(stub, MacroDeclaration)
    assert stub.symbol == "cargo_build"
    assert stub.parameters == parameters
    assert stub.enabled is False
    assert is_stub(stub)


def test_stub_parameters_round_trip_through_serialized_text() -> None:
    parameters = (
        Parameter(name="a", kind="positional_only"),
        Parameter(name="b", kind="positional"),
        Parameter(name="c", kind="keyword_only"),
    )

    text = serialize_declaration(synthesize_stub(_function(*parameters)))
    node = _parse_function(text)

    assert [arg.arg for arg in node.args.posonlyargs] == ["a"]
    assert [arg.arg for arg in node.args.args] == ["b"]
    assert [arg.arg for arg in node.args.kwonlyargs] == ["c"]


def test_non_literal_defaults_become_none() -> None:
    stub = synthesize_stub(
        _function(
            Parameter(name="profile", kind="positional", default="DEFAULT_PROFILE"),
            Parameter(name="jobs", kind="positional", default="4"),
        )
    )

    assert [p.default for p in stub.parameters] == ["None", "4"]


def test_stub_documentation_prefix() -> None:
    assert stub_documentation(_ORIGIN, None) == (
        "THIS DOES NOTHING BECAUSE :lang rust IS DISABLED"
    )
    assert stub_documentation(_ORIGIN, "Build it.") == (
        "THIS DOES NOTHING BECAUSE :lang rust IS DISABLED\n\nBuild it."
    )


def test_alias_stub_is_bound_to_ignore() -> None:
    alias = AliasDeclaration(
        symbol="cargo_alias",
        target="cargo.build",
        origin=_ORIGIN,
        enabled=False,
        file=_FILE,
    )

    stub = synthesize_stub(alias)

    assert isinstance(stub, AliasDeclaration)
    assert stub.target == "ignore"
    assert serialize_declaration(stub).splitlines() == [
        f"_autodef_put('cargo_alias', 'file', {_FILE!r})",
        "_autodef_put('cargo_alias', 'module', (':lang', 'rust'))",
        "cargo_alias = _autodef_ignore",
    ]


def test_other_declarations_have_no_stub() -> None:
    other = OtherDeclaration(
        symbol="FLAGS",
        text="FLAGS = []",
        origin=_ORIGIN,
        enabled=False,
        file=_FILE,
    )

    with pytest.raises(StubSynthesisError, match="only functions and aliases"):
        synthesize_stub(other)


def test_serialized_macro_stub_shape() -> None:
    stub = synthesize_stub(
        _function(
            Parameter(name="target", kind="positional"),
            Parameter(name="release", kind="positional", default="False"),
        )
    )

    lines = serialize_declaration(stub).splitlines()

    assert lines[0] == f"_autodef_put('cargo_build', 'file', {_FILE!r})"
    assert lines[1] == "_autodef_put('cargo_build', 'module', (':lang', 'rust'))"
    assert "def cargo_build(target, release=False):" in lines
    assert lines[-1] == "    del target, release"


def test_serialized_stub_without_parameters_passes() -> None:
    text = serialize_declaration(synthesize_stub(_function(doc=None)))

    node = _parse_function(text)
    assert ast.get_docstring(node) == "THIS DOES NOTHING BECAUSE :lang rust IS DISABLED"
    assert text.endswith("    pass")


def test_serialized_full_function_is_an_autoload() -> None:
    function = _function(Parameter(name="x", kind="positional")).model_copy(
        update={"enabled": True}
    )

    assert serialize_declaration(function) == (
        f"cargo_build = _autodef_autoload('cargo_build', {_FILE!r}, "
        "'Build it.', 'function')"
    )
    assert not is_stub(function)


def test_format_parameters_separators() -> None:
    parameters = [
        Parameter(name="a", kind="positional_only"),
        Parameter(name="b", kind="keyword_only", default="2"),
    ]

    assert format_parameters(parameters) == "a, /, *, b=2"


def test_docstring_literal_falls_back_to_repr() -> None:
    assert docstring_literal("plain") == '"""plain"""'
    assert docstring_literal('has """ quotes') == repr('has """ quotes')
    assert docstring_literal("back\\slash") == repr("back\\slash")
    assert ast.literal_eval(docstring_literal("two\n\nlines")) == (
        "two\n\n    lines\n    "
    )


def test_docstring_literal_escapes_control_characters() -> None:
    text = "Split on \x00 bytes.\x0b"

    literal = docstring_literal(text)

    assert literal == repr(text)
    assert ast.literal_eval(literal) == text
    assert docstring_literal("tabs\tare fine") == '"""tabs\tare fine"""'


def test_stub_with_control_characters_in_docstring_compiles() -> None:
    stub = synthesize_stub(
        _function(Parameter(name="a", kind="positional"), doc="Split on \x00.")
    )

    text = serialize_declaration(stub)

    assert "\x00" not in text
    docstring = ast.get_docstring(_parse_function(text), clean=False)
    assert docstring is not None
    assert docstring.endswith("\n\nSplit on \x00.")


def test_async_function_stub_is_awaitable() -> None:
    function = _function(Parameter(name="url", kind="positional")).model_copy(
        update={"is_async": True}
    )

    stub = synthesize_stub(function)
    text = serialize_declaration(stub)
    namespace: dict[str, object] = {}
    exec(f"{AUTOLOADS_SPEC.prelude}\n{text}\n", namespace)  # noqa: S102

    assert isinstance(stub, MacroDeclaration)
    assert stub.is_async is True
    assert "async def cargo_build(url):" in text.splitlines()
    stub_function = namespace["cargo_build"]
    assert callable(stub_function)
    assert asyncio.run(stub_function("https://example.invalid")) is None


def test_stub_bookkeeping_survives_exported_runtime_names() -> None:
    put_stub = synthesize_stub(
        _function(Parameter(name="value", kind="positional")).model_copy(
            update={"symbol": "put"}
        )
    )
    ignore_stub = synthesize_stub(
        AliasDeclaration(
            symbol="ignore",
            target="cargo.build",
            origin=_ORIGIN,
            enabled=False,
            file=_FILE,
        )
    )
    later = synthesize_stub(_function().model_copy(update={"symbol": "cargo_late"}))
    text = "\n".join(
        [
            AUTOLOADS_SPEC.prelude,
            serialize_declaration(put_stub),
            serialize_declaration(ignore_stub),
            serialize_declaration(later),
        ]
    )
    namespace: dict[str, object] = {}
    exec(f"{text}\n", namespace)  # noqa: S102

    assert runtime.get("cargo_late", "module") == (":lang", "rust")
    assert runtime.get("cargo_late", "file") == _FILE
    assert namespace["ignore"] is runtime.ignore
