"""Parsing utilities for autodef declaration files."""

from parse.ast_forms import (
    is_literal,
    read_alias,
    read_function,
    validate_override,
)
from parse.treesitter_forms import (
    TaggedForm,
    extract_tagged_forms,
    extract_tagged_forms_from_file,
)

__all__ = [
    "TaggedForm",
    "extract_tagged_forms",
    "extract_tagged_forms_from_file",
    "is_literal",
    "read_alias",
    "read_function",
    "validate_override",
]
