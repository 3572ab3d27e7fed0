# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Front-end for the JavaScript module subset.

`parse_program(source)` returns an `ast.Program`; grammar errors surface as
`lark.UnexpectedInput`, module-level errors as `ModuleSyntaxError`.
"""

from __future__ import annotations

from pathlib import Path

from . import ast
from .parser import ModuleSyntaxError, parse_program


def parse_file(path: Path) -> ast.Program:
	"""Parse a module source file (UTF-8)."""
	return parse_program(Path(path).read_text(encoding="utf-8"))


__all__ = ["ModuleSyntaxError", "ast", "parse_file", "parse_program"]
