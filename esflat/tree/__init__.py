# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Traversal substrate: node paths, scopes, visitors and the printer."""

from __future__ import annotations

from .path import NodePath, root_path
from .printer import print_expr, print_node, print_program
from .references import is_reference
from .scope import Scope
from .visitor import PathVisitor

__all__ = [
	"NodePath",
	"PathVisitor",
	"Scope",
	"is_reference",
	"print_expr",
	"print_node",
	"print_program",
	"root_path",
]
