# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Value-position identifier predicate."""

from __future__ import annotations

from esflat.parser.ast import (
	FUNCTION_TYPES,
	IMPORT_SPECIFIER_TYPES,
	ExportSpecifier,
	Identifier,
	MemberExpression,
	VariableDeclarator,
)

from .path import NodePath


def is_reference(path: NodePath) -> bool:
	"""
	True when `path` is an identifier read or written as a value.

	Not references: declarator targets, function names and parameters,
	non-computed member properties, import specifier names and the exported
	side of an export specifier. The local side of an export specifier does
	count; the rewriter decides separately whether to touch it.
	"""
	if not isinstance(path.value, Identifier):
		return False
	parent_path = path.parent
	if parent_path is None:
		return True
	parent = parent_path.value
	field = path.field
	if isinstance(parent, MemberExpression):
		return field == "object" or parent.computed
	if isinstance(parent, VariableDeclarator):
		return field == "init"
	if isinstance(parent, FUNCTION_TYPES):
		return False
	if isinstance(parent, IMPORT_SPECIFIER_TYPES):
		return False
	if isinstance(parent, ExportSpecifier):
		return field == "local"
	return True


__all__ = ["is_reference"]
