# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Namespace naming strategy.

Every module owns one namespace object (`math$fib$$` for `math/fib`) and each
of its top-level bindings becomes a property of it:

  import { sin } from "./math";   ->  (removed)
  var x = sin(0), y;              ->  mod$$.x = math$$.sin(0);
  export function f() {}          ->  mod$$.f = function () {};  (hoisted)
  export default x;               ->  mod$$.default = mod$$.x;

Slots: a local exported under some non-default name lives at the first such
name; a named `export default function f` lives at `default`; any other
top-level local lives at its own name, with `$` appended while that clashes
with an exported name or another top-level binding. Extra exported names of
the same local are copied once at the end of the module body.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from esflat.core import Span
from esflat.modules import ExportEntry, ExportOrigin, ImportEntry, Module, ModuleResolutionError
from esflat.parser.ast import (
	IMPORT_SPECIFIER_TYPES,
	AssignmentExpression,
	EmptyStatement,
	ExportDeclaration,
	ExportSpecifier,
	Expr,
	ExpressionStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	Identifier,
	MemberExpression,
	Node,
	SequenceExpression,
	Stmt,
	VariableDeclaration,
	VariableDeclarator,
)
from esflat.rewrite import NamingStrategy, Replacement
from esflat.tree import NodePath

logger = logging.getLogger(__name__)


def namespace_member(namespace: str, name: str) -> MemberExpression:
	return MemberExpression(object=Identifier(namespace), property=Identifier(name), computed=False)


def _assign(target: Expr, value: Expr) -> AssignmentExpression:
	return AssignmentExpression(operator="=", left=target, right=value)


class NamespaceNamingStrategy(NamingStrategy):
	# Slots ------------------------------------------------------------------

	def local_slot(self, mod: Module, local_name: str) -> str:
		"""Property of `mod`'s namespace holding the top-level binding `local_name`."""
		entries = [e for e in mod.exports.find_specifiers_by_local_name(local_name) if isinstance(e, ExportEntry)]
		for entry in entries:
			if entry.default and isinstance(entry.node, ExportDeclaration):
				return "default"
		for entry in entries:
			if not entry.default:
				return entry.name
		exported = set(mod.exports.names())
		bindings = mod.root.scope.get_bindings()
		slot = local_name
		while slot in exported or (slot != local_name and slot in bindings):
			slot += "$"
		return slot

	def export_slot(self, entry: ExportEntry) -> str:
		if entry.local_name is None:
			return entry.name
		return self.local_slot(entry.module, entry.local_name)

	def origin_expression(self, origin: ExportOrigin) -> Expr:
		if origin.namespace:
			return Identifier(origin.module.id)
		return namespace_member(origin.module.id, self.export_slot(origin.entry))

	def import_expression(self, mod: Module, entry: ImportEntry, loc=None) -> Expr:
		origin = mod.resolve_import(entry)
		if origin is None:
			raise ModuleResolutionError(
				f"module `{entry.source.name}` does not export `{entry.imported_name}`",
				span=Span.from_loc(loc if loc is not None else entry.node.loc, file=mod.file_name),
			)
		return self.origin_expression(origin)

	def name_expression(self, mod: Module, name: str) -> Expr:
		"""Expression reading the top-level binding `name` of `mod`."""
		imported = mod.imports.find_specifier_by_name(name)
		if isinstance(imported, ImportEntry):
			return self.import_expression(mod, imported)
		return namespace_member(mod.id, self.local_slot(mod, name))

	# References ---------------------------------------------------------------

	def exported_reference(self, mod: Module, path: NodePath) -> Optional[Expr]:
		declaring = _top_level_declaration(path)
		if declaring is None or _is_import_binding(declaring):
			return None
		name = path.value.name
		if not mod.exports.find_specifiers_by_local_name(name):
			return None
		return namespace_member(mod.id, self.local_slot(mod, name))

	def imported_reference(self, mod: Module, path: NodePath) -> Optional[Expr]:
		declaring = _top_level_declaration(path)
		if declaring is None or not _is_import_binding(declaring):
			return None
		entry = mod.imports.find_specifier_by_name(path.value.name)
		if not isinstance(entry, ImportEntry):
			return None
		return self.import_expression(mod, entry, loc=path.value.loc)

	def local_reference(self, mod: Module, path: NodePath) -> Optional[Expr]:
		declaring = _top_level_declaration(path)
		if declaring is None or _is_import_binding(declaring):
			return None
		return namespace_member(mod.id, self.local_slot(mod, path.value.name))

	# Declarations -------------------------------------------------------------

	def process_variable_declaration(self, mod: Module, path: NodePath) -> Optional[Replacement]:
		if isinstance(path.parent.value, ExportDeclaration):
			# Handled with the export statement.
			return None
		in_for_head = isinstance(path.parent.value, ForStatement) and path.field == "init"
		in_list = isinstance(path.parent_path.value, list)
		return Replacement.builds(path, _build_assignments, mod.id, self._slots(mod, path.value), in_for_head, in_list)

	def _slots(self, mod: Module, decl: VariableDeclaration) -> List[Tuple[str, VariableDeclarator]]:
		return [(self.local_slot(mod, d.id.name), d) for d in decl.declarations]

	def process_function_declaration(self, mod: Module, path: NodePath) -> Optional[Replacement]:
		return self._hoist(mod, path, path)

	def _hoist(self, mod: Module, function_path: NodePath, statement_path: NodePath) -> Replacement:
		"""Move `ns.f = function (...) {...};` to the top of the module body."""
		func: FunctionDeclaration = function_path.value
		index = _hoist_index(mod, statement_path)
		logger.debug("hoisting function %s of %s to body index %d", func.id.name, mod.name, index)
		statement = ExpressionStatement(
			expression=_assign(
				namespace_member(mod.id, self.local_slot(mod, func.id.name)),
				FunctionExpression(id=None, params=func.params, body=func.body, loc=func.loc),
			),
			loc=func.loc,
		)
		return Replacement.inserts(
			mod.root.get("body"),
			index,
			statement,
			adopt_from=function_path,
		).and_removes(statement_path)

	def process_export_declaration(self, mod: Module, path: NodePath) -> Optional[Replacement]:
		node: ExportDeclaration = path.value
		if isinstance(node.declaration, FunctionDeclaration):
			return self._hoist(mod, path.get("declaration"), path)
		if isinstance(node.declaration, VariableDeclaration):
			return Replacement.builds(path, _build_assignments, mod.id, self._slots(mod, node.declaration), False, True)
		if node.source is not None:
			# Re-exports bind nothing here; importers follow them to the origin.
			return Replacement.removes(path)

		copies: List[Stmt] = []
		for spec in node.specifiers:
			if not isinstance(spec, ExportSpecifier):
				continue
			local = spec.local.name
			imported = mod.imports.find_specifier_by_name(local)
			if not isinstance(imported, ImportEntry) and self.local_slot(mod, local) == spec.exported.name:
				continue
			if spec.default:
				# The local identifier itself is rewritten as a reference.
				value: Expr = spec.local
			else:
				value = self.name_expression(mod, local)
			copies.append(
				ExpressionStatement(
					expression=_assign(namespace_member(mod.id, spec.exported.name), value),
					loc=spec.loc,
				)
			)
		if not copies:
			return Replacement.removes(path)
		return Replacement.inserts(mod.root.get("body"), None, *copies, adopt_from=path).and_removes(path)

	def process_import_declaration(self, mod: Module, path: NodePath) -> Optional[Replacement]:
		return Replacement.removes(path)

	def default_export(self, mod: Module, value: Node) -> Optional[Node]:
		if isinstance(value, FunctionDeclaration):
			value = FunctionExpression(id=None, params=value.params, body=value.body, loc=value.loc)
		return ExpressionStatement(expression=_assign(namespace_member(mod.id, "default"), value))


def _build_assignments(
	namespace: str,
	slots: List[Tuple[str, VariableDeclarator]],
	in_for_head: bool,
	in_list: bool,
) -> Optional[Node]:
	"""`ns.a = 1, ns.b = 2` for the initialized declarators; the rest are dropped."""
	assignments: List[Expr] = [_assign(namespace_member(namespace, slot), d.init) for slot, d in slots if d.init is not None]
	if not assignments:
		return None if in_for_head or in_list else EmptyStatement()
	expr = assignments[0] if len(assignments) == 1 else SequenceExpression(expressions=assignments)
	if in_for_head:
		return expr
	return ExpressionStatement(expression=expr, loc=slots[0][1].loc)


def _top_level_declaration(path: NodePath) -> Optional[NodePath]:
	"""Declaring identifier path of the reference at `path`, if it is module scope."""
	name = path.value.name
	scope = path.scope.lookup(name)
	if scope is None or not scope.is_global:
		return None
	declarations = scope.get_bindings()[name]
	return declarations[0] if declarations else None


def _is_import_binding(declaring: NodePath) -> bool:
	return isinstance(declaring.parent.value, IMPORT_SPECIFIER_TYPES)


def _is_hoisted(stmt: Stmt) -> bool:
	if isinstance(stmt, FunctionDeclaration):
		return True
	return isinstance(stmt, ExportDeclaration) and not stmt.default and isinstance(stmt.declaration, FunctionDeclaration)


def _hoist_index(mod: Module, statement_path: NodePath) -> int:
	"""
	Body index for the hoisted copy of the top-level statement at `statement_path`.

	Hoisted functions keep their source order, so this is the number of
	hoisted statements before it. Only valid while the body is unmodified.
	"""
	position = statement_path.index()
	return sum(1 for stmt in mod.program.body[:position] if _is_hoisted(stmt))


__all__ = ["NamespaceNamingStrategy", "namespace_member"]
