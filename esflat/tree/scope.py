# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical scopes over node paths.

Function scopes are opened by `Program`, `FunctionDeclaration` and
`FunctionExpression` nodes. Block scopes are opened by `BlockStatement` nodes
(other than function bodies) and by `ForStatement` nodes, whose scope holds
`let`/`const` declarations of the loop head.

Bindings of a function scope:
- import specifier locals (module scope only),
- `var` declarator targets anywhere in the body outside nested functions,
  including `for` heads, nested blocks and exported declarations,
- `let`/`const` declarators and function declarations directly in the body,
- parameters, and a function expression's own name unless shadowed.

Bindings of a block scope: `let`/`const` declarators and function
declarations directly in the block (module code is strict, so block-level
functions are block scoped).

A binding maps a name to the list of declaring identifier paths. Parameters,
`var` and function declarations of one function scope may repeat each other
and form one binding, recorded at its first occurrence. Any other repetition
(`let a; let a;`, `let a; var a;`) yields several paths; callers that need
uniqueness check it.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from esflat.parser.ast import (
	FUNCTION_TYPES,
	BlockStatement,
	ExportDeclaration,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	IfStatement,
	ImportDeclaration,
	Program,
	VariableDeclaration,
	WhileStatement,
)

from .path import NodePath


class Scope:
	"""A lexical scope rooted at a Program, function, block or `for` path."""

	def __init__(self, path: NodePath, parent: Optional["Scope"]) -> None:
		self.path = path
		self.node = path.value
		self.parent = parent
		self.depth: int = 0 if parent is None else parent.depth + 1
		self._bindings: Optional[Dict[str, List[NodePath]]] = None

	def __repr__(self) -> str:
		return f"<Scope {type(self.node).__name__} depth={self.depth}>"

	@property
	def is_global(self) -> bool:
		return self.parent is None

	@property
	def is_function(self) -> bool:
		return isinstance(self.node, (Program,) + FUNCTION_TYPES)

	@property
	def function_scope(self) -> "Scope":
		"""Nearest enclosing function (or module) scope; `var` binds there."""
		scope = self
		while not scope.is_function and scope.parent is not None:
			scope = scope.parent
		return scope

	def get_global_scope(self) -> "Scope":
		scope = self
		while scope.parent is not None:
			scope = scope.parent
		return scope

	def declares(self, name: str) -> bool:
		return name in self.get_bindings()

	def lookup(self, name: str) -> Optional["Scope"]:
		"""Return the innermost scope (from self outwards) declaring `name`."""
		scope: Optional[Scope] = self
		while scope is not None:
			if scope.declares(name):
				return scope
			scope = scope.parent
		return None

	def get_bindings(self) -> Dict[str, List[NodePath]]:
		if self._bindings is None:
			self._bindings = self._scan()
		return self._bindings

	# Scanning -------------------------------------------------------------

	def _scan(self) -> Dict[str, List[NodePath]]:
		bindings: Dict[str, List[NodePath]] = {}
		redeclarable: set[str] = set()

		def add(id_path: NodePath, redeclare: bool = False) -> None:
			name = id_path.value.name
			if redeclare and name in redeclarable:
				return
			if redeclare and name not in bindings:
				redeclarable.add(name)
			bindings.setdefault(name, []).append(id_path)

		node = self.node
		if isinstance(node, Program):
			_scan_list(self.path.get("body"), add, function_level=True)
		elif isinstance(node, FUNCTION_TYPES):
			for i in range(len(node.params)):
				add(self.path.get("params", i), redeclare=True)
			_scan_list(self.path.get("body", "body"), add, function_level=True)
			if isinstance(node, FunctionExpression) and node.id is not None and node.id.name not in bindings:
				add(self.path.get("id"))
		elif isinstance(node, ForStatement):
			if isinstance(node.init, VariableDeclaration) and node.init.kind != "var":
				_declare(self.path.get("init"), add, function_level=False)
		elif isinstance(node, BlockStatement):
			_scan_list(self.path.get("body"), add, function_level=False)
		return bindings


def opens_scope(path: NodePath) -> bool:
	value = path.value
	if isinstance(value, (Program, ForStatement) + FUNCTION_TYPES):
		return True
	if isinstance(value, BlockStatement):
		# A function body shares the function's scope.
		return path.parent_path is None or not isinstance(path.parent_path.value, FUNCTION_TYPES)
	return False


def _scan_list(list_path: NodePath, add: Callable[..., None], *, function_level: bool) -> None:
	for i in range(len(list_path.value)):
		stmt_path = list_path.get(i)
		_declare(stmt_path, add, function_level=function_level)
		if function_level:
			_scan_vars(stmt_path, add)


def _declare(path: NodePath, add: Callable[..., None], *, function_level: bool) -> None:
	"""Lexical declarations and function declarations made directly by one statement."""
	node = path.value
	if isinstance(node, VariableDeclaration):
		if node.kind != "var":
			for i in range(len(node.declarations)):
				add(path.get("declarations", i, "id"))
	elif isinstance(node, FunctionDeclaration):
		# The body belongs to the function's own scope.
		add(path.get("id"), redeclare=function_level)
	elif isinstance(node, ImportDeclaration):
		for i in range(len(node.specifiers)):
			add(path.get("specifiers", i, "local"))
	elif isinstance(node, ExportDeclaration):
		# Includes a named `export default function f`.
		if isinstance(node.declaration, (VariableDeclaration, FunctionDeclaration)):
			_declare(path.get("declaration"), add, function_level=function_level)


def _scan_vars(path: NodePath, add: Callable[..., None]) -> None:
	"""`var` declarations reachable from one statement without entering a function."""
	node = path.value
	if node is None:
		return
	if isinstance(node, VariableDeclaration):
		if node.kind == "var":
			for i in range(len(node.declarations)):
				add(path.get("declarations", i, "id"), redeclare=True)
	elif isinstance(node, ExportDeclaration):
		if isinstance(node.declaration, VariableDeclaration):
			_scan_vars(path.get("declaration"), add)
	elif isinstance(node, BlockStatement):
		for i in range(len(node.body)):
			_scan_vars(path.get("body", i), add)
	elif isinstance(node, IfStatement):
		_scan_vars(path.get("consequent"), add)
		_scan_vars(path.get("alternate"), add)
	elif isinstance(node, WhileStatement):
		_scan_vars(path.get("body"), add)
	elif isinstance(node, ForStatement):
		if isinstance(node.init, VariableDeclaration):
			_scan_vars(path.get("init"), add)
		_scan_vars(path.get("body"), add)


__all__ = ["Scope", "opens_scope"]
