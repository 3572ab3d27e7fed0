# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree for the supported JavaScript module subset.

Node shapes and field names follow ESTree so the rewriter and printer read
like their JavaScript counterparts. Child fields are listed in evaluation
order; traversal walks dataclass fields in declaration order and picks every
value that is a `Node` or a list of nodes.

Nodes compare by identity (`eq=False`): the traversal substrate locates nodes
inside their parents with `is`, and two structurally equal identifiers at
different positions are different references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


class Node:
	"""Base class for all tree nodes."""

	loc: Optional[Located]


class Stmt(Node):
	pass


class Expr(Node):
	pass


# Program ------------------------------------------------------------------


@dataclass(eq=False)
class Program(Node):
	body: List[Stmt]
	loc: Optional[Located] = None


# Statements -----------------------------------------------------------------


@dataclass(eq=False)
class VariableDeclarator(Node):
	id: "Identifier"
	init: Optional[Expr] = None
	loc: Optional[Located] = None


@dataclass(eq=False)
class VariableDeclaration(Stmt):
	kind: str  # "var" | "let" | "const"
	declarations: List[VariableDeclarator]
	loc: Optional[Located] = None


@dataclass(eq=False)
class BlockStatement(Stmt):
	body: List[Stmt]
	loc: Optional[Located] = None


@dataclass(eq=False)
class FunctionDeclaration(Stmt):
	id: "Identifier"
	params: List["Identifier"]
	body: BlockStatement
	loc: Optional[Located] = None


@dataclass(eq=False)
class ExpressionStatement(Stmt):
	expression: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class ReturnStatement(Stmt):
	argument: Optional[Expr] = None
	loc: Optional[Located] = None


@dataclass(eq=False)
class IfStatement(Stmt):
	test: Expr
	consequent: Stmt
	alternate: Optional[Stmt] = None
	loc: Optional[Located] = None


@dataclass(eq=False)
class WhileStatement(Stmt):
	test: Expr
	body: Stmt
	loc: Optional[Located] = None


@dataclass(eq=False)
class ForStatement(Stmt):
	init: Optional[Union[VariableDeclaration, Expr]]
	test: Optional[Expr]
	update: Optional[Expr]
	body: Stmt
	loc: Optional[Located] = None


@dataclass(eq=False)
class EmptyStatement(Stmt):
	loc: Optional[Located] = None


# Module items ---------------------------------------------------------------


@dataclass(eq=False)
class ImportSpecifier(Node):
	"""`{ imported as local }`; `imported` is the remote export name."""

	imported: "Identifier"
	local: "Identifier"
	loc: Optional[Located] = None


@dataclass(eq=False)
class ImportDefaultSpecifier(Node):
	local: "Identifier"
	loc: Optional[Located] = None


@dataclass(eq=False)
class ImportNamespaceSpecifier(Node):
	local: "Identifier"
	loc: Optional[Located] = None


ImportSpecifierNode = Union[ImportSpecifier, ImportDefaultSpecifier, ImportNamespaceSpecifier]
IMPORT_SPECIFIER_TYPES = (ImportSpecifier, ImportDefaultSpecifier, ImportNamespaceSpecifier)


@dataclass(eq=False)
class ImportDeclaration(Stmt):
	specifiers: List[ImportSpecifierNode]
	source: "Literal"
	loc: Optional[Located] = None


@dataclass(eq=False)
class ExportSpecifier(Node):
	"""`{ local as exported }` inside an export declaration."""

	local: "Identifier"
	exported: "Identifier"
	loc: Optional[Located] = None

	@property
	def default(self) -> bool:
		return self.exported.name == "default"


@dataclass(eq=False)
class ExportBatchSpecifier(Node):
	"""The `*` of `export * from "m"`."""

	loc: Optional[Located] = None


@dataclass(eq=False)
class ExportDeclaration(Stmt):
	"""
	Every export form.

	- `export default <expr|function>`: `default=True`, value in `declaration`;
	- `export var ...` / `export function ...`: declaration set, no specifiers;
	- `export { a, b as c } [from "m"]`: specifiers, optional `source`;
	- `export * from "m"`: a single `ExportBatchSpecifier` plus `source`.
	"""

	default: bool
	declaration: Optional[Node] = None
	specifiers: List[Union[ExportSpecifier, ExportBatchSpecifier]] = field(default_factory=list)
	source: Optional["Literal"] = None
	loc: Optional[Located] = None


# Expressions ------------------------------------------------------------------


@dataclass(eq=False)
class Identifier(Expr):
	name: str
	loc: Optional[Located] = None


@dataclass(eq=False)
class Literal(Expr):
	"""Number/string/boolean/null literal; `raw` is the source spelling."""

	value: object
	raw: str
	loc: Optional[Located] = None


@dataclass(eq=False)
class ThisExpression(Expr):
	loc: Optional[Located] = None


@dataclass(eq=False)
class ArrayExpression(Expr):
	elements: List[Expr]
	loc: Optional[Located] = None


@dataclass(eq=False)
class FunctionExpression(Expr):
	id: Optional[Identifier]
	params: List[Identifier]
	body: BlockStatement
	loc: Optional[Located] = None


@dataclass(eq=False)
class MemberExpression(Expr):
	object: Expr
	property: Expr
	computed: bool = False
	loc: Optional[Located] = None


@dataclass(eq=False)
class CallExpression(Expr):
	callee: Expr
	arguments: List[Expr]
	loc: Optional[Located] = None


@dataclass(eq=False)
class NewExpression(Expr):
	callee: Expr
	arguments: List[Expr]
	loc: Optional[Located] = None


@dataclass(eq=False)
class UpdateExpression(Expr):
	operator: str  # "++" | "--"
	argument: Expr
	prefix: bool
	loc: Optional[Located] = None


@dataclass(eq=False)
class UnaryExpression(Expr):
	operator: str
	argument: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class BinaryExpression(Expr):
	operator: str
	left: Expr
	right: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class LogicalExpression(Expr):
	operator: str  # "&&" | "||"
	left: Expr
	right: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class ConditionalExpression(Expr):
	test: Expr
	consequent: Expr
	alternate: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class AssignmentExpression(Expr):
	operator: str  # "=", "+=", ...
	left: Expr
	right: Expr
	loc: Optional[Located] = None


@dataclass(eq=False)
class SequenceExpression(Expr):
	expressions: List[Expr]
	loc: Optional[Located] = None


FUNCTION_TYPES = (FunctionDeclaration, FunctionExpression)


def iter_child_fields(node: Node):
	"""
	Yield `(field_name, value)` for every child-bearing field of `node`.

	Values are either a `Node` or a list (possibly empty); scalar fields and
	`loc` are skipped. Order is the dataclass field order.
	"""
	for field_name in getattr(node, "__dataclass_fields__", {}) or {}:
		if field_name == "loc":
			continue
		val = getattr(node, field_name, None)
		if isinstance(val, (Node, list)):
			yield field_name, val

