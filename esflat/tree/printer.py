# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
JavaScript printer for `esflat.parser.ast` trees.

Output is deterministic, with two-space indentation and one statement per
line. Parentheses appear only where precedence or statement position needs them.
The printed text of any tree the front-end can produce parses back to the
same shape.
"""

from __future__ import annotations

from typing import List

from esflat.parser.ast import (
	ArrayExpression,
	AssignmentExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	ConditionalExpression,
	EmptyStatement,
	ExportBatchSpecifier,
	ExportDeclaration,
	Expr,
	ExpressionStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	Identifier,
	IfStatement,
	ImportDeclaration,
	ImportDefaultSpecifier,
	ImportNamespaceSpecifier,
	ImportSpecifier,
	Literal,
	LogicalExpression,
	MemberExpression,
	NewExpression,
	Node,
	Program,
	ReturnStatement,
	SequenceExpression,
	ThisExpression,
	UnaryExpression,
	UpdateExpression,
	VariableDeclaration,
	WhileStatement,
)

INDENT = "  "

# Binding power, loosest first.
_PREC_SEQUENCE = 0
_PREC_ASSIGN = 1
_PREC_CONDITIONAL = 2
_PREC_UNARY = 13
_PREC_POSTFIX = 14
_PREC_CALL = 15
_PREC_PRIMARY = 16

_BINARY_PREC = {
	"||": 3,
	"&&": 4,
	"|": 5,
	"^": 6,
	"&": 7,
	"==": 8,
	"!=": 8,
	"===": 8,
	"!==": 8,
	"<": 9,
	">": 9,
	"<=": 9,
	">=": 9,
	"instanceof": 9,
	"<<": 10,
	">>": 10,
	">>>": 10,
	"+": 11,
	"-": 11,
	"*": 12,
	"/": 12,
	"%": 12,
}

_WORD_OPERATORS = {"typeof", "void", "delete"}


def print_program(program: Program) -> str:
	lines: List[str] = []
	for stmt in program.body:
		lines.extend(_stmt_lines(stmt, 0))
	return "\n".join(lines) + ("\n" if lines else "")


def print_node(node: Node) -> str:
	"""Print a program, a statement or an expression."""
	if isinstance(node, Program):
		return print_program(node)
	if isinstance(node, Expr):
		return print_expr(node)
	return "\n".join(_stmt_lines(node, 0))


def print_expr(node: Node, min_prec: int = _PREC_SEQUENCE) -> str:
	text = _expr(node)
	if _precedence(node) < min_prec:
		return f"({text})"
	return text


# Statements -----------------------------------------------------------------


def _stmt_lines(node: Node, depth: int) -> List[str]:
	"""
	Lines of one statement, padded for `depth`.

	Expression text may span lines (function expressions); its continuation
	lines are relative to the statement's own column and get the same pad.
	"""
	pad = INDENT * depth
	lines: List[str] = []
	for line in _raw_stmt_lines(node, depth):
		if "\n" in line:
			lines.extend(line.replace("\n", "\n" + pad).split("\n"))
		else:
			lines.append(line)
	return lines


def _raw_stmt_lines(node: Node, depth: int) -> List[str]:
	pad = INDENT * depth
	if isinstance(node, VariableDeclaration):
		return [pad + _var_decl(node) + ";"]
	if isinstance(node, FunctionDeclaration):
		return _function_lines(pad + f"function {node.id.name}", node.params, node.body, depth)
	if isinstance(node, BlockStatement):
		return _block_lines(pad, node, depth)
	if isinstance(node, ExpressionStatement):
		text = print_expr(node.expression)
		if _starts_with_function(node.expression):
			text = f"({text})"
		return [pad + text + ";"]
	if isinstance(node, ReturnStatement):
		if node.argument is None:
			return [pad + "return;"]
		return [pad + "return " + print_expr(node.argument) + ";"]
	if isinstance(node, IfStatement):
		return _if_lines(pad, node, depth)
	if isinstance(node, WhileStatement):
		return _attach(pad + f"while ({print_expr(node.test)})", node.body, depth)
	if isinstance(node, ForStatement):
		init = ""
		if isinstance(node.init, VariableDeclaration):
			init = _var_decl(node.init)
		elif node.init is not None:
			init = print_expr(node.init)
		parts = [init]
		parts.append(" " + print_expr(node.test) if node.test is not None else "")
		parts.append(" " + print_expr(node.update) if node.update is not None else "")
		return _attach(pad + "for (" + ";".join(parts) + ")", node.body, depth)
	if isinstance(node, EmptyStatement):
		return [pad + ";"]
	if isinstance(node, ImportDeclaration):
		return [pad + _import_decl(node)]
	if isinstance(node, ExportDeclaration):
		return _export_lines(node, depth)
	raise TypeError(f"cannot print statement {type(node).__name__}")


def _if_lines(pad: str, node: IfStatement, depth: int) -> List[str]:
	consequent = node.consequent
	if node.alternate is not None and isinstance(consequent, IfStatement) and consequent.alternate is None:
		# Keep the `else` attached to the outer `if`.
		consequent = BlockStatement([consequent])
	lines = _attach(pad + f"if ({print_expr(node.test)})", consequent, depth)
	if node.alternate is None:
		return lines
	if lines[-1].endswith("}"):
		head = lines.pop() + " else"
	else:
		head = pad + "else"
	if isinstance(node.alternate, IfStatement):
		tail = _if_lines(pad, node.alternate, depth)
		return lines + [head + " " + tail[0][len(pad):]] + tail[1:]
	return lines + _attach(head, node.alternate, depth)


def _attach(head: str, body: Node, depth: int) -> List[str]:
	"""`head {` + block, or `head` + indented single statement."""
	if isinstance(body, BlockStatement):
		return _block_lines(head + " ", body, depth)
	return [head] + _stmt_lines(body, depth + 1)


def _block_lines(prefix: str, block: BlockStatement, depth: int) -> List[str]:
	if not block.body:
		return [prefix + "{}"]
	lines = [prefix + "{"]
	for stmt in block.body:
		lines.extend(_stmt_lines(stmt, depth + 1))
	lines.append(INDENT * depth + "}")
	return lines


def _function_lines(head: str, params: List[Identifier], body: BlockStatement, depth: int) -> List[str]:
	names = ", ".join(p.name for p in params)
	return _block_lines(f"{head}({names}) ", body, depth)


def _var_decl(node: VariableDeclaration) -> str:
	parts = []
	for declarator in node.declarations:
		if declarator.init is None:
			parts.append(declarator.id.name)
		else:
			parts.append(f"{declarator.id.name} = {print_expr(declarator.init, _PREC_ASSIGN)}")
	return f"{node.kind} " + ", ".join(parts)


def _import_decl(node: ImportDeclaration) -> str:
	source = node.source.raw
	if not node.specifiers:
		return f"import {source};"
	parts: List[str] = []
	named: List[str] = []
	for spec in node.specifiers:
		if isinstance(spec, ImportDefaultSpecifier):
			parts.append(spec.local.name)
		elif isinstance(spec, ImportNamespaceSpecifier):
			parts.append(f"* as {spec.local.name}")
		elif isinstance(spec, ImportSpecifier):
			if spec.imported.name == spec.local.name:
				named.append(spec.local.name)
			else:
				named.append(f"{spec.imported.name} as {spec.local.name}")
	if named or not parts:
		parts.append("{ " + ", ".join(named) + " }")
	return f"import {', '.join(parts)} from {source};"


def _export_lines(node: ExportDeclaration, depth: int) -> List[str]:
	pad = INDENT * depth
	decl = node.declaration
	if node.default:
		if isinstance(decl, FunctionDeclaration):
			return _function_lines(pad + f"export default function {decl.id.name}", decl.params, decl.body, depth)
		return [pad + "export default " + print_expr(decl, _PREC_ASSIGN) + ";"]
	if decl is not None:
		inner = _raw_stmt_lines(decl, depth)
		inner[0] = pad + "export " + inner[0][len(pad):]
		return inner
	if any(isinstance(spec, ExportBatchSpecifier) for spec in node.specifiers):
		return [pad + f"export * from {node.source.raw};"]
	names: List[str] = []
	for spec in node.specifiers:
		if spec.local.name == spec.exported.name:
			names.append(spec.local.name)
		else:
			names.append(f"{spec.local.name} as {spec.exported.name}")
	clause = "{ " + ", ".join(names) + " }" if names else "{}"
	if node.source is not None:
		return [pad + f"export {clause} from {node.source.raw};"]
	return [pad + f"export {clause};"]


# Expressions ----------------------------------------------------------------


def _precedence(node: Node) -> int:
	if isinstance(node, SequenceExpression):
		return _PREC_SEQUENCE
	if isinstance(node, AssignmentExpression):
		return _PREC_ASSIGN
	if isinstance(node, ConditionalExpression):
		return _PREC_CONDITIONAL
	if isinstance(node, (BinaryExpression, LogicalExpression)):
		return _BINARY_PREC[node.operator]
	if isinstance(node, UnaryExpression):
		return _PREC_UNARY
	if isinstance(node, UpdateExpression):
		return _PREC_UNARY if node.prefix else _PREC_POSTFIX
	if isinstance(node, (CallExpression, NewExpression, MemberExpression)):
		return _PREC_CALL
	if isinstance(node, FunctionExpression):
		# Printed bare only where any expression is accepted.
		return _PREC_ASSIGN
	return _PREC_PRIMARY


def _expr(node: Node) -> str:
	if isinstance(node, Identifier):
		return node.name
	if isinstance(node, Literal):
		return node.raw
	if isinstance(node, ThisExpression):
		return "this"
	if isinstance(node, ArrayExpression):
		return "[" + ", ".join(print_expr(e, _PREC_ASSIGN) for e in node.elements) + "]"
	if isinstance(node, FunctionExpression):
		head = "function " + node.id.name if node.id is not None else "function "
		params = ", ".join(p.name for p in node.params)
		lines = _block_lines(f"{head}({params}) ", node.body, 0)
		return "\n".join(lines)
	if isinstance(node, SequenceExpression):
		return ", ".join(print_expr(e, _PREC_ASSIGN) for e in node.expressions)
	if isinstance(node, AssignmentExpression):
		return f"{print_expr(node.left, _PREC_POSTFIX)} {node.operator} {print_expr(node.right, _PREC_ASSIGN)}"
	if isinstance(node, ConditionalExpression):
		return (
			f"{print_expr(node.test, _PREC_CONDITIONAL + 1)} ? "
			f"{print_expr(node.consequent, _PREC_ASSIGN)} : {print_expr(node.alternate, _PREC_ASSIGN)}"
		)
	if isinstance(node, (BinaryExpression, LogicalExpression)):
		prec = _BINARY_PREC[node.operator]
		return f"{print_expr(node.left, prec)} {node.operator} {print_expr(node.right, prec + 1)}"
	if isinstance(node, UnaryExpression):
		operand = print_expr(node.argument, _PREC_UNARY)
		if node.operator in _WORD_OPERATORS or (operand[:1] in "+-" and node.operator in "+-"):
			return f"{node.operator} {operand}"
		return node.operator + operand
	if isinstance(node, UpdateExpression):
		if node.prefix:
			operand = print_expr(node.argument, _PREC_UNARY)
			if operand[:1] in "+-":
				return f"{node.operator} {operand}"
			return node.operator + operand
		return print_expr(node.argument, _PREC_CALL) + node.operator
	if isinstance(node, CallExpression):
		args = ", ".join(print_expr(a, _PREC_ASSIGN) for a in node.arguments)
		return f"{print_expr(node.callee, _PREC_CALL)}({args})"
	if isinstance(node, NewExpression):
		callee = print_expr(node.callee, _PREC_CALL)
		if _contains_call(node.callee):
			callee = f"({callee})"
		args = ", ".join(print_expr(a, _PREC_ASSIGN) for a in node.arguments)
		return f"new {callee}({args})"
	if isinstance(node, MemberExpression):
		obj = print_expr(node.object, _PREC_CALL)
		if node.computed:
			return f"{obj}[{print_expr(node.property)}]"
		return f"{obj}.{node.property.name}"
	raise TypeError(f"cannot print expression {type(node).__name__}")


def _contains_call(node: Node) -> bool:
	while isinstance(node, MemberExpression):
		node = node.object
	return isinstance(node, CallExpression)


def _starts_with_function(node: Node) -> bool:
	"""True when the printed expression would begin with the `function` keyword."""
	# Function expressions nested anywhere else on the left edge get parenthesized.
	while isinstance(node, SequenceExpression):
		node = node.expressions[0]
	return isinstance(node, FunctionExpression)


__all__ = ["print_expr", "print_node", "print_program"]
