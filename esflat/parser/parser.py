# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from .ast import (
	ArrayExpression,
	AssignmentExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	ConditionalExpression,
	EmptyStatement,
	ExportBatchSpecifier,
	ExportDeclaration,
	ExportSpecifier,
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
	Located,
	LogicalExpression,
	MemberExpression,
	NewExpression,
	Node,
	Program,
	ReturnStatement,
	SequenceExpression,
	Stmt,
	ThisExpression,
	UnaryExpression,
	UpdateExpression,
	VariableDeclaration,
	VariableDeclarator,
	WhileStatement,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class ModuleSyntaxError(ValueError):
	"""
	User-facing module-level error detected while building the tree.

	Examples:
	- the same local name bound by two import specifiers,
	- the same name exported twice,
	- more than one `export default`.

	The CLI converts this into a parser-phase diagnostic.
	"""

	def __init__(self, message: str, *, loc: Optional[Located]) -> None:
		super().__init__(message)
		self.loc = loc


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="program",
	propagate_positions=True,
	maybe_placeholders=True,
)


def parse_program(source: str) -> Program:
	tree = _PARSER.parse(source)
	program = _build_program(tree)
	_check_module_items(program)
	return program


def _build_program(tree: Tree) -> Program:
	body = [_build_item(child) for child in tree.children if child is not None]
	return Program(body=body, loc=Located(line=1, column=1))


def _check_module_items(program: Program) -> None:
	"""Reject duplicate import bindings and duplicate export names."""
	imported: dict[str, Located | None] = {}
	exported: set[str] = set()
	for stmt in program.body:
		if isinstance(stmt, ImportDeclaration):
			for spec in stmt.specifiers:
				name = spec.local.name
				if name in imported:
					raise ModuleSyntaxError(f"duplicate import binding `{name}`", loc=spec.local.loc)
				imported[name] = spec.local.loc
		elif isinstance(stmt, ExportDeclaration):
			for name, loc in _exported_names(stmt):
				if name in exported:
					message = "duplicate `export default`" if name == "default" else f"duplicate export `{name}`"
					raise ModuleSyntaxError(message, loc=loc)
				exported.add(name)


def _exported_names(stmt: ExportDeclaration):
	if stmt.default:
		yield "default", stmt.loc
		return
	decl = stmt.declaration
	if isinstance(decl, VariableDeclaration):
		for declarator in decl.declarations:
			yield declarator.id.name, declarator.id.loc
	elif isinstance(decl, FunctionDeclaration):
		yield decl.id.name, decl.id.loc
	for spec in stmt.specifiers:
		if isinstance(spec, ExportSpecifier):
			yield spec.exported.name, spec.exported.loc


# Module items ---------------------------------------------------------------


def _build_item(tree: Tree) -> Stmt:
	kind = _name(tree)
	if kind == "import_decl":
		return _build_import_decl(tree)
	if kind == "import_bare":
		return ImportDeclaration(specifiers=[], source=_build_string(tree.children[0]), loc=_loc(tree))
	if kind.startswith("export_"):
		return _build_export_decl(tree)
	return _build_stmt(tree)


def _build_import_decl(tree: Tree) -> ImportDeclaration:
	clause, source_tok = tree.children
	specifiers: list = []
	for part in clause.children:
		part_kind = _name(part)
		if part_kind == "default_import":
			specifiers.append(ImportDefaultSpecifier(local=_ident(part.children[0]), loc=_loc(part)))
		elif part_kind == "namespace_import":
			specifiers.append(ImportNamespaceSpecifier(local=_ident(part.children[0]), loc=_loc(part)))
		elif part_kind == "named_imports":
			for spec in _present(part.children):
				name_node, alias_tok = spec.children
				imported = _ident(name_node.children[0])
				local = _ident(alias_tok) if alias_tok is not None else Identifier(name=imported.name, loc=imported.loc)
				specifiers.append(ImportSpecifier(imported=imported, local=local, loc=_loc(spec)))
		else:
			raise TypeError(f"Unexpected import clause part: {part_kind}")
	return ImportDeclaration(specifiers=specifiers, source=_build_string(source_tok), loc=_loc(tree))


def _build_export_decl(tree: Tree) -> ExportDeclaration:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "export_default":
		value = tree.children[0]
		if _name(value) == "function_decl":
			return ExportDeclaration(default=True, declaration=_build_function_decl(value), loc=loc)
		return ExportDeclaration(default=True, declaration=_build_expr(value), loc=loc)
	if kind == "export_declaration":
		decl = tree.children[0]
		built = _build_function_decl(decl) if _name(decl) == "function_decl" else _build_var_decl(decl)
		return ExportDeclaration(default=False, declaration=built, loc=loc)
	if kind == "export_named":
		return ExportDeclaration(default=False, specifiers=_build_export_clause(tree.children[0]), loc=loc)
	if kind == "export_from":
		clause, source_tok = tree.children
		return ExportDeclaration(
			default=False,
			specifiers=_build_export_clause(clause),
			source=_build_string(source_tok),
			loc=loc,
		)
	if kind == "export_all":
		return ExportDeclaration(
			default=False,
			specifiers=[ExportBatchSpecifier(loc=loc)],
			source=_build_string(tree.children[0]),
			loc=loc,
		)
	raise TypeError(f"Unexpected export form: {kind}")


def _build_export_clause(tree: Tree) -> List[ExportSpecifier]:
	specs: List[ExportSpecifier] = []
	for spec in _present(tree.children):
		local_node, exported_node = spec.children
		local = _ident(local_node.children[0])
		if exported_node is None:
			exported = Identifier(name=local.name, loc=local.loc)
		else:
			exported = _ident(exported_node.children[0])
		specs.append(ExportSpecifier(local=local, exported=exported, loc=_loc(spec)))
	return specs


# Statements -----------------------------------------------------------------


def _build_stmt(tree: Tree) -> Stmt:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "var_decl":
		return _build_var_decl(tree)
	if kind == "function_decl":
		return _build_function_decl(tree)
	if kind == "block":
		return _build_block(tree)
	if kind == "expr_stmt":
		return ExpressionStatement(expression=_build_expr(tree.children[0]), loc=loc)
	if kind == "if_stmt":
		test, consequent, alternate = tree.children
		return IfStatement(
			test=_build_expr(test),
			consequent=_build_stmt(consequent),
			alternate=_build_stmt(alternate) if alternate is not None else None,
			loc=loc,
		)
	if kind == "while_stmt":
		test, body = tree.children
		return WhileStatement(test=_build_expr(test), body=_build_stmt(body), loc=loc)
	if kind == "for_stmt":
		init, test, update, body = tree.children
		built_init: Optional[Node] = None
		if init is not None:
			built_init = _build_var_decl(init) if _name(init) == "var_decl" else _build_expr(init)
		return ForStatement(
			init=built_init,
			test=_build_expr(test) if test is not None else None,
			update=_build_expr(update) if update is not None else None,
			body=_build_stmt(body),
			loc=loc,
		)
	if kind == "return_stmt":
		(value,) = tree.children
		return ReturnStatement(argument=_build_expr(value) if value is not None else None, loc=loc)
	if kind == "empty_stmt":
		return EmptyStatement(loc=loc)
	raise TypeError(f"Unexpected statement kind: {kind}")


def _build_var_decl(tree: Tree) -> VariableDeclaration:
	kind_node, *declarators = tree.children
	built: List[VariableDeclarator] = []
	for declarator in declarators:
		name_tok, init = declarator.children
		built.append(
			VariableDeclarator(
				id=_ident(name_tok),
				init=_build_expr(init) if init is not None else None,
				loc=_loc(declarator),
			)
		)
	return VariableDeclaration(kind=kind_node.children[0].value, declarations=built, loc=_loc(tree))


def _build_function_decl(tree: Tree) -> FunctionDeclaration:
	name_tok, params, body = tree.children
	return FunctionDeclaration(
		id=_ident(name_tok),
		params=_build_params(params),
		body=_build_block(body),
		loc=_loc(tree),
	)


def _build_params(tree: Tree | None) -> List[Identifier]:
	if tree is None:
		return []
	return [_ident(tok) for tok in tree.children]


def _build_block(tree: Tree) -> BlockStatement:
	return BlockStatement(body=[_build_stmt(child) for child in _present(tree.children)], loc=_loc(tree))


# Expressions ----------------------------------------------------------------


def _build_expr(node) -> Expr:
	if not isinstance(node, Tree):
		raise TypeError(f"Unexpected node type: {type(node)}")
	name = _name(node)
	loc = _loc(node)
	if name == "identifier":
		return _ident(node.children[0])
	if name == "number":
		raw = node.children[0].value
		if raw[:2].lower() == "0x":
			value: object = int(raw, 16)
		elif any(c in raw for c in ".eE"):
			value = float(raw)
		else:
			value = int(raw)
		return Literal(value=value, raw=raw, loc=loc)
	if name == "string":
		return _build_string(node.children[0])
	if name == "true_lit":
		return Literal(value=True, raw="true", loc=loc)
	if name == "false_lit":
		return Literal(value=False, raw="false", loc=loc)
	if name == "null_lit":
		return Literal(value=None, raw="null", loc=loc)
	if name == "this_expr":
		return ThisExpression(loc=loc)
	if name == "array":
		return ArrayExpression(elements=[_build_expr(c) for c in _present(node.children)], loc=loc)
	if name == "function_expr":
		params, body = node.children
		return FunctionExpression(id=None, params=_build_params(params), body=_build_block(body), loc=loc)
	if name == "sequence":
		left, right = node.children
		left_expr = _build_expr(left)
		exprs = left_expr.expressions if isinstance(left_expr, SequenceExpression) else [left_expr]
		return SequenceExpression(expressions=exprs + [_build_expr(right)], loc=loc)
	if name == "assignment":
		target, op, value = node.children
		return AssignmentExpression(operator=_op(op), left=_build_expr(target), right=_build_expr(value), loc=loc)
	if name == "conditional":
		test, consequent, alternate = node.children
		return ConditionalExpression(
			test=_build_expr(test),
			consequent=_build_expr(consequent),
			alternate=_build_expr(alternate),
			loc=loc,
		)
	if name == "logical":
		left, op, right = node.children
		return LogicalExpression(operator=_op(op), left=_build_expr(left), right=_build_expr(right), loc=loc)
	if name == "binary":
		left, op, right = node.children
		return BinaryExpression(operator=_op(op), left=_build_expr(left), right=_build_expr(right), loc=loc)
	if name == "unary":
		op, operand = node.children
		return UnaryExpression(operator=_op(op), argument=_build_expr(operand), loc=loc)
	if name == "prefix_update":
		op, operand = node.children
		return UpdateExpression(operator=_op(op), argument=_build_expr(operand), prefix=True, loc=loc)
	if name == "postfix_update":
		operand, op = node.children
		return UpdateExpression(operator=_op(op), argument=_build_expr(operand), prefix=False, loc=loc)
	if name == "call":
		callee, args = node.children
		return CallExpression(callee=_build_expr(callee), arguments=_build_args(args), loc=loc)
	if name == "new_expr":
		callee, args = node.children
		return NewExpression(callee=_build_expr(callee), arguments=_build_args(args), loc=loc)
	if name == "member":
		obj, prop = node.children
		tok = prop.children[0]
		return MemberExpression(
			object=_build_expr(obj),
			property=Identifier(name=tok.value, loc=_loc_from_token(tok)),
			computed=False,
			loc=loc,
		)
	if name == "index":
		obj, prop = node.children
		return MemberExpression(object=_build_expr(obj), property=_build_expr(prop), computed=True, loc=loc)
	raise TypeError(f"Unexpected expression kind: {name}")


def _build_args(tree: Tree) -> List[Expr]:
	return [_build_expr(c) for c in _present(tree.children)]


def _build_string(tok: Token) -> Literal:
	return Literal(value=_decode_string_token(tok), raw=tok.value, loc=_loc_from_token(tok))


def _decode_string_token(tok: Token) -> str:
	"""
	Decode a single- or double-quoted STRING token.

	Escapes are interpreted with Python's rules, which agree with JavaScript's
	for the common cases (`\\n`, `\\t`, `\\\\`, `\\'`, `\\"`, `\\xHH`, `\\uHHHH`).
	"""
	body = tok.value[1:-1]
	if "\\" not in body:
		return body
	return body.encode("latin-1", "backslashreplace").decode("unicode_escape")


def _present(children: list) -> list:
	"""Drop `None` placeholders produced by optional groups."""
	return [c for c in children if c is not None]


def _op(tree: Tree) -> str:
	return tree.children[0].value


def _ident(tok: Token) -> Identifier:
	return Identifier(name=tok.value, loc=_loc_from_token(tok))


def _loc(tree: Tree) -> Located | None:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)
