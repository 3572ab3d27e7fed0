# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Front-end tests: module items, statement shapes, and module-level errors.
"""

from __future__ import annotations

import pytest
from lark import UnexpectedInput

from esflat.parser import ModuleSyntaxError, ast, parse_program


def test_import_forms_build_specifiers_in_order():
	prog = parse_program(
		"""
		import d, { a, b as c, default as e } from "./m";
		import * as ns from "../lib/n.js";
		import "side";
		"""
	)
	first, second, third = prog.body
	assert isinstance(first, ast.ImportDeclaration)
	assert first.source.value == "./m"
	kinds = [type(s).__name__ for s in first.specifiers]
	assert kinds == ["ImportDefaultSpecifier", "ImportSpecifier", "ImportSpecifier", "ImportSpecifier"]
	assert [s.local.name for s in first.specifiers] == ["d", "a", "c", "e"]
	assert [s.imported.name for s in first.specifiers[1:]] == ["a", "b", "default"]
	# A specifier without `as` gets its own local identifier node.
	assert first.specifiers[1].imported is not first.specifiers[1].local

	assert isinstance(second.specifiers[0], ast.ImportNamespaceSpecifier)
	assert second.specifiers[0].local.name == "ns"
	assert second.source.value == "../lib/n.js"

	assert third.specifiers == []
	assert third.source.value == "side"


def test_export_forms():
	prog = parse_program(
		"""
		export var a = 1, b;
		export function f(x) { return x; }
		export { a as c, f as g };
		export { q as r } from "./other";
		export * from "./all";
		export default a + 1;
		"""
	)
	var_export, fn_export, named, re_export, batch, default = prog.body

	assert isinstance(var_export.declaration, ast.VariableDeclaration)
	assert var_export.declaration.kind == "var"
	assert [d.id.name for d in var_export.declaration.declarations] == ["a", "b"]
	assert var_export.declaration.declarations[1].init is None

	assert isinstance(fn_export.declaration, ast.FunctionDeclaration)
	assert [p.name for p in fn_export.declaration.params] == ["x"]

	assert [(s.local.name, s.exported.name) for s in named.specifiers] == [("a", "c"), ("f", "g")]
	assert named.source is None

	assert re_export.source.value == "./other"
	assert re_export.specifiers[0].local.name == "q"

	assert isinstance(batch.specifiers[0], ast.ExportBatchSpecifier)
	assert batch.source.value == "./all"

	assert default.default is True
	assert isinstance(default.declaration, ast.BinaryExpression)


def test_export_default_function_keeps_its_name():
	prog = parse_program("export default function main() { return 1; }")
	(decl,) = prog.body
	assert decl.default is True
	assert isinstance(decl.declaration, ast.FunctionDeclaration)
	assert decl.declaration.id.name == "main"


def test_export_default_anonymous_function_is_an_expression():
	prog = parse_program("export default function () { return 1; };")
	assert isinstance(prog.body[0].declaration, ast.FunctionExpression)


def test_export_specifier_default_flag():
	prog = parse_program("var x = 1; export { x as default };")
	spec = prog.body[1].specifiers[0]
	assert spec.default is True


def test_expression_precedence_and_assignment_shapes():
	prog = parse_program("x = a + b * c; y += -z; n++; --m; o.p[q] = r ? s : t;")
	assign = prog.body[0].expression
	assert isinstance(assign, ast.AssignmentExpression)
	assert assign.right.operator == "+"
	assert assign.right.right.operator == "*"

	compound = prog.body[1].expression
	assert compound.operator == "+="
	assert isinstance(compound.right, ast.UnaryExpression)

	post = prog.body[2].expression
	assert isinstance(post, ast.UpdateExpression) and post.prefix is False
	pre = prog.body[3].expression
	assert pre.prefix is True and pre.operator == "--"

	member_assign = prog.body[4].expression
	assert isinstance(member_assign.left, ast.MemberExpression)
	assert member_assign.left.computed is True
	assert isinstance(member_assign.right, ast.ConditionalExpression)


def test_keywords_are_valid_property_names():
	prog = parse_program("m.default(1); n.new = 2;")
	call = prog.body[0].expression
	assert call.callee.property.name == "default"
	assert prog.body[1].expression.left.property.name == "new"


def test_statements_and_locations():
	prog = parse_program(
		"""function f(a, b) {
  if (a) { return b; } else return;
  while (a) a--;
  for (var i = 0; i < b; i++) ;
  for (;;) {}
}
"""
	)
	(fn,) = prog.body
	assert fn.loc == ast.Located(line=1, column=1)
	if_stmt, while_stmt, for_stmt, bare_for = fn.body.body
	assert isinstance(if_stmt.consequent, ast.BlockStatement)
	assert isinstance(if_stmt.alternate, ast.ReturnStatement)
	assert if_stmt.alternate.argument is None
	assert isinstance(while_stmt.body, ast.ExpressionStatement)
	assert isinstance(for_stmt.init, ast.VariableDeclaration)
	assert isinstance(for_stmt.body, ast.EmptyStatement)
	assert bare_for.init is None and bare_for.test is None and bare_for.update is None
	assert if_stmt.loc.line == 2


def test_literals():
	prog = parse_program("""x = [1, 0x1f, 2.5, "a\\nb", 'q', true, false, null, this];""")
	values = [e.value for e in prog.body[0].expression.right.elements[:8]]
	assert values == [1, 31, 2.5, "a\nb", "q", True, False, None]
	assert isinstance(prog.body[0].expression.right.elements[8], ast.ThisExpression)


def test_comments_are_ignored():
	prog = parse_program("// leading\nvar a = 1; /* block\n comment */ a;")
	assert len(prog.body) == 2


def test_duplicate_import_binding_is_rejected():
	with pytest.raises(ModuleSyntaxError) as excinfo:
		parse_program('import { a } from "x";\nimport a from "y";')
	assert "duplicate import binding `a`" in str(excinfo.value)
	assert excinfo.value.loc.line == 2


def test_duplicate_export_is_rejected():
	with pytest.raises(ModuleSyntaxError, match="duplicate export `a`"):
		parse_program("var a, b; export { a }; export { b as a };")


def test_second_default_export_is_rejected():
	with pytest.raises(ModuleSyntaxError, match="duplicate `export default`"):
		parse_program("export default 1; export default 2;")


def test_grammar_errors_surface_as_lark_errors():
	with pytest.raises(UnexpectedInput):
		parse_program("var = ;")
	with pytest.raises(UnexpectedInput):
		parse_program("x = 1")
