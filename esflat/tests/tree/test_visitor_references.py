# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from esflat.parser import parse_program
from esflat.tree import PathVisitor, is_reference, root_path


class _Collect(PathVisitor):
	def __init__(self) -> None:
		super().__init__()
		self.seen = []

	def visit_Identifier(self, path):
		self.seen.append((path.value.name, is_reference(path)))


def _identifiers(source: str):
	collector = _Collect()
	collector.visit(root_path(parse_program(source)))
	return collector.seen


def test_visit_order_follows_field_order():
	assert [name for name, _ in _identifiers("a = b + c; f(d);")] == ["a", "b", "c", "f", "d"]


def test_declaration_sites_are_not_references():
	seen = _identifiers("var x = y; function f(p) { return p; }")
	assert seen == [("x", False), ("y", True), ("f", False), ("p", False), ("p", True)]


def test_member_properties_are_references_only_when_computed():
	seen = _identifiers("o.p; o[q];")
	assert seen == [("o", True), ("p", False), ("o", True), ("q", True)]


def test_module_item_names():
	seen = _identifiers('import { a as b } from "m"; export { c as d };')
	assert seen == [("a", False), ("b", False), ("c", True), ("d", False)]


def test_handler_controls_descent():
	class _SkipFunctions(PathVisitor):
		def __init__(self) -> None:
			super().__init__()
			self.names = []

		def visit_FunctionDeclaration(self, path):
			pass

		def visit_Identifier(self, path):
			self.names.append(path.value.name)

	visitor = _SkipFunctions()
	visitor.visit(root_path(parse_program("a; function f() { b; } c;")))
	assert visitor.names == ["a", "c"]
