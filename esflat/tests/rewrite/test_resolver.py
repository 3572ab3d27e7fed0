# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference resolution order and the references that are never touched.
"""

from __future__ import annotations

from esflat.modules import ModuleContainer
from esflat.parser import ast
from esflat.rewrite import NamingStrategy, Rewriter, resolve_reference
from esflat.tree import print_program


class _Recording(NamingStrategy):
	"""Answers from fixed tables and records every question asked."""

	def __init__(self, exported=(), imported=(), local=()) -> None:
		self.answers = {"exported": set(exported), "imported": set(imported), "local": set(local)}
		self.asked = []

	def _answer(self, kind, path):
		name = path.value.name
		self.asked.append((kind, name))
		if name in self.answers[kind]:
			return ast.Identifier(f"{kind}_{name}")
		return None

	def exported_reference(self, mod, path):
		return self._answer("exported", path)

	def imported_reference(self, mod, path):
		return self._answer("imported", path)

	def local_reference(self, mod, path):
		return self._answer("local", path)


def _module(source: str, **others: str):
	container = ModuleContainer()
	for name, other in others.items():
		container.add_source(name, other)
	return container.add_source("main", source)


def _reference_path(mod, *keys):
	return mod.root.get("body", *keys)


def test_first_answer_wins_in_priority_order():
	mod = _module("x;")
	path = _reference_path(mod, 0, "expression")

	strategy = _Recording(exported={"x"}, imported={"x"}, local={"x"})
	assert resolve_reference(strategy, mod, path).name == "exported_x"
	assert strategy.asked == [("exported", "x")]

	strategy = _Recording(imported={"x"}, local={"x"})
	assert resolve_reference(strategy, mod, path).name == "imported_x"
	assert strategy.asked == [("exported", "x"), ("imported", "x")]

	strategy = _Recording(local={"x"})
	assert resolve_reference(strategy, mod, path).name == "local_x"

	strategy = _Recording()
	assert resolve_reference(strategy, mod, path) is None
	assert [kind for kind, _ in strategy.asked] == ["exported", "imported", "local"]


def test_non_default_export_specifier_names_are_left_alone():
	mod = _module("var a; export { a as b };")
	strategy = _Recording(exported={"a"})
	spec_local = _reference_path(mod, 1, "specifiers", 0, "local")
	assert resolve_reference(strategy, mod, spec_local) is None
	assert strategy.asked == []


def test_default_export_specifier_local_is_resolved():
	mod = _module("var a; export { a as default };")
	strategy = _Recording(local={"a"})
	spec_local = _reference_path(mod, 1, "specifiers", 0, "local")
	assert resolve_reference(strategy, mod, spec_local).name == "local_a"


def test_names_that_only_pass_through_are_left_alone():
	mod = _module('export { x } from "./other";\nf(x);', other="export var x;")
	strategy = _Recording(exported={"x"}, imported={"x"}, local={"x"})
	arg = _reference_path(mod, 1, "expression", "arguments", 0)
	assert resolve_reference(strategy, mod, arg) is None
	assert strategy.asked == []


def test_reexported_import_only_rewrites_the_expression_reference():
	container = ModuleContainer()
	container.add_source("a", "export var x = 1;")
	b = container.add_source("b", 'import { x } from "./a";\nexport { x as y };\nvar z = x + 1;')
	Rewriter(_Recording(imported={"x"})).rewrite(container.modules)
	assert print_program(b.program) == (
		'import { x } from "./a";\n'
		"export { x as y };\n"
		"var z = imported_x + 1;\n"
	)
