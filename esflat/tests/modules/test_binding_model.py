# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import/export tables and export chains.
"""

from __future__ import annotations

import pytest

from esflat.modules import ExportEntry, ImportEntry, ModuleContainer, namespace_id
from esflat.parser import ast


def _container(**sources: str) -> ModuleContainer:
	container = ModuleContainer()
	for name, source in sources.items():
		container.add_source(name.replace("__", "/"), source)
	return container


@pytest.mark.parametrize(
	"name, expected",
	[
		("main", "main$$"),
		("math/fib", "math$fib$$"),
		("lib/my-mod", "lib$my$mod$$"),
		("2d/shape", "_2d$shape$$"),
	],
)
def test_namespace_id(name, expected):
	assert namespace_id(name) == expected


def test_import_entries():
	mod = _container(
		main='import d, { a, b as c } from "./m";\nimport * as ns from "./m";',
		m="export var a, b; export default 1;",
	).get("main")
	entries = list(mod.imports.specifiers())
	assert all(isinstance(e, ImportEntry) for e in entries)
	assert [(e.local_name, e.imported_name) for e in entries] == [
		("d", "default"),
		("a", "a"),
		("c", "b"),
		("ns", None),
	]
	assert entries[0].default and not entries[1].default
	assert entries[3].namespace
	assert mod.imports.names() == ["d", "a", "c", "ns"]
	assert mod.imports.find_specifier_by_name("c").remote_name == "b"
	assert entries[1].source is mod.container.get("m")


def test_export_entries_and_binding_introduction():
	mod = _container(
		m="""
		var x;
		export var a = 1;
		export function f() {}
		export { x as y };
		export { q as r } from "./n";
		export * from "./n";
		export default function g() {}
		""",
		n="export var q, z;",
	).get("m")
	entries = list(mod.exports.specifiers())
	assert all(isinstance(e, ExportEntry) for e in entries)
	assert [(e.name, e.local_name) for e in entries] == [
		("a", "a"),
		("f", "f"),
		("y", "x"),
		("r", "q"),
		("default", "g"),
	]
	re_export = mod.exports.find_specifier_by_name("r")
	assert not re_export.introduces_binding
	assert re_export.source.name == "n"
	assert mod.exports.find_specifier_by_name("default").default
	assert [e.name for e in mod.exports.find_specifiers_by_local_name("x")] == ["y"]
	assert mod.exports.find_specifiers_by_local_name("q") == []
	(batch,) = mod.exports.batch_declarations()
	assert batch.source.name == "n"


def test_export_var_entry_points_at_the_declaring_identifier():
	container = _container(m="export var a = 1;")
	mod = container.get("m")
	entry = mod.exports.find_specifier_by_name("a")
	assert entry.node is mod.program.body[0].declaration.declarations[0].id


def test_anonymous_default_has_no_local():
	mod = _container(m="export default 1 + 2;").get("m")
	entry = mod.exports.find_specifier_by_name("default")
	assert entry.local_name is None
	assert not entry.introduces_binding
	assert isinstance(entry.node, ast.ExportDeclaration)
	assert mod.exports.find_declaration_by_node(entry.node) is entry.declaration


def test_resolve_export_follows_every_chain_kind():
	container = _container(
		base="export var v = 1; export default 2;",
		mid='import { v as w } from "./base";\nexport { w as viaImport };\nexport { v as viaReexport } from "./base";\nexport * from "./base";',
		top='export * from "./mid";',
	)
	base = container.get("base")
	top = container.get("top")
	for name in ("viaImport", "viaReexport", "v"):
		origin = top.resolve_export(name)
		assert origin.module is base
		assert origin.entry.name == "v"
	# `export *` never forwards the default export.
	assert top.resolve_export("default") is None
	assert top.resolve_export("missing") is None


def test_resolve_import_of_a_namespace():
	container = _container(a="export var x;", b='import * as ns from "./a";')
	entry = container.get("b").imports.find_specifier_by_name("ns")
	origin = container.get("b").resolve_import(entry)
	assert origin.module is container.get("a")
	assert origin.namespace


def test_circular_reexports_resolve_to_none():
	container = _container(
		a='export { x } from "./b";',
		b='export { x } from "./a";',
	)
	assert container.get("a").resolve_export("x") is None
