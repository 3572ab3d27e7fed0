# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Modules and their binding model.

`Module.from_program` collects the import/export tables from a parsed program.
The tables are read by the rewriter and the naming strategy; nothing here
mutates the tree.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Set, Tuple

from esflat.parser.ast import (
	ExportBatchSpecifier,
	ExportDeclaration,
	ExportSpecifier,
	FunctionDeclaration,
	ImportDeclaration,
	ImportDefaultSpecifier,
	ImportNamespaceSpecifier,
	ImportSpecifier,
	Program,
	VariableDeclaration,
)
from esflat.tree import NodePath, root_path

from .declarations import Declaration, DeclarationList, ExportEntry, ImportEntry

if TYPE_CHECKING:
	from .container import ModuleContainer

logger = logging.getLogger(__name__)

_NON_IDENT = re.compile(r"[^A-Za-z0-9_$]")


def namespace_id(name: str) -> str:
	"""
	Identifier of a module's namespace object.

	`math/fib` -> `math$fib$$`; characters that cannot appear in an identifier
	become `$`.
	"""
	ident = _NON_IDENT.sub("$", name) + "$$"
	if ident[0].isdigit():
		ident = "_" + ident
	return ident


@dataclass(frozen=True, eq=False)
class ExportOrigin:
	"""
	Where an exported or imported name finally lives.

	`entry` is the terminal export entry of `module`; `None` stands for the
	module namespace object itself (`import * as ns`).
	"""

	module: "Module"
	entry: Optional[ExportEntry] = None

	@property
	def namespace(self) -> bool:
		return self.entry is None


class Module:
	def __init__(
		self,
		name: str,
		program: Program,
		container: "ModuleContainer",
		source_path: Optional[Path] = None,
	) -> None:
		self.name = name
		self.program = program
		self.container = container
		self.source_path = source_path
		self.id = namespace_id(name)
		self.exports = DeclarationList(self)
		self.imports = DeclarationList(self)
		self._root: Optional[NodePath] = None

	def __repr__(self) -> str:
		return f"<Module {self.name!r}>"

	@classmethod
	def from_program(
		cls,
		name: str,
		program: Program,
		container: "ModuleContainer",
		path: Optional[Path] = None,
	) -> "Module":
		mod = cls(name, program, container, source_path=path)
		for stmt in program.body:
			if isinstance(stmt, ImportDeclaration):
				mod.imports.add(_collect_import(mod, stmt))
			elif isinstance(stmt, ExportDeclaration):
				mod.exports.add(_collect_export(mod, stmt))
		logger.debug(
			"collected module %s: %d import(s), %d export(s)",
			name,
			len(mod.imports),
			len(mod.exports),
		)
		return mod

	@property
	def root(self) -> NodePath:
		"""The program path; every traversal of this module starts here."""
		if self._root is None:
			self._root = root_path(self.program)
		return self._root

	@property
	def file_name(self) -> str:
		return str(self.source_path) if self.source_path is not None else self.name

	def resolve_sources(self) -> None:
		"""Resolve every `from "..."` now, so a missing module fails before any rewrite."""
		for declaration in list(self.imports) + list(self.exports):
			declaration.resolve_source()

	# Chains -------------------------------------------------------------------

	def resolve_export(self, name: str, _seen: Optional[Set[Tuple[int, str]]] = None) -> Optional[ExportOrigin]:
		"""
		Follow `name` exported by this module to the module that declares it.

		Re-exports, locally re-exported imports and `export *` are followed.
		Returns None when no such export exists or the chain is circular.
		"""
		seen = _seen if _seen is not None else set()
		key = (id(self), name)
		if key in seen:
			return None
		seen.add(key)

		entry = self.exports.find_specifier_by_name(name)
		if isinstance(entry, ExportEntry):
			if entry.source is not None:
				return entry.source.resolve_export(entry.local_name, seen)
			if entry.local_name is not None:
				imported = self.imports.find_specifier_by_name(entry.local_name)
				if isinstance(imported, ImportEntry):
					return self.resolve_import(imported, seen)
			return ExportOrigin(self, entry)

		if name != "default":
			for declaration in self.exports.batch_declarations():
				origin = declaration.source.resolve_export(name, seen)
				if origin is not None:
					return origin
		return None

	def resolve_import(self, entry: ImportEntry, _seen: Optional[Set[Tuple[int, str]]] = None) -> Optional[ExportOrigin]:
		source = entry.source
		if entry.namespace:
			return ExportOrigin(source)
		return source.resolve_export(entry.imported_name, _seen)


# Collection -------------------------------------------------------------------


def _collect_import(mod: Module, node: ImportDeclaration) -> Declaration:
	declaration = Declaration(module=mod, node=node, source_name=node.source.value)
	for spec in node.specifiers:
		if isinstance(spec, ImportSpecifier):
			imported = spec.imported.name
		elif isinstance(spec, ImportDefaultSpecifier):
			imported = "default"
		elif isinstance(spec, ImportNamespaceSpecifier):
			imported = None
		else:
			raise TypeError(f"unexpected import specifier {type(spec).__name__}")
		declaration.specifiers.append(
			ImportEntry(declaration=declaration, node=spec, local_name=spec.local.name, imported_name=imported)
		)
	return declaration


def _collect_export(mod: Module, node: ExportDeclaration) -> Declaration:
	source_name = node.source.value if node.source is not None else None
	declaration = Declaration(module=mod, node=node, source_name=source_name, default=node.default)
	decl = node.declaration
	if node.default:
		local = decl.id.name if isinstance(decl, FunctionDeclaration) else None
		declaration.specifiers.append(ExportEntry(declaration=declaration, node=node, name="default", local_name=local))
		return declaration
	if isinstance(decl, VariableDeclaration):
		for declarator in decl.declarations:
			name = declarator.id.name
			declaration.specifiers.append(
				ExportEntry(declaration=declaration, node=declarator.id, name=name, local_name=name)
			)
	elif isinstance(decl, FunctionDeclaration):
		declaration.specifiers.append(
			ExportEntry(declaration=declaration, node=decl.id, name=decl.id.name, local_name=decl.id.name)
		)
	for spec in node.specifiers:
		if isinstance(spec, ExportBatchSpecifier):
			declaration.batch = True
		elif isinstance(spec, ExportSpecifier):
			declaration.specifiers.append(
				ExportEntry(declaration=declaration, node=spec, name=spec.exported.name, local_name=spec.local.name)
			)
	return declaration


__all__ = ["ExportOrigin", "Module", "namespace_id"]
