# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import/export tables of a module.

Each `import` or `export` statement becomes one `Declaration` holding its
entries in source order:

- `ExportEntry`: `name` is the exported name; `local_name` is the local
  binding (or, for `export { a as b } from "m"`, the name inside `m`);
- `ImportEntry`: `local_name` is the binding created here; `imported_name`
  is the remote export name, `None` for `import * as ns`.

`find_specifier_by_name` matches what a declaration *names*: the exported
name for exports, the local name for imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Union

from esflat.parser.ast import ExportDeclaration, ImportDeclaration, Node

if TYPE_CHECKING:
	from .module import Module


@dataclass(eq=False)
class ExportEntry:
	declaration: "Declaration"
	# The AST node this entry stands for: an `ExportSpecifier`, the declaring
	# `Identifier` of `export var|function`, or the `ExportDeclaration` of an
	# anonymous `export default`.
	node: Node
	name: str
	local_name: Optional[str] = None

	def __repr__(self) -> str:
		return f"<ExportEntry {self.local_name!r} as {self.name!r} in {self.module.name!r}>"

	@property
	def module(self) -> "Module":
		return self.declaration.module

	@property
	def remote_name(self) -> str:
		return self.name

	@property
	def default(self) -> bool:
		return self.name == "default"

	@property
	def source(self) -> Optional["Module"]:
		return self.declaration.source

	@property
	def introduces_binding(self) -> bool:
		"""False for re-exports (`export { a } from "m"`) and anonymous defaults."""
		return self.declaration.source_name is None and self.local_name is not None


@dataclass(eq=False)
class ImportEntry:
	declaration: "Declaration"
	node: Node
	local_name: str
	imported_name: Optional[str]

	def __repr__(self) -> str:
		return f"<ImportEntry {self.imported_name!r} as {self.local_name!r} in {self.module.name!r}>"

	@property
	def module(self) -> "Module":
		return self.declaration.module

	@property
	def name(self) -> str:
		return self.local_name

	@property
	def remote_name(self) -> Optional[str]:
		return self.imported_name

	@property
	def default(self) -> bool:
		return self.imported_name == "default"

	@property
	def namespace(self) -> bool:
		return self.imported_name is None

	@property
	def source(self) -> Optional["Module"]:
		return self.declaration.source

	@property
	def introduces_binding(self) -> bool:
		return True


Entry = Union[ExportEntry, ImportEntry]


@dataclass(eq=False)
class Declaration:
	"""One `import` or `export` statement of a module."""

	module: "Module"
	node: Union[ImportDeclaration, ExportDeclaration]
	source_name: Optional[str] = None
	specifiers: List[Entry] = field(default_factory=list)
	default: bool = False
	# `export * from "m"`: no entries, every name of `m` except `default`.
	batch: bool = False
	_source: Optional["Module"] = field(default=None, repr=False)

	@property
	def source(self) -> Optional["Module"]:
		return self.resolve_source()

	def resolve_source(self) -> Optional["Module"]:
		"""The module named by `from "..."`, resolved once through the container."""
		if self.source_name is None:
			return None
		if self._source is None:
			self._source = self.module.container.resolve(self.source_name, importer=self.module, loc=self.node.source.loc)
		return self._source

	def find_specifier_by_name(self, name: str) -> Optional[Entry]:
		for spec in self.specifiers:
			if spec.name == name:
				return spec
		return None


class DeclarationList:
	"""Ordered declarations of one kind (imports or exports) of a module."""

	def __init__(self, module: "Module") -> None:
		self.module = module
		self.declarations: List[Declaration] = []

	def __iter__(self) -> Iterator[Declaration]:
		return iter(self.declarations)

	def __len__(self) -> int:
		return len(self.declarations)

	def add(self, declaration: Declaration) -> Declaration:
		self.declarations.append(declaration)
		return declaration

	def specifiers(self) -> Iterator[Entry]:
		for declaration in self.declarations:
			yield from declaration.specifiers

	def names(self) -> List[str]:
		return [spec.name for spec in self.specifiers()]

	def find_specifier_by_name(self, name: str) -> Optional[Entry]:
		for declaration in self.declarations:
			spec = declaration.find_specifier_by_name(name)
			if spec is not None:
				return spec
		return None

	def find_specifiers_by_local_name(self, local_name: str) -> List[Entry]:
		"""Entries that bind or export the local `local_name`, in source order."""
		return [
			spec
			for spec in self.specifiers()
			if spec.local_name == local_name and spec.introduces_binding
		]

	def find_declaration_by_node(self, node: Node) -> Optional[Declaration]:
		for declaration in self.declarations:
			if declaration.node is node:
				return declaration
		return None

	def batch_declarations(self) -> List[Declaration]:
		return [declaration for declaration in self.declarations if declaration.batch]


__all__ = ["Declaration", "DeclarationList", "Entry", "ExportEntry", "ImportEntry"]
