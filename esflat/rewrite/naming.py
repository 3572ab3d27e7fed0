# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Naming strategy protocol.

The rewriter knows *where* references and declarations are; a naming strategy
decides *what* they become. Every method may answer `None` for "leave as is".
Strategies may subclass `NamingStrategy` to inherit those no-op answers.

Reference lookups are asked in a fixed order and the first non-None answer
wins: `exported_reference`, then `imported_reference`, then
`local_reference`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from esflat.parser.ast import Expr, Node
from esflat.tree import NodePath

if TYPE_CHECKING:
	from esflat.modules import Module

	from .replacement import Replacement


class NamingStrategy(Protocol):
	# Declarations -------------------------------------------------------------

	def process_variable_declaration(self, mod: "Module", path: NodePath) -> Optional["Replacement"]:
		"""A `var`/`let`/`const` declaration whose scope is the module top level."""
		return None

	def process_function_declaration(self, mod: "Module", path: NodePath) -> Optional["Replacement"]:
		"""A function declaration directly in the module body."""
		return None

	def process_export_declaration(self, mod: "Module", path: NodePath) -> Optional["Replacement"]:
		"""Any non-default `export` statement."""
		return None

	def process_import_declaration(self, mod: "Module", path: NodePath) -> Optional["Replacement"]:
		return None

	def default_export(self, mod: "Module", value: Node) -> Optional[Node]:
		"""
		Statement that replaces `export default <value>`.

		`value` is the exported expression (already resolved when it was a
		bare reference) or a function declaration.
		"""
		return None

	# References -------------------------------------------------------------

	def exported_reference(self, mod: "Module", path: NodePath) -> Optional[Expr]:
		"""Reference to a local binding this module exports."""
		return None

	def imported_reference(self, mod: "Module", path: NodePath) -> Optional[Expr]:
		"""Reference to a binding created by an import specifier."""
		return None

	def local_reference(self, mod: "Module", path: NodePath) -> Optional[Expr]:
		"""Reference to any other binding the strategy wants qualified."""
		return None


__all__ = ["NamingStrategy"]
