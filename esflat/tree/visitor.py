# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Pre-order path visitor with dispatch by node kind.

Subclasses define `visit_<Kind>(path)` methods (`visit_Identifier`,
`visit_ExportDeclaration`, ...); kinds without a handler go to `visit_node`.
A handler decides whether to descend by calling `self.traverse(path)`;
returning without it skips the subtree.
"""

from __future__ import annotations

from typing import Callable, Dict

from esflat.parser.ast import Node, iter_child_fields

from .path import NodePath


class PathVisitor:
	def __init__(self) -> None:
		self._handlers: Dict[type, Callable[[NodePath], None]] = {}

	def visit(self, path: NodePath) -> None:
		node = path.value
		if node is None:
			return
		handler = self._handlers.get(type(node))
		if handler is None:
			handler = getattr(self, f"visit_{type(node).__name__}", self.visit_node)
			self._handlers[type(node)] = handler
		handler(path)

	def visit_node(self, path: NodePath) -> None:
		self.traverse(path)

	def traverse(self, path: NodePath) -> None:
		"""Visit every child of `path`, in field order."""
		node = path.value
		if not isinstance(node, Node):
			return
		for field_name, value in iter_child_fields(node):
			child = path.get(field_name)
			if isinstance(value, list):
				for i in range(len(value)):
					self.visit(child.get(i))
			else:
				self.visit(child)


__all__ = ["PathVisitor"]
