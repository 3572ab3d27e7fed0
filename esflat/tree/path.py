# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Node paths: a node (or list field) plus the route from its parent.

A path is the unit every other layer talks about: the rewriter records
replacements against paths, scope analysis reports declaring occurrences as
paths, and the naming strategy receives paths.

Rules:
- `get()` is cached, so one location always yields the same path object while
  the tree is unchanged.
- List elements are located by identity at mutation time, never by a stored
  index, so inserting or removing siblings does not invalidate paths.
- `replace()` re-homes cached descendant paths whose nodes are carried over
  into the replacement. A swap queued against a child keeps working after its
  parent statement has been rebuilt around it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Union

from esflat.parser.ast import Node, Program, iter_child_fields

if TYPE_CHECKING:
	from .scope import Scope

PathKey = Union[str, int]

_UNSET = object()


class NodePath:
	"""A location in a syntax tree."""

	def __init__(self, value: object, parent_path: Optional["NodePath"] = None, name: Optional[str] = None) -> None:
		self.value = value
		self.parent_path = parent_path
		# Field name within the parent node; None for list elements.
		self.name = name
		self._children: Dict[object, NodePath] = {}
		self._scope: object = _UNSET

	def __repr__(self) -> str:
		kind = type(self.value).__name__
		return f"<NodePath {kind} name={self.name!r}>"

	# Navigation ---------------------------------------------------------

	@property
	def node(self) -> Optional[Node]:
		"""The nearest enclosing node (self for node paths, the owner for list paths)."""
		path: Optional[NodePath] = self
		while path is not None and not isinstance(path.value, Node):
			path = path.parent_path
		return path.value if path is not None else None

	@property
	def parent(self) -> Optional["NodePath"]:
		"""The nearest ancestor path whose value is a node (list paths are skipped)."""
		path = self.parent_path
		while path is not None and not isinstance(path.value, Node):
			path = path.parent_path
		return path

	@property
	def field(self) -> Optional[str]:
		"""Field of the parent node holding this path (through a list if needed)."""
		if self.name is not None:
			return self.name
		if self.parent_path is not None:
			return self.parent_path.name
		return None

	def get(self, *names: PathKey) -> "NodePath":
		path = self
		for name in names:
			path = path._child(name)
		return path

	def _child(self, name: PathKey) -> "NodePath":
		if isinstance(self.value, list):
			if not isinstance(name, int):
				raise TypeError(f"list paths are indexed by position, got {name!r}")
			item = self.value[name]
			key: object = id(item)
			field_name = None
		else:
			if not isinstance(name, str):
				raise TypeError(f"node paths are indexed by field name, got {name!r}")
			item = getattr(self.value, name)
			key = name
			field_name = name
		cached = self._children.get(key)
		if cached is not None and cached.value is item:
			return cached
		child = NodePath(item, self, field_name)
		self._children[key] = child
		return child

	def index(self) -> int:
		"""Current position of this element inside its parent list."""
		if self.parent_path is None or not isinstance(self.parent_path.value, list):
			raise TypeError("index() is only defined for list elements")
		for i, item in enumerate(self.parent_path.value):
			if item is self.value:
				return i
		raise ValueError("path is detached from its parent list")

	# Scope ------------------------------------------------------------------

	@property
	def scope(self) -> Optional["Scope"]:
		"""
		Innermost scope enclosing this path.

		Program, function, `for` and non-body block nodes establish scopes; for
		those paths the scope is the one they establish.
		"""
		if self._scope is _UNSET:
			from .scope import Scope, opens_scope

			if opens_scope(self):
				parent_scope = self.parent_path.scope if self.parent_path is not None else None
				self._scope = Scope(self, parent_scope)
			elif self.parent_path is not None:
				self._scope = self.parent_path.scope
			else:
				self._scope = None
		return self._scope  # type: ignore[return-value]

	# Mutation -----------------------------------------------------------

	def replace(self, *nodes: Node) -> List["NodePath"]:
		"""
		Replace this location with `nodes` (zero nodes removes it).

		List elements may be replaced by any number of nodes; single fields by
		at most one. Returns the paths of the inserted nodes.
		"""
		parent = self.parent_path
		if parent is None:
			raise ValueError("cannot replace the root path")
		orphans = self._collect_cached()
		if isinstance(parent.value, list):
			idx = self.index()
			parent.value[idx : idx + 1] = list(nodes)
			if parent._children.get(id(self.value)) is self:
				del parent._children[id(self.value)]
			new_paths = [parent._claim(node, None, orphans) for node in nodes]
		else:
			if len(nodes) > 1:
				raise ValueError(f"field `{self.name}` holds a single node, got {len(nodes)} replacements")
			new_value = nodes[0] if nodes else None
			setattr(parent.value, self.name, new_value)
			if not nodes:
				self.value = None
				self._children = {}
				return []
			new_paths = [parent._claim(new_value, self.name, orphans)]
		for path in new_paths:
			path._adopt(orphans)
		return new_paths

	def insert_at(self, index: int, *nodes: Node, adopt_from: Optional["NodePath"] = None) -> List["NodePath"]:
		"""
		Insert `nodes` into this list path at `index`.

		Cached paths under `adopt_from` whose nodes appear among the inserted
		subtrees are re-homed, as `replace()` does for its own descendants.
		"""
		if not isinstance(self.value, list):
			raise TypeError("insert_at() requires a list path")
		orphans = adopt_from._collect_cached() if adopt_from is not None else {}
		self.value[index:index] = list(nodes)
		new_paths = [self._claim(node, None, orphans) for node in nodes]
		for path in new_paths:
			path._adopt(orphans)
		return new_paths

	def _collect_cached(self) -> Dict[int, "NodePath"]:
		"""Map `id(value)` to path for this path and every cached descendant."""
		found: Dict[int, NodePath] = {}
		stack: List[NodePath] = [self]
		while stack:
			path = stack.pop()
			if path.value is None:
				continue
			found.setdefault(id(path.value), path)
			stack.extend(path._children.values())
		return found

	def _claim(self, item: object, field_name: Optional[str], orphans: Dict[int, "NodePath"]) -> "NodePath":
		"""Return the path for `item` under self, re-homing an orphan if one matches."""
		key: object = field_name if field_name is not None else id(item)
		orphan = orphans.pop(id(item), None)
		if orphan is not None:
			old_parent = orphan.parent_path
			if old_parent is not None and old_parent is not self:
				old_parent._children = {k: v for k, v in old_parent._children.items() if v is not orphan}
			orphan.parent_path = self
			orphan.name = field_name
			orphan._scope = _UNSET
			self._children[key] = orphan
			return orphan
		cached = self._children.get(key)
		if cached is not None and cached.value is item:
			return cached
		child = NodePath(item, self, field_name)
		self._children[key] = child
		return child

	def _adopt(self, orphans: Dict[int, "NodePath"]) -> None:
		"""Walk the fresh part of this subtree and re-home matching orphans."""
		if not orphans:
			return
		value = self.value
		if isinstance(value, list):
			items = [(None, item) for item in value]
		elif isinstance(value, Node):
			items = list(iter_child_fields(value))
		else:
			return
		for field_name, item in items:
			if not orphans:
				return
			carried = id(item) in orphans
			child = self._claim(item, field_name, orphans)
			if not carried:
				child._adopt(orphans)


def root_path(program: Program) -> NodePath:
	return NodePath(program)


__all__ = ["NodePath", "root_path"]
