# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Planned tree changes.

Discovery only records what should change; nothing touches the tree until
`ReplacementQueue.commit()`. A `Replacement` is a short sequence of steps
applied together:

- swap: put a ready-made node at a location;
- build: call `builder(*args)` at commit time and put the result(s) at a
  location (zero results remove it);
- insert: splice nodes into a list location at a fixed index (or append);
- custom: an arbitrary callable, for changes the other steps cannot express.

Each location is written at most once per queue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from esflat.parser.ast import Node
from esflat.tree import NodePath

logger = logging.getLogger(__name__)

BuildResult = Union[None, Node, Sequence[Node]]


@dataclass
class _Swap:
	path: NodePath
	nodes: Tuple[Node, ...]

	def apply(self) -> None:
		self.path.replace(*self.nodes)


@dataclass
class _Build:
	path: NodePath
	builder: Callable[..., BuildResult]
	args: Tuple[Any, ...]

	def apply(self) -> None:
		result = self.builder(*self.args)
		if result is None:
			self.path.replace()
		elif isinstance(result, Node):
			self.path.replace(result)
		else:
			self.path.replace(*result)


@dataclass
class _Insert:
	path: NodePath
	# None appends at commit time.
	index: Optional[int]
	nodes: Tuple[Node, ...]
	adopt_from: Optional[NodePath] = None

	def apply(self) -> None:
		index = len(self.path.value) if self.index is None else self.index
		self.path.insert_at(index, *self.nodes, adopt_from=self.adopt_from)


@dataclass
class _Custom:
	action: Callable[[], None]

	def apply(self) -> None:
		self.action()


_Step = Union[_Swap, _Build, _Insert, _Custom]


@dataclass
class Replacement:
	steps: List[_Step] = field(default_factory=list)

	def __repr__(self) -> str:
		kinds = ", ".join(type(step).__name__.lstrip("_").lower() for step in self.steps)
		return f"<Replacement [{kinds}]>"

	# Constructors -----------------------------------------------------------

	@classmethod
	def swaps(cls, path: NodePath, *nodes: Node) -> "Replacement":
		return cls().and_swaps(path, *nodes)

	@classmethod
	def removes(cls, path: NodePath) -> "Replacement":
		return cls().and_swaps(path)

	@classmethod
	def builds(cls, path: NodePath, builder: Callable[..., BuildResult], *args: Any) -> "Replacement":
		return cls().and_builds(path, builder, *args)

	@classmethod
	def inserts(cls, path: NodePath, index: Optional[int], *nodes: Node, adopt_from: Optional[NodePath] = None) -> "Replacement":
		return cls().and_inserts(path, index, *nodes, adopt_from=adopt_from)

	@classmethod
	def custom(cls, action: Callable[[], None]) -> "Replacement":
		return cls([_Custom(action)])

	# Chaining -----------------------------------------------------------------

	def and_swaps(self, path: NodePath, *nodes: Node) -> "Replacement":
		self.steps.append(_Swap(path, tuple(nodes)))
		return self

	def and_removes(self, path: NodePath) -> "Replacement":
		return self.and_swaps(path)

	def and_builds(self, path: NodePath, builder: Callable[..., BuildResult], *args: Any) -> "Replacement":
		self.steps.append(_Build(path, builder, tuple(args)))
		return self

	def and_inserts(self, path: NodePath, index: Optional[int], *nodes: Node, adopt_from: Optional[NodePath] = None) -> "Replacement":
		self.steps.append(_Insert(path, index, tuple(nodes), adopt_from))
		return self

	# ------------------------------------------------------------------------

	def targets(self) -> List[NodePath]:
		"""Locations this replacement overwrites (insertions do not count)."""
		return [step.path for step in self.steps if isinstance(step, (_Swap, _Build))]

	def apply(self) -> None:
		for step in self.steps:
			step.apply()


class ReplacementQueue:
	"""Replacements of one discovery run, committed once in insertion order."""

	def __init__(self) -> None:
		self._items: List[Replacement] = []
		self._targets: Set[int] = set()
		self._committed = False

	def __len__(self) -> int:
		return len(self._items)

	def __iter__(self) -> Iterator[Replacement]:
		return iter(self._items)

	@property
	def committed(self) -> bool:
		return self._committed

	def push(self, replacement: Optional[Replacement]) -> None:
		"""Queue `replacement`; `None` (nothing to do) is ignored."""
		if replacement is None:
			return
		if self._committed:
			raise RuntimeError("replacement queue has already been committed")
		for path in replacement.targets():
			if id(path) in self._targets:
				raise ValueError(f"location {path!r} already has a planned replacement")
		self._targets.update(id(path) for path in replacement.targets())
		self._items.append(replacement)

	def commit(self) -> int:
		"""Apply every queued replacement; returns how many were applied."""
		if self._committed:
			raise RuntimeError("replacement queue has already been committed")
		self._committed = True
		for replacement in self._items:
			replacement.apply()
		logger.debug("committed %d replacement(s)", len(self._items))
		return len(self._items)


__all__ = ["Replacement", "ReplacementQueue"]
