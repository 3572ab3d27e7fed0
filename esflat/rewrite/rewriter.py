# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference rewriter.

Replaces references to imported and exported bindings according to a naming
strategy. Given

  import { sin } from './math';
  import fib from './math/fib';
  export var answer = fib(sin(0));

a namespace strategy turns the module body into

  mod$$.answer = math$fib$$.default(math$$.sin(0));

Rewriting happens in two passes. Discovery walks every module (in the order
given) and queues replacements without touching any tree, so scope lookups
always see the original code. Commit then applies the whole queue. Any error
found during discovery leaves every tree unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from esflat.core import Span
from esflat.modules import Module
from esflat.parser.ast import IMPORT_SPECIFIER_TYPES, Identifier, Program
from esflat.tree import NodePath, PathVisitor, is_reference

from .errors import ImmutableBindingError, RewriteError, ScopeConsistencyError
from .naming import NamingStrategy
from .replacement import Replacement, ReplacementQueue
from .resolver import resolve_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteOptions:
	# Stop at the first immutable-binding violation instead of collecting all.
	fail_fast: bool = True


@dataclass
class RewritePlan:
	"""Result of discovery: the queued replacements and any violations found."""

	queue: ReplacementQueue
	errors: List[ImmutableBindingError] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not self.errors

	def commit(self) -> int:
		if self.errors:
			raise RewriteError(self.errors)
		return self.queue.commit()


def check_reassignment(mod: Module, path: NodePath) -> Optional[ImmutableBindingError]:
	"""
	Check the target of an assignment or update expression.

	Returns an error value when the target names an import binding. Targets
	that are not plain identifiers (`a.b = 1`) and undeclared names pass.
	"""
	node = path.value
	if not isinstance(node, Identifier):
		return None
	scope = path.scope.lookup(node.name)
	if scope is None:
		return None
	declarations = scope.get_bindings()[node.name]
	if len(declarations) != 1:
		raise ScopeConsistencyError(
			node.name,
			len(declarations),
			span=Span.from_loc(node.loc, file=mod.file_name),
		)
	declaring = declarations[0]
	if isinstance(declaring.parent.value, IMPORT_SPECIFIER_TYPES):
		return ImmutableBindingError(node.name, span=Span.from_loc(node.loc, file=mod.file_name))
	return None


class Rewriter:
	def __init__(self, strategy: NamingStrategy, options: Optional[RewriteOptions] = None) -> None:
		self.strategy = strategy
		self.options = options if options is not None else RewriteOptions()

	def discover(self, modules: Iterable[Module]) -> RewritePlan:
		"""
		Queue every replacement for `modules` without mutating them.

		With `fail_fast` the first violation raises `RewriteError`; otherwise
		violations are collected into the plan in module order.
		"""
		modules = list(modules)
		for mod in modules:
			mod.resolve_sources()
		plan = RewritePlan(queue=ReplacementQueue())
		for mod in modules:
			before = len(plan.queue)
			_Discovery(self, mod, plan).visit(mod.root)
			logger.debug("discovered %d replacement(s) in %s", len(plan.queue) - before, mod.name)
		if plan.errors:
			logger.debug("discovery found %d violation(s)", len(plan.errors))
		return plan

	def rewrite(self, modules: Iterable[Module]) -> RewritePlan:
		"""Discover, then commit. Raises `RewriteError` before any mutation."""
		plan = self.discover(modules)
		plan.commit()
		return plan

	def resolve(self, mod: Module, path: NodePath):
		return resolve_reference(self.strategy, mod, path)


class _Discovery(PathVisitor):
	"""Pre-order walk of one module that fills a plan."""

	def __init__(self, rewriter: Rewriter, mod: Module, plan: RewritePlan) -> None:
		super().__init__()
		self.rewriter = rewriter
		self.strategy = rewriter.strategy
		self.mod = mod
		self.plan = plan
		# Reference paths already resolved by an enclosing handler.
		self._resolved: Set[int] = set()

	def _push(self, replacement: Optional[Replacement]) -> None:
		self.plan.queue.push(replacement)

	def _guard(self, target: NodePath) -> None:
		error = check_reassignment(self.mod, target)
		if error is None:
			return
		if self.rewriter.options.fail_fast:
			raise RewriteError([error])
		self.plan.errors.append(error)

	def visit_Identifier(self, path: NodePath) -> None:
		if id(path) not in self._resolved and is_reference(path):
			replacement = self.rewriter.resolve(self.mod, path)
			if replacement is not None:
				self._push(Replacement.swaps(path, replacement))
		self.traverse(path)

	def visit_AssignmentExpression(self, path: NodePath) -> None:
		self._guard(path.get("left"))
		self.traverse(path)

	def visit_UpdateExpression(self, path: NodePath) -> None:
		self._guard(path.get("argument"))
		self.traverse(path)

	def visit_VariableDeclaration(self, path: NodePath) -> None:
		scope = path.scope
		if path.value.kind == "var":
			scope = scope.function_scope
		if scope.is_global:
			self._push(self.strategy.process_variable_declaration(self.mod, path))
		self.traverse(path)

	def visit_FunctionDeclaration(self, path: NodePath) -> None:
		if isinstance(path.parent.value, Program):
			self._push(self.strategy.process_function_declaration(self.mod, path))
		self.traverse(path)

	def visit_ExportDeclaration(self, path: NodePath) -> None:
		node = path.value
		if node.default:
			# Default exports create no binding of their own; the statement
			# becomes whatever the strategy does with the exported value.
			value = node.declaration
			declaration_path = path.get("declaration")
			if is_reference(declaration_path):
				resolved = self.rewriter.resolve(self.mod, declaration_path)
				if resolved is not None:
					value = resolved
				self._resolved.add(id(declaration_path))
			statement = self.strategy.default_export(self.mod, value)
			if statement is not None:
				self._push(Replacement.swaps(path, statement))
		else:
			self._push(self.strategy.process_export_declaration(self.mod, path))
		self.traverse(path)

	def visit_ImportDeclaration(self, path: NodePath) -> None:
		self._push(self.strategy.process_import_declaration(self.mod, path))
		self.traverse(path)


__all__ = ["RewriteOptions", "RewritePlan", "Rewriter", "check_reassignment"]
