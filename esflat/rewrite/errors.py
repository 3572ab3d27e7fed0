# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Errors produced while rewriting references.

`ImmutableBindingError` is user-facing and converts to a `Diagnostic`.
`ScopeConsistencyError` means a name did not resolve to exactly one
declaration (`let a; let a;`); it stops the rewrite and is never collected.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from esflat.core import Diagnostic, Span


class ImmutableBindingError(SyntaxError):
	"""Assignment or update of a name bound by an import specifier."""

	code = "E-IMPORT-REASSIGN"

	def __init__(self, name: str, *, span: Optional[Span] = None) -> None:
		self.name = name
		self.span = span if span is not None else Span()
		super().__init__(f"cannot reassign imported binding `{name}` at {self.span.short()}")

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=f"cannot reassign imported binding `{self.name}`",
			code=self.code,
			phase="rewrite",
			span=self.span,
			notes=["imported bindings are read-only; assign to a local copy instead"],
		)


class ScopeConsistencyError(AssertionError):
	"""A name that must resolve to exactly one declaration did not."""

	def __init__(self, name: str, count: int, *, span: Optional[Span] = None) -> None:
		self.name = name
		self.count = count
		self.span = span if span is not None else Span()
		super().__init__(f"expected exactly one declaration for `{name}`, found {count}")

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=f"`{self.name}` is declared {self.count} times in one scope",
			code="E-SCOPE",
			phase="rewrite",
			span=self.span,
		)


class RewriteError(Exception):
	"""One or more immutable-binding violations; nothing has been mutated."""

	def __init__(self, errors: Sequence[ImmutableBindingError]) -> None:
		self.errors: List[ImmutableBindingError] = list(errors)
		if len(self.errors) == 1:
			message = str(self.errors[0])
		else:
			message = f"{len(self.errors)} rewrite errors; first: {self.errors[0]}"
		super().__init__(message)

	def diagnostics(self) -> List[Diagnostic]:
		return [err.to_diagnostic() for err in self.errors]


__all__ = ["ImmutableBindingError", "RewriteError", "ScopeConsistencyError"]
