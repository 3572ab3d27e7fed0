# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference rewriting.

  - rewriter: discovery walk, mutation guard, plan/commit
  - resolver: per-reference decision procedure
  - naming: the pluggable naming strategy protocol
  - replacement: queued tree changes
  - errors: immutable-binding and scope-consistency errors
"""

from __future__ import annotations

from .errors import ImmutableBindingError, RewriteError, ScopeConsistencyError
from .naming import NamingStrategy
from .replacement import Replacement, ReplacementQueue
from .resolver import resolve_reference
from .rewriter import RewriteOptions, RewritePlan, Rewriter, check_reassignment

__all__ = [
	"ImmutableBindingError",
	"NamingStrategy",
	"Replacement",
	"ReplacementQueue",
	"RewriteError",
	"RewriteOptions",
	"RewritePlan",
	"Rewriter",
	"ScopeConsistencyError",
	"check_reassignment",
	"resolve_reference",
]
