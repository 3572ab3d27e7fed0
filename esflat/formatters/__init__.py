# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Concrete naming strategies."""

from __future__ import annotations

from .namespace import NamespaceNamingStrategy, namespace_member

__all__ = ["NamespaceNamingStrategy", "namespace_member"]
