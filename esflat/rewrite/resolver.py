# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from esflat.parser.ast import ExportSpecifier, Expr
from esflat.tree import NodePath

from .naming import NamingStrategy

if TYPE_CHECKING:
	from esflat.modules import Module


def resolve_reference(strategy: NamingStrategy, mod: "Module", path: NodePath) -> Optional[Expr]:
	"""
	Replacement expression for the reference at `path`, or None to keep it.

	Imports are followed to their export by the strategy; names that only pass
	through this module (`export { x } from "m"`) have no local binding and
	are left alone, as are the names listed in non-default export specifiers.
	"""
	parent = path.parent.value if path.parent is not None else None
	if isinstance(parent, ExportSpecifier) and not parent.default:
		return None

	spec = mod.exports.find_specifier_by_name(path.value.name)
	if spec is not None and spec.declaration.source_name is not None and spec.node is not parent:
		return None

	for lookup in (strategy.exported_reference, strategy.imported_reference, strategy.local_reference):
		replacement = lookup(mod, path)
		if replacement is not None:
			return replacement
	return None


__all__ = ["resolve_reference"]
