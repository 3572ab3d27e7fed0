# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Binding model: modules, their import/export tables and the module registry."""

from __future__ import annotations

from .container import ModuleContainer, ModuleResolutionError, normalize_module_name
from .declarations import Declaration, DeclarationList, Entry, ExportEntry, ImportEntry
from .module import ExportOrigin, Module, namespace_id

__all__ = [
	"Declaration",
	"DeclarationList",
	"Entry",
	"ExportEntry",
	"ExportOrigin",
	"ImportEntry",
	"Module",
	"ModuleContainer",
	"ModuleResolutionError",
	"namespace_id",
	"normalize_module_name",
]
