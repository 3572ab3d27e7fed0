# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from esflat.core import Span
from esflat.core.diagnostics import Diagnostic
from esflat.parser import parse_program
from esflat.parser.ast import Located, Program

from .module import Module

logger = logging.getLogger(__name__)


class ModuleResolutionError(LookupError):
	"""An import or re-export names a module that is not part of the batch."""

	def __init__(self, message: str, *, span: Optional[Span] = None) -> None:
		super().__init__(message)
		self.span = span if span is not None else Span()

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=str(self), code="E-MODULE-NOT-FOUND", phase="resolve", span=self.span)


def normalize_module_name(name: str) -> str:
	"""Strip a trailing `.js` and collapse `.`/`..` segments."""
	if name.endswith(".js"):
		name = name[: -len(".js")]
	return posixpath.normpath(name)


class ModuleContainer:
	"""
	Ordered registry of the modules taking part in one rewrite.

	Iteration order is insertion order; the rewriter processes and reports
	modules in that order.
	"""

	def __init__(self) -> None:
		self._modules: Dict[str, Module] = {}

	def __iter__(self) -> Iterator[Module]:
		return iter(self._modules.values())

	def __len__(self) -> int:
		return len(self._modules)

	def __contains__(self, name: str) -> bool:
		return normalize_module_name(name) in self._modules

	@property
	def modules(self) -> List[Module]:
		return list(self._modules.values())

	def get(self, name: str) -> Optional[Module]:
		return self._modules.get(normalize_module_name(name))

	def add_program(self, name: str, program: Program, path: Optional[Path] = None) -> Module:
		name = normalize_module_name(name)
		if name in self._modules:
			raise ValueError(f"module `{name}` is already registered")
		mod = Module.from_program(name, program, self, path=path)
		self._modules[name] = mod
		logger.debug("registered module %s as %s", name, mod.id)
		return mod

	def add_source(self, name: str, source: str, path: Optional[Path] = None) -> Module:
		return self.add_program(name, parse_program(source), path=path)

	def resolve(self, source_name: str, *, importer: Optional[Module] = None, loc: Optional[Located] = None) -> Module:
		"""
		Find the module named by `from "<source_name>"` inside `importer`.

		`./x` and `../x` are relative to the importer's directory; any other
		name is taken as a module name from the batch root.
		"""
		name = source_name
		if importer is not None and (name.startswith("./") or name.startswith("../")):
			name = posixpath.join(posixpath.dirname(importer.name), name)
		mod = self.get(name)
		if mod is None:
			file = importer.file_name if importer is not None else None
			where = f" (imported from `{importer.name}`)" if importer is not None else ""
			raise ModuleResolutionError(
				f"cannot resolve module `{source_name}`{where}",
				span=Span.from_loc(loc, file=file),
			)
		return mod


__all__ = ["ModuleContainer", "ModuleResolutionError", "normalize_module_name"]
