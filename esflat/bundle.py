# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Single-script bundles.

After the namespace rewrite no module has imports or exports left and every
cross-module reference goes through a namespace object, so the bundle is the
namespace prelude followed by each module body in its own function scope:

  var math$$ = {}, main$$ = {};
  (function () {
    "use strict";
    ...
  })();
"""

from __future__ import annotations

import logging
from typing import List, Optional

from esflat.formatters import NamespaceNamingStrategy
from esflat.modules import ModuleContainer
from esflat.parser.ast import (
	BlockStatement,
	CallExpression,
	ExpressionStatement,
	FunctionExpression,
	Literal,
	Program,
)
from esflat.rewrite import NamingStrategy, RewriteOptions, Rewriter
from esflat.tree import print_program

logger = logging.getLogger(__name__)


def bundle(
	container: ModuleContainer,
	*,
	fail_fast: bool = True,
	strategy: Optional[NamingStrategy] = None,
) -> str:
	"""Rewrite every module of `container` in place and render the bundle."""
	modules = container.modules
	rewriter = Rewriter(strategy or NamespaceNamingStrategy(), RewriteOptions(fail_fast=fail_fast))
	plan = rewriter.rewrite(modules)
	logger.info("rewrote %d module(s) with %d replacement(s)", len(modules), len(plan.queue))
	return render_bundle(container)


def render_bundle(container: ModuleContainer) -> str:
	parts: List[str] = []
	if len(container):
		parts.append("var " + ", ".join(f"{mod.id} = {{}}" for mod in container) + ";\n")
	wrappers = [_wrap(mod.program) for mod in container]
	parts.append(print_program(Program(body=wrappers)))
	return "".join(parts)


def _wrap(program: Program) -> ExpressionStatement:
	strict = ExpressionStatement(expression=Literal(value="use strict", raw='"use strict"'))
	body = BlockStatement(body=[strict] + list(program.body))
	return ExpressionStatement(
		expression=CallExpression(
			callee=FunctionExpression(id=None, params=[], body=body),
			arguments=[],
		)
	)


__all__ = ["bundle", "render_bundle"]
