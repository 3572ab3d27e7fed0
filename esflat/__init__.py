# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
esflat: flatten a set of ES modules into one script.

Pipeline:
  source -> parser (lark) -> ast.Program
         -> modules (binding model: import/export tables)
         -> rewrite (discover replacements, then commit)
         -> tree.printer -> bundle

The CLI entrypoint is `esflat.cli:main`.
"""

__all__ = ["bundle", "cli", "core", "formatters", "modules", "parser", "rewrite", "tree"]
