# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from lark.exceptions import UnexpectedInput

from esflat.bundle import bundle
from esflat.core import Diagnostic, Span
from esflat.modules import ModuleContainer, ModuleResolutionError
from esflat.parser import ModuleSyntaxError, parse_file
from esflat.rewrite import RewriteError, RewriteOptions, ScopeConsistencyError

logger = logging.getLogger(__name__)


def module_name_for(path: Path, root: Path) -> str:
	"""`<root>/math/fib.js` -> `math/fib`."""
	rel = Path(os.path.relpath(path, root))
	if rel.suffix == ".js":
		rel = rel.with_suffix("")
	return rel.as_posix()


def load_modules(paths: Sequence[Path], root: Path) -> Tuple[ModuleContainer, List[Diagnostic]]:
	"""
	Parse every file into one container.

	Parse errors are collected per file rather than raised, so one run reports
	every broken file.
	"""
	container = ModuleContainer()
	diagnostics: List[Diagnostic] = []
	for path in paths:
		try:
			program = parse_file(path)
		except ModuleSyntaxError as err:
			diagnostics.append(
				Diagnostic(message=str(err), phase="parser", span=Span.from_loc(err.loc, file=str(path)))
			)
			continue
		except UnexpectedInput as err:
			span = Span(
				file=str(path),
				line=getattr(err, "line", None),
				column=getattr(err, "column", None),
				raw=err,
			)
			diagnostics.append(Diagnostic(message=str(err).strip(), phase="parser", span=span))
			continue
		name = module_name_for(path, root)
		logger.debug("loaded %s as module %s", path, name)
		container.add_program(name, program, path=path)
	return container, diagnostics


def _default_root(paths: Sequence[Path]) -> Path:
	parents = [str(path.resolve().parent) for path in paths]
	return Path(os.path.commonpath(parents))


def _report(diagnostics: Sequence[Diagnostic], *, as_json: bool, default_file: str) -> None:
	if as_json:
		payload = {
			"exit_code": 1,
			"diagnostics": [d.to_json(default_file=default_file) for d in diagnostics],
		}
		print(json.dumps(payload))
		return
	for d in diagnostics:
		print(d.render(), file=sys.stderr)
		for note in d.notes:
			print(f"  note: {note}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
	"""
	Flatten ES modules into one script.

	With --json, prints structured diagnostics (phase/message/severity/file/line/column)
	and an exit_code; otherwise prints human-readable messages to stderr.
	"""
	parser = argparse.ArgumentParser(prog="esflat", description="Flatten ES modules into a single script")
	parser.add_argument("source", type=Path, nargs="+", help="Module source file(s)")
	parser.add_argument(
		"-r",
		"--root",
		type=Path,
		help="Directory module names are relative to (default: common parent of the sources)",
	)
	parser.add_argument("-o", "--output", type=Path, help="Write the bundle here instead of stdout")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument(
		"--collect-all",
		action="store_true",
		help="Report every reassigned import instead of stopping at the first",
	)
	parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
	args = parser.parse_args(argv)

	level = logging.WARNING
	if args.verbose == 1:
		level = logging.INFO
	elif args.verbose >= 2:
		level = logging.DEBUG
	logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

	source_paths: List[Path] = list(args.source)
	source_path = str(source_paths[0])
	options = RewriteOptions(fail_fast=not args.collect_all)
	root = args.root.resolve() if args.root is not None else _default_root(source_paths)

	missing = [path for path in source_paths if not path.is_file()]
	if missing:
		_report(
			[Diagnostic(message=f"no such file: {path}", phase="driver", span=Span(file=str(path))) for path in missing],
			as_json=args.json,
			default_file=source_path,
		)
		return 1

	container, parse_diags = load_modules([path.resolve() for path in source_paths], root)
	if parse_diags:
		_report(parse_diags, as_json=args.json, default_file=source_path)
		return 1

	try:
		output = bundle(container, fail_fast=options.fail_fast)
	except (ModuleResolutionError, ScopeConsistencyError) as err:
		_report([err.to_diagnostic()], as_json=args.json, default_file=source_path)
		return 1
	except RewriteError as err:
		_report(err.diagnostics(), as_json=args.json, default_file=source_path)
		return 1

	if args.output is not None:
		args.output.write_text(output, encoding="utf-8")
		logger.info("wrote %s", args.output)
	else:
		sys.stdout.write(output)

	if args.json:
		# Without -o stdout carries the bundle itself.
		stream = sys.stdout if args.output is not None else sys.stderr
		print(json.dumps({"exit_code": 0, "diagnostics": []}), file=stream)
	return 0


if __name__ == "__main__":
	sys.exit(main())
