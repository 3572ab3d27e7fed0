# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from esflat.parser import ast, parse_program
from esflat.rewrite import Replacement, ReplacementQueue
from esflat.tree import print_program, root_path


def test_nothing_changes_until_commit():
	prog = parse_program("a; b;")
	root = root_path(prog)
	queue = ReplacementQueue()
	queue.push(Replacement.swaps(root.get("body", 0, "expression"), ast.Identifier("x")))
	queue.push(Replacement.removes(root.get("body", 1)))
	assert print_program(prog) == "a;\nb;\n"
	assert queue.commit() == 2
	assert queue.committed
	assert print_program(prog) == "x;\n"


def test_none_is_ignored():
	queue = ReplacementQueue()
	queue.push(None)
	assert len(queue) == 0


def test_locations_are_write_once():
	root = root_path(parse_program("a;"))
	target = root.get("body", 0, "expression")
	queue = ReplacementQueue()
	queue.push(Replacement.swaps(target, ast.Identifier("x")))
	with pytest.raises(ValueError):
		queue.push(Replacement.swaps(target, ast.Identifier("y")))
	assert len(queue) == 1


def test_commit_happens_once():
	queue = ReplacementQueue()
	queue.commit()
	with pytest.raises(RuntimeError):
		queue.commit()
	with pytest.raises(RuntimeError):
		queue.push(Replacement.custom(lambda: None))


def test_builder_runs_at_commit_time_with_its_arguments():
	prog = parse_program("var a = 1; b;")
	root = root_path(prog)
	calls = []

	def build(name, keep):
		calls.append(name)
		if not keep:
			return None
		return [ast.ExpressionStatement(ast.Identifier(name)), ast.EmptyStatement()]

	queue = ReplacementQueue()
	queue.push(Replacement.builds(root.get("body", 0), build, "first", True))
	queue.push(Replacement.builds(root.get("body", 1), build, "second", False))
	assert calls == []
	queue.commit()
	assert calls == ["first", "second"]
	assert print_program(prog) == "first;\n;\n"


def test_inserts_at_index_or_append_and_chain_with_removal():
	prog = parse_program("a; b;")
	root = root_path(prog)
	body = root.get("body")
	queue = ReplacementQueue()
	queue.push(
		Replacement.inserts(body, 0, ast.ExpressionStatement(ast.Identifier("top"))).and_removes(root.get("body", 0))
	)
	queue.push(Replacement.inserts(body, None, ast.ExpressionStatement(ast.Identifier("end"))))
	queue.commit()
	assert print_program(prog) == "top;\nb;\nend;\n"


def test_inserts_do_not_claim_their_list():
	root = root_path(parse_program("a;"))
	body = root.get("body")
	queue = ReplacementQueue()
	queue.push(Replacement.inserts(body, 0, ast.EmptyStatement()))
	queue.push(Replacement.inserts(body, 0, ast.EmptyStatement()))
	assert len(queue) == 2


def test_commit_applies_in_queue_order():
	order = []
	queue = ReplacementQueue()
	for n in range(3):
		queue.push(Replacement.custom(lambda n=n: order.append(n)))
	queue.commit()
	assert order == [0, 1, 2]
