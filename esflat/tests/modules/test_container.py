# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from esflat.modules import ModuleContainer, ModuleResolutionError, normalize_module_name


@pytest.mark.parametrize(
	"name, expected",
	[
		("math.js", "math"),
		("./math", "math"),
		("lib/../math.js", "math"),
		("a/b/./c", "a/b/c"),
	],
)
def test_normalize_module_name(name, expected):
	assert normalize_module_name(name) == expected


def test_registration_order_and_lookup():
	container = ModuleContainer()
	container.add_source("b", "var x;")
	container.add_source("a.js", "var y;")
	assert [mod.name for mod in container] == ["b", "a"]
	assert len(container) == 2
	assert "a.js" in container
	assert container.get("./a") is container.modules[1]
	assert container.get("zzz") is None


def test_duplicate_names_are_rejected():
	container = ModuleContainer()
	container.add_source("m", "var x;")
	with pytest.raises(ValueError, match="already registered"):
		container.add_source("m.js", "var y;")


def test_relative_sources_resolve_against_the_importer_directory():
	container = ModuleContainer()
	util = container.add_source("lib/util", "export var u;")
	shared = container.add_source("shared", "export var s;")
	app = container.add_source("lib/app", 'import { u } from "./util";\nimport { s } from "../shared.js";')
	assert container.resolve("./util", importer=app) is util
	assert container.resolve("../shared.js", importer=app) is shared
	assert container.resolve("lib/util") is util
	app.resolve_sources()


def test_unresolved_source_reports_importer_and_location():
	container = ModuleContainer()
	mod = container.add_source("main", 'var a;\nimport { x } from "./nowhere";', path=Path("src/main.js"))
	with pytest.raises(ModuleResolutionError) as excinfo:
		mod.resolve_sources()
	err = excinfo.value
	assert str(err) == "cannot resolve module `./nowhere` (imported from `main`)"
	assert err.span.file == "src/main.js"
	assert err.span.line == 2
	diagnostic = err.to_diagnostic()
	assert diagnostic.phase == "resolve"
	assert diagnostic.code == "E-MODULE-NOT-FOUND"
