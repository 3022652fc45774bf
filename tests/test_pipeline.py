"""End-to-end tests for a measurement run with stubbed bundler and installer."""

import json

import pytest

import depsize.services.pipeline as pipeline_module
from depsize.exceptions import ManifestError, SetupError
from depsize.schemas.units import Measurement, RunOptions
from depsize.services.pipeline import cache_dir_for, measure_dependencies


class SizedBundler:
    """Bundler stub whose output size grows with the synthesized source."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.invoked = []
        self.options = {}

    async def invoke(self, unit, options):
        self.invoked.append(unit.name)
        self.options[unit.name] = options
        if unit.name in self.failing:
            return Measurement(unit=unit, exit_code=1)
        size = 1000 + 100 * len(unit.source_text)
        return Measurement(unit=unit, exit_code=0, raw_bytes=size, gzip_bytes=size // 3)


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "my-app", "dependencies": {"left-pad": "*", "react": "*"}}),
        encoding="utf-8",
    )
    (tmp_path / "node_modules").mkdir()
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.js").write_text(
        "\n".join(
            [
                'import React from "react";',
                'import leftPad from "left-pad";',
                "const pad = require('left-pad/lib/pad');",
                'import util from "./util";',
                'const fs = require("fs");',
                'import shared from "@my/shared/helpers";',
            ]
        ),
        encoding="utf-8",
    )
    shared = tmp_path / "packages" / "shared"
    shared.mkdir(parents=True)
    (shared / "package.json").write_text(json.dumps({"name": "@my/shared"}), encoding="utf-8")

    installs = []

    async def fake_install(cache_dir, use_yarn, verbose, limiter):
        installs.append((str(cache_dir), use_yarn))

    monkeypatch.setattr(pipeline_module, "install_dependencies", fake_install)
    return tmp_path, installs


@pytest.mark.asyncio
async def test_end_to_end_with_failing_unit(project):
    root, installs = project
    bundler = SizedBundler(failing={"react"})

    report = await measure_dependencies(root / "package.json", RunOptions(), bundler=bundler)

    assert [r.name for r in report.results] == ["_all", "left-pad"]
    assert [f.name for f in report.failures] == ["react"]
    assert sorted(bundler.invoked) == ["_all", "_empty", "left-pad", "react"]
    assert bundler.invoked[0] == "_empty"

    cache_dir = cache_dir_for(root)
    assert installs == [(str(cache_dir), False)]
    assert (cache_dir / "left-pad.js").read_text(encoding="utf-8") == (
        'f(require("left-pad/lib/pad"));\nf(require("left-pad"));'
    )
    assert (cache_dir / "react.js").read_text(encoding="utf-8") == 'f(require("react"));'
    all_source = (cache_dir / "_all.js").read_text(encoding="utf-8")
    assert "./util" not in all_source
    assert '"fs"' not in all_source
    assert "@my/shared" not in all_source

    scratch = json.loads((cache_dir / "package.json").read_text(encoding="utf-8"))
    assert scratch["dependencies"] == {"left-pad": "*", "react": "*"}
    assert (cache_dir / "_main.html").exists()


@pytest.mark.asyncio
async def test_unmatched_reference_only_in_aggregate(project, caplog):
    root, _ = project
    (root / "src" / "extra.js").write_text('require("unregistered-pkg");', encoding="utf-8")
    caplog.set_level("DEBUG", logger="depsize")

    await measure_dependencies(
        root / "package.json", RunOptions(verbose=True), bundler=SizedBundler()
    )

    cache_dir = cache_dir_for(root)
    assert 'f(require("unregistered-pkg"));' in (cache_dir / "_all.js").read_text(encoding="utf-8")
    assert not (cache_dir / "unregistered-pkg.js").exists()
    assert 'Imported external dependency "unregistered-pkg"' in caplog.text


@pytest.mark.asyncio
async def test_yarn_lock_selects_yarn(project):
    root, installs = project
    (root / "yarn.lock").write_text("", encoding="utf-8")

    await measure_dependencies(root / "package.json", bundler=SizedBundler())

    assert installs[0][1] is True


@pytest.mark.asyncio
async def test_ignore_and_only_options(project):
    root, _ = project
    bundler = SizedBundler()

    report = await measure_dependencies(
        root / "package.json",
        RunOptions(ignore=["react"], only=["_all", "react"]),
        bundler=bundler,
    )

    assert [r.name for r in report.results] == ["_all"]
    assert "react" not in bundler.invoked


@pytest.mark.asyncio
async def test_repeated_runs_are_identical(project):
    root, _ = project

    first = await measure_dependencies(root / "package.json", bundler=SizedBundler())
    second = await measure_dependencies(root / "package.json", bundler=SizedBundler())

    assert first.results == second.results


@pytest.mark.asyncio
async def test_missing_node_modules_is_setup_error(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"name": "x"}), encoding="utf-8")

    with pytest.raises(SetupError, match="install"):
        await measure_dependencies(tmp_path / "package.json", bundler=SizedBundler())


@pytest.mark.asyncio
async def test_malformed_manifest_is_fatal(tmp_path):
    (tmp_path / "package.json").write_text("{", encoding="utf-8")
    (tmp_path / "node_modules").mkdir()

    with pytest.raises(ManifestError):
        await measure_dependencies(tmp_path / "package.json", bundler=SizedBundler())


@pytest.mark.asyncio
async def test_target_dependencies_stay_external(project, monkeypatch):
    root, _ = project

    async def install_with_react_deps(cache_dir, use_yarn, verbose, limiter):
        react_dir = cache_dir / "node_modules" / "react"
        react_dir.mkdir(parents=True, exist_ok=True)
        (react_dir / "package.json").write_text(
            json.dumps(
                {
                    "name": "react",
                    "dependencies": {"loose-envify": "^1.1.0"},
                    "peerDependencies": {"scheduler": "*"},
                }
            ),
            encoding="utf-8",
        )

    monkeypatch.setattr(pipeline_module, "install_dependencies", install_with_react_deps)
    bundler = SizedBundler()

    await measure_dependencies(root / "package.json", bundler=bundler)

    assert bundler.options["react"].externals == ["left-pad", "loose-envify", "scheduler"]
    assert bundler.options["left-pad"].externals == ["react"]
    assert bundler.options["_all"].externals == []
