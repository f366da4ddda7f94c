"""Shared fixtures for bundlerig tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundlerig.context import Context
from bundlerig.errors import CompileError
from bundlerig.targets import Target


class FakeCompiler:
    """Writes a small script for each target instead of invoking a real bundler."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.compiled: list[str] = []
        self.fail_on = fail_on

    def compile(self, ctx: Context) -> None:
        if ctx.target.name == self.fail_on:
            raise CompileError(ctx.target.name, "syntax error")
        self.compiled.append(ctx.target.name)
        ctx.output_file.parent.mkdir(parents=True, exist_ok=True)
        ctx.output_file.write_text("console.log(1)\nx=2\n")


def make_package(root: Path, name: str, files: dict[str, str] | None = None) -> Path:
    """Create an installed package under root/node_modules and return its directory."""
    pkg = root / "node_modules" / name
    pkg.mkdir(parents=True, exist_ok=True)
    (pkg / "package.json").write_text(f'{{"name": "{name}"}}')
    for rel, content in (files or {}).items():
        f = pkg / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.write_text(content)
    return pkg


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def cli_target() -> Target:
    return Target(name="cli", entry_points=["src/bin.ts"], outfile="build/index")


@pytest.fixture
def ctx(tmp_path, cli_target) -> Context:
    return Context(cli_target, root=tmp_path)
