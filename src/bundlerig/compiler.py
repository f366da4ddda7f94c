"""Compiler collaborators that turn a target into output files."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import jinja2

from . import process
from .context import Context
from .errors import CompileError, ProcessError

logger = logging.getLogger(__name__)

_ESBUILD_DRIVER = """\
const path = require("path");
const esbuild = require({{ esbuild | tojson }});
{% if override %}
const override = {{ override | tojson }};

const externalManifest = {
  name: "externalManifest",
  setup(build) {
    build.onResolve({ filter: new RegExp(override.filter) }, (args) => {
      if (path.resolve(args.resolveDir, args.path) === override.match_path) {
        return { path: override.redirect, external: true };
      }
      return undefined;
    });
  },
};
{% endif %}
esbuild
  .build({
    entryPoints: {{ entry_points | tojson }},
    outfile: {{ outfile | tojson }},
    format: {{ format | tojson }},
    platform: "node",
    bundle: {{ bundle | tojson }},
    minify: {{ minify | tojson }},
    external: {{ external | tojson }},
    plugins: [{% if override %}externalManifest{% endif %}],
    logLevel: "error",
  })
  .catch(() => process.exit(1));
"""


class Compiler(Protocol):
    """Builds the output files for a single target."""

    def compile(self, ctx: Context) -> None: ...


class EsbuildCompiler:
    """Drive esbuild through a generated Node script, then emit declarations with tsc."""

    def __init__(self, *, node: str = "node", esbuild: str = "esbuild", tsc: str = "tsc") -> None:
        self.node = node
        self.esbuild = esbuild
        self.tsc = tsc
        self._env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def options(self, ctx: Context) -> dict[str, Any]:
        """Template variables describing the build of one target."""
        target = ctx.target
        override = ctx.override
        return {
            "esbuild": self.esbuild,
            "entry_points": list(target.entry_points),
            "outfile": str(ctx.output_file),
            "format": target.format.short_name,
            "bundle": target.bundle,
            "minify": target.minify,
            "external": list(target.external),
            "override": None
            if override is None
            else {
                "filter": override.filter,
                "match_path": str(override.match_path),
                "redirect": override.redirect_path,
            },
        }

    def render(self, ctx: Context) -> str:
        template = self._env.from_string(_ESBUILD_DRIVER)
        return template.render(self.options(ctx))

    def compile(self, ctx: Context) -> None:
        target = ctx.target
        logger.info("Compiling '%s' -> %s", target.name, ctx.output_file)
        try:
            process.run([self.node, "-"], cwd=ctx.root, input=self.render(ctx))
            if target.emit_types:
                self._emit_types(ctx)
        except ProcessError as exc:
            raise CompileError(target.name, exc.stderr.strip() or str(exc)) from exc

    def _emit_types(self, ctx: Context) -> None:
        logger.info("Emitting type declarations for '%s'", ctx.target.name)
        process.run(
            [
                self.tsc,
                "--declaration",
                "--emitDeclarationOnly",
                "--outDir",
                str(ctx.output_dir),
                *ctx.target.entry_points,
            ],
            cwd=ctx.root,
        )
