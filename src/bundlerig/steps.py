"""Built-in staging steps for preparing inputs and finishing build output."""

from __future__ import annotations

import logging
import shutil
import stat
import sys
from pathlib import Path

from . import modules, process
from .context import Context
from .errors import StagingError
from .step import Step, step

logger = logging.getLogger(__name__)

NODE_SHEBANG = "#!/usr/bin/env node\n"

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


# -- Filesystem helpers --


def chmod_x(path: str | Path) -> bool:
    """Add execute permission for owner, group and other.

    Returns False without touching the file if the bits are already set.
    """
    path = Path(path)
    mode = stat.S_IMODE(path.stat().st_mode)
    new_mode = mode | _EXEC_BITS
    if new_mode == mode:
        return False
    path.chmod(new_mode)
    return True


def first_line(path: str | Path) -> str:
    """Return the first line of a file, including its terminator."""
    with Path(path).open(encoding="utf-8", newline="") as fp:
        return fp.readline()


def replace_first_line(path: str | Path, line: str) -> None:
    """Replace the first line of a file, leaving the remaining lines untouched.

    No terminator is added when ``line`` carries its own; otherwise the
    original terminator of the first line is kept so the next line stays
    separate.
    """
    path = Path(path)
    with path.open(encoding="utf-8", newline="") as fp:
        lines = fp.read().splitlines(keepends=True)

    rest = lines[1:]
    if rest and not line.endswith(("\n", "\r")):
        head = lines[0]
        line += head[len(head.rstrip("\r\n")) :]

    with path.open("w", encoding="utf-8", newline="") as fp:
        fp.write(line)
        fp.writelines(rest)


def _output_path(ctx: Context, path: str | None) -> Path:
    """Resolve a destination path against the target's output directory."""
    if path is None:
        return ctx.output_file
    return ctx.output_dir / path


def _source_path(
    ctx: Context,
    path: str,
    *,
    package: str | None = None,
    store: str | None = None,
) -> Path:
    """Resolve a source path from an installed package, a module store, or the root."""
    if package is not None:
        return modules.package_dir(package, ctx.root) / path
    if store is not None:
        return ctx.root / store / path
    return ctx.root / path


# -- Steps --


@step("run")
class RunCommand(Step):
    """Run an auxiliary command; always runs when invoked."""

    def __init__(self, command: str, cwd: str | None = None) -> None:
        self.command = command
        self.cwd = cwd

    def equals(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> None:
        cwd = ctx.root / self.cwd if self.cwd else ctx.root
        process.run(self.command, cwd=cwd)

    def __str__(self) -> str:
        return f"RunCommand({self.command})"


@step("copy_tree")
class CopyTree(Step):
    """Recursively copy a directory into the output directory, overwriting existing files."""

    def __init__(
        self,
        dest: str,
        source: str = "",
        package: str | None = None,
        store: str | None = None,
    ) -> None:
        self.dest = dest
        self.source = source
        self.package = package
        self.store = store

    def equals(self, ctx: Context) -> bool:
        return False

    def exists(self, ctx: Context) -> bool:
        return _output_path(ctx, self.dest).is_dir()

    def apply(self, ctx: Context) -> None:
        src = _source_path(ctx, self.source, package=self.package, store=self.store)
        dst = _output_path(ctx, self.dest)
        if not src.is_dir():
            raise StagingError(src, "source directory not found")
        logger.debug("Copying tree %s -> %s", src, dst)
        try:
            shutil.copytree(src, dst, dirs_exist_ok=True)
        except OSError as exc:
            raise StagingError(dst, str(exc)) from exc

    def __str__(self) -> str:
        return f"CopyTree({self.dest})"


@step("copy_file")
class CopyFile(Step):
    """Copy a single helper file or binary module into the output directory.

    The source is taken from an installed package when ``package`` is set,
    from a shared module store under the workspace root when ``store`` is set,
    and from the workspace root otherwise. ``platforms`` limits the copy to
    matching ``sys.platform`` prefixes.
    """

    def __init__(
        self,
        path: str,
        dest: str | None = None,
        package: str | None = None,
        store: str | None = None,
        platforms: list[str] | None = None,
    ) -> None:
        if package is not None and store is not None:
            raise ValueError("copy_file accepts either 'package' or 'store', not both")
        self.path = path
        self.dest = dest or Path(path).name
        self.package = package
        self.store = store
        self.platforms = platforms or []

    def skip(self, ctx: Context) -> bool:
        if not self.platforms:
            return False
        return not any(sys.platform.startswith(p) for p in self.platforms)

    def equals(self, ctx: Context) -> bool:
        return False

    def exists(self, ctx: Context) -> bool:
        return _output_path(ctx, self.dest).is_file()

    def apply(self, ctx: Context) -> None:
        src = _source_path(ctx, self.path, package=self.package, store=self.store)
        dst = _output_path(ctx, self.dest)
        if not src.is_file():
            raise StagingError(src, "source file not found")
        logger.debug("Copying %s -> %s", src, dst)
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(src, dst)
        except OSError as exc:
            raise StagingError(dst, str(exc)) from exc

    def __str__(self) -> str:
        return f"CopyFile({self.dest})"


@step("shebang")
class Shebang(Step):
    """Rewrite the first line of an output file to an interpreter directive."""

    def __init__(self, file: str | None = None, line: str = NODE_SHEBANG) -> None:
        self.file = file
        self.line = line

    def equals(self, ctx: Context) -> bool:
        path = _output_path(ctx, self.file)
        if not path.is_file():
            return False
        try:
            current = first_line(path)
        except UnicodeDecodeError as exc:
            raise StagingError(path, f"not a UTF-8 text file: {exc}") from exc
        if self.line.endswith(("\n", "\r")):
            return current == self.line
        return current.rstrip("\r\n") == self.line

    def apply(self, ctx: Context) -> None:
        path = _output_path(ctx, self.file)
        try:
            replace_first_line(path, self.line)
        except UnicodeDecodeError as exc:
            raise StagingError(path, f"not a UTF-8 text file: {exc}") from exc
        except OSError as exc:
            raise StagingError(path, str(exc)) from exc

    def __str__(self) -> str:
        return f"Shebang({self.file or 'output'})"


@step("chmod_x")
class ChmodX(Step):
    """Make an output file executable for owner, group and other."""

    def __init__(self, file: str | None = None) -> None:
        self.file = file

    def equals(self, ctx: Context) -> bool:
        path = _output_path(ctx, self.file)
        if not path.is_file():
            return False
        return path.stat().st_mode & _EXEC_BITS == _EXEC_BITS

    def apply(self, ctx: Context) -> None:
        path = _output_path(ctx, self.file)
        try:
            chmod_x(path)
        except OSError as exc:
            raise StagingError(path, str(exc)) from exc

    def __str__(self) -> str:
        return f"ChmodX({self.file or 'output'})"
