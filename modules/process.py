"""Run ``CommandSpec`` objects as subprocesses.

Two modes:
- ``must_run``: required step; non-zero exit raises ``CommandFailed``.
- ``run``: best-effort; the result is returned and the caller carries on.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from modules.commands import CommandSpec
from modules.errors import CommandFailed
from modules.utils import log

NOT_FOUND_EXIT = 127


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_cmd_for_log(argv: Sequence[str]) -> str:
    # Multi-line values (--extra-php) would flood the log line.
    return " ".join(a.splitlines()[0] + " ..." if "\n" in a else a for a in argv)


class ProcessRunner:
    def __init__(
        self,
        cwd: Path | str | None = None,
        argv_filter: Callable[[list[str]], list[str]] | None = None,
    ) -> None:
        self.cwd = Path(cwd) if cwd is not None else None
        self.argv_filter = argv_filter

    def _argv(self, spec: CommandSpec) -> list[str]:
        argv = spec.argv()
        if self.argv_filter is not None:
            argv = self.argv_filter(argv)
        return argv

    def _exec(self, argv: list[str]) -> CommandResult:
        cwd = self.cwd if self.cwd is not None and self.cwd.is_dir() else None
        t0 = time.monotonic()
        try:
            proc = subprocess.run(
                argv,
                cwd=cwd,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as err:
            logging.error("%s: %s", _fmt_cmd_for_log(argv), err)
            return CommandResult(tuple(argv), NOT_FOUND_EXIT, str(err))

        dt = time.monotonic() - t0
        result = CommandResult(tuple(argv), proc.returncode, proc.stdout or "")
        if result.ok:
            log(f"PASS: {_fmt_cmd_for_log(argv)} ({dt:.1f}s)")
        else:
            log(f"FAIL: {_fmt_cmd_for_log(argv)} exit={proc.returncode} ({dt:.1f}s)")
        return result

    def run(self, spec: CommandSpec) -> CommandResult:
        return self._exec(self._argv(spec))

    def must_run(self, spec: CommandSpec) -> CommandResult:
        result = self.run(spec)
        if not result.ok:
            raise CommandFailed(result.argv, result.returncode, result.output)
        return result
