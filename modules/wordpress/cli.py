# cli.py
# Invariants:
# - All WP-CLI access goes through WpCli; commands are built as ["wp", ...].
# - The runner swaps the leading "wp" for WP_CLI_PATH and pins --path to the
#   site's htdocs, so callers never pass the binary or --path themselves.
# - must_run raises CommandFailed; run returns the result for the caller to log.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from config import WP_CLI_PATH
from modules.commands import CommandBuilder, CommandSpec
from modules.process import CommandResult, ProcessRunner


def wp_argv_filter(site_path: Path) -> Callable[[list[str]], list[str]]:
    def _filter(argv: list[str]) -> list[str]:
        if not argv or argv[0] != "wp":
            return argv
        return [WP_CLI_PATH, f"--path={site_path}"] + argv[1:]

    return _filter


class WpCli:
    def __init__(self, builder: CommandBuilder, runner: ProcessRunner, logger: logging.Logger) -> None:
        self.builder = builder
        self.runner = runner
        self.logger = logger

    def command(self, positional: Sequence[str], flags: Mapping[str, Any] | None = None) -> CommandSpec:
        return self.builder.build(["wp", *positional], flags)

    def must_run(self, positional: Sequence[str], flags: Mapping[str, Any] | None = None) -> CommandResult:
        return self.runner.must_run(self.command(positional, flags))

    def run(self, positional: Sequence[str], flags: Mapping[str, Any] | None = None) -> CommandResult:
        return self.runner.run(self.command(positional, flags))

    def run_logged(self, spec: CommandSpec) -> CommandResult:
        """Best-effort: run, log whatever came back, never raise."""
        result = self.runner.run(spec)
        if result.output:
            self.logger.info(result.output.rstrip())
        if not result.ok:
            self.logger.error("%s exit=%s", spec.display(), result.returncode)
        return result
