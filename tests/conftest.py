from __future__ import annotations

import logging

import pytest

from modules.commands import CommandBuilder, CommandSpec
from modules.errors import CommandFailed
from modules.process import CommandResult


class FakeRunner:
    """Records every command instead of running it.

    ``failures`` maps an argv prefix to the exit code commands starting with
    it should report; everything else succeeds.
    """

    def __init__(self, failures: dict[tuple[str, ...], int] | None = None, output: str = "") -> None:
        self.calls: list[list[str]] = []
        self.failures = failures or {}
        self.output = output

    def _code(self, argv: list[str]) -> int:
        for prefix, code in self.failures.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return code
        return 0

    def run(self, spec: CommandSpec) -> CommandResult:
        argv = spec.argv()
        self.calls.append(argv)
        return CommandResult(tuple(argv), self._code(argv), self.output)

    def must_run(self, spec: CommandSpec) -> CommandResult:
        result = self.run(spec)
        if not result.ok:
            raise CommandFailed(result.argv, result.returncode, result.output)
        return result

    def commands(self) -> list[str]:
        return [" ".join(argv[:3]) for argv in self.calls]


class FakeDB:
    def __init__(self, existing: set[str] | None = None) -> None:
        self.existing = set(existing or ())
        self.queries: list[str] = []

    def query(self, sql: str) -> list[list[str]]:
        self.queries.append(sql)
        if sql.startswith("SHOW DATABASES LIKE"):
            name = sql.split("'")[1]
            return [[name]] if name in self.existing else []
        return []


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(failures={("wp", "core", "is-installed"): 1})


@pytest.fixture
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture
def builder() -> CommandBuilder:
    return CommandBuilder()


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("provisioner.test")
