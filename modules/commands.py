"""Build external command invocations from positional args and flags.

Flag values follow one rule set, applied in ``render_flag``:

- ``False`` (or ``OMIT``): the flag is left out entirely.
- ``None``, ``""`` or ``True`` (``PRESENT``): ``--name`` without a value.
- anything else: ``--name=value``.
"""

from __future__ import annotations

import contextlib
import enum
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence


class Flag(enum.Enum):
    OMIT = "omit"
    PRESENT = "present"


OMIT = Flag.OMIT
PRESENT = Flag.PRESENT


def render_flag(name: str, value: Any) -> str | None:
    if value is OMIT or value is False:
        return None
    if value is PRESENT or value is None or value is True or value == "":
        return f"--{name}"
    return f"--{name}={value}"


@dataclass(frozen=True)
class CommandSpec:
    positional: tuple[str, ...]
    flags: tuple[tuple[str, Any], ...] = ()

    def argv(self) -> list[str]:
        args = list(self.positional)
        for name, value in self.flags:
            rendered = render_flag(name, value)
            if rendered is not None:
                args.append(rendered)
        return args

    def display(self) -> str:
        return " ".join(self.argv())


class CommandBuilder:
    """Create ``CommandSpec`` objects, optionally behind a shared prefix."""

    def __init__(self, prefix: Sequence[str] = ()) -> None:
        self._prefix: tuple[str, ...] = tuple(prefix)

    @property
    def prefix(self) -> tuple[str, ...]:
        return self._prefix

    def set_prefix(self, prefix: Sequence[str]) -> None:
        self._prefix = tuple(str(p) for p in prefix)

    def reset_prefix(self) -> None:
        self._prefix = ()

    @contextlib.contextmanager
    def prefixed(self, prefix: Sequence[str]) -> Iterator["CommandBuilder"]:
        previous = self._prefix
        self.set_prefix(prefix)
        try:
            yield self
        finally:
            self._prefix = previous

    def build(
        self,
        positional: Sequence[str],
        flags: Mapping[str, Any] | None = None,
    ) -> CommandSpec:
        parts = self._prefix + tuple(str(p) for p in positional)
        return CommandSpec(parts, tuple((flags or {}).items()))
