"""Exception types raised by the provisioning pipeline."""

from __future__ import annotations

import subprocess
from typing import Sequence


class ProvisionError(Exception):
    """Fatal provisioning failure; ``code`` becomes the process exit status."""

    def __init__(self, message: str, code: int = 1) -> None:
        super().__init__(message)
        self.code = code


class ConfigError(ProvisionError):
    pass


class DatabaseError(ProvisionError):
    pass


class CommandFailed(subprocess.CalledProcessError, ProvisionError):
    """A required external command exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, output: str) -> None:
        subprocess.CalledProcessError.__init__(self, returncode, list(argv), output=output)
        self.code = 1

    def __str__(self) -> str:
        cmd = " ".join(self.cmd)
        text = (self.output or "").strip()
        msg = f"Command failed (exit={self.returncode}): {cmd}"
        if text:
            msg += f"\n{text}"
        return msg
