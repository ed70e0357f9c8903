"""Utility helpers kept dependency-free.

- init_logging: configure console + optional file logging with run-id.
- status_pass/status_fail: concise console status lines (with run-id).
- log: debug-level logger for command detail lines (file-oriented).
"""

import logging
import os
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOGGER_NAME = "provisioner"
CONSOLE_FORMAT = "%(name)s: [%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_RUN_ID = ""


def _gen_run_id() -> str:
    return uuid.uuid4().hex[:8]


def init_logging(log_dir: str | Path | None = None, run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: INFO+ to stdout, "provisioner: [INFO] message".
    - File: DEBUG+, rich format, written to <log_dir>/provision-<rid>.log
      when a log directory is given.
    Returns the run-id used.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get("PROVISION_RID") or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(logging.INFO)
        ch.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(ch)

    logfile = None
    if log_dir is not None:
        try:
            os.makedirs(log_dir, exist_ok=True)
            logfile = os.path.join(str(log_dir), f"provision-{rid}.log")
        except OSError as err:
            logging.getLogger(LOGGER_NAME).warning("No file log (%s): %s", log_dir, err)

    if logfile is not None:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        root.addHandler(fh)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    os.environ["PROVISION_RID"] = rid
    return rid


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _rid() -> str:
    return _RUN_ID or os.environ.get("PROVISION_RID", "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def log(msg: str) -> None:
    # Command-level detail; stays out of console noise.
    logging.getLogger(LOGGER_NAME).debug(msg)
