"""Filesystem layout for a site: log files, htdocs and repo clones."""

from __future__ import annotations

import logging
from pathlib import Path

from config import DIR_PERMS, GIT_PATH, LOG_DIR, LOG_FILES
from modules.commands import PRESENT, CommandBuilder
from modules.process import ProcessRunner


def ensure_logs(vm_dir: Path, logger: logging.Logger) -> None:
    log_dir = vm_dir / LOG_DIR
    if not log_dir.exists():
        logger.info("Creating %s directory...", log_dir)
        log_dir.mkdir(mode=DIR_PERMS)

    for name in LOG_FILES:
        logfile = log_dir / name
        if not logfile.exists():
            logfile.write_text("")


def ensure_dir(path: Path) -> bool:
    if path.exists():
        return False
    path.mkdir(mode=DIR_PERMS, parents=True)
    return True


def is_cloned(dest: Path, require_dir: bool = True) -> bool:
    marker = dest / ".git"
    if require_dir:
        return marker.is_dir()
    return marker.exists()


def remove_default_dir(
    path: Path,
    label: str,
    builder: CommandBuilder,
    runner: ProcessRunner,
    logger: logging.Logger,
) -> None:
    if not path.exists():
        return
    logger.info("Removing default %s directory...", label)
    result = runner.run(builder.build(["rm", "-rf", str(path)]))
    if result.output:
        logger.info(result.output)
    if not result.ok:
        logger.error("Could not remove %s (exit=%s)", path, result.returncode)


def clone_repo(
    repo: str,
    dest: Path,
    label: str,
    builder: CommandBuilder,
    runner: ProcessRunner,
    logger: logging.Logger,
    require_dir: bool = True,
) -> bool:
    """Clone ``repo`` into ``dest`` unless a checkout is already there.

    Any existing ``.git`` counts as cloned; the remote is not compared.
    Returns True when a clone ran.
    """
    if is_cloned(dest, require_dir=require_dir):
        return False

    remove_default_dir(dest, label, builder, runner, logger)

    logger.info("Cloning [%s] into %s...", repo, dest)
    result = runner.must_run(
        builder.build([GIT_PATH, "clone", repo, str(dest)], {"recursive": PRESENT})
    )
    if result.output:
        logger.info(result.output)
    return True
