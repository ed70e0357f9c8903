"""MariaDB helpers used to create the site database."""

from __future__ import annotations

import logging
import subprocess

from config import MARIADB_PATH, WP_DB_HOST, WP_DB_PASS, WP_DB_USER
from modules.errors import DatabaseError
from modules.settings import DatabaseParams
from modules.utils import log


class MariaDB:
    """Thin client over the ``mariadb`` command-line tool.

    Statements are sent verbatim; nothing is escaped here.
    """

    def __init__(self, host: str = "localhost", user: str = "root", password: str = "root") -> None:
        self.host = host
        self.user = user
        self.password = password

    @classmethod
    def from_params(cls, params: DatabaseParams) -> "MariaDB":
        return cls(params.host, params.user, params.password)

    def _argv(self, sql: str) -> list[str]:
        return [
            MARIADB_PATH,
            f"--host={self.host}",
            f"--user={self.user}",
            f"--password={self.password}",
            "-N",
            "-B",
            "-e",
            sql,
        ]

    def _mysql_try(self, sql: str) -> tuple[int, str, str]:
        try:
            proc = subprocess.run(self._argv(sql), text=True, capture_output=True, check=True)
            return proc.returncode, (proc.stdout or ""), (proc.stderr or "")
        except subprocess.CalledProcessError as exc:
            return exc.returncode, (exc.stdout or ""), (exc.stderr or "")
        except FileNotFoundError as exc:
            return 127, "", str(exc)

    def connect(self) -> None:
        rc, _, err = self._mysql_try("SELECT 1")
        if rc != 0:
            raise DatabaseError(f"Unable to connect to DB. Error: {err.strip()}")

    def query(self, sql: str) -> list[list[str]]:
        rc, out, err = self._mysql_try(sql)
        if rc != 0:
            logging.error("SQL: %s\nEXIT: %s\nSTDERR: %s", sql, rc, err.strip())
            raise DatabaseError(f"Query failed: {sql}\n{err.strip()}")
        log(f"PASS: SQL: {sql}")
        return [line.split("\t") for line in out.splitlines() if line]


def ensure_database(db, site_name: str, logger: logging.Logger) -> bool:
    """Create the site database and grant the wp user on it.

    Returns True when the database was created, False when it already existed.
    """
    logger.info("Checking database for site...")
    rows = db.query(f"SHOW DATABASES LIKE '{site_name}'")
    if rows:
        return False

    logger.info("Creating DB for %s", site_name)
    db.query(f"CREATE DATABASE `{site_name}`;")
    logger.info("Granting privileges on DB...")
    db.query(
        f"GRANT ALL PRIVILEGES ON `{site_name}`.* TO {WP_DB_USER}@{WP_DB_HOST} "
        f"IDENTIFIED BY '{WP_DB_PASS}'"
    )
    logger.info("DB setup complete.")
    return True
