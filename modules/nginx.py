"""Create or update the site's nginx vhost config.

SRP: This module only rewrites the ``server_name`` directive of
``provision/vvv-nginx.conf`` (seeded from the template on first run).

Convergence is a raw substring check: when the wanted ``server_name`` value
already appears anywhere in the file, nothing is written. A copy of the value
inside a comment therefore also counts as converged. ``strict=True`` only
accepts a real, uncommented directive.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from config import MAIN_HOST_PLACEHOLDER, NGINX_CONFIG_FILE, NGINX_TEMPLATE_FILE
from modules.settings import SiteSettings

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
TEMPLATE_FILE = DATA_DIR / NGINX_TEMPLATE_FILE

SERVER_NAME_RE = re.compile(r"(\bserver_name\s+)(?:[^;]*);")
XIPIO_BASE_RE = re.compile(r"(.*)\.[a-zA-Z0-9_]+$")
XIPIO_SUFFIX = r"\.\d+\.\d+\.\d+\.\d+\.xip\.io$"


def xipio_base(main_host: str) -> str:
    """Drop the top level domain: "example.com" -> "example",
    "foo.bar.local" -> "foo.bar".
    """
    return XIPIO_BASE_RE.sub(r"\1", main_host)


def xipio_pattern(main_host: str) -> str:
    return "~^" + xipio_base(main_host).replace(".", r"\.") + XIPIO_SUFFIX


def build_server_names(hosts: Sequence[str], main_host: str, use_xipio: bool) -> str:
    names = " ".join(hosts)
    if use_xipio:
        names += " " + xipio_pattern(main_host)
    return names


def _has_directive(text: str, server_names: str) -> bool:
    for line in text.splitlines():
        code = line.split("#", 1)[0]
        for match in re.finditer(r"\bserver_name\s+([^;]*);", code):
            if match.group(1).strip() == server_names:
                return True
    return False


def patch_config(
    text: str,
    hosts: Sequence[str],
    main_host: str,
    use_xipio: bool,
    strict: bool = False,
) -> str | None:
    """Return the patched config text, or None when it is already current."""
    server_names = build_server_names(hosts, main_host, use_xipio)

    if strict:
        if _has_directive(text, server_names):
            return None
    elif server_names in text:
        return None

    patched = SERVER_NAME_RE.sub(lambda m: f"{m.group(1)}{server_names};", text, count=1)
    return patched.replace(MAIN_HOST_PLACEHOLDER, main_host)


def read_source(provision_dir: Path) -> str:
    config_path = provision_dir / NGINX_CONFIG_FILE
    if config_path.exists():
        return config_path.read_text()
    template = provision_dir / NGINX_TEMPLATE_FILE
    if not template.exists():
        template = TEMPLATE_FILE
    return template.read_text()


def write_nginx_config(
    provision_dir: Path,
    settings: SiteSettings,
    logger: logging.Logger,
    strict: bool = False,
) -> bool:
    """Write ``vvv-nginx.conf``; returns True when the file changed."""
    logger.info("Setting up Nginx config")
    contents = read_source(provision_dir)
    patched = patch_config(contents, settings.hosts, settings.main_host, settings.xipio, strict=strict)
    if patched is None:
        return False

    provision_dir.mkdir(parents=True, exist_ok=True)
    (provision_dir / NGINX_CONFIG_FILE).write_text(patched)
    return True
