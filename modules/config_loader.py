"""Load and validate the YAML site configuration.

The file holds a ``sites`` map keyed by site identifier (each entry with
``hosts`` and ``custom``) and a ``vvvbase`` section with global plugin/theme
lists and the database connection used to create site databases.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from config import DEFAULT_DB_HOST, DEFAULT_DB_PASS, DEFAULT_DB_USER
from modules.errors import ConfigError
from modules.settings import DatabaseParams, GlobalOverrides, ItemSpec, MultisiteMode

BOOL_KEYS = (
    "wp",
    "download_wp",
    "xipio",
    "delete_default_plugins",
    "delete_default_themes",
)
STR_KEYS = (
    "htdocs",
    "wp_content",
    "wp-content",
    "db_prefix",
    "prefix",
    "dbprefix",
    "locale",
    "version",
    "title",
    "admin_user",
    "admin_password",
    "admin_email",
)
ITEM_KEYS = {"plugins": "plugin", "themes": "theme"}


def load_config(path: Path | str) -> dict[str, Any]:
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse config file: {path}\n{e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}.")
    return raw


def _check_items(site: str, key: str, value: Any) -> None:
    kind = ITEM_KEYS[key]
    if not isinstance(value, list):
        raise ConfigError(f"sites.{site}.custom.{key} must be a list")
    for item in value:
        try:
            ItemSpec.from_raw(item, kind)
        except ValueError as e:
            raise ConfigError(f"sites.{site}.custom.{key}: {e}") from e


def _validate_custom(site: str, custom: dict[str, Any]) -> None:
    for key, value in custom.items():
        if value is None:
            continue
        if key in BOOL_KEYS and not isinstance(value, bool):
            raise ConfigError(f"sites.{site}.custom.{key} must be true or false")
        if key in STR_KEYS and isinstance(value, (dict, list)):
            raise ConfigError(f"sites.{site}.custom.{key} must be a scalar")
        if key in ITEM_KEYS:
            _check_items(site, key, value)
        if key == "skip_plugins" and not isinstance(value, list):
            raise ConfigError(f"sites.{site}.custom.skip_plugins must be a list")
        if key == "multisite" and not MultisiteMode.is_known(value):
            raise ConfigError(f"sites.{site}.custom.multisite must be false, 'none', 'subdomain' or 'subdirectory'")
        if key == "hosts" and not (
            isinstance(value, str) or (isinstance(value, list) and all(isinstance(h, str) for h in value))
        ):
            raise ConfigError(f"sites.{site}.custom.hosts must be a list of host names")


def get_site_config(config: dict[str, Any], site: str) -> dict[str, Any]:
    """Return the validated ``{hosts, custom}`` entry for ``site``."""
    sites = config.get("sites")
    if not isinstance(sites, dict):
        raise ConfigError("Config is missing the 'sites' section")
    if site not in sites:
        raise ConfigError(f"Site '{site}' not found in config")

    entry = sites[site]
    if entry is None:
        entry = {}
    if not isinstance(entry, dict):
        raise ConfigError(f"sites.{site} must be a mapping")

    hosts = entry.get("hosts") or []
    if isinstance(hosts, str):
        hosts = [hosts]
    if not isinstance(hosts, list) or not all(isinstance(h, str) for h in hosts):
        raise ConfigError(f"sites.{site}.hosts must be a list of host names")

    custom = entry.get("custom") or {}
    if not isinstance(custom, dict):
        raise ConfigError(f"sites.{site}.custom must be a mapping")
    _validate_custom(site, custom)

    return {"hosts": hosts, "custom": custom}


def _items(section: dict[str, Any], key: str) -> tuple[ItemSpec, ...]:
    raw = section.get(key) or []
    if not isinstance(raw, list):
        raise ConfigError(f"vvvbase.{key} must be a list")
    try:
        return tuple(ItemSpec.from_raw(item, ITEM_KEYS[key]) for item in raw)
    except ValueError as e:
        raise ConfigError(f"vvvbase.{key}: {e}") from e


def get_overrides(config: dict[str, Any]) -> GlobalOverrides:
    section = config.get("vvvbase") or {}
    if not isinstance(section, dict):
        raise ConfigError("vvvbase must be a mapping")
    db = section.get("db") or {}
    if not isinstance(db, dict):
        raise ConfigError("vvvbase.db must be a mapping")

    return GlobalOverrides(
        plugins=_items(section, "plugins"),
        themes=_items(section, "themes"),
        db=DatabaseParams(
            host=str(db.get("host", DEFAULT_DB_HOST)),
            user=str(db.get("user", DEFAULT_DB_USER)),
            password=str(db.get("pass", DEFAULT_DB_PASS)),
        ),
    )
