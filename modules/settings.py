"""Resolved, read-only view of one site's configuration.

``resolve_site_settings`` layers three sources, lowest first:

1. ``SETTING_DEFAULTS``
2. computed defaults (``main_host``, ``hosts``) and legacy aliases
3. the site's ``custom`` map

Legacy aliases (``wp-content``, ``prefix``, ``dbprefix``) only fill the
defaults layer, so an explicit canonical key always wins. They are applied in
order, so ``dbprefix`` replaces a value set from ``prefix``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping


SETTING_DEFAULTS: dict[str, Any] = {
    "wp": True,
    "download_wp": True,
    "htdocs": None,
    "wp_content": None,
    "db_prefix": "wp_",
    "locale": "en_US",
    "version": "latest",
    "title": "My Awesome VVV site",
    "admin_user": "admin",
    "admin_password": "password",
    "admin_email": "admin@localhost.local",
    "multisite": False,
    "xipio": True,
    "delete_default_plugins": False,
    "delete_default_themes": False,
    "plugins": [],
    "themes": [],
    "skip_plugins": [],
}

# (alias, canonical) in the order they are checked
LEGACY_ALIASES: tuple[tuple[str, str], ...] = (
    ("wp-content", "wp_content"),
    ("prefix", "db_prefix"),
    ("dbprefix", "db_prefix"),
)

ITEM_KINDS = ("plugin", "theme")


class MultisiteMode(enum.Enum):
    NONE = "none"
    SUBDOMAIN = "subdomain"
    SUBDIRECTORY = "subdirectory"

    @classmethod
    def from_value(cls, value: Any) -> "MultisiteMode":
        if not value:
            return cls.NONE
        if isinstance(value, str):
            text = value.strip().lower()
            if text == "none":
                return cls.NONE
            if text.startswith("subdomain"):
                return cls.SUBDOMAIN
        return cls.SUBDIRECTORY

    @classmethod
    def is_known(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return True
        if not isinstance(value, str):
            return False
        text = value.strip().lower()
        return text in ("", "none", "subdirectory") or text.startswith("subdomain")


@dataclass(frozen=True)
class ItemSpec:
    """A plugin or theme to install, with its optional install flags."""

    name: str
    kind: str = "plugin"
    version: str | None = None
    force: bool | None = None
    activate: bool | None = None
    activate_network: bool | None = None

    @classmethod
    def from_raw(cls, raw: Any, kind: str) -> "ItemSpec":
        if kind not in ITEM_KINDS:
            raise ValueError(f"Invalid installer type: {kind}")
        if isinstance(raw, ItemSpec):
            return raw
        if isinstance(raw, str):
            return cls(name=raw, kind=kind)
        if not isinstance(raw, Mapping) or not (raw.get(kind) or raw.get("name")):
            raise ValueError(f"{kind} entry needs a '{kind}' name: {raw!r}")
        version = raw.get("version")
        return cls(
            name=str(raw.get(kind) or raw["name"]),
            kind=kind,
            version=None if version is None else str(version),
            force=raw.get("force"),
            activate=raw.get("activate"),
            activate_network=raw.get("activate-network", raw.get("activate_network"))
            if kind == "plugin"
            else None,
        )

    def install_flags(self) -> dict[str, Any]:
        """Flags for ``wp <kind> install``, limited to the allowed set.

        Unset flags are left out; ``activate-network`` only exists for plugins.
        """
        candidates = [
            ("version", self.version),
            ("force", self.force),
            ("activate", self.activate),
        ]
        if self.kind == "plugin":
            candidates.append(("activate-network", self.activate_network))
        return {name: value for name, value in candidates if value is not None}


@dataclass(frozen=True)
class DatabaseParams:
    host: str = "localhost"
    user: str = "root"
    password: str = "root"


@dataclass(frozen=True)
class GlobalOverrides:
    plugins: tuple[ItemSpec, ...] = ()
    themes: tuple[ItemSpec, ...] = ()
    db: DatabaseParams = field(default_factory=DatabaseParams)


@dataclass(frozen=True)
class SiteSettings:
    main_host: str
    hosts: tuple[str, ...]
    htdocs: str | None = None
    wp_content: str | None = None
    db_prefix: str | None = "wp_"
    locale: str = "en_US"
    version: str = "latest"
    title: str = "My Awesome VVV site"
    admin_user: str = "admin"
    admin_password: str = "password"
    admin_email: str = "admin@localhost.local"
    multisite: MultisiteMode = MultisiteMode.NONE
    wp: bool = True
    xipio: bool = True
    download_wp: bool = True
    delete_default_plugins: bool = False
    delete_default_themes: bool = False
    plugins: tuple[ItemSpec, ...] = ()
    themes: tuple[ItemSpec, ...] = ()
    skip_plugins: frozenset[str] = frozenset()

    def has_htdocs(self) -> bool:
        return bool(self.htdocs)

    def has_wp_content(self) -> bool:
        return bool(self.wp_content)


def _host_tuple(raw_hosts: Any) -> tuple[str, ...]:
    if isinstance(raw_hosts, str):
        raw_hosts = [raw_hosts]
    return tuple(str(h) for h in raw_hosts or ())


def _resolve_hosts(site_name: str, raw_hosts: Any) -> tuple[str, tuple[str, ...]]:
    hosts = _host_tuple(raw_hosts)
    if hosts:
        return hosts[0], hosts
    main_host = f"{site_name}.local"
    return main_host, (main_host,)


def _apply_aliases(custom: Mapping[str, Any], defaults: dict[str, Any]) -> None:
    for alias, canonical in LEGACY_ALIASES:
        if custom.get(alias) is None:
            continue
        if canonical in custom:
            continue
        defaults[canonical] = custom[alias]


def _optional_str(value: Any) -> str | None:
    if value is None or value is False:
        return None
    return str(value)


def resolve_site_settings(site_name: str, site_config: Mapping[str, Any]) -> SiteSettings:
    """Merge a site's raw ``hosts``/``custom`` entry into ``SiteSettings``."""
    main_host, hosts = _resolve_hosts(site_name, site_config.get("hosts"))
    custom = {k: v for k, v in (site_config.get("custom") or {}).items() if v is not None}

    defaults = dict(SETTING_DEFAULTS)
    defaults["main_host"] = main_host
    defaults["hosts"] = hosts
    _apply_aliases(custom, defaults)

    merged = {**defaults, **custom}

    return SiteSettings(
        main_host=str(merged["main_host"]),
        hosts=_host_tuple(merged["hosts"]) or (main_host,),
        htdocs=_optional_str(merged["htdocs"]),
        wp_content=_optional_str(merged["wp_content"]),
        db_prefix=_optional_str(merged["db_prefix"]),
        locale=str(merged["locale"]),
        version=str(merged["version"]),
        title=str(merged["title"]),
        admin_user=str(merged["admin_user"]),
        admin_password=str(merged["admin_password"]),
        admin_email=str(merged["admin_email"]),
        multisite=MultisiteMode.from_value(merged["multisite"]),
        wp=bool(merged["wp"]),
        xipio=bool(merged["xipio"]),
        download_wp=bool(merged["download_wp"]),
        delete_default_plugins=bool(merged["delete_default_plugins"]),
        delete_default_themes=bool(merged["delete_default_themes"]),
        plugins=tuple(ItemSpec.from_raw(p, "plugin") for p in merged["plugins"] or ()),
        themes=tuple(ItemSpec.from_raw(t, "theme") for t in merged["themes"] or ()),
        skip_plugins=frozenset(str(s) for s in merged["skip_plugins"] or ()),
    )
