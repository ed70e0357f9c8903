from __future__ import annotations

from typing import Iterable, Sequence

from config import DEFAULT_PLUGINS, DEFAULT_THEMES
from modules.settings import ITEM_KINDS, ItemSpec
from .cli import WpCli


def merge_items(overrides: Sequence[ItemSpec], site_items: Sequence[ItemSpec]) -> list[ItemSpec]:
    # Global items first; duplicates are kept.
    return list(overrides) + list(site_items)


def install_items(
    wp: WpCli,
    kind: str,
    items: Sequence[ItemSpec],
    skip: Iterable[str] = (),
) -> list[str]:
    """Install each item with ``wp <kind> install``; returns the names tried.

    Failures are logged and the loop moves on.
    """
    if kind not in ITEM_KINDS:
        raise ValueError(f"Invalid installer type: {kind}")

    skipped = set(skip)
    attempted: list[str] = []

    wp.logger.info("Installing %ss...", kind)
    with wp.builder.prefixed(["wp", kind, "install"]):
        for item in items:
            if item.name in skipped:
                wp.logger.info("Found %s in skip list, skipping...", item.name)
                continue
            spec = wp.builder.build([item.name], item.install_flags())
            wp.run_logged(spec)
            attempted.append(item.name)

    return attempted


def install_plugins(
    wp: WpCli,
    overrides: Sequence[ItemSpec],
    site_items: Sequence[ItemSpec],
    skip: Iterable[str] = (),
) -> list[str]:
    plugins = merge_items(overrides, site_items)
    if not plugins:
        return []
    return install_items(wp, "plugin", plugins, skip)


def install_themes(wp: WpCli, overrides: Sequence[ItemSpec], site_items: Sequence[ItemSpec]) -> list[str]:
    themes = merge_items(overrides, site_items)
    if not themes:
        return []
    return install_items(wp, "theme", themes)


def remove_default_plugins(wp: WpCli) -> None:
    wp.logger.info("Removing default plugins...")
    for slug in DEFAULT_PLUGINS:
        wp.run_logged(wp.command(["plugin", "delete", slug]))


def remove_default_themes(wp: WpCli) -> None:
    wp.logger.info("Removing default themes...")
    for name in DEFAULT_THEMES:
        wp.run_logged(wp.command(["theme", "delete", f"twenty{name}"]))
