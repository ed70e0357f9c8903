"""Download, configure and install WordPress core."""

from __future__ import annotations

from pathlib import Path

from config import WP_DB_HOST, WP_DB_PASS, WP_DB_USER
from modules.commands import OMIT, PRESENT
from modules.settings import MultisiteMode, SiteSettings
from .cli import WpCli

EXTRA_PHP = """define( 'WP_DEBUG', true );
define( 'WP_DEBUG_DISPLAY', false );
define( 'WP_DEBUG_LOG', true );
define( 'SCRIPT_DEBUG', true );
define( 'JETPACK_DEV_DEBUG', true );
define( 'JETPACK_STAGING_MODE', true );"""


def download_wordpress(wp: WpCli, base_dir: Path, settings: SiteSettings) -> bool:
    if (base_dir / "wp-admin").exists() or not settings.download_wp:
        return False

    result = wp.must_run(
        ["core", "download"],
        {"locale": settings.locale, "version": settings.version},
    )
    if result.output:
        wp.logger.info(result.output.rstrip())
    return True


def create_wp_config(wp: WpCli, base_dir: Path, site_name: str, settings: SiteSettings) -> bool:
    if (base_dir / "wp-config.php").exists():
        wp.logger.info("wp-config.php file found")
        return False

    result = wp.must_run(
        ["config", "create"],
        {
            "dbname": site_name,
            "dbuser": WP_DB_USER,
            "dbpass": WP_DB_PASS,
            "dbhost": WP_DB_HOST,
            "dbprefix": settings.db_prefix if settings.db_prefix else OMIT,
            "locale": settings.locale,
            "extra-php": EXTRA_PHP,
        },
    )
    if result.output:
        wp.logger.info(result.output.rstrip())
    return True


def install_flags(settings: SiteSettings) -> dict:
    flags = {
        "url": settings.main_host,
        "title": settings.title,
        "admin_user": settings.admin_user,
        "admin_password": settings.admin_password,
        "admin_email": settings.admin_email,
        "skip-plugins": PRESENT,
        "skip-themes": PRESENT,
    }
    if settings.multisite is MultisiteMode.SUBDOMAIN:
        flags["subdomains"] = PRESENT
    return flags


def install_wordpress(wp: WpCli, settings: SiteSettings) -> bool:
    if wp.run(["core", "is-installed"]).ok:
        return False

    wp.logger.info("Installing WordPress...")
    install_command = "install" if settings.multisite is MultisiteMode.NONE else "multisite-install"
    result = wp.must_run(["core", install_command], install_flags(settings))
    wp.logger.info(result.output.rstrip())
    return True
