"""Provision one site: database, logs, htdocs, nginx and WordPress.

Step order is fixed:

    create_db -> create_logs -> create_base_dir -> create_nginx_config
      -> (wp disabled: stop)
      -> download_wordpress -> create_wp_config -> install_wordpress
      -> (custom htdocs repo: stop)
      -> provision_content

Every step checks the state it would produce before acting, so a failed run
can simply be started again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from config import HTDOCS_DIR, PROVISION_DIR, WP_CONTENT_DIR
from modules import nginx
from modules.commands import CommandBuilder
from modules.db import ensure_database
from modules.process import ProcessRunner
from modules.settings import GlobalOverrides, resolve_site_settings
from modules.site import clone_repo, ensure_dir, ensure_logs
from modules.wordpress import installer, plugins_themes
from modules.wordpress.cli import WpCli, wp_argv_filter


class Provisioner:
    def __init__(
        self,
        builder: CommandBuilder,
        db,
        vm_dir: Path | str,
        site_name: str,
        site_config: Mapping[str, Any],
        logger: logging.Logger,
        overrides: GlobalOverrides,
        runner: ProcessRunner | None = None,
        provision_dir: Path | str | None = None,
        strict_nginx: bool = False,
    ) -> None:
        self.builder = builder
        self.db = db
        self.vm_dir = Path(vm_dir)
        self.site_name = site_name
        self.logger = logger
        self.overrides = overrides
        self.strict_nginx = strict_nginx

        self.site = resolve_site_settings(site_name, site_config)
        self.base_dir = self.vm_dir / HTDOCS_DIR
        self.wp_content = self.base_dir / WP_CONTENT_DIR
        self.provision_dir = Path(provision_dir) if provision_dir else self.vm_dir / PROVISION_DIR

        if runner is None:
            runner = ProcessRunner(cwd=self.vm_dir, argv_filter=wp_argv_filter(self.base_dir))
        self.runner = runner
        self.wp = WpCli(builder, runner, logger)

    def provision(self) -> None:
        self.create_db()
        self.create_logs()
        self.create_base_dir()
        self.create_nginx_config()

        if not self.site.wp:
            self.logger.info("Skipping WordPress setup.")
            return

        self.download_wordpress()
        self.create_wp_config()
        self.install_wordpress()

        if self.site.has_htdocs():
            return

        self.provision_content()

    def provision_content(self) -> None:
        """Clone a custom wp-content, or else install plugins/themes and
        delete the bundled defaults. Never both.
        """
        self.clone_wp_content()

        if not self.site.has_wp_content():
            self.install_plugins()
            self.install_themes()
            self.delete_default_content()

    def create_db(self) -> bool:
        return ensure_database(self.db, self.site_name, self.logger)

    def create_logs(self) -> None:
        ensure_logs(self.vm_dir, self.logger)

    def create_base_dir(self) -> None:
        if self.site.has_htdocs():
            self.clone_htdocs()
        else:
            ensure_dir(self.base_dir)

    def create_nginx_config(self) -> bool:
        return nginx.write_nginx_config(self.provision_dir, self.site, self.logger, strict=self.strict_nginx)

    def clone_htdocs(self) -> bool:
        return clone_repo(self.site.htdocs, self.base_dir, "htdocs", self.builder, self.runner, self.logger)

    def clone_wp_content(self) -> bool:
        if not self.site.has_wp_content():
            return False
        return clone_repo(
            self.site.wp_content,
            self.wp_content,
            "wp-content",
            self.builder,
            self.runner,
            self.logger,
            require_dir=False,
        )

    def download_wordpress(self) -> bool:
        return installer.download_wordpress(self.wp, self.base_dir, self.site)

    def create_wp_config(self) -> bool:
        return installer.create_wp_config(self.wp, self.base_dir, self.site_name, self.site)

    def install_wordpress(self) -> bool:
        return installer.install_wordpress(self.wp, self.site)

    def install_plugins(self) -> list[str]:
        return plugins_themes.install_plugins(
            self.wp, self.overrides.plugins, self.site.plugins, self.site.skip_plugins
        )

    def install_themes(self) -> list[str]:
        return plugins_themes.install_themes(self.wp, self.overrides.themes, self.site.themes)

    def delete_default_content(self) -> None:
        if self.site.delete_default_plugins:
            plugins_themes.remove_default_plugins(self.wp)
        if self.site.delete_default_themes:
            plugins_themes.remove_default_themes(self.wp)
