from __future__ import annotations

import logging
from pathlib import Path

import pytest

from conftest import FakeDB, FakeRunner
from modules.commands import CommandBuilder
from modules.errors import CommandFailed
from modules.provisioner import Provisioner
from modules.settings import GlobalOverrides, ItemSpec

LOGGER = logging.getLogger("provisioner.test")
CONTENT_REPO = "git@github.com:example/wp-content.git"


def _provisioner(
    tmp_path: Path,
    custom: dict,
    runner: FakeRunner,
    db: FakeDB | None = None,
    hosts: list[str] | None = None,
    overrides: GlobalOverrides | None = None,
) -> Provisioner:
    return Provisioner(
        CommandBuilder(),
        db if db is not None else FakeDB(),
        tmp_path,
        "mysite",
        {"hosts": hosts or [], "custom": custom},
        LOGGER,
        overrides or GlobalOverrides(),
        runner=runner,
    )


def test_wordpress_site_with_custom_wp_content(tmp_path: Path, runner: FakeRunner) -> None:
    db = FakeDB()
    custom = {
        "wp": True,
        "htdocs": None,
        "wp_content": CONTENT_REPO,
        "plugins": [{"plugin": "akismet"}],
    }

    _provisioner(tmp_path, custom, runner, db=db).provision()

    assert db.queries[1] == "CREATE DATABASE `mysite`;"
    assert (tmp_path / "log" / "error.log").exists()
    assert (tmp_path / "log" / "access.log").exists()
    assert (tmp_path / "htdocs").is_dir()
    conf = (tmp_path / "provision" / "vvv-nginx.conf").read_text()
    assert "server_name  mysite.local " in conf
    assert runner.commands() == [
        "wp core download",
        "wp config create",
        "wp core is-installed",
        "wp core install",
        f"git clone {CONTENT_REPO}",
    ]
    assert runner.calls[-1] == ["git", "clone", CONTENT_REPO, str(tmp_path / "htdocs" / "wp-content"), "--recursive"]


def test_non_wordpress_site_stops_after_nginx(tmp_path: Path, runner: FakeRunner) -> None:
    custom = {"wp": False, "htdocs": None, "wp_content": CONTENT_REPO, "plugins": [{"plugin": "akismet"}]}

    _provisioner(tmp_path, custom, runner).provision()

    assert runner.calls == []
    assert (tmp_path / "provision" / "vvv-nginx.conf").exists()


def test_existing_database_is_left_alone(tmp_path: Path, runner: FakeRunner) -> None:
    db = FakeDB(existing={"mysite"})
    _provisioner(tmp_path, {"wp": False}, runner, db=db).provision()
    assert db.queries == ["SHOW DATABASES LIKE 'mysite'"]


def test_logs_are_never_truncated(tmp_path: Path, runner: FakeRunner) -> None:
    (tmp_path / "log").mkdir()
    (tmp_path / "log" / "error.log").write_text("keep me\n")

    _provisioner(tmp_path, {"wp": False}, runner).create_logs()

    assert (tmp_path / "log" / "error.log").read_text() == "keep me\n"
    assert (tmp_path / "log" / "access.log").read_text() == ""


def test_plugins_themes_and_defaults(tmp_path: Path, runner: FakeRunner) -> None:
    overrides = GlobalOverrides(
        plugins=(ItemSpec("debug-bar"), ItemSpec("query-monitor")),
        themes=(ItemSpec("astra", kind="theme"),),
    )
    custom = {
        "plugins": [
            {"plugin": "query-monitor", "activate": True},
            {"plugin": "hello-dolly"},
        ],
        "themes": [{"theme": "twentytwentyfour", "force": True, "activate-network": True}],
        "skip_plugins": ["hello-dolly"],
        "delete_default_plugins": True,
        "delete_default_themes": True,
    }

    _provisioner(tmp_path, custom, runner, overrides=overrides).provision()

    installs = [argv for argv in runner.calls if argv[1] in ("plugin", "theme") and argv[2] == "install"]
    assert installs == [
        ["wp", "plugin", "install", "debug-bar"],
        ["wp", "plugin", "install", "query-monitor"],
        ["wp", "plugin", "install", "query-monitor", "--activate"],
        ["wp", "theme", "install", "astra"],
        ["wp", "theme", "install", "twentytwentyfour", "--force"],
    ]
    deletes = [argv[3] for argv in runner.calls if argv[2:3] == ["delete"]]
    assert deletes == [
        "akismet",
        "hello",
        "twentytwelve",
        "twentythirteen",
        "twentyfourteen",
        "twentyfifteen",
        "twentysixteen",
        "twentyseventeen",
    ]


def test_skip_list_never_reaches_install(tmp_path: Path, runner: FakeRunner) -> None:
    overrides = GlobalOverrides(plugins=(ItemSpec("hello-dolly"),))
    custom = {"plugins": ["hello-dolly", "jetpack"], "skip_plugins": ["hello-dolly"]}

    _provisioner(tmp_path, custom, runner, overrides=overrides).provision()

    installed = [argv[3] for argv in runner.calls if argv[1:3] == ["plugin", "install"]]
    assert installed == ["jetpack"]


def test_failed_plugin_install_does_not_abort(tmp_path: Path) -> None:
    runner = FakeRunner(
        failures={
            ("wp", "core", "is-installed"): 1,
            ("wp", "plugin", "install", "broken"): 1,
            ("wp", "plugin", "delete"): 1,
        }
    )
    custom = {"plugins": ["broken", "jetpack"], "delete_default_plugins": True}

    _provisioner(tmp_path, custom, runner).provision()

    assert ["wp", "plugin", "install", "jetpack"] in runner.calls
    assert ["wp", "plugin", "delete", "hello"] in runner.calls


def test_nothing_installed_without_items(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {}, runner).provision()
    assert not any(argv[2:3] == ["install"] and argv[1] in ("plugin", "theme") for argv in runner.calls)


def test_custom_htdocs_repo_stops_after_install(tmp_path: Path, runner: FakeRunner) -> None:
    custom = {"htdocs": "git@github.com:example/site.git", "wp_content": CONTENT_REPO, "plugins": ["jetpack"]}

    _provisioner(tmp_path, custom, runner).provision()

    assert runner.commands() == [
        "git clone git@github.com:example/site.git",
        "wp core download",
        "wp config create",
        "wp core is-installed",
        "wp core install",
    ]


def test_existing_htdocs_is_removed_before_clone(tmp_path: Path, runner: FakeRunner) -> None:
    (tmp_path / "htdocs").mkdir()
    custom = {"wp": False, "htdocs": "git@github.com:example/site.git"}

    _provisioner(tmp_path, custom, runner).provision()

    assert runner.calls[0] == ["rm", "-rf", str(tmp_path / "htdocs")]
    assert runner.calls[1][:2] == ["git", "clone"]


def test_clones_are_skipped_when_git_marker_exists(tmp_path: Path, runner: FakeRunner) -> None:
    (tmp_path / "htdocs" / ".git").mkdir(parents=True)
    (tmp_path / "htdocs" / "wp-content").mkdir()
    (tmp_path / "htdocs" / "wp-content" / ".git").write_text("gitdir: ../.git/modules/wp-content\n")
    custom = {"wp": False, "htdocs": "git@github.com:example/other.git", "wp_content": CONTENT_REPO}

    provisioner = _provisioner(tmp_path, custom, runner)
    provisioner.provision()
    provisioner.clone_wp_content()

    assert runner.calls == []


def test_existing_wordpress_files_skip_download_and_config(tmp_path: Path, runner: FakeRunner) -> None:
    (tmp_path / "htdocs" / "wp-admin").mkdir(parents=True)
    (tmp_path / "htdocs" / "wp-config.php").write_text("<?php\n")

    _provisioner(tmp_path, {}, runner).provision()

    assert "wp core download" not in runner.commands()
    assert "wp config create" not in runner.commands()


def test_download_disabled(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {"download_wp": False}, runner).provision()
    assert "wp core download" not in runner.commands()


def test_installed_site_skips_core_install(tmp_path: Path) -> None:
    runner = FakeRunner()
    _provisioner(tmp_path, {}, runner).provision()
    assert "wp core install" not in runner.commands()
    assert "wp core is-installed" in runner.commands()


def test_wp_config_flags(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {"prefix": "ms_", "locale": "fr_FR"}, runner).provision()

    argv = next(a for a in runner.calls if a[:3] == ["wp", "config", "create"])
    assert argv[3:9] == [
        "--dbname=mysite",
        "--dbuser=wp",
        "--dbpass=wp",
        "--dbhost=localhost",
        "--dbprefix=ms_",
        "--locale=fr_FR",
    ]
    assert argv[9].startswith("--extra-php=define( 'WP_DEBUG', true );")
    assert "define( 'JETPACK_STAGING_MODE', true );" in argv[9]


def test_download_flags(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {"version": "6.4.3", "locale": "de_DE"}, runner).provision()
    assert ["wp", "core", "download", "--locale=de_DE", "--version=6.4.3"] in runner.calls


def test_single_site_install_flags(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {"title": "Demo"}, runner, hosts=["demo.test"]).provision()

    argv = next(a for a in runner.calls if a[:3] == ["wp", "core", "install"])
    assert argv[3:] == [
        "--url=demo.test",
        "--title=Demo",
        "--admin_user=admin",
        "--admin_password=password",
        "--admin_email=admin@localhost.local",
        "--skip-plugins",
        "--skip-themes",
    ]


@pytest.mark.parametrize(("mode", "subdomains"), [("subdomain", True), ("subdirectory", False)])
def test_multisite_install(tmp_path: Path, runner: FakeRunner, mode: str, subdomains: bool) -> None:
    _provisioner(tmp_path, {"multisite": mode}, runner).provision()

    argv = next(a for a in runner.calls if a[:3] == ["wp", "core", "multisite-install"])
    assert ("--subdomains" in argv) is subdomains
    assert "wp core install" not in runner.commands()


def test_required_failure_aborts_run(tmp_path: Path) -> None:
    runner = FakeRunner(failures={("wp", "core", "download"): 1})

    with pytest.raises(CommandFailed):
        _provisioner(tmp_path, {"plugins": ["jetpack"]}, runner).provision()

    assert runner.commands() == ["wp core download"]


def test_second_run_repeats_no_completed_work(tmp_path: Path) -> None:
    db = FakeDB()
    first = FakeRunner(failures={("wp", "core", "is-installed"): 1})
    _provisioner(tmp_path, {"wp": False}, first, db=db).provision()
    conf = (tmp_path / "provision" / "vvv-nginx.conf").read_text()

    db.existing.add("mysite")
    second = FakeRunner()
    _provisioner(tmp_path, {"wp": False}, second, db=db).provision()

    assert (tmp_path / "provision" / "vvv-nginx.conf").read_text() == conf
    assert db.queries.count("CREATE DATABASE `mysite`;") == 1


def test_multisite_none_installs_single_site(tmp_path: Path, runner: FakeRunner) -> None:
    _provisioner(tmp_path, {"multisite": "none"}, runner).provision()

    assert any(a[:3] == ["wp", "core", "install"] for a in runner.calls)
    assert not any(a[:3] == ["wp", "core", "multisite-install"] for a in runner.calls)
