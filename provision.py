#!/usr/bin/env python3
"""CLI to provision one local development site.

Inputs: --vvv_config=PATH --site_escaped=NAME --vm_dir=DIR
        [--provision_dir=DIR] [--strict-nginx]
Side effects: creates the site database, log files, htdocs, nginx config
and, when enabled, a WordPress install with plugins and themes.
Exit code 0 on success; any fatal error exits non-zero.
"""
import os
import sys
from pathlib import Path

from modules.commands import CommandBuilder
from modules.config_loader import get_overrides, get_site_config, load_config
from modules.db import MariaDB
from modules.errors import ConfigError, ProvisionError
from modules.provisioner import Provisioner
from modules.utils import get_logger, init_logging, status_fail, status_pass

# ─── CONFIG ──────────────────────────────────────────────────────────────
REQUIRED_FLAGS = ("vvv_config", "site_escaped", "vm_dir")
OPTIONAL_FLAGS = ("provision_dir",)
SWITCHES = ("strict-nginx",)
USAGE = (
    "usage: provision.py --vvv_config=PATH --site_escaped=NAME --vm_dir=DIR "
    "[--provision_dir=DIR] [--strict-nginx]"
)


# ─── CLI ──────────────────────────────────────────────────────────────
def parse_options(argv: list[str]) -> dict[str, str | bool]:
    options: dict[str, str | bool] = {}
    for arg in argv:
        if not arg.startswith("--"):
            raise ConfigError(f"Unexpected argument: {arg}")
        name, sep, value = arg[2:].partition("=")
        if name in SWITCHES and not sep:
            options[name] = True
            continue
        if name not in REQUIRED_FLAGS + OPTIONAL_FLAGS or not sep:
            raise ConfigError(f"Unknown option: {arg}")
        options[name] = value
    return options


def validate_flags(options: dict[str, str | bool]) -> None:
    missing = [f"--{name}" for name in REQUIRED_FLAGS if not options.get(name)]
    if missing:
        raise ConfigError(f"Missing required options: {', '.join(missing)}\n{USAGE}")


def run(options: dict[str, str | bool]) -> None:
    logger = get_logger()
    config_path = Path(str(options["vvv_config"]))
    site_name = str(options["site_escaped"])
    vm_dir = Path(str(options["vm_dir"]))

    config = load_config(config_path)
    site_config = get_site_config(config, site_name)
    overrides = get_overrides(config)

    logger.info("Connecting to the DB...")
    db = MariaDB.from_params(overrides.db)
    db.connect()

    provisioner = Provisioner(
        CommandBuilder(),
        db,
        vm_dir,
        site_name,
        site_config,
        logger,
        overrides,
        provision_dir=options.get("provision_dir") or None,
        strict_nginx=bool(options.get("strict-nginx")),
    )
    provisioner.provision()


def main(argv: list[str]) -> int:
    init_logging(os.environ.get("PROVISION_LOG_DIR"))
    logger = get_logger()
    try:
        options = parse_options(argv)
        validate_flags(options)
        run(options)
    except ConfigError as err:
        logger.error(str(err))
        status_fail("configuration error")
        return err.code or 1
    except ProvisionError as err:
        logger.error(str(err))
        status_fail("provisioning aborted")
        return err.code or 1
    except OSError as err:
        logger.error(str(err))
        status_fail("filesystem error")
        return 1
    status_pass(f"site {options['site_escaped']} provisioned")
    return 0


def console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(console_main())
