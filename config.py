"""Shared configuration constants for the site provisioner.

Centralizes tool paths, fixed development credentials and file names used
by modules.
"""

import os

WP_CLI_PATH = os.environ.get("WP_CLI_PATH", "wp")
GIT_PATH = os.environ.get("GIT_PATH", "git")
MARIADB_PATH = os.environ.get("MARIADB_PATH", "mariadb")

# Every provisioned site talks to its database as wp/wp on localhost.
WP_DB_USER = "wp"
WP_DB_PASS = "wp"
WP_DB_HOST = "localhost"

DIR_PERMS = 0o775

HTDOCS_DIR = "htdocs"
WP_CONTENT_DIR = "wp-content"
LOG_DIR = "log"
LOG_FILES = ("error.log", "access.log")
PROVISION_DIR = "provision"
NGINX_CONFIG_FILE = "vvv-nginx.conf"
NGINX_TEMPLATE_FILE = "vvv-nginx.template"
MAIN_HOST_PLACEHOLDER = "{wp_main_host}"

DEFAULT_PLUGINS = ("akismet", "hello")
DEFAULT_THEMES = ("twelve", "thirteen", "fourteen", "fifteen", "sixteen", "seventeen")

# Global "vvvbase" section defaults
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_USER = "root"
DEFAULT_DB_PASS = "root"
