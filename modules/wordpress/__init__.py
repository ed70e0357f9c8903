"""WordPress provisioning package.

Submodules:
- cli: WP-CLI command construction and execution
- installer: core download, wp-config creation and install
- plugins_themes: plugin/theme install and default content removal
"""
