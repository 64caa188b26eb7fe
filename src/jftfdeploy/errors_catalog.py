"""Actionable error catalog for the JFTF deployment tool."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "running_as_root": {
        "what": "This script cannot be executed as root.",
        "next": "Run it again without root privileges; `sudo` is used only where required.",
    },
    "venv_activation_failed": {
        "what": "Python venv at {path} failed to activate.",
        "next": "Remove the directory and re-run so the virtual environment is regenerated.",
    },
    "requirements_not_found": {
        "what": "Requirements file not found: {path}",
        "next": "Run the tool from `scripts/deploy` or point `--parent-dir` at the JFTF checkout.",
    },
    "manage_py_not_found": {
        "what": "Django manage.py not found: {path}",
        "next": "Check that the `jftf_core` project exists under the parent directory.",
    },
    "legacy_views_dir_not_found": {
        "what": "Legacy database driver directory not found: {path}",
        "next": "Run the tool from `scripts/deploy` or set `legacy_views_dir` in the config file.",
    },
    "rsyslog_conf_not_found": {
        "what": "rsyslog configuration not found: {path}",
        "next": "Install the `rsyslog` package or set `rsyslog_conf` in the config file.",
    },
    "database_step_failed": {
        "what": "Database configuration failed while trying to {action}.",
        "next": "Check that MariaDB is running (`systemctl status mariadb`) and re-run the tool.",
    },
    "timezone_mismatch": {
        "what": "Global time zone is not set to {timezone}.",
        "next": "Load the time zone tables with `mariadb-tzinfo-to-sql /usr/share/zoneinfo | sudo mariadb mysql`.",
    },
    "apt_install_failed": {
        "what": "Failed to install apt package {package}.",
        "next": "Run `sudo apt-get update` and check the package name, then re-run the tool.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
