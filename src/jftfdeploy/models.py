"""Shared domain models for the JFTF deployment tool."""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from . import constants
from .errors import ProvisionerError


@dataclass(frozen=True)
class DeploymentSettings:
    """Paths, credentials and package lists for one provisioning run."""

    parent_dir: str
    legacy_views_dir: str
    venv_dir: str
    requirements_file: str
    manage_py: str
    rsyslog_conf: str = constants.RSYSLOG_CONF
    apt_packages: Tuple[str, ...] = constants.APT_PACKAGES
    python_package: str = constants.PYTHON3_PACKAGE
    database_name: str = constants.DATABASE_NAME
    mock_database_name: str = constants.MOCK_DATABASE_NAME
    database_user: str = constants.DATABASE_USER
    database_password: str = constants.DATABASE_PASSWORD
    database_host: str = constants.DATABASE_HOST
    database_timezone: str = constants.DATABASE_TIMEZONE
    superuser_username: str = constants.SUPERUSER_USERNAME
    superuser_email: str = constants.SUPERUSER_EMAIL
    superuser_password: str = constants.SUPERUSER_PASSWORD
    rabbitmq_user: str = constants.RABBITMQ_USER
    rabbitmq_password: str = constants.RABBITMQ_PASSWORD
    rabbitmq_vhost: str = constants.RABBITMQ_VHOST
    best_effort_steps: Tuple[str, ...] = ()

    @property
    def secrets(self) -> Tuple[str, ...]:
        return (self.database_password, self.superuser_password, self.rabbitmq_password)


SETTINGS_KEYS = frozenset(field.name for field in fields(DeploymentSettings))
_TUPLE_KEYS = ("apt_packages", "best_effort_steps")


def build_settings(
    cwd: str,
    parent_dir: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> DeploymentSettings:
    """Resolves default paths relative to the deploy directory.

    The tool is expected to run from ``<root>/scripts/deploy``: the project
    root is two levels up while the legacy driver lives next to the tool.
    """
    values = {key: value for key, value in (overrides or {}).items() if value is not None}

    for key, raw in values.items():
        if key in _TUPLE_KEYS:
            if isinstance(raw, str):
                raw = raw.split()
            elif not isinstance(raw, (list, tuple)):
                raise ProvisionerError(f"Setting '{key}' must be a list or a space separated string.")
            values[key] = tuple(str(item) for item in raw)
        elif isinstance(raw, (dict, list, tuple)):
            raise ProvisionerError(f"Setting '{key}' must be a single value, got {type(raw).__name__}.")
        else:
            # YAML reads unquoted 12345 or 2024 as numbers.
            values[key] = str(raw)

    configured_parent = values.pop("parent_dir", None)
    root = os.path.abspath(parent_dir or configured_parent or os.path.dirname(os.path.dirname(cwd)))

    values.setdefault("legacy_views_dir", os.path.join(cwd, constants.LEGACY_VIEWS_DIRNAME))
    values.setdefault("venv_dir", os.path.join(root, constants.VENV_DIRNAME))
    values.setdefault("requirements_file", os.path.join(root, constants.REQUIREMENTS_FILENAME))
    values.setdefault("manage_py", os.path.join(root, *constants.MANAGE_PY_RELPATH))

    return DeploymentSettings(parent_dir=root, **values)
