import os

import pytest

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.models import DeploymentSettings, build_settings
from jftfdeploy.services.command_runner import CommandRunner


def test_build_settings_resolves_paths_from_deploy_directory():
    cwd = os.path.join(os.sep, "srv", "jftf", "scripts", "deploy")

    settings = build_settings(cwd)

    root = os.path.join(os.sep, "srv", "jftf")
    assert settings.parent_dir == root
    assert settings.venv_dir == os.path.join(root, ".venv")
    assert settings.requirements_file == os.path.join(root, "requirements.txt")
    assert settings.manage_py == os.path.join(root, "jftf_core", "manage.py")
    assert settings.legacy_views_dir == os.path.join(cwd, "legacy_dbdriver")
    assert settings.database_name == "jftf_cmdb"
    assert "rabbitmq-server" in settings.apt_packages


def test_build_settings_prefers_explicit_parent_dir(tmp_path):
    settings = build_settings(
        str(tmp_path / "elsewhere"),
        parent_dir=str(tmp_path / "checkout"),
        overrides={"parent_dir": str(tmp_path / "ignored")},
    )

    assert settings.parent_dir == str(tmp_path / "checkout")
    assert settings.venv_dir == str(tmp_path / "checkout" / ".venv")


def test_build_settings_applies_overrides_and_normalizes_lists():
    settings = build_settings(
        "/srv/jftf/scripts/deploy",
        overrides={
            "apt_packages": "rsyslog memcached",
            "best_effort_steps": ["enable_rabbitmq"],
            "database_timezone": "UTC",
            "venv_dir": "/opt/venv",
            "superuser_email": None,
        },
    )

    assert settings.apt_packages == ("rsyslog", "memcached")
    assert settings.best_effort_steps == ("enable_rabbitmq",)
    assert settings.database_timezone == "UTC"
    assert settings.venv_dir == "/opt/venv"
    assert settings.superuser_email == "jftf_dev@jftf.com"


def test_secrets_lists_every_password():
    settings = DeploymentSettings(
        parent_dir="/srv/jftf",
        legacy_views_dir="/srv/jftf/scripts/deploy/legacy_dbdriver",
        venv_dir="/srv/jftf/.venv",
        requirements_file="/srv/jftf/requirements.txt",
        manage_py="/srv/jftf/jftf_core/manage.py",
        rabbitmq_password="broker-secret",
    )

    assert settings.secrets == ("jftf_development", "jftf_dev", "broker-secret")


def test_build_settings_converts_numeric_yaml_values_to_strings():
    settings = build_settings(
        "/srv/jftf/scripts/deploy",
        overrides={"database_password": 12345, "rabbitmq_password": 2024},
    )

    assert settings.database_password == "12345"
    assert settings.rabbitmq_password == "2024"
    runner = CommandRunner(logger=None, secrets=settings.secrets)
    assert runner.mask("IDENTIFIED BY '12345'") == f"IDENTIFIED BY '{CommandRunner.MASK}'"


def test_build_settings_rejects_mapping_for_single_value():
    with pytest.raises(ProvisionerError, match="database_password"):
        build_settings("/srv/jftf/scripts/deploy", overrides={"database_password": {"value": "x"}})
