import subprocess

import pytest

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.models import DeploymentSettings
from jftfdeploy.services.database import DatabaseService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeMariaDB:
    def __init__(self, timezone_result="1\n", fail_matching=None):
        self.statements = []
        self.timezone_result = timezone_result
        self.fail_matching = fail_matching

    def __call__(self, cmd, check=True, capture_output=False, **_kwargs):
        sql = cmd[-1]
        self.statements.append(sql)
        if self.fail_matching and self.fail_matching in sql:
            raise ProvisionerError(f"Command failed (1): {' '.join(cmd)}")
        if "-N" in cmd:
            return subprocess.CompletedProcess(cmd, 0, stdout=self.timezone_result, stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def _settings() -> DeploymentSettings:
    return DeploymentSettings(
        parent_dir="/srv/jftf",
        legacy_views_dir="/srv/jftf/scripts/deploy/legacy_dbdriver",
        venv_dir="/srv/jftf/.venv",
        requirements_file="/srv/jftf/requirements.txt",
        manage_py="/srv/jftf/jftf_core/manage.py",
    )


def _service(run_cmd):
    return DatabaseService(logger=DummyLogger(), console=DummyConsole(), run_cmd=run_cmd)


def test_configure_database_runs_sub_steps_in_order():
    mariadb = FakeMariaDB()

    _service(mariadb).configure_database(_settings())

    assert mariadb.statements == [
        "CREATE OR REPLACE USER 'jftf'@'localhost' IDENTIFIED BY 'jftf_development';",
        "DROP DATABASE IF EXISTS jftf_cmdb;",
        "CREATE OR REPLACE DATABASE jftf_cmdb;",
        "GRANT ALL ON jftf_cmdb.* TO 'jftf'@'localhost' IDENTIFIED BY 'jftf_development' WITH GRANT OPTION;",
        "GRANT ALL ON test_jftf_cmdb.* TO 'jftf'@'localhost' IDENTIFIED BY 'jftf_development' WITH GRANT OPTION;",
        "SET GLOBAL time_zone = 'Europe/Bucharest';",
        "SELECT @@global.time_zone='Europe/Bucharest';",
        "FLUSH PRIVILEGES;",
    ]


def test_timezone_readback_mismatch_aborts_before_flush():
    mariadb = FakeMariaDB(timezone_result="0\n")

    with pytest.raises(ProvisionerError, match="Global time zone is not set to Europe/Bucharest"):
        _service(mariadb).configure_database(_settings())

    assert "FLUSH PRIVILEGES;" not in mariadb.statements


def test_failed_sub_step_is_named_and_stops_the_sequence():
    mariadb = FakeMariaDB(fail_matching="GRANT ALL ON test_jftf_cmdb")

    with pytest.raises(ProvisionerError, match="grant privileges on test_jftf_cmdb"):
        _service(mariadb).configure_database(_settings())

    assert not any(statement.startswith("SET GLOBAL") for statement in mariadb.statements)


def test_database_left_dropped_is_tracked():
    service = _service(FakeMariaDB(fail_matching="CREATE OR REPLACE DATABASE"))

    with pytest.raises(ProvisionerError, match="create database jftf_cmdb"):
        service.recreate_database("jftf_cmdb")

    assert service.database_dropped is True


def test_statements_go_through_sudo_mariadb():
    calls = []

    def run_cmd(cmd, check=True, capture_output=False, **_kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    _service(run_cmd).flush_privileges()

    assert calls == [["sudo", "mariadb", "-e", "FLUSH PRIVILEGES;"]]
