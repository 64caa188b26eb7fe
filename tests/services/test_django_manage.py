import os
import subprocess

import pytest

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.services.django_manage import DjangoManageService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeRunCmd:
    def __init__(self, returncode=0, user_exists=False):
        self.calls = []
        self.returncode = returncode
        self.user_exists = user_exists

    def __call__(self, cmd, check=True, capture_output=False, **kwargs):
        self.calls.append((cmd, kwargs))
        if "shell" in cmd:
            return subprocess.CompletedProcess(cmd, 0 if self.user_exists else 1, stdout="", stderr="")
        if self.returncode and check:
            raise ProvisionerError(f"Command failed ({self.returncode}): {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr="")


@pytest.fixture
def manage_py(tmp_path):
    path = tmp_path / "jftf_core" / "manage.py"
    path.parent.mkdir()
    path.write_text("# manage\n", encoding="utf-8")
    return path


def _service(run_cmd, manage_py):
    return DjangoManageService(
        logger=DummyLogger(),
        console=DummyConsole(),
        run_cmd=run_cmd,
        manage_py=str(manage_py),
    )


def test_apply_migrations_runs_migrate_with_given_python(manage_py):
    run_cmd = FakeRunCmd()

    _service(run_cmd, manage_py).apply_migrations("/srv/jftf/.venv/bin/python3")

    assert run_cmd.calls[0][0] == ["/srv/jftf/.venv/bin/python3", str(manage_py), "migrate"]


def test_apply_migrations_requires_manage_py(tmp_path):
    run_cmd = FakeRunCmd()

    with pytest.raises(ProvisionerError, match="manage.py not found"):
        _service(run_cmd, tmp_path / "manage.py").apply_migrations("python3")

    assert run_cmd.calls == []


def test_apply_migrations_fails_on_exit_status(manage_py):
    with pytest.raises(ProvisionerError, match="Failed to apply migrations"):
        _service(FakeRunCmd(returncode=1), manage_py).apply_migrations("python3")


def test_create_superuser_scopes_credentials_to_invocation(manage_py, monkeypatch):
    monkeypatch.delenv("DJANGO_SUPERUSER_PASSWORD", raising=False)
    run_cmd = FakeRunCmd()

    _service(run_cmd, manage_py).create_superuser(
        "python3",
        username="jftf_dev",
        email="jftf_dev@jftf.com",
        password="jftf_dev",
    )

    cmd, kwargs = run_cmd.calls[1]
    assert cmd == ["python3", str(manage_py), "createsuperuser", "--noinput", "--email", "jftf_dev@jftf.com"]
    assert kwargs["env"] == {
        "DJANGO_SUPERUSER_USERNAME": "jftf_dev",
        "DJANGO_SUPERUSER_PASSWORD": "jftf_dev",
    }
    assert "DJANGO_SUPERUSER_PASSWORD" not in os.environ


def test_create_superuser_failure_is_raised(manage_py):
    with pytest.raises(ProvisionerError):
        _service(FakeRunCmd(returncode=1), manage_py).create_superuser(
            "python3",
            username="jftf_dev",
            email="jftf_dev@jftf.com",
            password="jftf_dev",
        )


def test_create_superuser_checks_existence_with_username_only(manage_py):
    run_cmd = FakeRunCmd()

    _service(run_cmd, manage_py).create_superuser(
        "python3",
        username="jftf_dev",
        email="jftf_dev@jftf.com",
        password="jftf_dev",
    )

    cmd, kwargs = run_cmd.calls[0]
    assert cmd[:4] == ["python3", str(manage_py), "shell", "-c"]
    assert kwargs["env"] == {"DJANGO_SUPERUSER_USERNAME": "jftf_dev"}


def test_create_superuser_skips_existing_user(manage_py):
    run_cmd = FakeRunCmd(user_exists=True)

    created = _service(run_cmd, manage_py).create_superuser(
        "python3",
        username="jftf_dev",
        email="jftf_dev@jftf.com",
        password="jftf_dev",
    )

    assert created is False
    assert len(run_cmd.calls) == 1
    assert all("createsuperuser" not in cmd for cmd, _kwargs in run_cmd.calls)
