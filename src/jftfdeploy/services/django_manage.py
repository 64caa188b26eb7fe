"""Django management command services."""

import os
from typing import Callable

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error

SUPERUSER_EXISTS_SCRIPT = (
    "import os, sys; "
    "from django.contrib.auth import get_user_model; "
    "sys.exit(0 if get_user_model().objects.filter("
    "username=os.environ['DJANGO_SUPERUSER_USERNAME']).exists() else 1)"
)


class DjangoManageService:
    """Runs ``manage.py`` subcommands with the venv interpreter."""

    def __init__(self, logger, console, run_cmd: Callable, manage_py: str):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.manage_py = manage_py

    def _require_manage_py(self):
        if not os.path.isfile(self.manage_py):
            raise ProvisionerError(actionable_error("manage_py_not_found", path=self.manage_py))

    def apply_migrations(self, python: str):
        self.console.print("[blue]Applying Django migrations[/blue]")
        self._require_manage_py()

        try:
            self.run_cmd([python, self.manage_py, "migrate"])
        except ProvisionerError as exc:
            raise ProvisionerError(f"Failed to apply migrations, aborting!\n{exc}") from exc
        self.console.print("[green]Migration applied successfully![/green]")

    def superuser_exists(self, python: str, username: str) -> bool:
        """Asks Django whether ``username`` is already registered.

        ``manage.py shell`` exits 0 when the user exists and 1 otherwise.
        """
        result = self.run_cmd(
            [python, self.manage_py, "shell", "-c", SUPERUSER_EXISTS_SCRIPT],
            check=False,
            capture_output=True,
            env={"DJANGO_SUPERUSER_USERNAME": username},
        )
        return result.returncode == 0

    def create_superuser(self, python: str, username: str, email: str, password: str):
        self.console.print("[blue]Creating Django superuser[/blue]")
        self._require_manage_py()

        if self.superuser_exists(python, username):
            self.logger.info("Django superuser %s already exists, skipping creation.", username)
            self.console.print(f"[green]Django superuser {username} already exists.[/green]")
            return False

        self.run_cmd(
            [python, self.manage_py, "createsuperuser", "--noinput", "--email", email],
            env={
                "DJANGO_SUPERUSER_USERNAME": username,
                "DJANGO_SUPERUSER_PASSWORD": password,
            },
        )
        self.console.print(f"[green]Django superuser {username} created.[/green]")
        return True
