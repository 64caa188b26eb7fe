"""MariaDB user, schema and server configuration."""

from typing import Callable, List

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


class DatabaseService:
    """Configures the JFTF development database through ``sudo mariadb``.

    Every statement is a separate invocation so a failure can be traced to
    the sub-step that caused it.
    """

    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.database_dropped = False

    @staticmethod
    def _account(user: str, host: str) -> str:
        return f"'{user}'@'{host}'"

    def execute(self, sql: str, action: str):
        try:
            self.run_cmd(["sudo", "mariadb", "-e", sql], capture_output=True)
        except ProvisionerError as exc:
            raise ProvisionerError(f"{actionable_error('database_step_failed', action=action)}\n{exc}") from exc

    def query(self, sql: str, action: str) -> List[str]:
        try:
            result = self.run_cmd(["sudo", "mariadb", "-B", "-N", "-e", sql], capture_output=True)
        except ProvisionerError as exc:
            raise ProvisionerError(f"{actionable_error('database_step_failed', action=action)}\n{exc}") from exc
        return [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]

    def create_user(self, user: str, password: str, host: str):
        self.execute(
            f"CREATE OR REPLACE USER {self._account(user, host)} IDENTIFIED BY '{password}';",
            action="create the development user",
        )
        self.console.print("[green]JFTF development user created successfully![/green]")

    def recreate_database(self, database: str):
        self.execute(f"DROP DATABASE IF EXISTS {database};", action=f"drop database {database}")
        self.database_dropped = True
        self.execute(f"CREATE OR REPLACE DATABASE {database};", action=f"create database {database}")
        self.database_dropped = False
        self.console.print("[green]JFTF development database created successfully![/green]")

    def grant_privileges(self, databases: List[str], user: str, password: str, host: str):
        for database in databases:
            self.execute(
                f"GRANT ALL ON {database}.* TO {self._account(user, host)} "
                f"IDENTIFIED BY '{password}' WITH GRANT OPTION;",
                action=f"grant privileges on {database}",
            )
        self.console.print("[green]JFTF development user granted development database permissions![/green]")

    def set_global_timezone(self, timezone: str):
        self.execute(f"SET GLOBAL time_zone = '{timezone}';", action="set the global time zone")
        rows = self.query(
            f"SELECT @@global.time_zone='{timezone}';",
            action="read back the global time zone",
        )
        if rows != ["1"]:
            raise ProvisionerError(actionable_error("timezone_mismatch", timezone=timezone))
        self.console.print(f"[green]Global time zone is set to {timezone}.[/green]")

    def flush_privileges(self):
        self.execute("FLUSH PRIVILEGES;", action="flush privileges")

    def configure_database(self, settings):
        self.console.print("[blue]Configuring MariaDB development database and development user[/blue]")
        self.logger.info("Configuring MariaDB database %s", settings.database_name)

        self.create_user(settings.database_user, settings.database_password, settings.database_host)
        self.recreate_database(settings.database_name)
        self.grant_privileges(
            [settings.database_name, settings.mock_database_name],
            settings.database_user,
            settings.database_password,
            settings.database_host,
        )
        self.set_global_timezone(settings.database_timezone)
        self.flush_privileges()
