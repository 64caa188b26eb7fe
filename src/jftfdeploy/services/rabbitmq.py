"""RabbitMQ service and administrator user configuration."""

from typing import Callable, List

from jftfdeploy import constants


class RabbitMQService:
    def __init__(self, logger, console, run_cmd: Callable, service_name: str = constants.RABBITMQ_SERVICE):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.service_name = service_name

    def enable_rabbitmq(self):
        self.console.print("[blue]Enabling and starting RabbitMQ service[/blue]")
        self.run_cmd(["sudo", "systemctl", "enable", self.service_name], capture_output=True)
        self.run_cmd(["sudo", "systemctl", "start", self.service_name], capture_output=True)

        status = self.run_cmd(
            ["sudo", "systemctl", "status", self.service_name, "--no-pager"],
            check=False,
            capture_output=True,
        )
        if status.stdout:
            self.logger.info("%s", status.stdout.rstrip())

    def list_users(self) -> List[str]:
        result = self.run_cmd(
            ["sudo", "rabbitmqctl", "list_users", "--quiet"],
            check=False,
            capture_output=True,
        )
        if result.returncode != 0:
            return []

        users = []
        for line in (result.stdout or "").splitlines():
            fields = line.split()
            if fields and fields[0] != "user":
                users.append(fields[0])
        return users

    def configure_rabbitmq_user(self, user: str, password: str, vhost: str = constants.RABBITMQ_VHOST):
        self.console.print("[blue]Configuring RabbitMQ JFTF administrator user[/blue]")

        if user in self.list_users():
            self.logger.info("RabbitMQ user %s already exists, skipping creation.", user)
        else:
            self.run_cmd(["sudo", "rabbitmqctl", "add_user", user, password], capture_output=True)

        self.run_cmd(["sudo", "rabbitmqctl", "set_user_tags", user, "administrator"], capture_output=True)
        self.run_cmd(
            ["sudo", "rabbitmqctl", "set_permissions", "-p", vhost, user, ".*", ".*", ".*"],
            capture_output=True,
        )
        self.console.print(f"[green]RabbitMQ administrator {user} configured.[/green]")
