"""rsyslog remote logging configuration."""

import os
from typing import Callable, Iterable

from jftfdeploy import constants
from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


def uncomment_directive(text: str, directive: str) -> str:
    return text.replace(f"#{directive}", directive)


def ensure_line(text: str, line: str) -> str:
    if line in text:
        return text
    if text and not text.endswith("\n"):
        text += "\n"
    return f"{text}{line}\n"


def patch_rsyslog_config(
    text: str,
    directives: Iterable[str] = constants.RSYSLOG_UNCOMMENT_DIRECTIVES,
    allowed_sender: str = constants.RSYSLOG_ALLOWED_SENDER,
) -> str:
    """Enables the UDP listener; applying it twice gives the same text."""
    for directive in directives:
        text = uncomment_directive(text, directive)
    return ensure_line(text, allowed_sender)


class RsyslogService:
    """Patches rsyslog.conf for remote UDP ingestion and restarts the daemon."""

    def __init__(self, logger, console, run_cmd: Callable, config_path: str = constants.RSYSLOG_CONF):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.config_path = config_path

    def configure_rsyslog_remote_logging(self) -> bool:
        """Returns True when the configuration file was rewritten."""
        self.console.print("[blue]Reconfiguring rsyslog daemon configuration file to allow remote logging[/blue]")
        if not os.path.isfile(self.config_path):
            raise ProvisionerError(actionable_error("rsyslog_conf_not_found", path=self.config_path))

        with open(self.config_path, "r", encoding="utf-8") as file_obj:
            original = file_obj.read()

        patched = patch_rsyslog_config(original)
        changed = patched != original
        if changed:
            self.write_config(patched)
            self.logger.info("Updated %s", self.config_path)
        else:
            self.logger.info("%s already allows remote logging.", self.config_path)

        self.run_cmd(["sudo", "systemctl", "restart", constants.RSYSLOG_SERVICE])
        self.console.print("[green]Rsyslog daemon configuration successful![/green]")
        return changed

    def write_config(self, content: str):
        # /etc is root owned; tee runs under sudo while this process does not.
        self.run_cmd(
            ["sudo", "tee", self.config_path],
            capture_output=True,
            input_text=content,
        )
