"""Legacy JFTF CMDB database view initialization."""

import os
from typing import Callable

from jftfdeploy import constants
from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


class LegacyViewsService:
    def __init__(self, logger, console, run_cmd: Callable, legacy_dir: str):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.legacy_dir = legacy_dir

    def init_legacy_jftf_cmdb_db_views(self, database_password: str, database_host: str):
        self.console.print("[blue]Initializing legacy JFTF CMDB database views[/blue]")
        if not os.path.isdir(self.legacy_dir):
            raise ProvisionerError(actionable_error("legacy_views_dir_not_found", path=self.legacy_dir))

        script = os.path.join(self.legacy_dir, constants.LEGACY_VIEWS_SCRIPT)
        if not os.path.isfile(script):
            raise ProvisionerError(f"Legacy views script not found: {script}")

        # db_views_init.sh expects to run from its own directory.
        self.run_cmd(
            ["sudo", f"./{constants.LEGACY_VIEWS_SCRIPT}", database_password, database_host],
            cwd=self.legacy_dir,
        )
        self.console.print("[green]Legacy database views initialized.[/green]")
