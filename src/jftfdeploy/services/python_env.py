"""Python virtual environment and pip requirements services."""

import os
from typing import Callable

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


class PythonEnvService:
    """Creates the project venv and installs requirements with its pip.

    A subprocess cannot source ``bin/activate`` into this process, so
    activation means validating the venv and routing every later
    ``python3``/``pip3`` call through its ``bin`` directory.
    """

    def __init__(self, logger, console, run_cmd: Callable, venv_dir: str):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.venv_dir = venv_dir
        self.active = False

    @property
    def bin_dir(self) -> str:
        return os.path.join(self.venv_dir, "bin")

    @property
    def python(self) -> str:
        if self.active:
            return os.path.join(self.bin_dir, "python3")
        return "python3"

    @property
    def pip(self) -> str:
        if self.active:
            return os.path.join(self.bin_dir, "pip3")
        return "pip3"

    def generate_python_venv(self):
        self.console.print("[blue]Generating Python virtual environment[/blue]")
        self.logger.info("Checking for Python venv existence")

        if os.path.isdir(self.venv_dir):
            self.logger.info("Found Python venv, skipping generation step!")
        else:
            self.logger.info("No Python venv found, generating...")
            self.run_cmd(["python3", "-m", "venv", self.venv_dir])

        self.activate()
        self.list_packages()

    def activate(self):
        self.logger.info("Activating Python venv")
        failure = actionable_error("venv_activation_failed", path=self.venv_dir)

        activate_script = os.path.join(self.bin_dir, "activate")
        if not os.path.isfile(activate_script):
            raise ProvisionerError(failure)

        result = self.run_cmd(
            [os.path.join(self.bin_dir, "python3"), "-c", "import sys; print(sys.prefix)"],
            check=False,
            capture_output=True,
        )
        if result.returncode != 0:
            raise ProvisionerError(failure)

        self.active = True
        self.console.print("[green]Python venv activated successfully![/green]")

    def install_pip_dependencies(self, requirements_file: str):
        self.console.print(f"[blue]Resolving pip dependencies from {os.path.basename(requirements_file)}[/blue]")
        if not os.path.isfile(requirements_file):
            raise ProvisionerError(actionable_error("requirements_not_found", path=requirements_file))

        try:
            self.run_cmd([self.pip, "install", "-r", requirements_file])
        except ProvisionerError as exc:
            raise ProvisionerError(f"Failed to install Python packages, aborting!\n{exc}") from exc

        self.console.print("[green]Installed Python packages successfully![/green]")
        self.list_packages()

    def list_packages(self):
        result = self.run_cmd([self.pip, "list"], check=False, capture_output=True)
        if result.returncode == 0 and result.stdout:
            self.logger.info("Installed Python packages:\n%s", result.stdout.rstrip())
