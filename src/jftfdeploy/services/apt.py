"""Idempotent apt package installation."""

from typing import Callable, Iterable, List

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


class AptService:
    """Installs OS packages only when dpkg does not report them installed."""

    INSTALLED_MARKER = "ok installed"

    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def is_installed(self, name: str) -> bool:
        result = self.run_cmd(
            ["dpkg-query", "-W", "-f=${Status}", name],
            check=False,
            capture_output=True,
        )
        if result.returncode != 0:
            return False
        return self.INSTALLED_MARKER in (result.stdout or "")

    def install_apt_package(self, name: str) -> bool:
        """Returns True when the installer ran, False when the package was present."""
        self.logger.info("Checking installation of %s", name)
        if self.is_installed(name):
            self.logger.info("Package %s already installed on the system!", name)
            return False

        self.console.print(f"[blue]Installing {name}...[/blue]")
        try:
            self.run_cmd(["sudo", "apt-get", "install", name, "-y"])
        except ProvisionerError as exc:
            raise ProvisionerError(f"{actionable_error('apt_install_failed', package=name)}\n{exc}") from exc
        return True

    def install_apt_dependencies(self, names: Iterable[str], stop_on_error: bool = True) -> List[str]:
        """Installs every package in order and returns the names that failed.

        With ``stop_on_error`` disabled the loop always reaches the end of the
        list and failures are only logged.
        """
        self.console.print("[blue]Installing required apt packages[/blue]")
        failed: List[str] = []
        for name in names:
            try:
                self.install_apt_package(name)
            except ProvisionerError as exc:
                if stop_on_error:
                    raise
                self.logger.warning(str(exc))
                failed.append(name)
        return failed
