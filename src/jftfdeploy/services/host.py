"""Host preflight checks for the JFTF deployment tool."""

import os
from typing import Callable, Dict, Optional

from packaging import version

from jftfdeploy import constants
from jftfdeploy.errors import ProvisionerError
from jftfdeploy.errors_catalog import actionable_error


class HostService:
    """Checks the invoking identity and the host distribution."""

    def __init__(
        self,
        logger,
        console,
        geteuid: Optional[Callable[[], int]] = None,
        os_release_file: str = constants.OS_RELEASE_FILE,
    ):
        self.logger = logger
        self.console = console
        self.geteuid = geteuid or os.geteuid
        self.os_release_file = os_release_file

    def ensure_not_root(self):
        if self.geteuid() == 0:
            raise ProvisionerError(actionable_error("running_as_root"))

    def read_os_release(self) -> Dict[str, str]:
        if not os.path.exists(self.os_release_file):
            return {}

        values: Dict[str, str] = {}
        with open(self.os_release_file, "r", encoding="utf-8") as file_obj:
            for line in file_obj:
                key, sep, value = line.strip().partition("=")
                if sep and key:
                    values[key] = value.strip().strip('"')
        return values

    def check_distribution(self, minimum: str = constants.MIN_UBUNTU_VERSION) -> bool:
        """Warns unless the host is Ubuntu ``minimum`` or newer. Never fatal."""
        release = self.read_os_release()
        distro = release.get("ID", "").lower()
        version_id = release.get("VERSION_ID", "")

        if distro != "ubuntu":
            self.logger.warning(
                "Host distribution '%s' is not Ubuntu; this tool targets Ubuntu %s+.",
                distro or "unknown",
                minimum,
            )
            return False

        try:
            supported = version.parse(version_id) >= version.parse(minimum)
        except version.InvalidVersion:
            supported = False

        if not supported:
            self.logger.warning(
                "Ubuntu %s detected; this tool targets Ubuntu %s+.",
                version_id or "unknown",
                minimum,
            )
            return False

        self.logger.debug("Ubuntu %s detected.", version_id)
        return True
