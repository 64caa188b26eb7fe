"""Configuration loader for the JFTF deployment tool."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from jftfdeploy.errors import ProvisionerError
from jftfdeploy.models import SETTINGS_KEYS


class ConfigLoader:
    """Loads YAML files overriding CLI defaults and deployment settings."""

    CLI_KEYS = {
        "assume_yes",
        "dry_run",
        "verbose",
        "log_file",
        "report_file",
    }
    SUPPORTED_KEYS = CLI_KEYS | SETTINGS_KEYS

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ProvisionerError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ProvisionerError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ProvisionerError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(str(key) for key in set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            raise ProvisionerError(f"Unknown configuration keys: {', '.join(unknown)}")

        return parsed

    def split(self, values: Dict[str, Any]):
        """Separates CLI option values from deployment setting overrides."""
        cli_values = {key: value for key, value in values.items() if key in self.CLI_KEYS}
        settings_values = {key: value for key, value in values.items() if key in SETTINGS_KEYS}
        return cli_values, settings_values
