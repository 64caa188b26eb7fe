import logging
import os

import click
from rich.logging import RichHandler

from . import constants
from .core import Provisioner, ProvisionerError
from .models import build_settings
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {constants.DEFAULT_CONFIG_FILENAME} if present.",
)
@click.option(
    "--parent-dir",
    required=False,
    type=click.Path(file_okay=False),
    help="JFTF project root. Defaults to two levels above the working directory.",
)
@click.option(
    "--yes",
    "-y",
    "assume_yes",
    is_flag=True,
    default=None,
    help="Skip the confirmation prompt. The JFTF database is still dropped and recreated.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Print the provisioning plan without prompting or changing the system.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--report-file",
    type=click.Path(),
    help="Write a JSON report of every step outcome to this path.",
)
def main(config, parent_dir, assume_yes, dry_run, verbose, log_file, report_file):
    """Provision a local JFTF development environment."""
    logger = logging.getLogger("jftfdeploy")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), constants.DEFAULT_CONFIG_FILENAME)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values, settings_values = config_loader.split(config_loader.load(resolved_config))
    except ProvisionerError as exc:
        raise click.ClickException(str(exc)) from exc

    assume_yes = bool(_resolve_option(assume_yes, config_values, "assume_yes", default=False))
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    report_file = _resolve_option(report_file, config_values, "report_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        settings = build_settings(os.getcwd(), parent_dir=parent_dir, overrides=settings_values)
        provisioner = Provisioner(
            settings=settings,
            assume_yes=assume_yes,
            dry_run=dry_run,
            report_file=report_file,
        )
    except ProvisionerError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(provisioner.run())


if __name__ == "__main__":
    main()
