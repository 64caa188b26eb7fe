import logging
import subprocess
import uuid
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from rich.console import Console

from .errors import ProvisionerError
from .models import DeploymentSettings
from .services.apt import AptService
from .services.command_runner import CommandRunner
from .services.database import DatabaseService
from .services.django_manage import DjangoManageService
from .services.host import HostService
from .services.legacy_views import LegacyViewsService
from .services.manifest import ManifestService
from .services.prompt import ConfirmationGate
from .services.python_env import PythonEnvService
from .services.rabbitmq import RabbitMQService
from .services.rsyslog import RsyslogService

console = Console()
logger = logging.getLogger("jftfdeploy")


class Provisioner:
    STEPS = (
        "install_apt_dependencies",
        "generate_python_venv",
        "install_pip_dependencies",
        "configure_database",
        "apply_migrations",
        "init_legacy_jftf_cmdb_db_views",
        "create_superuser",
        "configure_rsyslog_remote_logging",
        "enable_rabbitmq",
        "configure_rabbitmq_user",
    )

    def __init__(
        self,
        settings: DeploymentSettings,
        assume_yes: bool = False,
        dry_run: bool = False,
        report_file: Optional[str] = None,
        input_func: Optional[Callable[[str], str]] = None,
        geteuid: Optional[Callable[[], int]] = None,
    ):
        unknown_steps = sorted(set(settings.best_effort_steps) - set(self.STEPS))
        if unknown_steps:
            raise ProvisionerError(
                f"Unknown step(s) in best_effort_steps: {', '.join(unknown_steps)}. "
                f"Valid steps: {', '.join(self.STEPS)}"
            )

        self.settings = settings
        self.assume_yes = assume_yes
        self.dry_run = dry_run
        self.run_id = uuid.uuid4().hex[:10]

        self.command_runner = CommandRunner(logger=logger, secrets=settings.secrets)
        self.manifest_service = ManifestService(report_file=report_file, logger=logger)
        self.host_service = HostService(logger=logger, console=console, geteuid=geteuid)
        self.confirmation_gate = ConfirmationGate(console=console, input_func=input_func)
        self.apt_service = AptService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.python_env_service = PythonEnvService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            venv_dir=settings.venv_dir,
        )
        self.database_service = DatabaseService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.django_manage_service = DjangoManageService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            manage_py=settings.manage_py,
        )
        self.legacy_views_service = LegacyViewsService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            legacy_dir=settings.legacy_views_dir,
        )
        self.rsyslog_service = RsyslogService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            config_path=settings.rsyslog_conf,
        )
        self.rabbitmq_service = RabbitMQService(logger=logger, console=console, run_cmd=self._run_cmd)

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output, **kwargs)

    def _is_best_effort(self, name: str) -> bool:
        return name in self.settings.best_effort_steps

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.manifest_service.step_started(name)
        console.print()

        try:
            result = callback(*args, **kwargs)
        except ProvisionerError as exc:
            if self._is_best_effort(name):
                console.print(f"[yellow]Step {name} failed and was skipped:[/yellow] {exc}")
                logger.warning("Step %s failed, continuing: %s", name, exc)
                self.manifest_service.step_finished(name, "warning", error=str(exc))
                return None
            self.manifest_service.step_finished(name, "failed", error=str(exc))
            raise
        except Exception as exc:
            self.manifest_service.step_finished(name, "failed", error=str(exc))
            raise

        self.manifest_service.step_finished(name, "success")
        return result

    def _build_manifest_metadata(self) -> Dict[str, Any]:
        metadata = asdict(self.settings)
        for key in ("database_password", "superuser_password", "rabbitmq_password"):
            metadata[key] = CommandRunner.MASK
        return metadata

    def pipeline(self) -> List[Tuple[str, Callable]]:
        return [(name, getattr(self, name)) for name in self.STEPS]

    def install_apt_dependencies(self):
        failed = self.apt_service.install_apt_dependencies(
            self.settings.apt_packages,
            stop_on_error=not self._is_best_effort("install_apt_dependencies"),
        )
        if failed:
            raise ProvisionerError(f"Failed to install apt packages: {', '.join(failed)}")

    def generate_python_venv(self):
        self.apt_service.install_apt_package(self.settings.python_package)
        self.python_env_service.generate_python_venv()

    def install_pip_dependencies(self):
        self.python_env_service.install_pip_dependencies(self.settings.requirements_file)

    def configure_database(self):
        self.database_service.configure_database(self.settings)

    def apply_migrations(self):
        self.django_manage_service.apply_migrations(self.python_env_service.python)

    def init_legacy_jftf_cmdb_db_views(self):
        self.legacy_views_service.init_legacy_jftf_cmdb_db_views(
            self.settings.database_password,
            self.settings.database_host,
        )

    def create_superuser(self):
        self.django_manage_service.create_superuser(
            self.python_env_service.python,
            username=self.settings.superuser_username,
            email=self.settings.superuser_email,
            password=self.settings.superuser_password,
        )

    def configure_rsyslog_remote_logging(self):
        self.rsyslog_service.configure_rsyslog_remote_logging()

    def enable_rabbitmq(self):
        self.rabbitmq_service.enable_rabbitmq()

    def configure_rabbitmq_user(self):
        self.rabbitmq_service.configure_rabbitmq_user(
            self.settings.rabbitmq_user,
            self.settings.rabbitmq_password,
            self.settings.rabbitmq_vhost,
        )

    def print_plan(self):
        console.print("[bold]Dry run: no changes will be made.[/bold]")
        console.print(f"Parent directory: {self.settings.parent_dir}")
        console.print(f"Python venv: {self.settings.venv_dir}")
        console.print(f"Requirements: {self.settings.requirements_file}")
        console.print(f"manage.py: {self.settings.manage_py}")
        console.print(f"Database: {self.settings.database_name} (dropped and recreated)")
        for index, name in enumerate(self.STEPS, start=1):
            suffix = " [yellow](best effort)[/yellow]" if self._is_best_effort(name) else ""
            console.print(f"  {index}. {name}{suffix}")

    def confirm(self) -> bool:
        self.confirmation_gate.show_warning()
        if self.assume_yes:
            logger.info("Confirmation skipped with --yes.")
            return True
        return self.confirmation_gate.ask()

    def run(self) -> int:
        try:
            self.host_service.ensure_not_root()
        except ProvisionerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1

        self.host_service.check_distribution()

        if self.dry_run:
            self.print_plan()
            return 0

        try:
            confirmed = self.confirm()
        except (KeyboardInterrupt, EOFError):
            console.print()
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            return 1

        if not confirmed:
            logger.info("Setup declined, nothing was changed.")
            return 0

        exit_code = 1
        manifest_status = "failed"
        manifest_error: Optional[str] = None
        self.manifest_service.start_run(run_id=self.run_id, metadata=self._build_manifest_metadata())

        try:
            for name, callback in self.pipeline():
                self._run_step(name, callback)

            console.print()
            statuses = self.manifest_service.step_statuses()
            warned = [name for name, status in statuses.items() if status == "warning"]
            if warned:
                console.print("[bold yellow]JFTF development deployment completed with warnings.[/bold yellow]")
                logger.warning("Steps skipped after failing: %s", ", ".join(warned))
            else:
                console.print("[bold green]JFTF development deployment completed successfully![/bold green]")
            manifest_status = "success"
            exit_code = 0
            return exit_code

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            manifest_status = "aborted"
            manifest_error = "Operation cancelled by user."
            return exit_code
        except ProvisionerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            manifest_error = str(exc)
            return exit_code
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            manifest_error = str(exc)
            return exit_code
        finally:
            if self.database_service.database_dropped:
                logger.warning(
                    "Database %s was dropped and not recreated. Re-run the tool after fixing the cause.",
                    self.settings.database_name,
                )
            self.manifest_service.finalize(manifest_status, error=manifest_error)
