"""Subprocess execution service for the JFTF deployment tool."""

import os
import re
import subprocess
from typing import Dict, Iterable, List, Optional, Pattern

from jftfdeploy.errors import ProvisionerError


class CommandRunner:
    """Runs external commands and checks their exit status.

    Secrets passed at construction are masked in every logged command line
    and error message.
    """

    MASK = "******"

    def __init__(self, logger, default_timeout: Optional[float] = None, secrets: Iterable[str] = ()):
        self.logger = logger
        self.default_timeout = default_timeout
        self.secrets = sorted({str(secret) for secret in secrets if secret}, key=len, reverse=True)
        self._secret_pattern = self._compile_secrets(self.secrets)

    @staticmethod
    def _compile_secrets(secrets: List[str]) -> Optional[Pattern[str]]:
        if not secrets:
            return None
        alternatives = []
        for secret in secrets:
            # A secret is only masked where it is a whole token, so
            # "jftf_dev" leaves "jftf_dev@jftf.com" and "jftf_dev2" readable.
            prefix = r"(?<!\w)" if re.match(r"\w", secret[0]) else ""
            suffix = r"(?![\w@])" if re.match(r"\w", secret[-1]) else ""
            alternatives.append(f"{prefix}{re.escape(secret)}{suffix}")
        return re.compile("|".join(alternatives))

    def mask(self, text: str) -> str:
        if self._secret_pattern is None:
            return text
        return self._secret_pattern.sub(self.MASK, text)

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = self.mask(" ".join(cmd))
        if cwd:
            self.logger.debug("Executing in %s: %s", cwd, cmd_str)
        else:
            self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout
        process_env = None
        if env:
            # Extra variables exist only for this invocation.
            process_env = dict(os.environ)
            process_env.update(env)

        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=capture_output,
                timeout=effective_timeout,
                env=process_env,
                cwd=cwd,
                input=input_text,
            )
        except FileNotFoundError as exc:
            raise ProvisionerError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProvisionerError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except OSError as exc:
            raise ProvisionerError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", self.mask(result.stdout.strip()))

        if result.returncode == 0:
            return result

        stderr = self.mask((result.stderr or "").strip()) if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise ProvisionerError(message)

        self.logger.debug(message)
        return result
