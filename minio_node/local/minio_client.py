import os
import json
import logging
import subprocess
from pathlib import Path
from urllib.parse import quote
from typing import Any, Dict, Optional, Sequence
from minio_node import settings
from .config import RuntimeConfig
from .exceptions import AdminCommandError

log = logging.getLogger(__name__)


class MinioClient:
    """
    Thin wrapper around the MinIO client (`mc`) used as the administrative channel.

    The `local` alias is addressed through the `MC_HOST_local` environment
    variable, so no client configuration needs to exist for the supervisor to
    talk to its own server. Every command runs with a timeout.
    """

    def __init__(
        self,
        config: RuntimeConfig,
        host: str = "localhost",
        executable: str = settings.MC_EXECUTABLE,
        config_dir: Path = settings.CLIENT_CONF_DIR,
        alias: str = settings.CLIENT_ALIAS,
    ):
        self.config = config
        self.host = host
        self.executable = executable
        self.config_dir = Path(config_dir)
        self.alias = alias

    @property
    def server_url(self) -> str:
        return f"{self.config.scheme}://{self.host}:{self.config.api_port}"

    def _env(self) -> Dict[str, str]:
        env = os.environ.copy()
        user = quote(self.config.root_user, safe="")
        password = quote(self.config.root_password, safe="")
        env[f"MC_HOST_{self.alias}"] = (
            f"{self.config.scheme}://{user}:{password}@{self.host}:{self.config.api_port}"
        )
        return env

    def execute(self, *args: str, timeout: float = settings.ADMIN_QUERY_TIMEOUT) -> subprocess.CompletedProcess:
        """
        Runs an `mc` command against the local server.

        :param args: The `mc` sub-command and its arguments.
        :param timeout: Seconds before the command is abandoned.
        :return: The completed process.
        :raises AdminCommandError: If `mc` is missing, times out or exits non-zero.
        """
        cmd = [self.executable, "--config-dir", str(self.config_dir), "--quiet", *args]
        log.debug(f"Running MinIO client command: {' '.join(args)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, env=self._env(), check=False)
        except subprocess.TimeoutExpired as e:
            raise AdminCommandError(f"'mc {' '.join(args)}' timed out after {timeout}s") from e
        except OSError as e:
            raise AdminCommandError(f"Could not run MinIO client '{self.executable}': {e}") from e

        if result.returncode != 0:
            raise AdminCommandError(
                f"'mc {' '.join(args)}' failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
        return result

    def execute_json(self, *args: str, timeout: float = settings.ADMIN_QUERY_TIMEOUT) -> Dict[str, Any]:
        """Runs an `mc` command with `--json` and decodes its output."""
        result = self.execute(*args, "--json", timeout=timeout)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise AdminCommandError(f"Malformed JSON from 'mc {' '.join(args)}': {e}") from e

    def server_mode(self) -> str:
        """Returns the server's operational mode, e.g. 'online'."""
        info = self.execute_json("admin", "info", self.alias)
        return str((info.get("info") or {}).get("mode", ""))

    def stop_server(self) -> None:
        self.execute("admin", "service", "stop", self.alias)

    def bucket_exists(self, name: str) -> bool:
        try:
            self.execute("stat", f"{self.alias}/{name}")
        except AdminCommandError as e:
            log.debug(f"Bucket {self.alias}/{name} not found: {e}")
            return False
        return True

    def make_bucket(self, name: str, region: Optional[str] = None) -> None:
        args: Sequence[str] = ("mb", "--region", region) if region else ("mb",)
        self.execute(*args, f"{self.alias}/{name}", timeout=settings.ADMIN_MUTATION_TIMEOUT)

    def set_policy(self, name: str, policy: str) -> None:
        self.execute("anonymous", "set", policy, f"{self.alias}/{name}/", timeout=settings.ADMIN_MUTATION_TIMEOUT)

    def configure_alias(self) -> None:
        """Persists the `local` alias in the client configuration for operators."""
        log.info(f"Configuring MinIO client alias '{self.alias}' for {self.server_url}")
        self.execute(
            "alias", "set", self.alias, self.server_url,
            self.config.root_user, self.config.root_password,
            timeout=settings.ADMIN_MUTATION_TIMEOUT,
        )
