import os
import logging
from pathlib import Path
from typing import Dict, Optional
from minio_node import settings
from minio_node.local.config import RuntimeConfig
from minio_node.local.exceptions import AdminCommandError
from minio_node.local.minio_client import MinioClient
from minio_node.local.supervisor import persistence, process_utils, shutdown, startup

log = logging.getLogger(__name__)


class MinioProcessManager:
    """
    Starts, observes and stops the MinIO server of this node.

    At most one server is started: `start` is a no-op while a recorded process
    is alive and reports itself online. The PID is persisted so that a later
    invocation of the supervisor can stop the same process.
    """

    def __init__(
        self,
        config: RuntimeConfig,
        client: Optional[MinioClient] = None,
        pid_file: Path = settings.PID_FILE_PATH,
        settle_seconds: float = settings.START_SETTLE_SECONDS,
        stop_attempts: int = settings.STOP_POLL_ATTEMPTS,
        stop_interval: float = settings.STOP_POLL_INTERVAL,
    ) -> None:
        self.config = config
        self.client = client or MinioClient(config)
        self.pid_file = Path(pid_file)
        self.settle_seconds = settle_seconds
        self.stop_attempts = stop_attempts
        self.stop_interval = stop_interval

        pid = persistence.get_pid(self.pid_file)
        self.handle: Optional[process_utils.ProcessHandle] = (
            process_utils.ProcessHandle(pid) if pid is not None else None
        )

    def is_running(self) -> bool:
        """
        A node is running when a PID is recorded, that process is alive and
        the server reports mode 'online'. Admin channel failures count as not running.
        """
        if self.handle is None or not self.handle.is_alive():
            return False
        try:
            mode = self.client.server_mode()
        except AdminCommandError as e:
            log.debug(f"MinIO status query failed: {e}")
            return False
        return mode == "online"

    def start(self, extra_env: Optional[Dict[str, str]] = None) -> None:
        """
        Starts MinIO in the background and waits for it to settle.

        :param extra_env: Additional environment for the server, e.g. old credentials.
        :raises ProcessError: If the server binary cannot be launched.
        """
        if self.is_running():
            log.info("MinIO is already running...")
            return

        executable = process_utils.resolve_executable(settings.MINIO_EXECUTABLE)
        args = [executable, *startup.build_server_args(self.config)]
        env = startup.build_server_env(self.config, extra_env)

        log.info("Starting MinIO in background...")
        self.handle = process_utils.launch_process(args, env, name="minio", capture_output=self.config.debug)
        persistence.write_pid_file(self.pid_file, self.handle.pid)
        startup.wait_for_settle(self.settle_seconds)

    def stop(self) -> None:
        """Stops MinIO gracefully, waiting a bounded time for it to exit."""
        if not self.is_running():
            log.info("MinIO is already stopped...")
            return

        log.info("Stopping MinIO...")
        shutdown.request_graceful_stop(self)
        if shutdown.wait_for_exit(self, self.stop_attempts, self.stop_interval):
            persistence.remove_pid_file(self.pid_file)
            self.handle = None
            log.info("MinIO stopped.")

    def run_foreground(self) -> None:
        """Replaces the current process with the MinIO server. Does not return."""
        executable = process_utils.resolve_executable(settings.MINIO_EXECUTABLE)
        args = [executable, *startup.build_server_args(self.config)]
        env = startup.build_server_env(self.config)
        log.info("Starting MinIO in foreground...")
        # exec keeps the PID, so the record stays valid for `stop` and `status`
        persistence.write_pid_file(self.pid_file, os.getpid())
        os.execve(executable, args, env)
