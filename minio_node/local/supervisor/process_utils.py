import shutil
import psutil
import logging
import threading
import subprocess
from typing import Dict, List, Optional
from minio_node.local.exceptions import ProcessError

log = logging.getLogger(__name__)


#* --- Process Status ---
def pid_exists(pid: int) -> bool:
    """A wrapper for psutil.pid_exists for easy testing/mocking if needed."""
    return psutil.pid_exists(pid)


class ProcessHandle:
    """
    Reference to the running MinIO server process.

    When the process was spawned by this supervisor the Popen object is kept,
    so exited children are reaped instead of lingering as zombies.
    """

    def __init__(self, pid: int, popen: Optional[subprocess.Popen] = None):
        self.pid = pid
        self._popen = popen

    def is_alive(self) -> bool:
        if self._popen is not None:
            return self._popen.poll() is None
        if not pid_exists(self.pid):
            return False
        try:
            return psutil.Process(self.pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.Error as e:
            log.debug(f"Could not inspect PID {self.pid}: {e}")
            return False

    def __repr__(self) -> str:
        return f"ProcessHandle(pid={self.pid})"


#* --- Process Creation ---
def resolve_executable(name: str) -> str:
    """Returns the full path of an executable on PATH, or raises ProcessError."""
    path = shutil.which(name)
    if path is None:
        raise ProcessError(f"Executable '{name}' not found in PATH")
    return path


def _read_pipe(pipe, process_name: str, level: int):
    """Target function for reader threads. Reads and logs lines from a subprocess pipe."""
    proc_logger = logging.getLogger(f"proc.{process_name}")
    try:
        for line_bytes in iter(pipe.readline, b""):
            line = line_bytes.decode("utf-8", errors="replace").strip()
            if line:
                proc_logger.log(level, line)
    except (OSError, ValueError) as e:
        proc_logger.debug(f"Pipe reader for {process_name} stream exited: {e}")
    finally:
        pipe.close()


def log_process_output(process: subprocess.Popen, name: str):
    """Starts background threads to consume and log a process's stdout/stderr."""
    if process.stdout:
        threading.Thread(target=_read_pipe, args=(process.stdout, name, logging.INFO), daemon=True).start()
    if process.stderr:
        threading.Thread(target=_read_pipe, args=(process.stderr, name, logging.ERROR), daemon=True).start()


def launch_process(args: List[str], env: Dict[str, str], name: str = "minio", capture_output: bool = False) -> ProcessHandle:
    """
    Launches a detached background process.

    :param args: Full command line, executable first.
    :param env: The environment of the new process.
    :param name: Logical name, used for the `proc.<name>` output logger.
    :param capture_output: Pipe stdout/stderr into the log instead of discarding them.
    :return: A handle on the new process.
    :raises ProcessError: If the process cannot be spawned.
    """
    output = subprocess.PIPE if capture_output else subprocess.DEVNULL
    try:
        p = subprocess.Popen(
            args, stdout=output, stderr=output, stdin=subprocess.DEVNULL,
            env=env, start_new_session=True,
        )
    except OSError as e:
        log.critical(f"Failed to start process '{name}': {e}")
        raise ProcessError(f"Failed to start process '{name}': {e}") from e

    if capture_output:
        log_process_output(p, name)
    log.info(f"{name.capitalize()} started with PID: {p.pid}")
    return ProcessHandle(p.pid, popen=p)
