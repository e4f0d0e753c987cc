import time
import logging
from typing import TYPE_CHECKING
from minio_node.local.exceptions import AdminCommandError

if TYPE_CHECKING:
    from .supervisor import MinioProcessManager

log = logging.getLogger(__name__)


def request_graceful_stop(manager: "MinioProcessManager") -> None:
    """Asks the server to stop through the admin channel. Failures are only logged."""
    try:
        manager.client.stop_server()
        log.debug("MinIO stop command sent.")
    except AdminCommandError as e:
        log.debug(f"MinIO stop command failed, waiting for exit anyway: {e}")


def wait_for_exit(manager: "MinioProcessManager", attempts: int, interval: float) -> bool:
    """
    Polls until the server process is gone or the attempts are used up.

    :param manager: The MinioProcessManager instance.
    :param attempts: Maximum number of polls.
    :param interval: Seconds between polls.
    :return: True if the process exited, False if it is still alive.
    """
    while manager.is_running() or manager.handle.is_alive():
        if attempts <= 0:
            log.warning(f"MinIO (PID {manager.handle.pid}) is still alive, giving up waiting.")
            return False
        time.sleep(interval)
        attempts -= 1
    return True
