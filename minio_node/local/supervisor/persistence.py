import logging
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)


def get_pid(pid_path: Path) -> Optional[int]:
    """
    Reads the PID file from disk.

    :param pid_path: Location of the PID file.
    :return: The recorded PID, or None if the file is missing or invalid.
    """
    if not pid_path.exists():
        return None
    try:
        return int(pid_path.read_text().strip())
    except (ValueError, OSError):
        log.warning(f"Ignoring unreadable PID file at {pid_path}")
        pid_path.unlink(missing_ok=True)
        return None


def write_pid_file(pid_path: Path, pid: int) -> None:
    """
    Atomically writes the server PID to the PID file.

    :param pid_path: Location of the PID file.
    :param pid: The PID to record.
    """
    temp_pid_path = pid_path.with_suffix(".tmp")
    try:
        pid_path.parent.mkdir(parents=True, exist_ok=True)
        temp_pid_path.write_text(f"{pid}\n")
        temp_pid_path.replace(pid_path)
    except OSError as e:
        log.error(f"Failed to write PID file: {e}", exc_info=True)
    finally:
        temp_pid_path.unlink(missing_ok=True)


def remove_pid_file(pid_path: Path) -> None:
    pid_path.unlink(missing_ok=True)
    log.debug(f"Removed PID file {pid_path}.")
