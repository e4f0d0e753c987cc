"""
Root credential rotation.

The credentials a node was last started with are kept in two owner-only files
inside the data directory. When MINIO_FORCE_NEW_KEYS is enabled and the
configured credentials differ from the persisted ones, the server is started
once with both the old and the new pair so it can re-encrypt its state, and
the caller is told to recreate the container.
"""
import os
import logging
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, TYPE_CHECKING
from minio_node import settings
from .config import RuntimeConfig

if TYPE_CHECKING:
    from .supervisor import MinioProcessManager

log = logging.getLogger(__name__)


class RotationOutcome(Enum):
    UNCHANGED = "unchanged"
    ROTATED = "rotated-needs-container-restart"

    @property
    def needs_restart(self) -> bool:
        return self is RotationOutcome.ROTATED


class CredentialRecord(NamedTuple):
    user: str
    password: str


class CredentialStore:
    """Reads and writes the persisted root credentials of a data directory."""

    def __init__(self, data_dir: Path):
        self.user_path = Path(data_dir) / settings.ROOT_USER_FILE_NAME
        self.password_path = Path(data_dir) / settings.ROOT_PASSWORD_FILE_NAME

    def read(self) -> Optional[CredentialRecord]:
        """Returns the persisted record, or None unless both files exist."""
        if not (self.user_path.is_file() and self.password_path.is_file()):
            return None
        return CredentialRecord(
            user=self.user_path.read_text().rstrip("\n"),
            password=self.password_path.read_text().rstrip("\n"),
        )

    @staticmethod
    def _write_private(path: Path, value: str) -> None:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, settings.CREDENTIAL_FILE_MODE)
        # O_CREAT's mode does not apply to files that already exist
        os.fchmod(fd, settings.CREDENTIAL_FILE_MODE)
        with os.fdopen(fd, "w") as f:
            f.write(f"{value}\n")

    def write(self, record: CredentialRecord) -> None:
        self.user_path.parent.mkdir(parents=True, exist_ok=True)
        self._write_private(self.user_path, record.user)
        self._write_private(self.password_path, record.password)


class CredentialRotator:
    """Decides whether a credential change requires a coordinated restart."""

    def __init__(self, config: RuntimeConfig, manager: "MinioProcessManager", store: Optional[CredentialStore] = None):
        self.config = config
        self.manager = manager
        self.store = store or CredentialStore(config.data_dir)

    def rotate(self) -> RotationOutcome:
        """
        Compares the configured credentials with the persisted record.

        The new record is always persisted last, even if starting the server
        with the old credentials fails, so an interrupted rotation is detected
        again on the next run.

        :return: ROTATED if the container must be restarted, UNCHANGED otherwise.
        """
        current = CredentialRecord(self.config.root_user, self.config.root_password)
        previous = self.store.read() if self.config.force_new_keys.enabled else None
        outcome = RotationOutcome.UNCHANGED

        try:
            if previous is not None and previous != current:
                log.info("Reconfiguring MinIO credentials...")
                self.manager.start(extra_env={
                    "MINIO_ROOT_USER_OLD": previous.user,
                    "MINIO_ROOT_PASSWORD_OLD": previous.password,
                })
                log.info("Forcing container restart after key regeneration")
                outcome = RotationOutcome.ROTATED
        finally:
            self.store.write(current)
        return outcome
