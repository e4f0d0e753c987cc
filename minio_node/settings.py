"""
This module contains the static settings for the minio-node supervisor.
It defines installation paths, timing constants and the set of recognized
MINIO_* options together with their defaults.

Only `collect_environment` reads the option values; everything downstream
works on the validated RuntimeConfig.
"""

import os
import pathlib
from typing import Dict, Mapping, Optional
from dotenv import load_dotenv

# Load environment variables from .env file (real environment wins)
load_dotenv(override=False)

#* --- Installation Paths ---
BASE_DIR = pathlib.Path(os.getenv("MINIO_BASE_DIR", "/opt/bitnami/minio"))
TMP_DIR = pathlib.Path(os.getenv("MINIO_TMP_DIR", str(BASE_DIR / "tmp")))
PID_FILE_PATH = TMP_DIR / "minio.pid"
CLIENT_CONF_DIR = pathlib.Path(os.getenv("MINIO_CLIENT_CONF_DIR", "/opt/bitnami/minio-client/.mc"))

#* --- External Executables ---
MINIO_EXECUTABLE = os.getenv("MINIO_EXECUTABLE", "minio")
MC_EXECUTABLE = os.getenv("MINIO_CLIENT_EXECUTABLE", "mc")
CLIENT_ALIAS = "local"

#* --- Supervisor Timing ---
START_SETTLE_SECONDS = 10
STOP_POLL_ATTEMPTS = 5
STOP_POLL_INTERVAL = 1          # seconds
ADMIN_QUERY_TIMEOUT = 5         # seconds, status/stop/stat
ADMIN_MUTATION_TIMEOUT = 30     # seconds, bucket creation and policies
HEALTH_CHECK_TIMEOUT = 5        # seconds
HEALTH_CHECK_VERIFY_TLS = os.getenv("MINIO_HEALTHCHECK_VERIFY_TLS", "true").lower() in ('true', '1', 't', 'yes')

#* --- Persisted Credentials ---
ROOT_USER_FILE_NAME = ".root_user"
ROOT_PASSWORD_FILE_NAME = ".root_password"
CREDENTIAL_FILE_MODE = 0o600

#* --- Recognized Options ---
ENVIRONMENT_DEFAULTS: Dict[str, str] = {
    "MINIO_DATA_DIR": "/data",
    "MINIO_CERTS_DIR": "/certs",
    "MINIO_SCHEME": "http",
    "MINIO_API_PORT_NUMBER": "9000",
    "MINIO_CONSOLE_PORT_NUMBER": "9001",
    "MINIO_DISTRIBUTED_MODE_ENABLED": "no",
    "MINIO_DISTRIBUTED_NODES": "",
    "MINIO_ROOT_USER": "minio",
    "MINIO_ROOT_PASSWORD": "miniosecret",
    "MINIO_FORCE_NEW_KEYS": "no",
    "MINIO_SKIP_CLIENT": "no",
    "MINIO_DEFAULT_BUCKETS": "",
    "MINIO_REGION_NAME": "",
    "MINIO_BROWSER": "",
    "MINIO_HTTP_TRACE": "",
    "BITNAMI_DEBUG": "false",
}


def _read_file_value(path: str) -> Optional[str]:
    """Reads a `<NAME>_FILE` secret, stripping the trailing newline."""
    try:
        return pathlib.Path(path).read_text().rstrip("\n")
    except OSError:
        return None


def collect_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Collects the raw configuration candidate from the environment.

    Each recognized option falls back to its default. When `<NAME>_FILE` is set,
    the option is read from that file instead (e.g. Docker secrets).

    :param environ: The mapping to read from. Defaults to `os.environ`.
    :return: A dictionary with one string value per recognized option.
    """
    environ = os.environ if environ is None else environ
    candidate: Dict[str, str] = {}
    for key, default in ENVIRONMENT_DEFAULTS.items():
        file_path = environ.get(f"{key}_FILE")
        value = _read_file_value(file_path) if file_path else None
        if value is None:
            value = environ.get(key, default)
        candidate[key] = value
    return candidate
