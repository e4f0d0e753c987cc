"""Shared configuration builders for the test suites."""

from typing import Dict
from minio_node.local.config import RuntimeConfig
from minio_node.local.validation import ConfigValidator

FOUR_NODES = "minio1,minio2,minio3,minio4"


def make_candidate(**overrides: str) -> Dict[str, str]:
    """Returns a valid standalone configuration candidate with overrides applied."""
    candidate = {
        "MINIO_DATA_DIR": "/data",
        "MINIO_CERTS_DIR": "/certs",
        "MINIO_SCHEME": "http",
        "MINIO_API_PORT_NUMBER": "9000",
        "MINIO_CONSOLE_PORT_NUMBER": "9001",
        "MINIO_DISTRIBUTED_MODE_ENABLED": "no",
        "MINIO_DISTRIBUTED_NODES": "",
        "MINIO_ROOT_USER": "admin",
        "MINIO_ROOT_PASSWORD": "supersecret",
        "MINIO_FORCE_NEW_KEYS": "no",
        "MINIO_SKIP_CLIENT": "no",
        "MINIO_DEFAULT_BUCKETS": "",
        "MINIO_REGION_NAME": "",
        "MINIO_BROWSER": "",
        "MINIO_HTTP_TRACE": "",
        "BITNAMI_DEBUG": "false",
    }
    candidate.update(overrides)
    return candidate


def make_config(**overrides: str) -> RuntimeConfig:
    """Validates a candidate as a non-root user and returns the RuntimeConfig."""
    return ConfigValidator(running_as_root=False).validate(make_candidate(**overrides))


def make_distributed_config(nodes: str = FOUR_NODES, **overrides: str) -> RuntimeConfig:
    return make_config(MINIO_DISTRIBUTED_MODE_ENABLED="yes", MINIO_DISTRIBUTED_NODES=nodes, **overrides)
