"""
Local package for the minio-node supervisor.

Holds the node lifecycle logic: configuration validation, topology
resolution, process supervision, credential rotation and bucket provisioning.
"""

from .config import RuntimeConfig, YesNo
from .exceptions import AdminCommandError, ConfigError, MinioNodeError, ProcessError, TopologyError

__all__ = [
    "RuntimeConfig", "YesNo",
    "MinioNodeError", "ConfigError", "TopologyError", "ProcessError", "AdminCommandError",
]
