from typing import List


class MinioNodeError(Exception):
    """Base class for all supervisor errors."""


class ConfigError(MinioNodeError):
    """One or more configuration rules were violated."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} configuration error(s): " + "; ".join(self.errors))


class TopologyError(MinioNodeError):
    """The node list cannot be resolved, or the local node is not part of it."""


class ProcessError(MinioNodeError):
    """The MinIO server process could not be launched or controlled."""


class AdminCommandError(ProcessError):
    """An `mc` administrative command failed, timed out or returned garbage."""
