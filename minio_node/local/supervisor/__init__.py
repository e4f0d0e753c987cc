"""
The Supervisor package.
Manages the lifecycle of the MinIO server subprocess.

This package contains the central MinioProcessManager class and its helper
modules, which together handle building the server arguments, starting,
observing and gracefully stopping exactly one MinIO process.
"""
from .supervisor import MinioProcessManager

__all__ = ['MinioProcessManager']
