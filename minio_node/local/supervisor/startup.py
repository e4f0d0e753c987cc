import os
import time
import logging
from pathlib import Path
from typing import Dict, List, Optional
from minio_node.local.config import RuntimeConfig
from minio_node.local.topology import Topology, distributed_drives

log = logging.getLogger(__name__)


def build_server_args(config: RuntimeConfig, topology: Optional[Topology] = None) -> List[str]:
    """
    Builds the `minio server` arguments for this node.

    Standalone mode serves the data directory. Distributed mode lists every
    node endpoint, either the range expressions as given or one
    `<scheme>://<host>:<port><drive>` URI per explicit node.

    :param config: The validated runtime configuration.
    :param topology: The resolved topology, defaults to `config.topology`.
    :return: The argument list (without the executable).
    """
    args = [
        "server",
        "--certs-dir", str(config.certs_dir),
        "--console-address", f":{config.console_port}",
        "--address", f":{config.api_port}",
    ]
    if not config.distributed_mode.enabled:
        args.append(str(config.data_dir))
        return args

    topology = config.topology if topology is None else topology
    if topology.is_range:
        args.extend(topology.range_expressions)
    else:
        args.extend(node.server_uri(config.api_port, str(config.data_dir)) for node in topology.nodes)
    return args


def local_drive_paths(config: RuntimeConfig) -> List[Path]:
    """
    The directories the server stores data in: the data directory plus every
    explicit drive path of an explicit distributed node list.
    """
    paths = [config.data_dir]
    if config.distributed_mode.enabled and not config.topology.is_range:
        for drive in distributed_drives(config.distributed_nodes, config.scheme):
            if drive and Path(drive) not in paths:
                paths.append(Path(drive))
    return paths


def prepare_drives(config: RuntimeConfig) -> None:
    """Creates missing data and drive directories before the server starts."""
    for path in local_drive_paths(config):
        if not path.is_dir():
            log.info(f"Creating MinIO drive directory {path}")
            path.mkdir(parents=True, exist_ok=True)


def build_server_env(config: RuntimeConfig, extra_env: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Builds the MinIO server environment from the runtime configuration."""
    env = os.environ.copy()
    env["MINIO_ROOT_USER"] = config.root_user
    env["MINIO_ROOT_PASSWORD"] = config.root_password
    env["MINIO_BROWSER"] = "on" if config.browser_enabled else "off"
    if config.region:
        env["MINIO_REGION_NAME"] = config.region
    if config.http_trace:
        env["MINIO_HTTP_TRACE"] = str(config.http_trace)
    if extra_env:
        env.update(extra_env)
    return env


def wait_for_settle(seconds: float) -> None:
    """
    Blocks while a freshly started server initializes.

    The server exposes no earlier readiness signal to the supervisor, so a
    fixed delay bounds the worst-case start latency.
    """
    log.debug(f"Waiting {seconds}s for MinIO to settle...")
    time.sleep(seconds)
