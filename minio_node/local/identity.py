import socket
import logging
from typing import Optional
from .config import RuntimeConfig
from .exceptions import TopologyError
from .topology import NodeSpec

log = logging.getLogger(__name__)

LOCAL_NODE_NAME = "localhost"


def dns_lookup(host: str) -> Optional[str]:
    """Resolves a host name to its IPv4 address, or None if it does not resolve."""
    try:
        return socket.gethostbyname(host)
    except (socket.gaierror, UnicodeError) as e:
        log.debug(f"Could not resolve '{host}': {e}")
        return None


def get_machine_ip() -> Optional[str]:
    """The address this machine's host name resolves to."""
    return dns_lookup(socket.gethostname())


def resolve_self_node(config: RuntimeConfig) -> NodeSpec:
    """
    Finds the entry of the node list that designates this machine.

    :param config: The runtime configuration.
    :return: The matching node, or the local designator in standalone mode.
    :raises TopologyError: If the node list uses range syntax or no entry
        resolves to this machine's address.
    """
    if not config.distributed_mode.enabled:
        return NodeSpec(scheme=config.scheme, host=LOCAL_NODE_NAME)

    topology = config.topology
    if topology.is_range:
        raise TopologyError("Cannot identify own node when MINIO_DISTRIBUTED_NODES uses range syntax")

    machine_ip = get_machine_ip()
    if machine_ip is not None:
        for node in topology.nodes:
            if dns_lookup(node.host) == machine_ip:
                log.debug(f"Identified own node as '{node.host}' ({machine_ip})")
                return node
    raise TopologyError(f"Could not find own node in MINIO_DISTRIBUTED_NODES: {config.distributed_nodes}")
