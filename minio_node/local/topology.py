"""
Resolution of MINIO_DISTRIBUTED_NODES into a node topology.

A node list is either an explicit list of `host[:port][/path]` tokens or a set
of MinIO ellipsis expressions such as `minio{1...4}/data{1...2}`. The two forms
are never mixed: the presence of the ellipsis marker anywhere selects range mode.
"""
import re
import logging
from urllib.parse import urlsplit
from typing import List, NamedTuple, Optional, Tuple
from .exceptions import TopologyError

log = logging.getLogger(__name__)

RANGE_MARKER = "..."
_SEPARATORS = re.compile(r"[,;\s]+")


class NodeSpec(NamedTuple):
    scheme: str
    host: str
    port: Optional[int] = None
    path: str = ""

    def server_uri(self, default_port: int, default_path: str) -> str:
        """Builds the endpoint argument passed to `minio server` for this node."""
        port = self.port or default_port
        path = self.path or default_path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.scheme}://{self.host}:{port}{path}"


class Topology(NamedTuple):
    nodes: Tuple[NodeSpec, ...]
    range_expressions: Tuple[str, ...]

    @property
    def is_range(self) -> bool:
        return bool(self.range_expressions)


def split_list(raw: Optional[str]) -> List[str]:
    """Splits a comma/semicolon separated list, dropping empty tokens."""
    if not raw:
        return []
    return [token for token in _SEPARATORS.split(raw.strip()) if token]


def is_range_syntax(raw: Optional[str]) -> bool:
    """True when the node list uses the `{1...n}` ellipsis syntax."""
    return bool(raw) and RANGE_MARKER in raw


def parse_node(token: str, scheme: str) -> NodeSpec:
    """
    Parses a single node token by treating it as `<scheme>://<token>`.

    :param token: A node token, e.g. `minio1:9000/data`.
    :param scheme: The URI scheme (http or https).
    :return: The resolved NodeSpec.
    :raises TopologyError: If the token has no host or an invalid port.
    """
    parts = urlsplit(f"{scheme}://{token}")
    try:
        port = parts.port
    except ValueError as e:
        raise TopologyError(f"Invalid port in node '{token}': {e}") from e
    if not parts.hostname:
        raise TopologyError(f"Node '{token}' does not contain a host name")
    return NodeSpec(scheme=scheme, host=parts.hostname, port=port, path=parts.path)


def resolve_topology(raw: Optional[str], scheme: str) -> Topology:
    """
    Resolves a raw node list into a Topology.

    In range mode every token is passed through untouched as `<scheme>://<token>`;
    its cardinality is left to the MinIO server. Otherwise each token becomes a
    NodeSpec, in input order.
    """
    tokens = split_list(raw)
    if is_range_syntax(raw):
        log.debug(f"Node list uses range syntax, passing {len(tokens)} expression(s) through.")
        return Topology(nodes=(), range_expressions=tuple(f"{scheme}://{t}" for t in tokens))
    return Topology(nodes=tuple(parse_node(t, scheme) for t in tokens), range_expressions=())


def distributed_drives(raw: Optional[str], scheme: str) -> List[str]:
    """
    Returns the drive path of every explicit node, in input order.

    An empty node list yields an empty list; a node without a path yields "".
    """
    if not raw:
        return []
    return [urlsplit(f"{scheme}://{token}").path for token in split_list(raw)]
