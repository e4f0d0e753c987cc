"""
Typed, immutable runtime configuration.

A RuntimeConfig is only ever built by the ConfigValidator; components receive
it by reference and never read the environment themselves.
"""
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .provisioning import BucketSpec
    from .topology import Topology


class YesNo(Enum):
    """A boolean option with its two accepted literal forms."""
    YES = "yes"
    NO = "no"

    @property
    def enabled(self) -> bool:
        return self is YesNo.YES


class RuntimeConfig(NamedTuple):
    distributed_mode: YesNo
    distributed_nodes: str
    scheme: str
    root_user: str
    root_password: str
    force_new_keys: YesNo
    skip_client: YesNo
    console_port: int
    api_port: int
    certs_dir: Path
    data_dir: Path
    default_buckets: Tuple["BucketSpec", ...] = ()
    region: str = ""
    browser_enabled: bool = True
    http_trace: Optional[Path] = None
    debug: bool = False

    @property
    def topology(self) -> "Topology":
        """The resolved node topology (empty when distributed mode is off)."""
        from .topology import Topology, resolve_topology
        if not self.distributed_mode.enabled:
            return Topology(nodes=(), range_expressions=())
        return resolve_topology(self.distributed_nodes, self.scheme)
