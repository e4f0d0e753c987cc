import os
import logging
from pathlib import Path
from typing import List, Mapping, Optional
from .config import RuntimeConfig, YesNo
from .exceptions import ConfigError, TopologyError
from .provisioning import parse_bucket_list
from .topology import is_range_syntax, parse_node, split_list

log = logging.getLogger(__name__)

MIN_DISTRIBUTED_NODES = 4
ALLOWED_SCHEMES = ("http", "https")
PRIVILEGED_PORT_LIMIT = 1024


def am_i_root() -> bool:
    """Whether the supervisor runs with an effective uid of 0."""
    return os.geteuid() == 0


class ConfigValidator:
    """
    Validates a raw configuration candidate and builds the RuntimeConfig.

    Every rule is evaluated; violations are collected and raised together as a
    single ConfigError so the operator sees all of them in one container run.
    """

    def __init__(self, running_as_root: Optional[bool] = None):
        self.running_as_root = am_i_root() if running_as_root is None else running_as_root
        self.errors: List[str] = []

    def _error(self, message: str) -> None:
        log.error(message)
        self.errors.append(message)

    def _check_yes_no(self, candidate: Mapping[str, str], key: str) -> Optional[YesNo]:
        try:
            return YesNo(candidate.get(key, ""))
        except ValueError:
            self._error(f"The allowed values for {key} are [yes, no]")
            return None

    def _check_port(self, candidate: Mapping[str, str], key: str) -> Optional[int]:
        raw = candidate.get(key, "")
        err = None
        if not (raw.isascii() and raw.isdigit()):
            port, err = None, "value must be an integer"
        else:
            port = int(raw)
            if port <= 0:
                err = "value must be greater than 0"
            elif port > 65535:
                err = "requested port is greater than 65535"
            elif not self.running_as_root and port < PRIVILEGED_PORT_LIMIT:
                err = "privileged port requested"

        if err:
            self._error(f"An invalid port was specified in the environment variable {key}: {err}")
            return None
        return port

    def _check_distributed(self, candidate: Mapping[str, str]) -> None:
        nodes = candidate.get("MINIO_DISTRIBUTED_NODES", "")
        if candidate.get("MINIO_DISTRIBUTED_MODE_ENABLED") != YesNo.YES.value:
            if nodes:
                log.warning(
                    "Distributed mode is not enabled. The nodes set at the environment "
                    "variable MINIO_DISTRIBUTED_NODES will be ignored."
                )
            return

        if not candidate.get("MINIO_ROOT_USER") or not candidate.get("MINIO_ROOT_PASSWORD"):
            self._error(
                "Distributed mode is enabled. Both MINIO_ROOT_USER and MINIO_ROOT_PASSWORD "
                "environment must be set"
            )
        if not nodes:
            self._error(
                "Distributed mode is enabled. Nodes must be indicated setting the "
                "environment variable MINIO_DISTRIBUTED_NODES"
            )
            return
        if is_range_syntax(nodes):
            return

        tokens = split_list(nodes)
        if len(tokens) < MIN_DISTRIBUTED_NODES or len(tokens) % 2:
            self._error("Number of nodes must be even and greater than or equal to 4.")
        scheme = candidate.get("MINIO_SCHEME", "http")
        for token in tokens:
            try:
                parse_node(token, scheme)
            except TopologyError as e:
                self._error(f"Invalid node in MINIO_DISTRIBUTED_NODES: {e}")

    def _check_http_trace(self, candidate: Mapping[str, str]) -> Optional[Path]:
        trace = candidate.get("MINIO_HTTP_TRACE", "")
        if not trace:
            return None
        if os.access(trace, os.W_OK):
            log.info(f"HTTP log trace enabled. Find the HTTP logs at: {trace}")
        else:
            self._error(
                "The HTTP log file specified at the environment variable MINIO_HTTP_TRACE "
                f"is not writable by current user \"{os.geteuid()}\""
            )
        return Path(trace)

    def _check_browser(self, candidate: Mapping[str, str]) -> bool:
        if candidate.get("MINIO_BROWSER", "").lower() == "off":
            log.warning(
                "Access to MinIO web UI is disabled!! More information at: "
                "https://github.com/minio/minio/tree/master/docs/config/#browser"
            )
            return False
        return True

    def validate(self, candidate: Mapping[str, str]) -> RuntimeConfig:
        """
        Validates the configuration candidate.

        :param candidate: Raw option values, as returned by `settings.collect_environment`.
        :return: The immutable RuntimeConfig.
        :raises ConfigError: With every violation found, if any rule failed.
        """
        log.debug("Validating settings in MINIO_* env vars...")
        self.errors = []

        self._check_distributed(candidate)
        browser_enabled = self._check_browser(candidate)
        http_trace = self._check_http_trace(candidate)

        scheme = candidate.get("MINIO_SCHEME", "http")
        if scheme not in ALLOWED_SCHEMES:
            self._error("The allowed values for MINIO_SCHEME are [http, https]")

        skip_client = self._check_yes_no(candidate, "MINIO_SKIP_CLIENT")
        distributed_mode = self._check_yes_no(candidate, "MINIO_DISTRIBUTED_MODE_ENABLED")
        force_new_keys = self._check_yes_no(candidate, "MINIO_FORCE_NEW_KEYS")
        console_port = self._check_port(candidate, "MINIO_CONSOLE_PORT_NUMBER")
        api_port = self._check_port(candidate, "MINIO_API_PORT_NUMBER")

        if self.errors:
            raise ConfigError(self.errors)

        return RuntimeConfig(
            distributed_mode=distributed_mode,
            distributed_nodes=candidate.get("MINIO_DISTRIBUTED_NODES", ""),
            scheme=scheme,
            root_user=candidate.get("MINIO_ROOT_USER", ""),
            root_password=candidate.get("MINIO_ROOT_PASSWORD", ""),
            force_new_keys=force_new_keys,
            skip_client=skip_client,
            console_port=console_port,
            api_port=api_port,
            certs_dir=Path(candidate.get("MINIO_CERTS_DIR", "/certs")),
            data_dir=Path(candidate.get("MINIO_DATA_DIR", "/data")),
            default_buckets=tuple(parse_bucket_list(candidate.get("MINIO_DEFAULT_BUCKETS", ""))),
            region=candidate.get("MINIO_REGION_NAME", ""),
            browser_enabled=browser_enabled,
            http_trace=http_trace,
            debug=candidate.get("BITNAMI_DEBUG", "false").lower() in ('true', '1', 't', 'yes'),
        )
