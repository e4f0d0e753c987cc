"""
Container entrypoint for the minio-node supervisor.

Usage: python -m minio_node <command>

Exit status is 0 on success, 1 on any failure and 3 when the container must
be recreated after a root credential rotation.
"""
import sys
import logging
from typing import Callable, Dict, List, Optional
import setproctitle
from minio_node import settings
from minio_node.log.setup import setup_logging
from minio_node.local.config import RuntimeConfig
from minio_node.local.credentials import CredentialRotator
from minio_node.local.exceptions import ConfigError, MinioNodeError
from minio_node.local.health_client import probe_liveness
from minio_node.local.identity import resolve_self_node
from minio_node.local.minio_client import MinioClient
from minio_node.local.provisioning import BucketProvisioner
from minio_node.local.supervisor import MinioProcessManager
from minio_node.local.supervisor.startup import prepare_drives
from minio_node.local.validation import ConfigValidator

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_RESTART_REQUIRED = 3


def load_config() -> RuntimeConfig:
    """Validates the environment, raising ConfigError with every violation."""
    return ConfigValidator().validate(settings.collect_environment())


def client_host(config: RuntimeConfig) -> str:
    """
    The host the admin client talks to: this node's own entry for an explicit
    distributed node list (certificates are issued for it), localhost otherwise.
    """
    if config.distributed_mode.enabled and not config.topology.is_range:
        return resolve_self_node(config).host
    return "localhost"


def build_manager(config: RuntimeConfig) -> MinioProcessManager:
    return MinioProcessManager(config, client=MinioClient(config, host=client_host(config)))


def stop_server(manager: MinioProcessManager) -> None:
    """Stops the background server, warning if it is still alive afterwards."""
    manager.stop()
    if manager.handle is not None and manager.handle.is_alive():
        log.warning(
            f"MinIO (PID {manager.handle.pid}) is still alive after stopping; "
            "a server started next may fail to bind its ports."
        )


#* --- Commands ---
def cmd_validate(config: RuntimeConfig) -> int:
    log.info("Configuration is valid.")
    return EXIT_OK


def cmd_setup(config: RuntimeConfig) -> int:
    """Rotates credentials, then starts MinIO once to provision default buckets."""
    prepare_drives(config)
    manager = build_manager(config)

    outcome = CredentialRotator(config, manager).rotate()
    if outcome.needs_restart:
        stop_server(manager)
        return EXIT_RESTART_REQUIRED

    if not config.skip_client.enabled:
        manager.client.configure_alias()

    if config.default_buckets:
        manager.start()
        try:
            BucketProvisioner(manager.client, region=config.region).provision(config.default_buckets)
        finally:
            stop_server(manager)
    log.info("MinIO setup finished.")
    return EXIT_OK


def cmd_run(config: RuntimeConfig) -> int:
    build_manager(config).run_foreground()
    return EXIT_OK


def cmd_entrypoint(config: RuntimeConfig) -> int:
    status = cmd_setup(config)
    if status != EXIT_OK:
        return status
    return cmd_run(config)


def cmd_start(config: RuntimeConfig) -> int:
    build_manager(config).start()
    return EXIT_OK


def cmd_stop(config: RuntimeConfig) -> int:
    build_manager(config).stop()
    return EXIT_OK


def cmd_status(config: RuntimeConfig) -> int:
    if build_manager(config).is_running():
        print("MinIO is RUNNING")
        return EXIT_OK
    print("MinIO is STOPPED")
    return EXIT_FAILURE


def cmd_health(config: RuntimeConfig) -> int:
    return EXIT_OK if probe_liveness(config, host=client_host(config)) else EXIT_FAILURE


def cmd_node_name(config: RuntimeConfig) -> int:
    print(resolve_self_node(config).host)
    return EXIT_OK


COMMANDS: Dict[str, Callable[[RuntimeConfig], int]] = {
    "validate": cmd_validate,
    "setup": cmd_setup,
    "run": cmd_run,
    "entrypoint": cmd_entrypoint,
    "start": cmd_start,
    "stop": cmd_stop,
    "status": cmd_status,
    "health": cmd_health,
    "node-name": cmd_node_name,
}


def print_help() -> None:
    print("Usage: python -m minio_node <command> [--verbose]")
    print("Commands: " + ", ".join(sorted(COMMANDS)) + ", help")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs a single supervisor command.

    :param argv: Command line arguments without the program name.
    :return: The process exit status.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = "--verbose" in args
    if verbose:
        args.remove("--verbose")

    if not args or args[0] in ("help", "-h", "--help"):
        print_help()
        return EXIT_OK if args else EXIT_FAILURE

    command = args[0].lower()
    if command not in COMMANDS:
        print(f"Unknown command: '{command}'.")
        print_help()
        return EXIT_FAILURE

    setproctitle.setproctitle(f"minio-node - {command}")
    setup_logging(logging.DEBUG if verbose else logging.INFO)

    try:
        config = load_config()
        if config.debug and not verbose:
            setup_logging(logging.DEBUG)
        return COMMANDS[command](config)
    except ConfigError as e:
        log.error(f"Found {len(e.errors)} configuration error(s). Aborting.")
        return EXIT_FAILURE
    except MinioNodeError as e:
        log.critical(f"{command} failed: {e}")
        return EXIT_FAILURE
    except Exception as e:
        log.critical(f"Unexpected error during '{command}': {e}", exc_info=True)
        return EXIT_FAILURE
