import logging
import requests
from minio_node import settings
from .config import RuntimeConfig

log = logging.getLogger(__name__)


def probe_liveness(config: RuntimeConfig, host: str = "localhost", timeout: float = settings.HEALTH_CHECK_TIMEOUT) -> bool:
    """
    Queries MinIO's unauthenticated liveness endpoint.

    :param config: The runtime configuration (scheme and API port).
    :param host: The host to probe.
    :param timeout: Request timeout in seconds.
    :return: True if the server answered with a success status, False otherwise.
    """
    url = f"{config.scheme}://{host}:{config.api_port}/minio/health/live"
    try:
        response = requests.get(url, timeout=timeout, verify=settings.HEALTH_CHECK_VERIFY_TLS)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        log.warning(f"MinIO liveness probe at '{url}' failed: {e}")
        return False
    log.debug(f"MinIO liveness probe at '{url}' succeeded.")
    return True
