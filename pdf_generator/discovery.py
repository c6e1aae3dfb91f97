"""
Control endpoint discovery.

Chromium started with --remote-debugging-port exposes GET /json/version,
whose body carries the browser-level `webSocketDebuggerUrl`.
"""

import logging

import httpx

from .errors import DiscoveryError

logger = logging.getLogger(__name__)

DEFAULT_DISCOVERY_TIMEOUT = 10.0  # seconds


async def discover_endpoint(
    discovery_url: str,
    timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
) -> str:
    """
    Fetch the browser's WebSocket debugger URL.

    Args:
        discovery_url: Chromium /json/version URL
        timeout: Request timeout in seconds

    Returns:
        The `webSocketDebuggerUrl` reported by the browser

    Raises:
        DiscoveryError: on network errors, timeouts, non-2xx status or an
            unparseable body
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(discovery_url)
            response.raise_for_status()
            data = response.json()
    except httpx.TimeoutException as e:
        logger.error(f"Timed out after {timeout}s getting WebSocket debugger URL from {discovery_url}")
        raise DiscoveryError(discovery_url, f"timed out after {timeout}s") from e
    except httpx.HTTPStatusError as e:
        logger.error(f"Chromium discovery returned HTTP {e.response.status_code} from {discovery_url}")
        raise DiscoveryError(discovery_url, f"HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Could not reach Chromium at {discovery_url}: {e}")
        raise DiscoveryError(discovery_url, str(e) or type(e).__name__) from e
    except ValueError as e:
        logger.error(f"Chromium discovery returned invalid JSON from {discovery_url}")
        raise DiscoveryError(discovery_url, "response body is not valid JSON") from e

    endpoint = data.get("webSocketDebuggerUrl") if isinstance(data, dict) else None
    if not isinstance(endpoint, str) or not endpoint:
        logger.error(f"No webSocketDebuggerUrl in discovery response from {discovery_url}")
        raise DiscoveryError(discovery_url, "response has no webSocketDebuggerUrl")

    logger.info(f"Got WebSocket debugger URL: {endpoint}")
    return endpoint
