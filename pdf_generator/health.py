"""
Liveness probe for a cached control endpoint.
"""

import logging

import websockets

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0  # seconds


async def is_endpoint_live(endpoint: str, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
    """
    Check whether a WebSocket debugger URL still accepts connections.

    Completes the opening handshake and then aborts the transport without a
    closing handshake. Any failure (refused, timed out, malformed URL) is
    reported as False; this never raises.

    A True result is a point-in-time observation only.
    """
    if not endpoint:
        return False

    try:
        connection = await websockets.connect(endpoint, open_timeout=timeout)
    except Exception as e:
        logger.info(f"WebSocket debugger URL tested NOT OK: {type(e).__name__}: {e}")
        return False

    connection.transport.abort()
    logger.info("WebSocket debugger URL tested OK")
    return True
