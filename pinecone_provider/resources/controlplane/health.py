"""Control-plane reachability check. Used by /ready; no business logic."""

from typing import Any

from pinecone_provider.config.logging import get_logger
from pinecone_provider.resources.controlplane.base import (
    BaseControlPlaneClient,
    ClientConfigurationError,
    ControlPlaneError,
    ControlPlaneTransportError,
)

logger = get_logger(__name__)


async def ping_controlplane(client: BaseControlPlaneClient | None) -> dict[str, Any]:
    """
    List indexes as a cheap authenticated round trip. Returns dict with 'ok' bool and
    optional 'error' string; does not leak internal details.
    """
    if client is None:
        return {"ok": False, "error": "not_configured"}
    try:
        await client.list_indexes()
        return {"ok": True}
    except ClientConfigurationError:
        return {"ok": False, "error": "not_configured"}
    except ControlPlaneTransportError as e:
        logger.warning("Control-plane ping failed", extra={"error": type(e.cause or e).__name__})
        return {"ok": False, "error": "connection_failed"}
    except ControlPlaneError as e:
        logger.warning("Control-plane ping rejected", extra={"error": type(e).__name__})
        return {"ok": False, "error": "request_rejected"}
