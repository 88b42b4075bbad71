"""Control-plane client implementations: the Pinecone HTTP API and an in-memory stand-in."""

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.config.settings import Settings, get_settings
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient
from pinecone_provider.resources.controlplane.http_client import HttpControlPlaneClient
from pinecone_provider.resources.controlplane.memory_client import InMemoryControlPlaneClient

CLIENT_REGISTRY: dict[str, type[BaseControlPlaneClient]] = {
    "http": HttpControlPlaneClient,
    "memory": InMemoryControlPlaneClient,
}


def create_controlplane_client(
    config: ControlPlaneConfig,
    settings: Settings | None = None,
) -> BaseControlPlaneClient:
    """Build the client selected by settings.controlplane_backend."""
    s = settings or get_settings()
    cls = CLIENT_REGISTRY.get(s.controlplane_backend)
    if cls is None:
        raise ValueError(f"Unknown control-plane backend: {s.controlplane_backend!r}")
    if cls is InMemoryControlPlaneClient:
        return InMemoryControlPlaneClient(config, settle_polls=s.memory_settle_polls)
    return cls(config)
