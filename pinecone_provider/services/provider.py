"""
Provider: turns the provider block into a configured control-plane client and hands it to
the resource and data source. Credentials are resolved once here; explicit values win over
PINECONE_API_KEY / PINECONE_ENVIRONMENT.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pinecone_provider import __version__
from pinecone_provider.config.controlplane import resolve_controlplane_config
from pinecone_provider.config.logging import get_logger
from pinecone_provider.config.settings import Settings, get_settings
from pinecone_provider.models.resource import ProviderConfigModel
from pinecone_provider.resources.controlplane import create_controlplane_client
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.index_data_source import IndexDataSource
from pinecone_provider.services.index_resource import IndexResource
from pinecone_provider.services.reconciler import IndexReconciler, PollPolicy
from pinecone_provider.services.schema import (
    INDEX_DATA_SOURCE_SCHEMA,
    INDEX_RESOURCE_SCHEMA,
    INDEX_TYPE_NAME,
    PROVIDER_SCHEMA,
    PROVIDER_TYPE_NAME,
)

logger = get_logger(__name__)

_MISSING_DETAIL = (
    "The provider cannot create the Pinecone API client as there is a missing or empty value for the "
    "Pinecone {what}. Set the {attribute} value in the configuration or use the {env_var} environment "
    "variable. If either is already set, ensure the value is not empty."
)


class PineconeProvider:
    """
    Holds the configured client for one host session. Pass client to use a ready-made
    implementation (e.g. the in-memory one) instead of building one from settings.
    """

    type_name = PROVIDER_TYPE_NAME
    version = __version__

    def __init__(
        self,
        settings: Settings | None = None,
        client: BaseControlPlaneClient | None = None,
        policy: PollPolicy | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._override_client = client
        self._client: BaseControlPlaneClient | None = None
        self._policy = policy or PollPolicy.from_settings(self._settings)
        self._stop_event = asyncio.Event()
        # Operations in flight per client; a replaced client is closed when its count drops to zero
        self._leases: dict[int, int] = {}
        self._retired: dict[int, BaseControlPlaneClient] = {}

    @property
    def client(self) -> BaseControlPlaneClient | None:
        return self._client

    @property
    def configured(self) -> bool:
        return self._client is not None

    @staticmethod
    def schema() -> dict:
        return {
            "provider": PROVIDER_SCHEMA.model_dump(),
            "resources": {INDEX_TYPE_NAME: INDEX_RESOURCE_SCHEMA.model_dump()},
            "data_sources": {INDEX_TYPE_NAME: INDEX_DATA_SOURCE_SCHEMA.model_dump()},
        }

    async def configure(self, config: ProviderConfigModel, diagnostics: Diagnostics) -> None:
        """Resolve credentials and build the client. Missing values become attribute diagnostics."""
        logger.info("Configuring Pinecone client")
        resolved = resolve_controlplane_config(
            api_key=config.api_key,
            environment=config.environment,
            settings=self._settings,
        )

        if not resolved.environment:
            diagnostics.add_error(
                "Missing Pinecone API environment",
                _MISSING_DETAIL.format(what="API environment", attribute="environment", env_var="PINECONE_ENVIRONMENT"),
                attribute="environment",
            )
        if not resolved.api_key.get_secret_value():
            diagnostics.add_error(
                "Missing Pinecone API Key",
                _MISSING_DETAIL.format(what="API Key", attribute="api_key", env_var="PINECONE_API_KEY"),
                attribute="api_key",
            )
        if diagnostics.has_error():
            return

        if self._override_client is not None:
            client = self._override_client
        else:
            try:
                client = create_controlplane_client(resolved, self._settings)
            except ValueError as e:
                diagnostics.add_error(
                    "Unable to Create Pinecone API Client",
                    "An unexpected error occurred when creating the Pinecone API client.\n\n"
                    f"Pinecone Client Error: {e}",
                )
                return

        if self._client is not None and self._client is not client:
            await self._retire(self._client)
        self._client = client
        if self._stop_event.is_set():
            # Configured again after shutdown; waits started from now on must not end at once
            self._stop_event = asyncio.Event()
        logger.info(
            "Configured Pinecone client",
            extra={
                "backend": client.backend_name,
                "pinecone_environment": resolved.environment,
                "success": True,
            },
        )

    def _require_client(self, diagnostics: Diagnostics) -> BaseControlPlaneClient | None:
        if self._client is None:
            diagnostics.add_error(
                "Unconfigured Pinecone client",
                "The provider has not been configured. Configure the provider before managing indexes.",
            )
        return self._client

    @asynccontextmanager
    async def _lease(self, diagnostics: Diagnostics) -> AsyncIterator[BaseControlPlaneClient | None]:
        """
        Hold the current client for one operation. A configure() during the operation
        swaps in a new client but leaves this one open until the operation ends.
        """
        client = self._require_client(diagnostics)
        if client is None:
            yield None
            return
        key = id(client)
        self._leases[key] = self._leases.get(key, 0) + 1
        try:
            yield client
        finally:
            self._leases[key] -= 1
            if self._leases[key] == 0:
                del self._leases[key]
                retired = self._retired.pop(key, None)
                if retired is not None:
                    logger.info("Closing replaced Pinecone client", extra={"backend": retired.backend_name})
                    await retired.aclose()

    async def _retire(self, client: BaseControlPlaneClient) -> None:
        if self._leases.get(id(client)):
            self._retired[id(client)] = client
            return
        await client.aclose()

    @asynccontextmanager
    async def index_resource(self, diagnostics: Diagnostics) -> AsyncIterator[IndexResource | None]:
        """Resource bound to the current client for the duration of the block (None if unconfigured)."""
        async with self._lease(diagnostics) as client:
            if client is None:
                yield None
            else:
                yield IndexResource(client, IndexReconciler(client, self._policy, self._stop_event))

    @asynccontextmanager
    async def index_data_source(self, diagnostics: Diagnostics) -> AsyncIterator[IndexDataSource | None]:
        async with self._lease(diagnostics) as client:
            yield IndexDataSource(client) if client is not None else None

    async def shutdown(self) -> None:
        """Interrupt in-flight convergence waits and close the client once nothing uses it."""
        self._stop_event.set()
        if self._client is not None:
            await self._retire(self._client)
            self._client = None
