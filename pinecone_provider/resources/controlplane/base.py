"""Control-plane client contract and the errors every implementation raises."""

from abc import ABC, abstractmethod

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.models.controlplane import (
    ConfigureIndexRequest,
    CreateIndexRequest,
    IndexDescription,
)


class ControlPlaneError(Exception):
    """Base for control-plane failures. Carries the index name when one is involved."""

    def __init__(self, message: str, index_name: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.index_name = index_name
        self.cause = cause


class ClientConfigurationError(ControlPlaneError):
    """Environment or API key missing. Raised before any request is sent."""


class ControlPlaneTransportError(ControlPlaneError):
    """The request never got an HTTP response (connect, TLS, timeout)."""


class ControlPlaneStatusError(ControlPlaneError):
    """The control plane answered with a status code >= 400."""

    def __init__(self, message: str, status_code: int, index_name: str | None = None):
        super().__init__(message, index_name=index_name)
        self.status_code = status_code


class ControlPlaneResponseError(ControlPlaneError):
    """A successful response whose body could not be decoded."""


class BaseControlPlaneClient(ABC):
    """
    One method per remote action. describe_index returns None for an index that does
    not exist; every other failure raises a ControlPlaneError subclass.
    """

    def __init__(self, config: ControlPlaneConfig):
        self._config = config

    @property
    def config(self) -> ControlPlaneConfig:
        return self._config

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Registry key, e.g. 'http' or 'memory'."""
        ...

    def ensure_configured(self) -> str:
        """Return the controller base URL, or raise if environment or API key is empty."""
        base_url = self._config.base_url
        if not base_url:
            raise ClientConfigurationError("environment is empty")
        if not self._config.api_key.get_secret_value():
            raise ClientConfigurationError("api key is empty")
        return base_url

    @abstractmethod
    async def list_indexes(self) -> list[str]:
        ...

    @abstractmethod
    async def create_index(self, request: CreateIndexRequest) -> None:
        """Start provisioning. Does not wait for the index to become ready."""
        ...

    @abstractmethod
    async def describe_index(self, index_name: str) -> IndexDescription | None:
        ...

    @abstractmethod
    async def delete_index(self, index_name: str) -> None:
        ...

    @abstractmethod
    async def configure_index(self, index_name: str, request: ConfigureIndexRequest) -> None:
        ...

    async def aclose(self) -> None:
        """Release connections. Safe to call more than once."""
        return None
