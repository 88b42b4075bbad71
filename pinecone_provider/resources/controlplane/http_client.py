"""Async Pinecone controller client over HTTPS using httpx."""

from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.config.logging import get_logger
from pinecone_provider.models.controlplane import (
    ConfigureIndexRequest,
    CreateIndexRequest,
    IndexDescription,
)
from pinecone_provider.resources.controlplane.base import (
    BaseControlPlaneClient,
    ControlPlaneResponseError,
    ControlPlaneStatusError,
    ControlPlaneTransportError,
)

logger = get_logger(__name__)

_INDEX_NAMES = TypeAdapter(list[str])

# Longest response body quoted back in an error message
_MAX_ERROR_BODY = 300


def _index_path(index_name: str) -> str:
    """Path of one index. The name is a single segment, so "/" and "?" are escaped."""
    return f"/databases/{quote(index_name, safe='')}"


class HttpControlPlaneClient(BaseControlPlaneClient):
    """
    Talks to https://controller.<environment>.pinecone.io. Stateless apart from credentials
    and the connection pool, so one instance may serve concurrent operations.
    Pass http_client to reuse a pool (or a mock transport); otherwise one is created and
    closed by aclose().
    """

    def __init__(self, config: ControlPlaneConfig, http_client: httpx.AsyncClient | None = None) -> None:
        super().__init__(config)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout_seconds))

    @property
    def backend_name(self) -> str:
        return "http"

    async def _send(
        self,
        method: str,
        path: str,
        *,
        accept: str,
        index_name: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        base_url = self.ensure_configured()
        headers = {"Accept": accept, "Api-Key": self._config.api_key.get_secret_value()}
        try:
            response = await self._http.request(method, f"{base_url}{path}", headers=headers, json=json)
        except httpx.RequestError as e:
            logger.warning(
                "Control-plane request failed",
                extra={"method": method, "path": path, "error_type": type(e).__name__},
            )
            raise ControlPlaneTransportError(
                f"{method} {path} failed: {e}", index_name=index_name, cause=e
            ) from e
        except RuntimeError as e:
            # httpx raises a bare RuntimeError once the pool has been closed
            if not self._http.is_closed:
                raise
            raise ControlPlaneTransportError(
                f"{method} {path} failed: client is closed", index_name=index_name, cause=e
            ) from e
        logger.debug(
            "Control-plane response",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str, index_name: str | None = None) -> None:
        if response.status_code < 400:
            return
        body = response.text.strip()[:_MAX_ERROR_BODY]
        message = f"{action} failed with status code {response.status_code}"
        if body:
            message = f"{message}: {body}"
        raise ControlPlaneStatusError(message, status_code=response.status_code, index_name=index_name)

    async def list_indexes(self) -> list[str]:
        response = await self._send("GET", "/databases", accept="application/json; charset=utf-8")
        self._raise_for_status(response, "list indexes")
        try:
            return _INDEX_NAMES.validate_python(response.json())
        except ValueError as e:
            raise ControlPlaneResponseError(f"unexpected list indexes response: {e}", cause=e) from e

    async def create_index(self, request: CreateIndexRequest) -> None:
        response = await self._send(
            "POST",
            "/databases",
            accept="text/plain; charset=utf-8",
            index_name=request.name,
            json=request.to_payload(),
        )
        self._raise_for_status(response, f"create index {request.name!r}", request.name)
        logger.info(
            "Index creation requested",
            extra={"index_name": request.name, "dimension": request.dimension, "metric": str(request.metric)},
        )

    async def describe_index(self, index_name: str) -> IndexDescription | None:
        response = await self._send(
            "GET", _index_path(index_name), accept="application/json", index_name=index_name
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response, f"describe index {index_name!r}", index_name)
        try:
            return IndexDescription.model_validate(response.json())
        except ValueError as e:
            raise ControlPlaneResponseError(
                f"unexpected describe response for index {index_name!r}: {e}",
                index_name=index_name,
                cause=e,
            ) from e

    async def delete_index(self, index_name: str) -> None:
        response = await self._send(
            "DELETE", _index_path(index_name), accept="text/plain", index_name=index_name
        )
        self._raise_for_status(response, f"delete index {index_name!r}", index_name)
        logger.info("Index deletion requested", extra={"index_name": index_name})

    async def configure_index(self, index_name: str, request: ConfigureIndexRequest) -> None:
        response = await self._send(
            "PATCH",
            _index_path(index_name),
            accept="text/plain",
            index_name=index_name,
            json=request.to_payload(),
        )
        self._raise_for_status(response, f"configure index {index_name!r}", index_name)
        logger.info(
            "Index configuration requested",
            extra={"index_name": index_name, "replicas": request.replicas, "pod_type": str(request.pod_type)},
        )

    async def aclose(self) -> None:
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()
