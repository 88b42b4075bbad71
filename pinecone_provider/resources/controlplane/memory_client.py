"""In-memory control plane for tests and local runs. Same contract as the HTTP client."""

import asyncio
from dataclasses import dataclass

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.config.logging import get_logger
from pinecone_provider.models.controlplane import (
    ConfigureIndexRequest,
    CreateIndexRequest,
    DatabaseDescription,
    IndexDescription,
    IndexStatus,
)
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient, ControlPlaneStatusError

logger = get_logger(__name__)

MEMORY_INDEX_PORT = 433


@dataclass
class _StoredIndex:
    description: IndexDescription
    unsettled: int = 0
    terminating: bool = False


class InMemoryControlPlaneClient(BaseControlPlaneClient):
    """
    Keeps indexes in a dict guarded by one asyncio.Lock held for each operation.

    settle_polls imitates the eventually-consistent controller: after create or configure
    an index answers that many describes with ready=False, and after delete it stays
    visible (state "Terminating") for that many describes before disappearing.
    """

    def __init__(self, config: ControlPlaneConfig, settle_polls: int = 0) -> None:
        super().__init__(config)
        if settle_polls < 0:
            raise ValueError("settle_polls must be >= 0")
        self._settle_polls = settle_polls
        self._indexes: dict[str, _StoredIndex] = {}
        self._lock = asyncio.Lock()

    @property
    def backend_name(self) -> str:
        return "memory"

    def _host_for(self, index_name: str) -> str:
        return f"{index_name}.svc.{self._config.environment}.pinecone.io"

    async def list_indexes(self) -> list[str]:
        self.ensure_configured()
        async with self._lock:
            return sorted(self._indexes)

    async def create_index(self, request: CreateIndexRequest) -> None:
        self.ensure_configured()
        async with self._lock:
            if request.name in self._indexes:
                raise ControlPlaneStatusError(
                    f"create index {request.name!r} failed with status code 409: index already exists",
                    status_code=409,
                    index_name=request.name,
                )
            description = IndexDescription(
                database=DatabaseDescription(
                    name=request.name,
                    metric=request.metric,
                    dimension=request.dimension,
                    replicas=request.replicas,
                    shards=1,
                    pods=request.pods,
                    pod_type=request.pod_type,
                    metadata_config=(
                        request.metadata_config.model_copy(deep=True) if request.metadata_config else None
                    ),
                ),
                status=IndexStatus(host=self._host_for(request.name), port=MEMORY_INDEX_PORT),
            )
            stored = _StoredIndex(description=description, unsettled=self._settle_polls)
            self._mark_unsettled(stored, "Initializing")
            self._indexes[request.name] = stored
        logger.debug("In-memory index created", extra={"index_name": request.name})

    async def describe_index(self, index_name: str) -> IndexDescription | None:
        self.ensure_configured()
        async with self._lock:
            stored = self._indexes.get(index_name)
            if stored is None:
                return None
            if stored.unsettled > 0:
                stored.unsettled -= 1
                return stored.description.model_copy(deep=True)
            if stored.terminating:
                del self._indexes[index_name]
                return None
            status = stored.description.status
            status.ready = True
            status.state = "Ready"
            status.waiting = []
            return stored.description.model_copy(deep=True)

    async def delete_index(self, index_name: str) -> None:
        self.ensure_configured()
        async with self._lock:
            stored = self._indexes.get(index_name)
            if stored is None:
                raise ControlPlaneStatusError(
                    f"delete index {index_name!r} failed with status code 404: index not found",
                    status_code=404,
                    index_name=index_name,
                )
            if self._settle_polls == 0:
                del self._indexes[index_name]
                return
            stored.terminating = True
            stored.unsettled = self._settle_polls
            self._mark_unsettled(stored, "Terminating")

    async def configure_index(self, index_name: str, request: ConfigureIndexRequest) -> None:
        self.ensure_configured()
        async with self._lock:
            stored = self._indexes.get(index_name)
            if stored is None or stored.terminating:
                raise ControlPlaneStatusError(
                    f"configure index {index_name!r} failed with status code 404: index not found",
                    status_code=404,
                    index_name=index_name,
                )
            database = stored.description.database
            database.replicas = request.replicas
            database.pod_type = request.pod_type
            stored.unsettled = self._settle_polls
            self._mark_unsettled(stored, "ScalingUp")

    def _mark_unsettled(self, stored: _StoredIndex, state: str) -> None:
        if stored.unsettled == 0:
            return
        status = stored.description.status
        status.ready = False
        status.state = state
        status.waiting = [f"{stored.description.database.name}-0"]
