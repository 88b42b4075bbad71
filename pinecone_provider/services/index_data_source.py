"""pinecone_index data source: read-only lookup of an index by name."""

from pinecone_provider.config.logging import get_logger
from pinecone_provider.models.resource import IndexDataSourceConfig, IndexDataSourceModel
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient, ControlPlaneError
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.schema import INDEX_TYPE_NAME
from pinecone_provider.services.state_mapper import to_data_source_state

logger = get_logger(__name__)


class IndexDataSource:
    type_name = INDEX_TYPE_NAME

    def __init__(self, client: BaseControlPlaneClient) -> None:
        self._client = client

    async def read(self, config: IndexDataSourceConfig, diagnostics: Diagnostics) -> IndexDataSourceModel | None:
        """Describe the index. An unknown name is not an error: only id is filled in."""
        try:
            description = await self._client.describe_index(config.name)
        except ControlPlaneError as e:
            diagnostics.add_error("Error DescribeIndex", str(e))
            return None
        if description is None:
            logger.info("Index not found for data source", extra={"index_name": config.name})
        return to_data_source_state(config.name, description)
