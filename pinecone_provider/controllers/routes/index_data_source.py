"""POST /v1/data-sources/pinecone_index/read: look up an index by name."""

from fastapi import APIRouter, Depends

from pinecone_provider.controllers.dependencies import get_provider
from pinecone_provider.controllers.schema.lifecycle import DataSourceReadRequest, DataSourceStateResponse
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.provider import PineconeProvider
from pinecone_provider.services.schema import INDEX_TYPE_NAME

router = APIRouter(prefix=f"/v1/data-sources/{INDEX_TYPE_NAME}", tags=["data-sources"])


@router.post("/read", response_model=DataSourceStateResponse)
async def read_index_data_source(
    body: DataSourceReadRequest,
    provider: PineconeProvider = Depends(get_provider),
) -> DataSourceStateResponse:
    diagnostics = Diagnostics()
    async with provider.index_data_source(diagnostics) as data_source:
        state = await data_source.read(body.config, diagnostics) if data_source else None
    return DataSourceStateResponse(state=state, diagnostics=diagnostics.to_list())
