"""
POST /v1/resources/pinecone_index/{create,read,update,delete,import}.
Failures come back as diagnostics with status 200; only malformed bodies get a 422.
"""

from fastapi import APIRouter, Depends

from pinecone_provider.controllers.dependencies import get_provider
from pinecone_provider.controllers.schema.lifecycle import (
    CreateRequest,
    DeleteRequest,
    ImportRequest,
    ReadRequest,
    ResourceStateResponse,
    UpdateRequest,
)
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.provider import PineconeProvider
from pinecone_provider.services.schema import INDEX_TYPE_NAME

router = APIRouter(prefix=f"/v1/resources/{INDEX_TYPE_NAME}", tags=["resources"])


def _respond(state, diagnostics: Diagnostics) -> ResourceStateResponse:
    return ResourceStateResponse(state=state, diagnostics=diagnostics.to_list())


@router.post("/create", response_model=ResourceStateResponse)
async def create_index(body: CreateRequest, provider: PineconeProvider = Depends(get_provider)) -> ResourceStateResponse:
    """Create the index and block until the controller reports it ready."""
    diagnostics = Diagnostics()
    async with provider.index_resource(diagnostics) as resource:
        state = await resource.create(body.plan, diagnostics) if resource else None
    return _respond(state, diagnostics)


@router.post("/read", response_model=ResourceStateResponse)
async def read_index(body: ReadRequest, provider: PineconeProvider = Depends(get_provider)) -> ResourceStateResponse:
    """Refresh state. A null state without diagnostics means the index was deleted out of band."""
    diagnostics = Diagnostics()
    async with provider.index_resource(diagnostics) as resource:
        state = await resource.read(body.state, diagnostics) if resource else None
    return _respond(state, diagnostics)


@router.post("/update", response_model=ResourceStateResponse)
async def update_index(body: UpdateRequest, provider: PineconeProvider = Depends(get_provider)) -> ResourceStateResponse:
    """Apply replicas/pod_type in place and block until the index is ready again."""
    diagnostics = Diagnostics()
    async with provider.index_resource(diagnostics) as resource:
        state = await resource.update(body.plan, diagnostics, prior=body.prior_state) if resource else None
    return _respond(state, diagnostics)


@router.post("/delete", response_model=ResourceStateResponse)
async def delete_index(body: DeleteRequest, provider: PineconeProvider = Depends(get_provider)) -> ResourceStateResponse:
    """Delete the index and block until describe no longer finds it."""
    diagnostics = Diagnostics()
    async with provider.index_resource(diagnostics) as resource:
        if resource:
            await resource.delete(body.state, diagnostics)
    return _respond(None, diagnostics)


@router.post("/import", response_model=ResourceStateResponse)
async def import_index(body: ImportRequest, provider: PineconeProvider = Depends(get_provider)) -> ResourceStateResponse:
    """Seed state from the index name; follow with read to fill in the rest."""
    diagnostics = Diagnostics()
    async with provider.index_resource(diagnostics) as resource:
        state = resource.import_state(body.id, diagnostics) if resource else None
    return _respond(state, diagnostics)
