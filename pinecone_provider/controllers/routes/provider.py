"""GET /v1/schema and POST /v1/provider/configure."""

from typing import Any

from fastapi import APIRouter, Depends

from pinecone_provider.controllers.dependencies import get_provider
from pinecone_provider.controllers.schema.lifecycle import ConfigureRequest, DiagnosticsResponse
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.provider import PineconeProvider

router = APIRouter(prefix="/v1", tags=["provider"])


@router.get("/schema")
async def get_schema(provider: PineconeProvider = Depends(get_provider)) -> dict[str, Any]:
    """Provider, resource and data-source schemas with per-attribute replacement metadata."""
    return {"type_name": provider.type_name, "version": provider.version, **provider.schema()}


@router.post("/provider/configure", response_model=DiagnosticsResponse)
async def configure_provider(
    body: ConfigureRequest,
    provider: PineconeProvider = Depends(get_provider),
) -> DiagnosticsResponse:
    """Configure the client from the provider block; unset values fall back to the service environment."""
    diagnostics = Diagnostics()
    await provider.configure(body.config, diagnostics)
    return DiagnosticsResponse(diagnostics=diagnostics.to_list())
