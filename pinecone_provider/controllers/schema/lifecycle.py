"""Request/response envelopes for the provider, resource and data-source endpoints."""

from pydantic import BaseModel, Field

from pinecone_provider.models.resource import (
    IndexDataSourceConfig,
    IndexDataSourceModel,
    IndexResourceModel,
    ProviderConfigModel,
)
from pinecone_provider.services.diagnostics import Diagnostic


class DiagnosticsResponse(BaseModel):
    diagnostics: list[Diagnostic] = Field(default_factory=list, description="Errors and warnings for the user")


class ConfigureRequest(BaseModel):
    config: ProviderConfigModel = Field(default_factory=ProviderConfigModel)


class CreateRequest(BaseModel):
    plan: IndexResourceModel


class ReadRequest(BaseModel):
    state: IndexResourceModel


class UpdateRequest(BaseModel):
    plan: IndexResourceModel
    prior_state: IndexResourceModel | None = Field(
        default=None, description="Current state; used to refuse changes that need a replacement"
    )


class DeleteRequest(BaseModel):
    state: IndexResourceModel


class ImportRequest(BaseModel):
    id: str = Field(..., description="Index name")


class ResourceStateResponse(DiagnosticsResponse):
    """state is null when the call failed, after delete, or when read found the index gone."""

    state: IndexResourceModel | None = None


class DataSourceReadRequest(BaseModel):
    config: IndexDataSourceConfig


class DataSourceStateResponse(DiagnosticsResponse):
    state: IndexDataSourceModel | None = None
