"""Declarative records exchanged with the host: provider block, pinecone_index resource and data source."""

from pydantic import BaseModel, Field

from pinecone_provider.models.values import DEFAULT_POD_TYPE, Metric

DEFAULT_METRIC = Metric.COSINE.value
DEFAULT_PODS = 1
DEFAULT_REPLICAS = 1


class ProviderConfigModel(BaseModel):
    """Provider block. Unset fields fall back to PINECONE_ENVIRONMENT / PINECONE_API_KEY."""

    environment: str | None = None
    api_key: str | None = Field(default=None, repr=False)


class MetadataConfigModel(BaseModel):
    """metadata_config block as written by the user; checked when turned into a request."""

    indexed: list[str] | None = None


class IndexResourceModel(BaseModel):
    """
    pinecone_index resource state. metric and pod_type stay plain strings here so a bad
    value becomes a diagnostic from the lifecycle call rather than a schema error.
    """

    id: str | None = None
    name: str = Field(..., min_length=1)
    dimension: int | None = None
    metric: str = DEFAULT_METRIC
    pods: int = DEFAULT_PODS
    replicas: int = DEFAULT_REPLICAS
    pod_type: str = DEFAULT_POD_TYPE
    metadata_config: MetadataConfigModel | None = None
    last_updated: str | None = None


class IndexStatusModel(BaseModel):
    host: str
    port: int
    state: str
    ready: bool


class IndexDataSourceConfig(BaseModel):
    """Data source arguments: only the index name."""

    name: str = Field(..., min_length=1)


class IndexDataSourceModel(BaseModel):
    """pinecone_index data source state. Everything but id is empty when the index does not exist."""

    id: str
    name: str | None = None
    metric: str | None = None
    dimension: int | None = None
    replicas: int | None = None
    shards: int | None = None
    pods: int | None = None
    pod_type: str | None = None
    metadata_config: MetadataConfigModel | None = None
    status: IndexStatusModel | None = None
