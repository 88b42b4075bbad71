"""Control-plane request and response bodies. Field names match the wire format (snake_case)."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from pinecone_provider.models.values import DEFAULT_POD_TYPE, MetadataConfig, Metric, PodType

MAX_INDEX_NAME_LENGTH = 45


def _coerce_metric(value: Any) -> Any:
    if isinstance(value, str):
        return Metric.parse(value)
    return value


class CreateIndexRequest(BaseModel):
    """POST /databases body."""

    name: str = Field(..., min_length=1, max_length=MAX_INDEX_NAME_LENGTH)
    dimension: int = Field(..., ge=1)
    metric: Metric = Field(default=Metric.COSINE)
    pods: int = Field(default=1, ge=1)
    replicas: int = Field(default=1, ge=1)
    pod_type: PodType = Field(default_factory=lambda: PodType.parse(DEFAULT_POD_TYPE))
    metadata_config: MetadataConfig | None = None

    @field_validator("metric", mode="before")
    @classmethod
    def _parse_metric(cls, value: Any) -> Any:
        return _coerce_metric(value)

    def to_payload(self) -> dict[str, Any]:
        """JSON body; metadata_config is omitted when absent."""
        return self.model_dump(mode="json", exclude_none=True)


class ConfigureIndexRequest(BaseModel):
    """PATCH /databases/{name} body. Only replicas and pod_type change after create."""

    replicas: int = Field(..., ge=1)
    pod_type: PodType

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class DatabaseDescription(BaseModel):
    """The `database` half of a describe response."""

    name: str
    metric: Metric
    dimension: int
    replicas: int = 0
    shards: int = 0
    pods: int = 0
    pod_type: PodType
    metadata_config: MetadataConfig | None = None

    @field_validator("metric", mode="before")
    @classmethod
    def _parse_metric(cls, value: Any) -> Any:
        return _coerce_metric(value)


class IndexStatus(BaseModel):
    """The `status` half of a describe response. Fresh on every describe; never persisted."""

    waiting: list[str] = Field(default_factory=list)
    crashed: list[str] = Field(default_factory=list)
    host: str = ""
    port: int = 0
    state: str = ""
    ready: bool = False

    @field_validator("waiting", "crashed", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class IndexDescription(BaseModel):
    """Describe response: database settings plus current status."""

    database: DatabaseDescription
    status: IndexStatus = Field(default_factory=IndexStatus)
