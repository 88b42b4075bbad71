"""
Translate between declarative records (models/resource.py) and control-plane bodies
(models/controlplane.py). Request builders parse metric, pod type and metadata config and
raise ValueError on bad input, before anything is sent.
"""

from pinecone_provider.models.controlplane import (
    ConfigureIndexRequest,
    CreateIndexRequest,
    IndexDescription,
)
from pinecone_provider.models.resource import (
    IndexDataSourceModel,
    IndexResourceModel,
    IndexStatusModel,
    MetadataConfigModel,
)
from pinecone_provider.models.values import MetadataConfig, Metric, PodType


def _metadata_config_from_record(record: MetadataConfigModel | None) -> MetadataConfig | None:
    if record is None:
        return None
    return MetadataConfig.from_fields(record.indexed)


def _metadata_config_to_record(config: MetadataConfig | None) -> MetadataConfigModel | None:
    if config is None:
        return None
    return MetadataConfigModel(indexed=list(config.indexed))


def to_create_request(plan: IndexResourceModel) -> CreateIndexRequest:
    if plan.dimension is None:
        raise ValueError("dimension is required")
    return CreateIndexRequest(
        name=plan.name,
        dimension=plan.dimension,
        metric=Metric.parse(plan.metric),
        pods=plan.pods,
        replicas=plan.replicas,
        pod_type=PodType.parse(plan.pod_type),
        metadata_config=_metadata_config_from_record(plan.metadata_config),
    )


def to_configure_request(plan: IndexResourceModel) -> ConfigureIndexRequest:
    return ConfigureIndexRequest(replicas=plan.replicas, pod_type=PodType.parse(plan.pod_type))


def to_resource_state(
    index_name: str,
    description: IndexDescription | None,
    last_updated: str | None = None,
) -> IndexResourceModel | None:
    """
    Persisted state for a described index. None means the index no longer exists and the
    host should drop it from state.
    """
    if description is None:
        return None
    database = description.database
    name = database.name or index_name
    return IndexResourceModel(
        id=name,
        name=name,
        dimension=database.dimension,
        metric=str(database.metric),
        pods=database.pods,
        replicas=database.replicas,
        pod_type=str(database.pod_type),
        metadata_config=_metadata_config_to_record(database.metadata_config),
        last_updated=last_updated,
    )


def to_data_source_state(index_name: str, description: IndexDescription | None) -> IndexDataSourceModel:
    """Lookup result. An unknown index yields a record with only the id set."""
    if description is None:
        return IndexDataSourceModel(id=index_name)
    database = description.database
    status = description.status
    return IndexDataSourceModel(
        id=index_name,
        name=database.name,
        metric=str(database.metric),
        dimension=database.dimension,
        replicas=database.replicas,
        shards=database.shards,
        pods=database.pods,
        pod_type=str(database.pod_type),
        metadata_config=_metadata_config_to_record(database.metadata_config),
        status=IndexStatusModel(host=status.host, port=status.port, state=status.state, ready=status.ready),
    )
