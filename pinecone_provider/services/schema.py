"""Schemas the host uses to validate configuration and to plan in-place updates vs replacement."""

from typing import Any

from pydantic import BaseModel, Field

from pinecone_provider.models.resource import (
    DEFAULT_METRIC,
    DEFAULT_PODS,
    DEFAULT_REPLICAS,
    IndexResourceModel,
)
from pinecone_provider.models.values import DEFAULT_POD_TYPE

PROVIDER_TYPE_NAME = "pinecone"
INDEX_TYPE_NAME = f"{PROVIDER_TYPE_NAME}_index"


class AttributeSchema(BaseModel):
    type: str = Field(..., description="string | number | bool | list(string) | object")
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    default: Any = None
    requires_replace: bool = False
    use_state_for_unknown: bool = False
    attributes: dict[str, "AttributeSchema"] | None = None


class BlockSchema(BaseModel):
    description: str
    attributes: dict[str, AttributeSchema]


PROVIDER_SCHEMA = BlockSchema(
    description="Interact with Pinecone vector database. https://www.pinecone.io/",
    attributes={
        "environment": AttributeSchema(
            type="string", optional=True, description="The Pinecone environment to use."
        ),
        "api_key": AttributeSchema(
            type="string", optional=True, sensitive=True, description="The Pinecone API key to use."
        ),
    },
)

INDEX_RESOURCE_SCHEMA = BlockSchema(
    description="Manage an index.",
    attributes={
        "id": AttributeSchema(type="string", computed=True, description="The ID of the index."),
        "name": AttributeSchema(
            type="string", required=True, requires_replace=True, description="The name of the index."
        ),
        "dimension": AttributeSchema(
            type="number",
            required=True,
            requires_replace=True,
            use_state_for_unknown=True,
            description="The dimension of the index.",
        ),
        "metric": AttributeSchema(
            type="string",
            optional=True,
            computed=True,
            default=DEFAULT_METRIC,
            requires_replace=True,
            use_state_for_unknown=True,
            description="The metric of the index.",
        ),
        "pods": AttributeSchema(
            type="number",
            optional=True,
            computed=True,
            default=DEFAULT_PODS,
            requires_replace=True,
            use_state_for_unknown=True,
            description="The number of pods of the index.",
        ),
        "replicas": AttributeSchema(
            type="number",
            optional=True,
            computed=True,
            default=DEFAULT_REPLICAS,
            description="The number of replicas of the index.",
        ),
        "pod_type": AttributeSchema(
            type="string",
            optional=True,
            computed=True,
            default=DEFAULT_POD_TYPE,
            description="The pod type of the index.",
        ),
        "metadata_config": AttributeSchema(
            type="object",
            optional=True,
            computed=True,
            requires_replace=True,
            description="The metadata config of the index.",
            attributes={
                "indexed": AttributeSchema(
                    type="list(string)",
                    optional=True,
                    computed=True,
                    description="The indexed fields of the index.",
                ),
            },
        ),
        "last_updated": AttributeSchema(
            type="string", computed=True, description="The last updated time of the index."
        ),
    },
)

INDEX_DATA_SOURCE_SCHEMA = BlockSchema(
    description="Get information about an index.",
    attributes={
        "id": AttributeSchema(type="string", computed=True, description="The ID of the index."),
        "name": AttributeSchema(type="string", required=True, description="The name of the index."),
        "metric": AttributeSchema(type="string", computed=True, description="The metric of the index."),
        "dimension": AttributeSchema(type="number", computed=True, description="The dimension of the index."),
        "replicas": AttributeSchema(type="number", computed=True, description="The replicas of the index."),
        "shards": AttributeSchema(type="number", computed=True, description="The shards of the index."),
        "pods": AttributeSchema(type="number", computed=True, description="The pods of the index."),
        "pod_type": AttributeSchema(type="string", computed=True, description="The pod type of the index."),
        "metadata_config": AttributeSchema(
            type="object",
            computed=True,
            description="The metadata config of the index.",
            attributes={
                "indexed": AttributeSchema(
                    type="list(string)", computed=True, description="The indexed fields of the index."
                ),
            },
        ),
        "status": AttributeSchema(
            type="object",
            computed=True,
            description="The status of the index.",
            attributes={
                "host": AttributeSchema(type="string", computed=True, description="The host of the index."),
                "port": AttributeSchema(type="number", computed=True, description="The port of the index."),
                "state": AttributeSchema(type="string", computed=True, description="The state of the index."),
                "ready": AttributeSchema(type="bool", computed=True, description="The ready state of the index."),
            },
        ),
    },
)


def replacement_attributes(prior: IndexResourceModel, planned: IndexResourceModel) -> list[str]:
    """Names of requires_replace attributes whose planned value differs from prior state."""
    prior_values = prior.model_dump()
    planned_values = planned.model_dump()
    return [
        name
        for name, attribute in INDEX_RESOURCE_SCHEMA.attributes.items()
        if attribute.requires_replace and prior_values.get(name) != planned_values.get(name)
    ]
