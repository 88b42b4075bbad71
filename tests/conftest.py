"""Shared fixtures: credentials, in-memory control plane, zero-wait poll policy."""

import pytest

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.config.settings import Settings
from pinecone_provider.resources.controlplane.memory_client import InMemoryControlPlaneClient
from pinecone_provider.services.reconciler import PollPolicy

TEST_API_KEY = "test_api_key"
TEST_ENVIRONMENT = "test"


def describe_payload(**database_overrides) -> dict:
    """A describe response body as the controller sends it."""
    database = {
        "name": "test",
        "metric": "dotproduct",
        "dimension": 1536,
        "replicas": 1,
        "shards": 1,
        "pods": 1,
        "pod_type": "p1.x1",
        "metadata_config": {"indexed": ["potato"]},
    }
    database.update(database_overrides)
    return {
        "database": database,
        "status": {
            "waiting": [],
            "crashed": [],
            "host": "test-1234.svc.test.pinecone.io",
            "port": 433,
            "state": "Ready",
            "ready": True,
        },
    }


@pytest.fixture
def describe_body():
    return describe_payload


@pytest.fixture
def controlplane_config() -> ControlPlaneConfig:
    return ControlPlaneConfig(api_key=TEST_API_KEY, environment=TEST_ENVIRONMENT)


@pytest.fixture
def memory_client(controlplane_config: ControlPlaneConfig) -> InMemoryControlPlaneClient:
    return InMemoryControlPlaneClient(controlplane_config)


@pytest.fixture
def settling_client(controlplane_config: ControlPlaneConfig) -> InMemoryControlPlaneClient:
    """Stays unsettled for two describes after every mutation."""
    return InMemoryControlPlaneClient(controlplane_config, settle_polls=2)


@pytest.fixture
def no_wait() -> PollPolicy:
    return PollPolicy(interval_seconds=0)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the process environment and .env."""
    return Settings(
        _env_file=None,
        pinecone_api_key="",
        pinecone_environment="",
        controlplane_backend="memory",
        poll_interval_seconds=0,
    )
