"""HttpControlPlaneClient against httpx.MockTransport."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from pinecone_provider.config.controlplane import ControlPlaneConfig
from pinecone_provider.models.controlplane import ConfigureIndexRequest, CreateIndexRequest
from pinecone_provider.models.values import MetadataConfig
from pinecone_provider.resources.controlplane.base import (
    ClientConfigurationError,
    ControlPlaneResponseError,
    ControlPlaneStatusError,
    ControlPlaneTransportError,
)
from pinecone_provider.resources.controlplane.http_client import HttpControlPlaneClient

BASE_URL = "https://controller.test.pinecone.io"


class Recorder:
    """Mock transport handler that records requests and replays a canned response."""

    def __init__(self, status_code: int = 200, body=None, text: str | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.body = body
        self.text = text

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code)


def make_client(handler, environment: str = "test", api_key: str = "test_api_key") -> HttpControlPlaneClient:
    config = ControlPlaneConfig(api_key=api_key, environment=environment)
    return HttpControlPlaneClient(config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestBaseUrl:
    def test_derived_from_environment(self):
        assert ControlPlaneConfig(environment="us-west1-gcp").base_url == "https://controller.us-west1-gcp.pinecone.io"

    def test_empty_without_environment(self):
        assert ControlPlaneConfig(environment="").base_url == ""


class TestListIndexes:
    @pytest.mark.asyncio
    async def test_returns_names(self):
        recorder = Recorder(body=["test", "other"])
        client = make_client(recorder)

        assert await client.list_indexes() == ["test", "other"]

        request = recorder.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/databases"
        assert request.headers["Api-Key"] == "test_api_key"
        assert request.headers["Accept"] == "application/json; charset=utf-8"

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = make_client(Recorder(status_code=401, text="unauthorized"))
        with pytest.raises(ControlPlaneStatusError) as excinfo:
            await client.list_indexes()
        assert excinfo.value.status_code == 401
        assert "unauthorized" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_unexpected_body(self):
        client = make_client(Recorder(body={"indexes": "nope"}))
        with pytest.raises(ControlPlaneResponseError):
            await client.list_indexes()


class TestCreateIndex:
    @pytest.mark.asyncio
    async def test_posts_json_body(self):
        recorder = Recorder(status_code=201, text="")
        client = make_client(recorder)
        request = CreateIndexRequest(
            name="test",
            dimension=1536,
            metric="dotproduct",
            metadata_config=MetadataConfig(indexed=["potato"]),
        )

        await client.create_index(request)

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert str(sent.url) == f"{BASE_URL}/databases"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["Api-Key"] == "test_api_key"
        assert json.loads(sent.content) == {
            "name": "test",
            "dimension": 1536,
            "metric": "dotproduct",
            "pods": 1,
            "replicas": 1,
            "pod_type": "p1.x1",
            "metadata_config": {"indexed": ["potato"]},
        }

    @pytest.mark.asyncio
    async def test_conflict_carries_status_code(self):
        client = make_client(Recorder(status_code=409, text="index already exists"))
        with pytest.raises(ControlPlaneStatusError) as excinfo:
            await client.create_index(CreateIndexRequest(name="test", dimension=8))
        assert excinfo.value.status_code == 409
        assert excinfo.value.index_name == "test"


class TestDescribeIndex:
    @pytest.mark.asyncio
    async def test_parses_description(self, describe_body):
        recorder = Recorder(body=describe_body())
        client = make_client(recorder)

        description = await client.describe_index("test")

        assert str(recorder.requests[0].url) == f"{BASE_URL}/databases/test"
        assert description.status.ready is True
        assert str(description.database.metric) == "dotproduct"
        assert str(description.database.pod_type) == "p1.x1"
        assert description.database.metadata_config.indexed == ["potato"]
        assert description.status.host == "test-1234.svc.test.pinecone.io"

    @pytest.mark.asyncio
    async def test_not_found_is_absent_not_error(self):
        client = make_client(Recorder(status_code=404, text="not found"))
        assert await client.describe_index("missing") is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = make_client(Recorder(status_code=500, text="boom"))
        with pytest.raises(ControlPlaneStatusError) as excinfo:
            await client.describe_index("test")
        assert excinfo.value.status_code == 500

    @pytest.mark.asyncio
    async def test_null_member_lists(self, describe_body):
        body = describe_body()
        body["status"]["waiting"] = None
        body["status"]["crashed"] = None
        description = await make_client(Recorder(body=body)).describe_index("test")
        assert description.status.waiting == []
        assert description.status.crashed == []

    @pytest.mark.asyncio
    async def test_bad_pod_type_in_response(self, describe_body):
        client = make_client(Recorder(body=describe_body(pod_type="p9.x1")))
        with pytest.raises(ControlPlaneResponseError, match="invalid pod class: p9"):
            await client.describe_index("test")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = make_client(Recorder(text="{not json"))
        with pytest.raises(ControlPlaneResponseError):
            await client.describe_index("test")


class TestDeleteAndConfigure:
    @pytest.mark.asyncio
    async def test_delete(self):
        recorder = Recorder(status_code=202, text="")
        await make_client(recorder).delete_index("test")
        sent = recorder.requests[0]
        assert sent.method == "DELETE"
        assert str(sent.url) == f"{BASE_URL}/databases/test"
        assert sent.headers["Accept"] == "text/plain"

    @pytest.mark.asyncio
    async def test_delete_error(self):
        with pytest.raises(ControlPlaneStatusError) as excinfo:
            await make_client(Recorder(status_code=404, text="")).delete_index("test")
        assert excinfo.value.status_code == 404

    @pytest.mark.asyncio
    async def test_configure_patches_replicas_and_pod_type(self):
        recorder = Recorder(status_code=202, text="")
        await make_client(recorder).configure_index("test", ConfigureIndexRequest(replicas=2, pod_type="p1.x2"))
        sent = recorder.requests[0]
        assert sent.method == "PATCH"
        assert str(sent.url) == f"{BASE_URL}/databases/test"
        assert json.loads(sent.content) == {"replicas": 2, "pod_type": "p1.x2"}

    @pytest.mark.asyncio
    async def test_configure_error(self):
        with pytest.raises(ControlPlaneStatusError):
            await make_client(Recorder(status_code=400, text="bad")).configure_index(
                "test", ConfigureIndexRequest(replicas=2, pod_type="p1.x2")
            )


class TestPreconditions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.list_indexes(),
            lambda c: c.create_index(CreateIndexRequest(name="test", dimension=8)),
            lambda c: c.describe_index("test"),
            lambda c: c.delete_index("test"),
            lambda c: c.configure_index("test", ConfigureIndexRequest(replicas=1, pod_type="p1.x1")),
        ],
    )
    async def test_empty_environment_sends_nothing(self, call):
        recorder = Recorder(body=[])
        client = make_client(recorder, environment="")
        with pytest.raises(ClientConfigurationError, match="environment is empty"):
            await call(client)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_empty_api_key_sends_nothing(self):
        recorder = Recorder(body=[])
        client = make_client(recorder, api_key="")
        with pytest.raises(ClientConfigurationError, match="api key is empty"):
            await client.list_indexes()
        assert recorder.requests == []


class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ControlPlaneTransportError, match="connection refused") as excinfo:
            await make_client(refuse).describe_index("test")
        assert isinstance(excinfo.value.cause, httpx.ConnectError)
        assert excinfo.value.index_name == "test"

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self):
        http = AsyncMock(spec=httpx.AsyncClient)
        http.request.side_effect = httpx.ReadTimeout("timed out")
        client = HttpControlPlaneClient(ControlPlaneConfig(api_key="k", environment="test"), http_client=http)

        with pytest.raises(ControlPlaneTransportError):
            await client.list_indexes()
        http.request.assert_awaited_once()


class TestClose:
    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(body=[])))
        client = HttpControlPlaneClient(ControlPlaneConfig(api_key="k", environment="test"), http_client=http)
        await client.aclose()
        assert not http.is_closed
        await http.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        client = HttpControlPlaneClient(ControlPlaneConfig(api_key="k", environment="test"))
        await client.aclose()
        await client.aclose()
        assert client._http.is_closed

    @pytest.mark.asyncio
    async def test_closed_pool_is_a_transport_error(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(body=[])))
        client = HttpControlPlaneClient(ControlPlaneConfig(api_key="k", environment="test"), http_client=http)
        await http.aclose()

        with pytest.raises(ControlPlaneTransportError, match="client is closed") as excinfo:
            await client.describe_index("test")
        assert isinstance(excinfo.value.cause, RuntimeError)
        assert excinfo.value.index_name == "test"


class TestIndexNameInPath:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "index_name, raw_path",
        [
            ("other?x=1", b"/databases/other%3Fx%3D1"),
            ("a/b", b"/databases/a%2Fb"),
            ("../databases", b"/databases/..%2Fdatabases"),
        ],
    )
    async def test_name_stays_one_path_segment(self, index_name, raw_path):
        recorder = Recorder(status_code=404, text="")
        client = make_client(recorder)

        assert await client.describe_index(index_name) is None
        url = recorder.requests[0].url
        assert url.raw_path == raw_path
        assert url.query == b""

    @pytest.mark.asyncio
    async def test_delete_and_configure_escape_the_name(self):
        recorder = Recorder(status_code=202, text="")
        client = make_client(recorder)

        await client.delete_index("a/b?c")
        await client.configure_index("a/b?c", ConfigureIndexRequest(replicas=1, pod_type="p1.x1"))

        assert [r.url.raw_path for r in recorder.requests] == [b"/databases/a%2Fb%3Fc"] * 2
