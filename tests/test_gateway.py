"""Unit tests for the request gateway."""

import json

import httpx
import pytest
import respx

from cognee_client import (
    AuthenticationError,
    ClientConfig,
    CogneeError,
    FormBody,
    HttpxTransport,
    JsonBody,
    MultipartBody,
    NotFoundError,
    RequestDescriptor,
    ServerError,
    TransportError,
    dispatch,
    dispatch_binary,
)
from cognee_client.gateway import build_request


def test_build_url_adds_version_prefix(config: ClientConfig) -> None:
    """Test versioned paths get /api/v1."""
    request = build_request(config, RequestDescriptor(path="/datasets"))
    assert str(request.url) == "https://api.example.com/api/v1/datasets"


def test_build_url_unversioned(config: ClientConfig) -> None:
    """Test health-style paths skip the prefix."""
    request = build_request(config, RequestDescriptor(path="/health", versioned=False))
    assert str(request.url) == "https://api.example.com/health"


def test_trailing_slash_stripped() -> None:
    """Test base URL normalization."""
    config = ClientConfig(base_url="https://api.example.com/")
    request = build_request(config, RequestDescriptor(path="/search"))
    assert str(request.url) == "https://api.example.com/api/v1/search"


def test_repeated_query_params(config: ClientConfig) -> None:
    """Test sequence params repeat the key."""
    descriptor = RequestDescriptor(path="/datasets/status", params=[("dataset", "d1"), ("dataset", "d2")])
    request = build_request(config, descriptor)
    assert str(request.url) == "https://api.example.com/api/v1/datasets/status?dataset=d1&dataset=d2"


def test_json_body_and_default_content_type(config: ClientConfig) -> None:
    """Test JSON bodies are serialized with a JSON content type."""
    request = build_request(config, RequestDescriptor(path="/search", method="POST", body=JsonBody({"query": "hello"})))
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"query": "hello"}


def test_caller_content_type_preserved(config: ClientConfig) -> None:
    """Test a caller-supplied content type is not overridden."""
    descriptor = RequestDescriptor(
        path="/notebooks",
        method="POST",
        body=JsonBody({"a": 1}),
        headers={"content-type": "application/vnd.cognee+json"},
    )
    request = build_request(config, descriptor)
    assert request.headers["content-type"] == "application/vnd.cognee+json"


def test_multipart_body_has_no_json_content_type(config: ClientConfig) -> None:
    """Test multipart uploads let httpx set the boundary."""
    body = MultipartBody(
        fields=[("datasetName", "research"), ("node_set", "a"), ("node_set", "b")],
        files=[("data", ("notes.txt", b"hello", "text/plain"))],
    )
    descriptor = RequestDescriptor(path="/add", method="POST", body=body)
    assert descriptor.suppress_json_content_type

    request = build_request(config, descriptor)
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    assert "application/json" not in content_type

    content = request.read()
    assert b'name="datasetName"' in content
    assert content.count(b'name="node_set"') == 2
    assert b'filename="notes.txt"' in content


def test_form_body(config: ClientConfig) -> None:
    """Test URL-encoded form bodies."""
    body = FormBody(fields=[("username", "ada@example.com"), ("password", "s3cret")])
    request = build_request(config, RequestDescriptor(path="/auth/login", method="POST", body=body))
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.read() == b"username=ada%40example.com&password=s3cret"


def test_both_credentials_sent(base_url: str) -> None:
    """Test api key and bearer token are sent together."""
    config = ClientConfig(base_url=base_url, api_key="key_123", auth_token="tok_456")
    request = build_request(config, RequestDescriptor(path="/datasets"))
    assert request.headers["x-api-key"] == "key_123"
    assert request.headers["authorization"] == "Bearer tok_456"


def test_no_credentials(config: ClientConfig) -> None:
    """Test no credential headers without config."""
    request = build_request(config, RequestDescriptor(path="/datasets"))
    assert "x-api-key" not in request.headers
    assert "authorization" not in request.headers


def test_descriptor_does_not_mutate_config(base_url: str) -> None:
    """Test config stays untouched across builds."""
    config = ClientConfig(base_url=base_url, api_key="key_123")
    build_request(config, RequestDescriptor(path="/datasets", headers={"X-Trace": "1"}))
    assert config.api_key == "key_123"
    assert config.auth_token is None


@pytest.mark.asyncio
async def test_dispatch_json_success(config: ClientConfig, fake_transport) -> None:
    """Test JSON responses decode verbatim."""
    results = [{"search_result": ["Cognee builds graphs"], "dataset_name": "research"}]
    transport = fake_transport(json=results)

    data = await dispatch(config, RequestDescriptor(path="/search", method="POST", body=JsonBody({"query": "hello"})), transport)

    assert data == results
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_dispatch_text_success(config: ClientConfig, fake_transport) -> None:
    """Test non-JSON responses return text."""
    transport = fake_transport(content=b"<html>graph</html>", headers={"content-type": "text/html"})
    data = await dispatch(config, RequestDescriptor(path="/visualize"), transport)
    assert data == "<html>graph</html>"


@pytest.mark.asyncio
async def test_dispatch_empty_success(config: ClientConfig, fake_transport) -> None:
    """Test empty responses decode to an empty string."""
    transport = fake_transport(status_code=204)
    assert await dispatch(config, RequestDescriptor(path="/datasets/d1", method="DELETE"), transport) == ""


@pytest.mark.asyncio
async def test_dispatch_malformed_json_propagates(config: ClientConfig, fake_transport) -> None:
    """Test advertised-but-broken JSON is not normalized."""
    transport = fake_transport(content=b"{not json", headers={"content-type": "application/json"})
    with pytest.raises(json.JSONDecodeError):
        await dispatch(config, RequestDescriptor(path="/datasets"), transport)


@pytest.mark.asyncio
async def test_dispatch_error_message_from_payload(config: ClientConfig, fake_transport) -> None:
    """Test the payload message becomes the error message."""
    transport = fake_transport(status_code=404, json={"message": "Dataset not found"})

    with pytest.raises(NotFoundError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/datasets/d1/graph"), transport)

    error = exc_info.value
    assert error.message == "Dataset not found"
    assert error.status_code == 404
    assert error.payload == {"message": "Dataset not found"}
    assert error.error.message == "Dataset not found"


@pytest.mark.asyncio
async def test_dispatch_error_detail_fallback(config: ClientConfig, fake_transport) -> None:
    """Test FastAPI detail strings are used when message is absent."""
    transport = fake_transport(status_code=401, json={"detail": "Unauthorized"})

    with pytest.raises(AuthenticationError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/users/me"), transport)

    assert exc_info.value.message == "Unauthorized"
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_dispatch_error_empty_body(config: ClientConfig, fake_transport) -> None:
    """Test an empty failure body falls back to the status line."""
    transport = fake_transport(status_code=500)

    with pytest.raises(ServerError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/cognify", method="POST", body=JsonBody({})), transport)

    error = exc_info.value
    assert error.message == "HTTP 500: Internal Server Error"
    assert error.status_code == 500
    assert error.payload == {"message": "Internal Server Error"}


@pytest.mark.asyncio
async def test_dispatch_error_non_json_body(config: ClientConfig, fake_transport) -> None:
    """Test a plain-text failure body falls back to the status line."""
    transport = fake_transport(status_code=502, content=b"Bad gateway from proxy", headers={"content-type": "text/plain"})

    with pytest.raises(ServerError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/search"), transport)

    assert exc_info.value.message == "HTTP 502: Bad Gateway"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_dispatch_error_unmapped_status(config: ClientConfig, fake_transport) -> None:
    """Test statuses without a dedicated class raise the base error."""
    transport = fake_transport(status_code=418, json={"error": "teapot"})

    with pytest.raises(CogneeError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/search"), transport)

    assert type(exc_info.value) is CogneeError
    assert exc_info.value.message == "HTTP 418: I'm a teapot"
    assert exc_info.value.payload == {"error": "teapot"}


@pytest.mark.asyncio
async def test_dispatch_transport_error_wrapped(config: ClientConfig, fake_transport) -> None:
    """Test connection failures surface as TransportError."""
    cause = httpx.ConnectError("connection refused")
    transport = fake_transport(error=cause)

    with pytest.raises(TransportError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/datasets"), transport)

    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "cause",
    [
        httpx.DecodingError("Error -3 while decompressing data: incorrect header check"),
        httpx.TooManyRedirects("Exceeded maximum allowed redirects."),
    ],
)
async def test_dispatch_other_httpx_errors_wrapped(config: ClientConfig, fake_transport, cause: Exception) -> None:
    """Test decoding and redirect failures surface as TransportError."""
    transport = fake_transport(error=cause)

    with pytest.raises(TransportError) as exc_info:
        await dispatch(config, RequestDescriptor(path="/datasets"), transport)

    assert isinstance(exc_info.value, CogneeError)
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
@respx.mock
async def test_dispatch_broken_content_encoding(config: ClientConfig, base_url: str) -> None:
    """Test a corrupt gzip body through the httpx transport raises a client error."""
    respx.get(f"{base_url}/api/v1/datasets").mock(
        return_value=httpx.Response(
            200,
            headers={"content-encoding": "gzip", "content-type": "application/json"},
            stream=httpx.ByteStream(b"not gzip at all"),
        )
    )

    transport = HttpxTransport()
    try:
        with pytest.raises(CogneeError):
            await dispatch(config, RequestDescriptor(path="/datasets"), transport)
    finally:
        await transport.aclose()


@pytest.mark.asyncio
async def test_dispatch_binary_skips_json(config: ClientConfig, fake_transport) -> None:
    """Test binary fetch returns bytes even for JSON content types."""
    transport = fake_transport(content=b'{"looks": "like json"}', headers={"content-type": "application/json"})
    data = await dispatch_binary(config, RequestDescriptor(path="/datasets/d1/data/x1/raw"), transport)
    assert data == b'{"looks": "like json"}'


@pytest.mark.asyncio
async def test_dispatch_binary_error(config: ClientConfig, fake_transport) -> None:
    """Test binary failures carry no payload."""
    transport = fake_transport(status_code=404, json={"message": "Data not found"})

    with pytest.raises(NotFoundError) as exc_info:
        await dispatch_binary(config, RequestDescriptor(path="/datasets/d1/data/x1/raw"), transport)

    assert exc_info.value.message == "Failed to download file: Not Found"
    assert exc_info.value.status_code == 404
    assert exc_info.value.payload is None
