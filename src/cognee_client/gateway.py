"""
Request gateway shared by every Cognee endpoint.

Turns a ``RequestDescriptor`` into an ``httpx.Request``, sends it through a
``Transport`` exactly once, and decodes the response or raises a
``CogneeError``.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from .config import ClientConfig
from .exceptions import CogneeError, TransportError, error_for_status
from .transport import Transport

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

API_KEY_HEADER = "X-Api-Key"
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


@dataclass(frozen=True)
class JsonBody:
    """A JSON-serializable request body."""

    value: Any


@dataclass(frozen=True)
class MultipartBody:
    """
    A multipart form body.

    ``fields`` are plain form fields; a field may repeat. ``files`` use the
    httpx file tuple format, e.g. ``("data", ("notes.txt", b"...", "text/plain"))``.
    """

    fields: Sequence[tuple[str, str]] = ()
    files: Sequence[tuple[str, Any]] = ()


@dataclass(frozen=True)
class FormBody:
    """A URL-encoded form body."""

    fields: Sequence[tuple[str, str]] = ()


Body = Union[JsonBody, MultipartBody, FormBody]


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one call."""

    path: str
    method: str = "GET"
    body: Optional[Body] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Optional[QueryParams] = None
    versioned: bool = True

    @property
    def suppress_json_content_type(self) -> bool:
        return isinstance(self.body, MultipartBody)


def build_url(config: ClientConfig, descriptor: RequestDescriptor) -> str:
    prefix = API_PREFIX if descriptor.versioned else ""
    return f"{config.base_url}{prefix}{descriptor.path}"


def build_headers(config: ClientConfig, descriptor: RequestDescriptor) -> httpx.Headers:
    """
    Assemble outgoing headers.

    Caller headers come first, then credentials. Multipart bodies never get a
    JSON content type so httpx can set the boundary; every other request
    defaults to JSON unless the caller already picked a content type.
    """
    headers = httpx.Headers(descriptor.headers)

    if config.api_key:
        headers[API_KEY_HEADER] = config.api_key
    if config.auth_token:
        headers["Authorization"] = f"Bearer {config.auth_token}"

    if isinstance(descriptor.body, FormBody):
        headers.setdefault("Content-Type", FORM_CONTENT_TYPE)
    elif not descriptor.suppress_json_content_type:
        headers.setdefault("Content-Type", JSON_CONTENT_TYPE)

    return headers


def build_request(config: ClientConfig, descriptor: RequestDescriptor) -> httpx.Request:
    """Build the ``httpx.Request`` for a descriptor without sending it."""
    url = build_url(config, descriptor)
    headers = build_headers(config, descriptor)
    extensions = {"timeout": httpx.Timeout(config.timeout).as_dict()}
    body = descriptor.body
    method = descriptor.method.upper()

    if body is None:
        return httpx.Request(method, url, headers=headers, params=descriptor.params, extensions=extensions)
    if isinstance(body, JsonBody):
        return httpx.Request(
            method,
            url,
            headers=headers,
            params=descriptor.params,
            content=json.dumps(body.value).encode("utf-8"),
            extensions=extensions,
        )
    if isinstance(body, MultipartBody):
        return httpx.Request(
            method,
            url,
            headers=headers,
            params=descriptor.params,
            data=_group_fields(body.fields),
            files=list(body.files),
            extensions=extensions,
        )
    if isinstance(body, FormBody):
        return httpx.Request(
            method,
            url,
            headers=headers,
            params=descriptor.params,
            data=_group_fields(body.fields),
            extensions=extensions,
        )
    raise TypeError(f"Unsupported request body: {type(body).__name__}")


def _group_fields(fields: Sequence[tuple[str, str]]) -> dict[str, Union[str, list[str]]]:
    # httpx takes repeated form fields as a list value
    grouped: dict[str, Union[str, list[str]]] = {}
    for name, value in fields:
        if name not in grouped:
            grouped[name] = value
        elif isinstance(grouped[name], list):
            grouped[name].append(value)  # type: ignore[union-attr]
        else:
            grouped[name] = [grouped[name], value]  # type: ignore[list-item]
    return grouped


async def _send(transport: Transport, request: httpx.Request) -> httpx.Response:
    logger.debug("%s %s", request.method, request.url)
    try:
        return await transport.send(request)
    except httpx.HTTPError as e:
        raise TransportError(f"Request failed: {e}") from e


def error_from_response(response: httpx.Response) -> CogneeError:
    """
    Normalize a non-2xx response into a ``CogneeError``.

    The body is parsed as JSON when possible. Otherwise the payload falls back
    to ``{"message": <reason phrase>}`` and the message to
    ``"HTTP <status>: <reason phrase>"``.
    """
    status = response.status_code
    reason = response.reason_phrase
    message: Optional[str] = None

    try:
        payload: Any = response.json()
    except ValueError:
        payload = {"message": reason}
    else:
        if isinstance(payload, dict):
            candidate = payload.get("message") or payload.get("detail")
            if isinstance(candidate, str) and candidate:
                message = candidate

    if message is None:
        message = f"HTTP {status}: {reason}"

    return error_for_status(message, status, payload)


def decode_response(response: httpx.Response) -> Any:
    """Decode a successful response by its declared content type."""
    content_type = response.headers.get("content-type", "")
    if JSON_CONTENT_TYPE in content_type:
        return response.json()
    return response.text


async def dispatch(config: ClientConfig, descriptor: RequestDescriptor, transport: Transport) -> Any:
    """
    Send one request and decode its response.

    Args:
        config: Connection settings
        descriptor: What to send
        transport: Where to send it

    Returns:
        Parsed JSON for ``application/json`` responses, text otherwise

    Raises:
        CogneeError: Non-2xx response (a status-specific subclass where one exists)
        TransportError: The request could not be completed
        json.JSONDecodeError: A 2xx response advertised JSON but was malformed
    """
    request = build_request(config, descriptor)
    response = await _send(transport, request)
    if not response.is_success:
        error = error_from_response(response)
        logger.debug("%s %s failed with %s: %s", request.method, request.url, error.status_code, error.message)
        raise error
    return decode_response(response)


async def dispatch_binary(config: ClientConfig, descriptor: RequestDescriptor, transport: Transport) -> bytes:
    """
    Send one request and return the raw response body.

    The content type is never inspected. Failures carry only a message and
    the status code, since file endpoints do not return structured errors.
    """
    request = build_request(config, descriptor)
    response = await _send(transport, request)
    if not response.is_success:
        logger.debug("Download from %s failed with %s", request.url, response.status_code)
        raise error_for_status(f"Failed to download file: {response.reason_phrase}", response.status_code)
    return response.content
