"""Main client for the Cognee API."""

import asyncio
import logging
import os
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from pydantic import BaseModel, TypeAdapter

from .config import DEFAULT_BASE_URL, ClientConfig
from .gateway import (
    Body,
    FormBody,
    JsonBody,
    MultipartBody,
    QueryParams,
    RequestDescriptor,
    dispatch,
    dispatch_binary,
)
from .models import (
    AuthToken,
    DataItem,
    Dataset,
    DetailedHealthStatus,
    Graph,
    HealthStatus,
    LLMSettings,
    PipelineRunInfo,
    ResponseBody,
    Role,
    SearchHistoryItem,
    Settings,
    SyncResponse,
    SyncStatusOverview,
    User,
    VectorDBSettings,
)
from .transport import HttpxTransport, Transport
from .types import DeleteMode, SearchType

logger = logging.getLogger(__name__)

FileInput = Union[str, os.PathLike, bytes, IO[bytes], tuple]


def _to_value(v: Any) -> Any:
    """Extract string value from an enum member, or return string as-is."""
    return v.value if hasattr(v, "value") else v


def _dump(v: Any) -> Any:
    if isinstance(v, BaseModel):
        return v.model_dump(exclude_none=True)
    return v


async def _file_part(file: FileInput, index: int) -> Any:
    """Convert a user-supplied file into an httpx file tuple.

    Paths are read in a worker thread so the event loop is not blocked.
    """
    if isinstance(file, tuple):
        return file
    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        return (path.name, await asyncio.to_thread(path.read_bytes))
    if isinstance(file, bytes):
        return (f"data_{index}.txt", file)
    name = os.path.basename(getattr(file, "name", "") or f"data_{index}")
    return (name, file)


class CogneeClient:
    """
    Python client for the Cognee API.

    Usage:
        async with CogneeClient(
            base_url="http://localhost:8000",
            api_key="your-api-key",
        ) as client:
            # Ingest a document
            await client.add(["notes.txt"], dataset_name="research")

            # Build the knowledge graph
            await client.cognify(datasets=["research"])

            # Ask questions
            results = await client.search("what did we learn?")

    A custom ``transport`` can be injected; the client then works without
    ``async with`` and never closes it.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize Cognee client.

        Args:
            config: Complete connection settings; overrides the keyword arguments
            base_url: API base URL (default: http://localhost:8000)
            api_key: API key sent as X-Api-Key
            auth_token: Bearer token for server-side callers
            timeout: Request timeout in seconds (default: None, no timeout)
            transport: Transport to send requests through
        """
        self.config = config or ClientConfig(
            base_url=base_url,
            api_key=api_key,
            auth_token=auth_token,
            timeout=timeout,
        )
        self._transport = transport
        self._owns_transport = False

    async def __aenter__(self) -> "CogneeClient":
        """Async context manager entry."""
        if self._transport is None:
            self._transport = HttpxTransport()
            self._owns_transport = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._owns_transport and self._transport is not None:
            await self._transport.aclose()
            self._transport = None
            self._owns_transport = False

    def set_auth_token(self, auth_token: Optional[str]) -> None:
        """
        Set the bearer token used for subsequent requests.

        Args:
            auth_token: Token to send, or None to stop sending one
        """
        self.config = self.config.with_auth_token(auth_token)

    def _ensure_transport(self) -> Transport:
        """Ensure transport is initialized."""
        if self._transport is None:
            raise RuntimeError("Client not initialized. Use async with context manager.")
        return self._transport

    def _descriptor(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        body: Optional[Body] = None,
        params: Optional[QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        versioned: bool = True,
    ) -> RequestDescriptor:
        if json is not None:
            body = JsonBody(json)
        return RequestDescriptor(
            path=path,
            method=method,
            body=body,
            headers={"Accept": "application/json", **(headers or {})},
            params=params,
            versioned=versioned,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Make HTTP request through the gateway.

        Args:
            method: HTTP method
            path: API path below the version prefix (or below the base URL
                when ``versioned=False``)
            **kwargs: ``json``, ``body``, ``params``, ``headers``, ``versioned``

        Returns:
            Decoded response: parsed JSON or text

        Raises:
            AuthenticationError: Authentication failed (401)
            AuthorizationError: Access denied (403)
            NotFoundError: Resource not found (404)
            ConflictError: Conflicting request (409)
            ValidationError: Validation failed (422)
            RateLimitError: Rate limit exceeded (429)
            ServerError: Server error (5xx)
            TransportError: The request could not be completed
            CogneeError: Other errors
        """
        transport = self._ensure_transport()
        return await dispatch(self.config, self._descriptor(method, path, **kwargs), transport)

    # Authentication

    async def login(self, username: str, password: str, auto_set_token: bool = True) -> Optional[AuthToken]:
        """
        Log in with username (email) and password.

        The server may answer with a bearer token, or only set an
        ``auth_token`` cookie; the cookie is kept by the transport either way.

        Args:
            username: Account email
            password: Account password
            auto_set_token: If True (default), send the returned token as a
                bearer credential on subsequent requests

        Returns:
            The token when the server returns one, otherwise None

        Example:
            token = await client.login("ada@example.com", "s3cret")
        """
        form = FormBody(fields=[("username", username), ("password", password)])
        data = await self._request("POST", "/auth/login", body=form)
        if not isinstance(data, dict) or "access_token" not in data:
            return None

        token = AuthToken(**data)
        if auto_set_token:
            self.set_auth_token(token.access_token)
        return token

    async def logout(self) -> None:
        """Log out and drop any bearer token held by the client."""
        await self._request("POST", "/auth/logout")
        self.set_auth_token(None)

    async def register(self, email: str, password: str, **extra: Any) -> User:
        """
        Register a new account.

        Args:
            email: Account email
            password: Account password
            **extra: Additional registration fields accepted by the server

        Returns:
            Created user
        """
        payload = {"email": email, "password": password, **extra}
        data = await self._request("POST", "/auth/register", json=payload)
        return User(**data)

    async def forgot_password(self, email: str) -> None:
        await self._request("POST", "/auth/forgot-password", json={"email": email})

    async def reset_password(self, token: str, password: str) -> None:
        await self._request("POST", "/auth/reset-password", json={"token": token, "password": password})

    async def request_verify_token(self, email: str) -> None:
        await self._request("POST", "/auth/request-verify-token", json={"email": email})

    async def verify(self, token: str) -> User:
        """Confirm an account with the token sent by email."""
        data = await self._request("POST", "/auth/verify", json={"token": token})
        return User(**data)

    # Users

    async def get_current_user(self) -> User:
        data = await self._request("GET", "/users/me")
        return User(**data)

    async def update_current_user(
        self,
        email: Optional[str] = None,
        password: Optional[str] = None,
        **extra: Any,
    ) -> User:
        """
        Update the logged-in user.

        Args:
            email: New email (optional)
            password: New password (optional)
            **extra: Other fields to update

        Returns:
            Updated user
        """
        payload = self._user_update(email, password, extra)
        data = await self._request("PATCH", "/users/me", json=payload)
        return User(**data)

    async def get_user(self, user_id: str) -> User:
        data = await self._request("GET", f"/users/{user_id}")
        return User(**data)

    async def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        password: Optional[str] = None,
        **extra: Any,
    ) -> User:
        """Update another user (superuser only)."""
        payload = self._user_update(email, password, extra)
        data = await self._request("PATCH", f"/users/{user_id}", json=payload)
        return User(**data)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")

    @staticmethod
    def _user_update(email: Optional[str], password: Optional[str], extra: dict[str, Any]) -> dict[str, Any]:
        payload: dict[str, Any] = {k: v for k, v in extra.items() if v is not None}
        if email is not None:
            payload["email"] = email
        if password is not None:
            payload["password"] = password
        return payload

    # Ingestion

    async def add(
        self,
        files: Sequence[FileInput],
        dataset_name: Optional[str] = None,
        dataset_id: Optional[str] = None,
        node_set: Optional[list[str]] = None,
    ) -> PipelineRunInfo:
        """
        Upload files into a dataset.

        Args:
            files: Paths, raw bytes, binary file objects, or httpx file tuples
                such as ``("notes.txt", b"...", "text/plain")``
            dataset_name: Target dataset name (created if missing)
            dataset_id: Target dataset ID
            node_set: Node sets to tag the ingested data with

        Returns:
            Pipeline run info for the ingestion

        Raises:
            ValueError: No files given, or neither dataset_name nor dataset_id

        Example:
            run = await client.add(
                ["report.pdf", ("notes.txt", b"Cognee builds graphs")],
                dataset_name="research",
            )
        """
        if not files:
            raise ValueError("At least one file is required")
        if not dataset_name and not dataset_id:
            raise ValueError("Either dataset_name or dataset_id is required")

        # Form field names follow the server's camelCase wire format
        fields: list[tuple[str, str]] = []
        if dataset_name:
            fields.append(("datasetName", dataset_name))
        if dataset_id:
            fields.append(("datasetId", dataset_id))
        for node in node_set or []:
            fields.append(("node_set", node))

        parts = [("data", await _file_part(f, i)) for i, f in enumerate(files)]
        logger.debug("Uploading %d file(s) to dataset %s", len(parts), dataset_name or dataset_id)

        data = await self._request("POST", "/add", body=MultipartBody(fields=fields, files=parts))
        return PipelineRunInfo(**data)

    async def cognify(
        self,
        datasets: Optional[list[str]] = None,
        dataset_ids: Optional[list[str]] = None,
        run_in_background: Optional[bool] = None,
        custom_prompt: Optional[str] = None,
    ) -> dict[str, PipelineRunInfo]:
        """
        Build the knowledge graph for datasets.

        Args:
            datasets: Dataset names to process
            dataset_ids: Dataset IDs to process
            run_in_background: Return immediately instead of waiting for completion
            custom_prompt: Custom extraction prompt

        Returns:
            Pipeline run info keyed by dataset ID
        """
        payload: dict[str, Any] = {}
        if datasets is not None:
            payload["datasets"] = datasets
        if dataset_ids is not None:
            payload["dataset_ids"] = dataset_ids
        if run_in_background is not None:
            payload["run_in_background"] = run_in_background
        if custom_prompt is not None:
            payload["custom_prompt"] = custom_prompt

        data = await self._request("POST", "/cognify", json=payload)
        return TypeAdapter(dict[str, PipelineRunInfo]).validate_python(data)

    async def memify(
        self,
        extraction_tasks: Optional[list[str]] = None,
        enrichment_tasks: Optional[list[str]] = None,
        data: Optional[str] = None,
        dataset_name: Optional[str] = None,
        dataset_id: Optional[str] = None,
        node_name: Optional[list[str]] = None,
        run_in_background: Optional[bool] = None,
    ) -> Any:
        """
        Enrich an existing graph with extra extraction and enrichment tasks.

        Returns:
            The server's pipeline result, undecoded
        """
        payload: dict[str, Any] = {}
        if extraction_tasks is not None:
            payload["extraction_tasks"] = extraction_tasks
        if enrichment_tasks is not None:
            payload["enrichment_tasks"] = enrichment_tasks
        if data is not None:
            payload["data"] = data
        if dataset_name is not None:
            payload["dataset_name"] = dataset_name
        if dataset_id is not None:
            payload["dataset_id"] = dataset_id
        if node_name is not None:
            payload["node_name"] = node_name
        if run_in_background is not None:
            payload["run_in_background"] = run_in_background

        return await self._request("POST", "/memify", json=payload)

    # Code pipeline

    async def code_index(self, repo_path: str, include_docs: bool = False) -> None:
        """Index a code repository on the server's filesystem."""
        payload = {"repo_path": repo_path, "include_docs": include_docs}
        await self._request("POST", "/code-pipeline/index", json=payload)

    async def code_retrieve(self, query: str, full_input: str) -> list[dict[str, Any]]:
        payload = {"query": query, "full_input": full_input}
        return await self._request("POST", "/code-pipeline/retrieve", json=payload)

    # Datasets

    async def get_datasets(self) -> list[Dataset]:
        """
        List datasets visible to the current user.

        Returns:
            List of datasets

        Example:
            for dataset in await client.get_datasets():
                print(dataset.name)
        """
        data = await self._request("GET", "/datasets")
        return TypeAdapter(list[Dataset]).validate_python(data)

    async def create_dataset(self, name: str) -> Dataset:
        """
        Create a dataset, or return the existing one with the same name.

        Args:
            name: Dataset name

        Returns:
            The dataset
        """
        data = await self._request("POST", "/datasets", json={"name": name})
        return Dataset(**data)

    async def delete_dataset(self, dataset_id: str) -> None:
        await self._request("DELETE", f"/datasets/{dataset_id}")

    async def get_dataset_graph(self, dataset_id: str) -> Graph:
        """
        Get the knowledge graph of a dataset.

        Args:
            dataset_id: Dataset ID

        Returns:
            Graph with nodes and edges
        """
        data = await self._request("GET", f"/datasets/{dataset_id}/graph")
        return Graph(**data)

    async def get_dataset_data(self, dataset_id: str) -> list[DataItem]:
        data = await self._request("GET", f"/datasets/{dataset_id}/data")
        return TypeAdapter(list[DataItem]).validate_python(data)

    async def get_dataset_status(self, dataset_ids: Iterable[str]) -> dict[str, str]:
        """
        Get pipeline status for datasets.

        Args:
            dataset_ids: Dataset IDs; each is sent as its own ``dataset`` query value

        Returns:
            Status keyed by dataset ID

        Example:
            status = await client.get_dataset_status(["d1", "d2"])
            # GET /api/v1/datasets/status?dataset=d1&dataset=d2
        """
        params = [("dataset", dataset_id) for dataset_id in dataset_ids]
        return await self._request("GET", "/datasets/status", params=params)

    async def delete_dataset_data_item(self, dataset_id: str, data_id: str) -> None:
        await self._request("DELETE", f"/datasets/{dataset_id}/data/{data_id}")

    async def get_raw_data(self, dataset_id: str, data_id: str) -> bytes:
        """
        Download the original file behind a data item.

        Args:
            dataset_id: Dataset ID
            data_id: Data item ID

        Returns:
            File contents as bytes
        """
        transport = self._ensure_transport()
        descriptor = RequestDescriptor(path=f"/datasets/{dataset_id}/data/{data_id}/raw")
        return await dispatch_binary(self.config, descriptor, transport)

    # Search

    async def search(
        self,
        query: str,
        search_type: Optional[Union[str, SearchType]] = None,
        datasets: Optional[list[str]] = None,
        dataset_ids: Optional[list[str]] = None,
        system_prompt: Optional[str] = None,
        node_name: Optional[list[str]] = None,
        top_k: Optional[int] = None,
        only_context: Optional[bool] = None,
        use_combined_context: Optional[bool] = None,
        dataset_name: Optional[str] = None,
    ) -> list[Any]:
        """
        Search the knowledge graph.

        Args:
            query: Natural language query
            search_type: Retrieval strategy (None = server default)
            datasets: Restrict to dataset names
            dataset_ids: Restrict to dataset IDs
            system_prompt: System prompt for completion search types
            node_name: Restrict to node sets
            top_k: Maximum results (None = server default)
            only_context: Return retrieved context without completion
            use_combined_context: Merge context across datasets
            dataset_name: Restrict to a single dataset by name

        Returns:
            Search results; their shape depends on the search type

        Example:
            results = await client.search(
                "how are the services connected?",
                search_type=SearchType.GRAPH_COMPLETION,
                datasets=["research"],
            )
        """
        payload: dict[str, Any] = {"query": query}
        if search_type is not None:
            payload["search_type"] = _to_value(search_type)
        if datasets is not None:
            payload["datasets"] = datasets
        if dataset_ids is not None:
            payload["dataset_ids"] = dataset_ids
        if dataset_name is not None:
            payload["dataset_name"] = dataset_name
        if system_prompt is not None:
            payload["system_prompt"] = system_prompt
        if node_name is not None:
            payload["node_name"] = node_name
        if top_k is not None:
            payload["top_k"] = top_k
        if only_context is not None:
            payload["only_context"] = only_context
        if use_combined_context is not None:
            payload["use_combined_context"] = use_combined_context

        return await self._request("POST", "/search", json=payload)

    async def get_search_history(self) -> list[SearchHistoryItem]:
        data = await self._request("GET", "/search")
        return TypeAdapter(list[SearchHistoryItem]).validate_python(data)

    # Settings

    async def get_settings(self) -> Settings:
        data = await self._request("GET", "/settings")
        return Settings(**data)

    async def save_settings(
        self,
        llm: Optional[Union[LLMSettings, dict[str, Any]]] = None,
        vector_db: Optional[Union[VectorDBSettings, dict[str, Any]]] = None,
    ) -> None:
        """
        Save LLM and/or vector database settings.

        Args:
            llm: LLM provider settings
            vector_db: Vector database settings
        """
        payload: dict[str, Any] = {}
        if llm is not None:
            payload["llm"] = _dump(llm)
        if vector_db is not None:
            payload["vector_db"] = _dump(vector_db)
        await self._request("POST", "/settings", json=payload)

    # Sync

    async def sync(self, dataset_ids: Optional[list[str]] = None) -> dict[str, SyncResponse]:
        """
        Sync local datasets to Cognee cloud.

        Args:
            dataset_ids: Datasets to sync (None = all of the user's datasets)

        Returns:
            Sync run info keyed by dataset ID
        """
        payload: dict[str, Any] = {}
        if dataset_ids is not None:
            payload["dataset_ids"] = dataset_ids
        data = await self._request("POST", "/sync", json=payload)
        return TypeAdapter(dict[str, SyncResponse]).validate_python(data)

    async def get_sync_status(self) -> SyncStatusOverview:
        data = await self._request("GET", "/sync/status")
        return SyncStatusOverview(**data)

    # Delete

    async def delete_data(
        self,
        dataset_id: str,
        data_id: str,
        mode: Union[str, DeleteMode] = DeleteMode.SOFT,
    ) -> None:
        """
        Delete a data item and its graph contributions.

        Args:
            dataset_id: Dataset ID
            data_id: Data item ID
            mode: "soft" (default) or "hard"
        """
        params = {"dataset_id": dataset_id, "data_id": data_id, "mode": _to_value(mode)}
        await self._request("DELETE", "/delete", params=params)

    # Visualize

    async def visualize_dataset(self, dataset_id: str) -> str:
        """Render a dataset's graph as a standalone HTML page."""
        return await self._request("GET", "/visualize", params={"dataset_id": dataset_id})

    # Permissions

    async def grant_dataset_permissions(
        self,
        principal_id: str,
        permission_name: str,
        dataset_ids: list[str],
    ) -> None:
        """
        Grant a permission on datasets to a user, role or tenant.

        Args:
            principal_id: Principal receiving the permission
            permission_name: e.g. "read", "write", "delete", "share"
            dataset_ids: Datasets the permission applies to
        """
        await self._request(
            "POST",
            f"/permissions/datasets/{principal_id}",
            params={"permission_name": permission_name},
            json=list(dataset_ids),
        )

    async def create_role(self, role_name: str) -> None:
        await self._request("POST", "/permissions/roles", params={"role_name": role_name})

    async def get_role_by_name(self, role_name: str) -> Role:
        data = await self._request("GET", f"/permissions/roles/{quote(role_name, safe='')}")
        return Role(**data)

    async def add_user_to_role(self, user_id: str, role_id: str) -> None:
        await self._request("POST", f"/permissions/users/{user_id}/roles", params={"role_id": role_id})

    async def add_user_to_tenant(self, user_id: str, tenant_id: str) -> None:
        await self._request("POST", f"/permissions/users/{user_id}/tenants", params={"tenant_id": tenant_id})

    async def create_tenant(self, tenant_name: str) -> None:
        await self._request("POST", "/permissions/tenants", params={"tenant_name": tenant_name})

    # Notebooks

    async def get_notebooks(self) -> Any:
        return await self._request("GET", "/notebooks")

    async def create_notebook(self, name: str, cells: Optional[list[dict[str, Any]]] = None) -> Any:
        """
        Create a notebook.

        Args:
            name: Notebook name
            cells: Initial cells (default: none)

        Returns:
            The created notebook as returned by the server
        """
        payload = {"name": name, "cells": cells or []}
        return await self._request("POST", "/notebooks", json=payload)

    async def update_notebook(self, notebook_id: str, name: str, cells: list[dict[str, Any]]) -> Any:
        payload = {"name": name, "cells": cells}
        return await self._request("PUT", f"/notebooks/{notebook_id}", json=payload)

    async def delete_notebook(self, notebook_id: str) -> Any:
        return await self._request("DELETE", f"/notebooks/{notebook_id}")

    async def run_notebook_cell(self, notebook_id: str, cell_id: str, content: str) -> Any:
        """
        Execute one notebook cell on the server.

        Args:
            notebook_id: Notebook ID
            cell_id: Cell ID
            content: Cell source to run

        Returns:
            Execution result (output and error) as returned by the server
        """
        return await self._request("POST", f"/notebooks/{notebook_id}/{cell_id}/run", json={"content": content})

    # Responses (OpenAI-compatible)

    async def create_response(
        self,
        input: str,
        model: str = "cognee-v1",
        tools: Optional[list[dict[str, Any]]] = None,
        tool_choice: Optional[Union[str, dict[str, Any]]] = None,
        user: Optional[str] = None,
        temperature: Optional[float] = None,
        max_completion_tokens: Optional[int] = None,
    ) -> ResponseBody:
        """
        Create an OpenAI-compatible response, letting the model call Cognee tools.

        Args:
            input: User input
            model: Model name (default: cognee-v1)
            tools: Tool definitions (None = server's default Cognee tools)
            tool_choice: "auto", "none", or a specific tool
            user: End-user identifier
            temperature: Sampling temperature
            max_completion_tokens: Completion token limit

        Returns:
            Response with tool calls and usage
        """
        payload: dict[str, Any] = {"model": model, "input": input}
        if tools is not None:
            payload["tools"] = tools
        if tool_choice is not None:
            payload["tool_choice"] = tool_choice
        if user is not None:
            payload["user"] = user
        if temperature is not None:
            payload["temperature"] = temperature
        if max_completion_tokens is not None:
            payload["max_completion_tokens"] = max_completion_tokens

        data = await self._request("POST", "/responses/", json=payload)
        return ResponseBody(**data)

    # Health

    async def get_root(self) -> Any:
        return await self._request("GET", "/", versioned=False)

    async def health_check(self) -> HealthStatus:
        """Check that the server is up."""
        data = await self._request("GET", "/health", versioned=False)
        return HealthStatus(**data)

    async def detailed_health_check(self) -> DetailedHealthStatus:
        """Check the server and each of its backing components."""
        data = await self._request("GET", "/health/detailed", versioned=False)
        return DetailedHealthStatus(**data)

    async def check_connection(self) -> Any:
        return await self._request("POST", "/checks/connection")
