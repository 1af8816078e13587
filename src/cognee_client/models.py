"""Pydantic models for the Cognee client."""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .types import PipelineStatus


class AuthToken(BaseModel):
    """Bearer token returned by login."""

    access_token: str
    token_type: str = "bearer"


class User(BaseModel):
    """A user account."""

    model_config = ConfigDict(extra="allow")

    id: str
    email: str
    is_active: bool = True
    is_superuser: bool = False
    is_verified: bool = False
    tenant_id: Optional[str] = None


class Role(BaseModel):
    """A permission role."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    tenant_id: Optional[str] = None


class PipelineRunInfo(BaseModel):
    """State of one pipeline run (add, cognify).

    Known statuses parse to ``PipelineStatus``; anything else is kept as the raw string.
    """

    status: Union[PipelineStatus, str] = Field(union_mode="left_to_right")
    pipeline_run_id: str
    dataset_id: str
    dataset_name: str
    payload: Any = None
    data_ingestion_info: Optional[list[Any]] = None


class Dataset(BaseModel):
    """A dataset owned by a user."""

    id: str
    name: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    owner_id: str


class DataItem(BaseModel):
    """A single ingested data item inside a dataset."""

    id: str
    name: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    extension: str
    mime_type: str
    raw_data_location: str
    dataset_id: str


class GraphNode(BaseModel):
    """A node of a dataset's knowledge graph."""

    id: str
    label: str
    type: Optional[str] = None
    properties: dict[str, Any] = Field(default_factory=dict)


class GraphEdge(BaseModel):
    """A labelled edge between two graph nodes."""

    source: str
    target: str
    label: str


class Graph(BaseModel):
    """Knowledge graph of a dataset."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class SearchHistoryItem(BaseModel):
    """A past search query."""

    model_config = ConfigDict(extra="allow")

    id: str
    text: str
    user: Optional[str] = None
    created_at: datetime


class LLMSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None


class VectorDBSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    provider: Optional[str] = None
    url: Optional[str] = None
    api_key: Optional[str] = None


class Settings(BaseModel):
    """Server-side LLM and vector database settings."""

    model_config = ConfigDict(extra="allow")

    llm: Optional[LLMSettings] = None
    vector_db: Optional[VectorDBSettings] = None


class SyncResponse(BaseModel):
    """Result of starting a cloud sync."""

    model_config = ConfigDict(extra="allow")

    run_id: str
    status: str
    dataset_ids: list[str] = Field(default_factory=list)
    dataset_names: list[str] = Field(default_factory=list)
    message: Optional[str] = None
    timestamp: Optional[datetime] = None
    user_id: Optional[str] = None


class SyncStatusOverview(BaseModel):
    """Whether any sync is currently running for the user."""

    model_config = ConfigDict(extra="allow")

    has_running_sync: bool
    running_sync_count: int = 0
    latest_running_sync: Optional[dict[str, Any]] = None


class ResponseUsage(BaseModel):
    model_config = ConfigDict(extra="allow")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ResponseBody(BaseModel):
    """OpenAI-compatible response object."""

    model_config = ConfigDict(extra="allow")

    id: str
    created: int
    model: str
    object: str = "response"
    status: str
    tool_calls: list[dict[str, Any]] = Field(default_factory=list)
    usage: Optional[ResponseUsage] = None


class HealthStatus(BaseModel):
    """Basic liveness report."""

    model_config = ConfigDict(extra="allow")

    status: str
    timestamp: Optional[str] = None
    version: Optional[str] = None


class ComponentHealth(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    provider: Optional[str] = None
    response_time_ms: Optional[float] = None
    details: Optional[Any] = None


class DetailedHealthStatus(HealthStatus):
    """Liveness report including each backing component."""

    uptime: Optional[float] = None
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
