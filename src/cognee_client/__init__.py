"""Cognee Python client - typed async binding for the Cognee HTTP API."""

from .client import CogneeClient
from .config import ClientConfig
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    CogneeError,
    ConflictError,
    NormalizedError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)
from .gateway import FormBody, JsonBody, MultipartBody, RequestDescriptor, dispatch, dispatch_binary
from .models import (
    AuthToken,
    DataItem,
    Dataset,
    DetailedHealthStatus,
    Graph,
    GraphEdge,
    GraphNode,
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
from .types import DeleteMode, PipelineStatus, SearchType

__version__ = "0.1.0"

__all__ = [
    # Main client
    "CogneeClient",
    "ClientConfig",
    # Gateway
    "RequestDescriptor",
    "JsonBody",
    "MultipartBody",
    "FormBody",
    "dispatch",
    "dispatch_binary",
    "Transport",
    "HttpxTransport",
    # Models
    "AuthToken",
    "User",
    "Role",
    "PipelineRunInfo",
    "Dataset",
    "DataItem",
    "Graph",
    "GraphNode",
    "GraphEdge",
    "SearchHistoryItem",
    "Settings",
    "LLMSettings",
    "VectorDBSettings",
    "SyncResponse",
    "SyncStatusOverview",
    "ResponseBody",
    "HealthStatus",
    "DetailedHealthStatus",
    # Types
    "SearchType",
    "PipelineStatus",
    "DeleteMode",
    # Exceptions
    "CogneeError",
    "NormalizedError",
    "TransportError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
]
