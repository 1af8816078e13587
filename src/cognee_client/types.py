"""Type definitions and enums for the Cognee client."""

from enum import Enum


class SearchType(str, Enum):
    """Retrieval strategy for search queries."""

    SUMMARIES = "SUMMARIES"
    INSIGHTS = "INSIGHTS"
    CHUNKS = "CHUNKS"
    RAG_COMPLETION = "RAG_COMPLETION"
    GRAPH_COMPLETION = "GRAPH_COMPLETION"
    GRAPH_SUMMARY_COMPLETION = "GRAPH_SUMMARY_COMPLETION"
    CODE = "CODE"
    CYPHER = "CYPHER"
    NATURAL_LANGUAGE = "NATURAL_LANGUAGE"
    GRAPH_COMPLETION_COT = "GRAPH_COMPLETION_COT"
    GRAPH_COMPLETION_CONTEXT_EXTENSION = "GRAPH_COMPLETION_CONTEXT_EXTENSION"
    FEELING_LUCKY = "FEELING_LUCKY"
    FEEDBACK = "FEEDBACK"
    TEMPORAL = "TEMPORAL"
    CODING_RULES = "CODING_RULES"


class PipelineStatus(str, Enum):
    """Pipeline run states reported by add/cognify."""

    STARTED = "PipelineRunStarted"
    YIELD = "PipelineRunYield"
    COMPLETED = "PipelineRunCompleted"
    ALREADY_COMPLETED = "PipelineRunAlreadyCompleted"
    ERRORED = "PipelineRunErrored"


class DeleteMode(str, Enum):
    """How data is removed."""

    SOFT = "soft"  # Unlink from the dataset, keep shared nodes
    HARD = "hard"  # Also remove orphaned graph entities
