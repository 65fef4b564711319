"""Database layer: engine lifecycle, tables and query helpers."""

from repotalk_db.database.errors import (
    DataAccessError,
    DatabaseConnectionError,
    NotFoundError,
    ValidationError,
)
from repotalk_db.database.models import (
    TERMINAL_CALL_STATUSES,
    AnalysisType,
    ApiUsage,
    CodeAnalysis,
    CodeEmbedding,
    Conversation,
    FileNode,
    FileType,
    GroqModel,
    InsightType,
    Message,
    MessageRole,
    ProcessingStatus,
    RepoInsight,
    Repository,
    User,
    VapiCall,
    VapiCallStatus,
)
from repotalk_db.database.queries import (
    create_conversation,
    find_similar_code,
    get_analysis_by_type,
    get_language_distribution,
    mark_repository_as_failed,
    update_vapi_call_status,
)
from repotalk_db.database.session import Database, close_database, get_database

__all__ = [
    # Session
    "Database",
    "get_database",
    "close_database",
    # Errors
    "DataAccessError",
    "NotFoundError",
    "ValidationError",
    "DatabaseConnectionError",
    # Models
    "User",
    "Repository",
    "CodeEmbedding",
    "CodeAnalysis",
    "FileNode",
    "Conversation",
    "Message",
    "VapiCall",
    "RepoInsight",
    "ApiUsage",
    # Enums
    "ProcessingStatus",
    "MessageRole",
    "GroqModel",
    "FileType",
    "AnalysisType",
    "InsightType",
    "VapiCallStatus",
    "TERMINAL_CALL_STATUSES",
    # Helpers
    "update_vapi_call_status",
    "mark_repository_as_failed",
    "get_analysis_by_type",
    "find_similar_code",
    "get_language_distribution",
    "create_conversation",
]
