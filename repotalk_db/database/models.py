"""SQLModel database tables for repository analysis and voice sessions.

Tables:
- User: GitHub authenticated users
- Repository: Imported repositories with processing status
- FileNode: File tree of a repository
- CodeEmbedding: Code chunks with pgvector embeddings
- CodeAnalysis: Generated analyses (diagrams, summaries)
- RepoInsight: Short findings surfaced on the dashboard
- Conversation / Message: Chat and voice history
- VapiCall: Voice calls placed through Vapi
- ApiUsage: Token and cost accounting per model call
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pgvector.sqlalchemy import Vector
from sqlalchemy import Column, Index, Text
from sqlmodel import Field, SQLModel

# Width of the embedding column; must match the embedding model in use.
EMBEDDING_DIMENSIONS = 1536


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Enums
# =============================================================================

class ProcessingStatus(str, Enum):
    """Ingestion status of a repository."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class MessageRole(str, Enum):
    """Author of a conversation message."""
    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"


class GroqModel(str, Enum):
    """Groq-hosted models used for chat and analysis."""
    LLAMA3_8B = "LLAMA3_8B"
    LLAMA3_70B = "LLAMA3_70B"
    MIXTRAL_8X7B = "MIXTRAL_8X7B"
    GEMMA_7B = "GEMMA_7B"


class FileType(str, Enum):
    """Kind of node in a repository file tree."""
    FILE = "FILE"
    DIRECTORY = "DIRECTORY"


class AnalysisType(str, Enum):
    """Kinds of generated repository analysis."""
    ARCHITECTURE = "ARCHITECTURE"
    DEPENDENCY_GRAPH = "DEPENDENCY_GRAPH"
    CLASS_DIAGRAM = "CLASS_DIAGRAM"
    SEQUENCE_DIAGRAM = "SEQUENCE_DIAGRAM"
    SUMMARY = "SUMMARY"


class InsightType(str, Enum):
    """Category of a repository insight."""
    COMPLEXITY = "COMPLEXITY"
    SECURITY = "SECURITY"
    PERFORMANCE = "PERFORMANCE"
    BEST_PRACTICE = "BEST_PRACTICE"
    DOCUMENTATION = "DOCUMENTATION"


class VapiCallStatus(str, Enum):
    """Lifecycle of a Vapi voice call."""
    QUEUED = "QUEUED"
    RINGING = "RINGING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_CALL_STATUSES = frozenset({VapiCallStatus.COMPLETED, VapiCallStatus.FAILED})


# =============================================================================
# User Model
# =============================================================================

class User(SQLModel, table=True):
    """GitHub authenticated user."""

    __tablename__ = "users"

    id: str = Field(default_factory=_new_id, primary_key=True)
    github_id: str | None = Field(default=None, unique=True, index=True)
    email: str | None = Field(default=None, unique=True)
    name: str | None = Field(default=None)
    avatar_url: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = Field(default=None)


# =============================================================================
# Repository Models
# =============================================================================

class Repository(SQLModel, table=True):
    """A repository imported for analysis."""

    __tablename__ = "repositories"
    __table_args__ = (
        Index("ix_repositories_user_created", "user_id", "created_at"),
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)

    github_url: str = Field(description="Clone URL of the repository")
    owner: str
    name: str
    default_branch: str = Field(default="main")
    description: str | None = Field(default=None, sa_column=Column(Text))

    status: ProcessingStatus = Field(default=ProcessingStatus.PENDING, index=True)
    error_message: str | None = Field(default=None, sa_column=Column(Text))

    file_count: int = Field(default=0)
    total_lines: int = Field(default=0)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = Field(default=None)


class FileNode(SQLModel, table=True):
    """One file or directory in a repository tree."""

    __tablename__ = "file_nodes"

    id: str = Field(default_factory=_new_id, primary_key=True)
    repository_id: str = Field(foreign_key="repositories.id", index=True)
    parent_id: str | None = Field(default=None, foreign_key="file_nodes.id")

    path: str = Field(index=True)
    name: str
    type: FileType = Field(default=FileType.FILE)
    language: str | None = Field(default=None)
    size_bytes: int | None = Field(default=None)


class CodeEmbedding(SQLModel, table=True):
    """A code chunk and its embedding vector."""

    __tablename__ = "code_embeddings"
    __table_args__ = (
        Index("ix_code_embeddings_repo_language", "repository_id", "language"),
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    repository_id: str = Field(foreign_key="repositories.id", index=True)

    content: str = Field(sa_column=Column(Text, nullable=False))
    path: str
    language: str | None = Field(default=None)
    start_line: int | None = Field(default=None)
    end_line: int | None = Field(default=None)

    vector: Any = Field(default=None, sa_column=Column(Vector(EMBEDDING_DIMENSIONS)))

    created_at: datetime = Field(default_factory=_utcnow)


class CodeAnalysis(SQLModel, table=True):
    """Generated analysis output, e.g. Mermaid diagram source."""

    __tablename__ = "code_analyses"
    __table_args__ = (
        Index("ix_code_analyses_repo_type", "repository_id", "type"),
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    repository_id: str = Field(foreign_key="repositories.id", index=True)

    type: AnalysisType
    content: str = Field(sa_column=Column(Text, nullable=False))
    model: GroqModel | None = Field(default=None)

    created_at: datetime = Field(default_factory=_utcnow)


class RepoInsight(SQLModel, table=True):
    """Short finding about a repository."""

    __tablename__ = "repo_insights"

    id: str = Field(default_factory=_new_id, primary_key=True)
    repository_id: str = Field(foreign_key="repositories.id", index=True)

    type: InsightType
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    severity: int = Field(default=0)

    created_at: datetime = Field(default_factory=_utcnow)


# =============================================================================
# Conversation Models
# =============================================================================

class Conversation(SQLModel, table=True):
    """Chat or voice conversation about a repository."""

    __tablename__ = "conversations"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    repository_id: str = Field(foreign_key="repositories.id", index=True)
    title: str

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = Field(default=None)


class Message(SQLModel, table=True):
    """Single message in a conversation."""

    __tablename__ = "messages"

    id: str = Field(default_factory=_new_id, primary_key=True)
    conversation_id: str = Field(foreign_key="conversations.id", index=True)

    role: MessageRole
    content: str = Field(sa_column=Column(Text, nullable=False))
    model: GroqModel | None = Field(default=None)
    tokens_used: int = Field(default=0)

    created_at: datetime = Field(default_factory=_utcnow)


class VapiCall(SQLModel, table=True):
    """Voice call placed through Vapi."""

    __tablename__ = "vapi_calls"

    id: str = Field(default_factory=_new_id, primary_key=True)
    vapi_call_id: str = Field(unique=True, index=True, description="Call ID assigned by Vapi")
    user_id: str = Field(foreign_key="users.id", index=True)
    conversation_id: str | None = Field(default=None, foreign_key="conversations.id")

    status: VapiCallStatus = Field(default=VapiCallStatus.QUEUED, index=True)
    duration: float | None = Field(default=None, description="Call length in seconds")
    cost: float | None = Field(default=None, description="Call cost in USD")
    transcript: str | None = Field(default=None, sa_column=Column(Text))

    started_at: datetime = Field(default_factory=_utcnow)
    ended_at: datetime | None = Field(default=None)


# =============================================================================
# API Usage (for cost tracking)
# =============================================================================

class ApiUsage(SQLModel, table=True):
    """Token and cost record for one model call."""

    __tablename__ = "api_usage"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)

    model: GroqModel
    endpoint: str
    prompt_tokens: int = Field(default=0)
    completion_tokens: int = Field(default=0)
    cost: float = Field(default=0.0)

    created_at: datetime = Field(default_factory=_utcnow)
