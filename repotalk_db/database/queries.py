"""Query helpers used by API handlers, voice callbacks and generators.

Every helper takes an ``AsyncSession`` and runs one statement against it.
Mutations commit before returning. Database errors are not caught.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from pgvector.sqlalchemy import Vector
from sqlalchemy import bindparam, desc, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from repotalk_db.database.errors import NotFoundError
from repotalk_db.database.models import (
    TERMINAL_CALL_STATUSES,
    AnalysisType,
    CodeAnalysis,
    CodeEmbedding,
    Conversation,
    ProcessingStatus,
    Repository,
    VapiCall,
    VapiCallStatus,
)
from repotalk_db.schemas import LanguageCount, SimilarCode, SimilarCodeOptions, VapiCallMetadata


logger = logging.getLogger(__name__)


# =============================================================================
# Voice Integration
# =============================================================================

async def update_vapi_call_status(
    session: AsyncSession,
    vapi_call_id: str,
    status: VapiCallStatus,
    metadata: VapiCallMetadata | None = None,
    keep_zero: bool = False,
) -> VapiCall:
    """Apply a Vapi callback to the stored call.

    ``ended_at`` is stamped when the call reaches a terminal status and
    left as is otherwise.

    Raises:
        NotFoundError: No call has this Vapi call ID.
    """
    result = await session.execute(
        select(VapiCall).where(VapiCall.vapi_call_id == vapi_call_id)
    )
    call = result.scalar_one_or_none()
    if not call:
        raise NotFoundError("VapiCall", vapi_call_id)

    status = VapiCallStatus(status)
    call.status = status
    if metadata:
        for field, value in metadata.to_update(keep_zero=keep_zero).items():
            setattr(call, field, value)
    if status in TERMINAL_CALL_STATUSES:
        call.ended_at = datetime.now(timezone.utc)

    await session.commit()
    await session.refresh(call)

    logger.info(f"Vapi call {vapi_call_id} -> {status.value}")
    return call


# =============================================================================
# Code Ingestion
# =============================================================================

async def mark_repository_as_failed(
    session: AsyncSession,
    repo_id: str,
    error_message: str,
) -> Repository:
    """Move a repository to FAILED and record why.

    Applies regardless of the current status; a later call replaces the
    stored message.
    """
    repo = await session.get(Repository, repo_id)
    if not repo:
        raise NotFoundError("Repository", repo_id)

    repo.status = ProcessingStatus.FAILED
    repo.error_message = error_message
    repo.updated_at = datetime.now(timezone.utc)

    await session.commit()
    await session.refresh(repo)

    logger.info(f"Repository {repo_id} marked as failed: {error_message}")
    return repo


# =============================================================================
# Diagram Utilities
# =============================================================================

async def get_analysis_by_type(
    session: AsyncSession,
    repo_id: str,
    type: AnalysisType,
) -> CodeAnalysis | None:
    """Get the first analysis of a type for a repository, or None."""
    result = await session.execute(
        select(CodeAnalysis)
        .where(CodeAnalysis.repository_id == repo_id)
        .where(CodeAnalysis.type == AnalysisType(type))
        .limit(1)
    )
    return result.scalars().first()


# =============================================================================
# Vector Search
# =============================================================================

def similar_code_statement(
    repo_id: str,
    vector: Sequence[float],
    options: SimilarCodeOptions | None = None,
):
    """Build the similarity query for ``find_similar_code``.

    Similarity is ``1 - cosine distance``. Rows must score strictly above
    the threshold; ties in similarity come back in storage order.
    """
    options = options or SimilarCodeOptions()

    # Dimensionless bind so dimension mismatches are reported by pgvector
    query_vector = bindparam("query_vector", list(vector), type_=Vector())
    similarity = 1 - col(CodeEmbedding.vector).cosine_distance(query_vector)

    statement = select(
        CodeEmbedding.id,
        CodeEmbedding.content,
        CodeEmbedding.path,
        similarity.label("similarity"),
    ).where(CodeEmbedding.repository_id == repo_id)

    if options.language:
        statement = statement.where(CodeEmbedding.language == options.language)

    return (
        statement
        .where(similarity > options.similarity_threshold)
        .order_by(desc("similarity"))
        .limit(options.limit)
    )


async def find_similar_code(
    session: AsyncSession,
    repo_id: str,
    vector: Sequence[float],
    options: SimilarCodeOptions | None = None,
) -> list[SimilarCode]:
    """Find code chunks in a repository most similar to an embedding."""
    result = await session.execute(similar_code_statement(repo_id, vector, options))
    matches = [
        SimilarCode(
            id=row.id,
            content=row.content,
            path=row.path,
            similarity=float(row.similarity),
        )
        for row in result
    ]
    logger.debug(f"Found {len(matches)} similar chunks in repository {repo_id}")
    return matches


# =============================================================================
# Analytics
# =============================================================================

async def get_language_distribution(
    session: AsyncSession,
    repo_id: str,
) -> list[LanguageCount]:
    """Count embedded chunks per language, most common first."""
    result = await session.execute(
        select(CodeEmbedding.language, func.count(CodeEmbedding.id).label("count"))
        .where(CodeEmbedding.repository_id == repo_id)
        .group_by(CodeEmbedding.language)
        .order_by(desc("count"))
    )
    # Row.count is the tuple method, so unpack by position
    return [LanguageCount(language=language, count=count) for language, count in result]


# =============================================================================
# Conversation Helpers
# =============================================================================

def default_conversation_title(now: datetime | None = None) -> str:
    """Title used when a conversation is started without one."""
    now = now or datetime.now()
    hour = now.hour % 12 or 12
    # Spelled out rather than %p, which follows the process locale
    meridiem = "AM" if now.hour < 12 else "PM"
    return (
        f"New conversation {now.month}/{now.day}/{now.year}, "
        f"{hour}:{now:%M:%S} {meridiem}"
    )


async def create_conversation(
    session: AsyncSession,
    user_id: str,
    repo_id: str,
    title: str | None = None,
) -> Conversation:
    """Start a conversation about a repository."""
    conversation = Conversation(
        user_id=user_id,
        repository_id=repo_id,
        title=title or default_conversation_title(),
    )
    session.add(conversation)
    await session.commit()
    await session.refresh(conversation)

    logger.info(f"Created conversation {conversation.id} for repository {repo_id}")
    return conversation
