"""Pydantic schemas for data-access helper inputs and results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Voice call updates
# =============================================================================

class VapiCallMetadata(BaseModel):
    """Optional call details reported by a Vapi callback."""
    duration: float | None = Field(default=None, description="Call length in seconds")
    cost: float | None = Field(default=None, description="Call cost in USD")
    transcript: str | None = Field(default=None, description="Full call transcript")

    def to_update(self, keep_zero: bool = False) -> dict[str, Any]:
        """Return the fields that should be written to the call row.

        Fields that were never supplied, or supplied as ``None``, are
        skipped. With ``keep_zero`` off, falsy values (``0``, ``0.0``,
        ``""``) are skipped too, so a zero duration or cost never
        overwrites a stored value.
        """
        updates: dict[str, Any] = {}
        for name in ("duration", "cost", "transcript"):
            value = getattr(self, name)
            if value is None:
                continue
            if not value and not keep_zero:
                continue
            updates[name] = value
        return updates


# =============================================================================
# Vector search
# =============================================================================

class SimilarCodeOptions(BaseModel):
    """Filters and limits for a similarity search."""
    similarity_threshold: float = Field(default=0.7, description="Exclusive lower bound on similarity")
    limit: int = Field(default=5, ge=0, description="Maximum number of rows returned; 0 returns nothing")
    language: str | None = Field(default=None, description="Restrict to one language")


class SimilarCode(BaseModel):
    """A code chunk ranked by similarity to a query vector."""
    id: str
    content: str
    path: str
    similarity: float


# =============================================================================
# Analytics
# =============================================================================

class LanguageCount(BaseModel):
    """Number of embedded chunks for one language."""
    language: str | None
    count: int
