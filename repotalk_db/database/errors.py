"""Error types surfaced by the data-access helpers.

Only ``NotFoundError`` is raised by this package. Database failures are
propagated exactly as SQLAlchemy raises them; the aliases below name the
two kinds callers usually care about.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DataError, OperationalError

# Malformed input rejected by the database (e.g. wrong vector dimensions).
ValidationError = DataError

# Database unreachable or connection dropped.
DatabaseConnectionError = OperationalError


class DataAccessError(Exception):
    """Base class for errors raised by the data-access layer."""


class NotFoundError(DataAccessError):
    """A mutation targeted a row that does not exist."""

    def __init__(self, model: str, key: Any):
        self.model = model
        self.key = key
        super().__init__(f"{model} not found: {key}")
