"""CLI entrypoint (Typer).

Operator commands for the RepoTalk database:
- `repotalk-db init-db` creates the vector extension and tables
- `repotalk-db languages <repo_id>` prints the language breakdown
- `repotalk-db fail-repo <repo_id> "<message>"` marks an import as failed
- `repotalk-db call-status <call_id> <status>` applies a call status update
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer

from repotalk_db.config import configure_logging, get_settings
from repotalk_db.database.errors import NotFoundError
from repotalk_db.database.models import VapiCallStatus
from repotalk_db.database.queries import (
    get_language_distribution,
    mark_repository_as_failed,
    update_vapi_call_status,
)
from repotalk_db.database.session import Database
from repotalk_db.schemas import VapiCallMetadata

app = typer.Typer(help="RepoTalk database utilities.")
logger = logging.getLogger(__name__)


def _database() -> Database:
    return Database.from_settings(get_settings())


@app.callback()
def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger.debug(f"{settings.app_name} v{settings.app_version} ({settings.environment})")


@app.command("init-db")
def init_db() -> None:
    """Create the vector extension and all tables."""

    async def _run() -> None:
        async with _database() as db:
            await db.init_schema()

    asyncio.run(_run())
    typer.echo("Database initialized.")


@app.command()
def languages(repo_id: str) -> None:
    """Show how many embedded chunks each language has."""

    async def _run():
        async with _database() as db:
            async with db.session() as session:
                return await get_language_distribution(session, repo_id)

    rows = asyncio.run(_run())
    if not rows:
        typer.echo(f"No embeddings for repository {repo_id}.")
        return
    for row in rows:
        typer.echo(f"{row.language or 'unknown'}\t{row.count}")


@app.command("fail-repo")
def fail_repo(repo_id: str, message: str) -> None:
    """Mark a repository as FAILED with an error message."""

    async def _run() -> None:
        async with _database() as db:
            async with db.session() as session:
                await mark_repository_as_failed(session, repo_id, message)

    try:
        asyncio.run(_run())
    except NotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Repository {repo_id} marked as failed.")


@app.command("call-status")
def call_status(
    call_id: str,
    status: VapiCallStatus,
    duration: Optional[float] = typer.Option(None, "--duration", help="Call length in seconds"),
    cost: Optional[float] = typer.Option(None, "--cost", help="Call cost in USD"),
    transcript: Optional[str] = typer.Option(None, "--transcript"),
    keep_zero: bool = typer.Option(False, "--keep-zero", help="Write zero duration/cost values"),
) -> None:
    """Apply a Vapi call status update."""
    metadata = VapiCallMetadata(duration=duration, cost=cost, transcript=transcript)

    async def _run():
        async with _database() as db:
            async with db.session() as session:
                return await update_vapi_call_status(
                    session, call_id, status, metadata, keep_zero=keep_zero
                )

    try:
        call = asyncio.run(_run())
    except NotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    ended = call.ended_at.isoformat() if call.ended_at else "-"
    typer.echo(f"{call.vapi_call_id}\t{call.status.value}\tended_at={ended}")


if __name__ == "__main__":
    app()
