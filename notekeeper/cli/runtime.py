"""
CLI Runtime.

Shared plumbing for command modules: running a coroutine to completion,
releasing pools and engines afterwards, and turning application errors
into a red message and a non-zero exit code.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich.console import Console

from notekeeper.backend.core.concurrency import shutdown_pools
from notekeeper.backend.core.database import dispose_engine
from notekeeper.backend.core.exceptions import ApplicationError
from notekeeper.backend.core.logging import get_logger, log_with_source

T = TypeVar("T")

console = Console()
logger = get_logger(__name__)


async def _run_and_cleanup(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return await coro
    finally:
        await dispose_engine()
        await shutdown_pools()


def run_command(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a command coroutine, exiting with status 1 on application errors.

    Raises:
        typer.Exit: If the command raised an ApplicationError
    """
    try:
        return asyncio.run(_run_and_cleanup(coro))
    except ApplicationError as e:
        log_with_source(logger, "cli", "warning", "Command failed", code=e.code, error=e.message)
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


def backend_from(ctx: typer.Context) -> str | None:
    """Backend override chosen with the global --backend option."""
    return (ctx.obj or {}).get("backend")
