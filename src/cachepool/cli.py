"""CLI interface for cachepool"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from cachepool.backends.factory import get_supported_backends
from cachepool.config import Config, get_config, load_config
from cachepool.exceptions import CacheError
from cachepool.pool import CachePool, create_pool

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="cachepool",
    help="Inspect and edit cache entries",
    no_args_is_help=True,
)
console = Console()


def parse_value(raw: str) -> Any:
    """Parse a value from the command line

    JSON is tried first (objects, arrays, numbers, booleans, null);
    anything else is kept as a plain string.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _load(ctx: typer.Context) -> Config:
    config_path: Path | None = ctx.obj.get("config_path") if ctx.obj else None
    backend: str | None = ctx.obj.get("backend") if ctx.obj else None

    try:
        config = load_config(config_path) if config_path else get_config()
        if backend:
            config = config.model_copy(
                update={"cache": config.cache.model_copy(update={"backend": backend})}
            )
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e

    logging.basicConfig(level=config.logging.level)
    if config.cache.backend == "memory":
        console.print(
            "[yellow]Warning:[/yellow] the memory backend is per-process; "
            "entries are lost when this command exits"
        )
    return config


def _run(ctx: typer.Context, operation) -> Any:
    """Run an async operation against a pool built from the active config"""
    config = _load(ctx)

    async def runner() -> Any:
        async with create_pool(config.cache) as pool:
            return await operation(pool)

    try:
        return asyncio.run(runner())
    except CacheError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to .cachepool.yaml")
    ] = None,
    backend: Annotated[
        str | None, typer.Option("--backend", "-b", help="Override the cache backend")
    ] = None,
) -> None:
    """Inspect and edit cache entries"""
    if backend is not None and backend not in get_supported_backends():
        msg = f"Unsupported backend '{backend}'. Supported: {', '.join(get_supported_backends())}"
        raise typer.BadParameter(msg)
    ctx.obj = {"config_path": config, "backend": backend}


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Show the value stored for a key"""

    async def operation(pool: CachePool):
        return await pool.get_item(key)

    item = _run(ctx, operation)
    if not item.is_hit():
        console.print(f"[yellow]Miss:[/yellow] {key}")
        raise typer.Exit(1)

    console.print(f"[green]Hit:[/green] {key}")
    console.print(json.dumps(item.get(), indent=2, default=str), markup=False)
    expiration = item.expiration.isoformat() if item.expiration else "never"
    console.print(f"Expires: {expiration}")


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value (JSON or plain string)")],
    ttl: Annotated[
        int | None, typer.Option("--ttl", "-t", help="Time to live in seconds")
    ] = None,
) -> None:
    """Store a value for a key

    With the memory backend the entry only lives as long as this command;
    use --backend redis to keep it between invocations.
    """

    async def operation(pool: CachePool):
        item = await pool.get_item(key)
        return await pool.save(item.set(parse_value(value), ttl))

    _run(ctx, operation)
    console.print(f"✓ Saved [green]{key}[/green]")


@app.command()
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Delete a key"""

    async def operation(pool: CachePool):
        return await pool.delete_item(key)

    if _run(ctx, operation):
        console.print(f"✓ Deleted [green]{key}[/green]")
    else:
        console.print(f"[yellow]Not found:[/yellow] {key}")


@app.command()
def clear(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Clear all entries from the cache"""
    if not yes:
        typer.confirm("Clear all cache entries?", abort=True)

    async def operation(pool: CachePool):
        await pool.clear()

    _run(ctx, operation)
    console.print("✓ Cache cleared")


@app.command()
def backends() -> None:
    """List supported cache backends"""
    table = Table(title="Cache backends")
    table.add_column("Backend", style="cyan")
    table.add_column("Description")

    descriptions = {
        "memory": "In-process dictionary (per-process, not persistent)",
        "redis": "Redis server (persistent, shared)",
        "test_redis": "fakeredis (testing only)",
    }
    for name in get_supported_backends():
        table.add_row(name, descriptions.get(name, ""))

    console.print(table)
