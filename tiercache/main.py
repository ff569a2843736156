"""Main entry point for the tiercache command line.

Sets up the Typer CLI application, wires the dependencies (Composition Root)
and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Coroutine, Dict, Optional

import typer
from typing_extensions import Annotated

from tiercache.core.command_handler import CommandHandler
from tiercache.infrastructure.cache.file_cache import FileCache
from tiercache.infrastructure.cli.display import ConsoleDisplay
from tiercache.infrastructure.config.settings import (
    get_cache_root_name,
    get_config,
    get_default_ttl,
    get_logging_enabled,
    get_temp_root,
    get_use_memory_cache,
    load_configuration,
)
from tiercache.infrastructure.filesystem.temp_dirs import SystemTempDirectorySupplier
from tiercache.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CACHE_NAME = "default"


def _identity(value: Any) -> Any:
    return value


def create_dependencies(
    cache_name: str = DEFAULT_CACHE_NAME,
    root_name: Optional[str] = None,
    use_memory: Optional[bool] = None,
    verbose: bool = False,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    Command-line options win over configuration values.
    """
    load_configuration()
    setup_logging(
        level_name=get_config("logging.level"),
        verbose=verbose,
        log_file=get_config("logging.file"),
    )

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()
    dependencies['directory_supplier'] = SystemTempDirectorySupplier(get_temp_root())
    dependencies['cache_service'] = FileCache(
        cache_name=cache_name,
        from_json=_identity,
        to_json=_identity,
        default_ttl=get_default_ttl(),
        use_memory_cache=get_use_memory_cache() if use_memory is None else use_memory,
        enable_logging=verbose or get_logging_enabled(),
        cache_root_name=root_name or get_cache_root_name(),
        directory_supplier=dependencies['directory_supplier'],
    )
    dependencies['command_handler'] = CommandHandler(
        cache_service=dependencies['cache_service'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


app = typer.Typer(
    name="tiercache",
    help="Inspect and manage tiercache memory + file caches.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Runs an async command handler from a sync Typer command."""
    return asyncio.run(coro)


def _handler(ctx: typer.Context) -> CommandHandler:
    return ctx.obj['command_handler']


@app.callback()
def main_callback(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", "-n", help="Cache name (one directory per cache).")] = DEFAULT_CACHE_NAME,
    root: Annotated[Optional[str], typer.Option("--root", help="Cache root directory name.")] = None,
    memory: Annotated[Optional[bool], typer.Option("--memory/--no-memory", help="Use the in-memory tier.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Memory + file key-value cache with TTL."""
    ctx.obj = create_dependencies(cache_name=name, root_name=root, use_memory=memory, verbose=verbose)


@app.command()
def get(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Print the cached value for KEY."""
    if not run_async(_handler(ctx).handle_get(key)):
        raise typer.Exit(code=1)


@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
    value: Annotated[str, typer.Argument(help="Value; parsed as JSON when possible.")],
    ttl: Annotated[Optional[float], typer.Option("--ttl", "-t", min=0, help="Time-to-live in seconds.")] = None,
):
    """Store VALUE under KEY."""
    run_async(_handler(ctx).handle_set(key, value, ttl))


@app.command()
def has(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Exit with status 0 if KEY holds a live value, 1 otherwise."""
    if not run_async(_handler(ctx).handle_has(key)):
        raise typer.Exit(code=1)


@app.command()
def remove(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Delete KEY from the cache."""
    run_async(_handler(ctx).handle_remove(key))


@app.command()
def clear(ctx: typer.Context):
    """Delete every entry of the cache."""
    run_async(_handler(ctx).handle_clear())


@app.command()
def cleanup(ctx: typer.Context):
    """Purge expired and corrupt entries."""
    run_async(_handler(ctx).handle_cleanup())


@app.command()
def info(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Show expiry details for KEY."""
    if not run_async(_handler(ctx).handle_info(key)):
        raise typer.Exit(code=1)


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
