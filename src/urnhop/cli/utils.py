"""
CLI Utilities - Shared helper functions for command line operations.

This module provides formatted printing, the connection options shared by
every command that talks to the catalog, and client construction.
"""

import functools
import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from ..client.catalog import CatalogClient
from ..config import CatalogConfig, load_config
from ..core.exceptions import CatalogApiError
from ..core.types import NavigationMode
from ..graph.neighborhood import NeighborhoodBuilder


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True))


def connection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Add the catalog connection flags to a command.

    The decorated command receives a resolved `config: CatalogConfig`
    keyword instead of the individual flags.
    """

    @click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
                  default=None, help="Config file (default: .urnhop/config.yaml)")
    @click.option("--scheme", default=None, help="http or https")
    @click.option("--host", default=None, help="Catalog API host")
    @click.option("--port", default=None, help="Catalog API port (empty for none)")
    @click.option("--api-path", default=None, help="API path prefix, e.g. /gms")
    @click.option("--token", default=None, help="Bearer token")
    @functools.wraps(func)
    def wrapper(*args: Any, config_path: Optional[Path], scheme: Optional[str],
                host: Optional[str], port: Optional[str], api_path: Optional[str],
                token: Optional[str], **kwargs: Any) -> Any:
        config = load_config(
            config_path,
            scheme=scheme,
            host=host,
            port=port,
            api_path=api_path,
            token=token,
        )
        return func(*args, config=config, **kwargs)

    return wrapper


def create_client(config: CatalogConfig) -> CatalogClient:
    """Build a catalog client for the effective configuration."""
    return CatalogClient(config.base_url, token=config.token, timeout=config.timeout)


async def connect_neighborhood(config: CatalogConfig, urn: str) -> NeighborhoodBuilder:
    """Resolve the neighborhood of `urn` in a fresh session."""
    async with create_client(config) as client:
        builder = NeighborhoodBuilder(client)
        await builder.navigate(urn, NavigationMode.CONNECT)
    return builder


def report_failure(error: Exception, as_json: bool = False) -> None:
    """
    Print a failed navigation action and exit with status 1.

    Catalog errors list every endpoint variant that was attempted.
    """
    if isinstance(error, CatalogApiError):
        payload = error.to_dict()
        message = error.describe()
    else:
        payload = {"message": str(error)}
        message = str(error)

    if as_json:
        click.echo(json.dumps({"meta": {"status": "error"}, "error": payload}))
    else:
        echo_error(message)
    sys.exit(1)
