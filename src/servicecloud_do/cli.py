#!/usr/bin/env python3
"""
servicecloud CLI

Resolve and call actions on logically named services.

Usage:
    servicecloud resolve SERVICE [ACTION]   - Show the authoritative remote
    servicecloud call SERVICE ACTION [DATA] - Call an action with JSON data
    servicecloud info SERVICE               - Show service information
    servicecloud actions SERVICE            - List a service's actions
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click

from .client import call, information, list_actions
from .config import configure_from_env, get_config
from .errors import ServiceCloudError
from .remote import get_url_from_remote
from .resolver import resolve
from .transport import HttpTransport
from .types import ResolveOptions


# Color codes for terminal output
class Colors:
    RESET = "\x1b[0m"
    BRIGHT = "\x1b[1m"
    DIM = "\x1b[2m"
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"
    CYAN = "\x1b[36m"


def print_error(message: str, error: Exception | None = None) -> None:
    """Print error message."""
    click.echo(f"{Colors.RED}Error:{Colors.RESET} {message}", err=True)
    if error and str(error):
        click.echo(str(error), err=True)


def run_async(coro: Any) -> Any:
    """Run an async function synchronously, exiting 1 on library errors."""
    try:
        return asyncio.run(coro)
    except ServiceCloudError as e:
        print_error(f"[{e.code_name}] {e.message}")
        sys.exit(1)


class Settings:
    """Options shared by every subcommand."""

    def __init__(self, remote: str | None, ttl: int, timeout: float) -> None:
        self.remote = remote
        self.options = ResolveOptions(ttl=ttl)
        self.timeout = timeout

    def require_remote(self) -> str:
        if not self.remote:
            raise click.UsageError("No remote given. Use --remote or set SERVICECLOUD_REMOTE.")
        return self.remote

    def transport(self) -> HttpTransport:
        return HttpTransport(timeout=self.timeout)


pass_settings = click.make_pass_decorator(Settings)


@click.group()
@click.option("--remote", "-r", help="Starting remote URL (default: SERVICECLOUD_REMOTE)")
@click.option("--ttl", type=int, help="Hop budget for resolution (default: SERVICECLOUD_TTL or 100)")
@click.option("--timeout", type=float, help="HTTP timeout in seconds (default: SERVICECLOUD_TIMEOUT or 30)")
@click.option("--debug", is_flag=True, help="Log resolution hops and requests")
@click.pass_context
def cli(
    ctx: click.Context,
    remote: str | None,
    ttl: int | None,
    timeout: float | None,
    debug: bool,
) -> None:
    """servicecloud - call actions on services wherever they live."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        logging.getLogger("servicecloud_do").setLevel(logging.DEBUG)

    configure_from_env()
    config = get_config()
    ctx.obj = Settings(
        remote=remote or config.remote,
        ttl=ttl if ttl is not None else config.ttl,
        timeout=timeout if timeout is not None else config.timeout,
    )


@cli.command("resolve")
@click.argument("service")
@click.argument("action", required=False)
@pass_settings
def resolve_command(settings: Settings, service: str, action: str | None) -> None:
    """Show the authoritative remote for SERVICE and ACTION."""
    remote = settings.require_remote()

    async def run() -> None:
        async with settings.transport() as transport:
            resolution = await resolve(service, action, remote, settings.options, transport=transport)
        click.echo(f"{Colors.BRIGHT}Service:{Colors.RESET} {resolution.service_name}")
        click.echo(f"{Colors.BRIGHT}Action:{Colors.RESET}  {resolution.action_name or '-'}")
        click.echo(
            f"{Colors.BRIGHT}URL:{Colors.RESET}     "
            f"{get_url_from_remote(resolution.service_name, resolution.remote)}"
        )

    run_async(run())


@cli.command("call")
@click.argument("service")
@click.argument("action")
@click.argument("data", required=False)
@pass_settings
def call_command(settings: Settings, service: str, action: str, data: str | None) -> None:
    """Call ACTION on SERVICE with JSON DATA and print the JSON result."""
    remote = settings.require_remote()
    try:
        payload = json.loads(data) if data is not None else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"DATA is not valid JSON: {e}", param_hint="DATA") from e

    async def run() -> None:
        async with settings.transport() as transport:
            result = await call(service, action, remote, payload, settings.options, transport=transport)
        click.echo(json.dumps(result, indent=2))

    run_async(run())


@cli.command("info")
@click.argument("service")
@pass_settings
def info_command(settings: Settings, service: str) -> None:
    """Show the name, actions and system actions of SERVICE."""
    remote = settings.require_remote()

    async def run() -> None:
        async with settings.transport() as transport:
            info = await information(service, remote, settings.options, transport=transport)
        click.echo(f"{Colors.BRIGHT}Name:{Colors.RESET} {info.name}")
        click.echo(f"{Colors.BRIGHT}Actions:{Colors.RESET}")
        for name in info.actions:
            click.echo(f"  {Colors.CYAN}{name}{Colors.RESET}")
        click.echo(f"{Colors.BRIGHT}System actions:{Colors.RESET}")
        for name in info.system_actions:
            click.echo(f"  {Colors.DIM}{name}{Colors.RESET}")

    run_async(run())


@cli.command("actions")
@click.argument("service")
@pass_settings
def actions_command(settings: Settings, service: str) -> None:
    """List the actions of SERVICE, one per line."""
    remote = settings.require_remote()

    async def run() -> None:
        async with settings.transport() as transport:
            names = await list_actions(service, remote, settings.options, transport=transport)
        for name in names:
            click.echo(name)

    run_async(run())


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
