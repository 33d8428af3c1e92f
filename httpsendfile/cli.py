#!/usr/bin/env python3
"""
HTTP SendFile CLI

Command-line interface for the range-aware, throttled file server.

Usage:
    httpsendfile serve [ROOT]            # Serve a directory over HTTP
    httpsendfile probe FILE              # Show the detected content type
    httpsendfile range HEADER --size N   # Show how a Range header is read
    httpsendfile config                  # Show the effective configuration
"""

import asyncio
import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler

from .config import load_config
from .errors import FileNotReadable, RangeNotSatisfiable
from .file import ContentTypeProbe, FileDescriptor
from .ranges import parse_range

console = Console()


def setup_logging(verbose: bool = False):
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)]
    )


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help='JSON config file')
@click.pass_context
def cli(ctx, verbose, config_path):
    """HTTP SendFile - resumable, throttled file downloads."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(Path(config_path) if config_path else None)


@cli.command()
@click.argument('root', required=False, type=click.Path(exists=True, file_okay=False))
@click.option('--host', default=None, help='Bind address')
@click.option('--port', default=None, type=int, help='HTTP port')
@click.option('--delay', default=None, type=float, help='Seconds to wait after each chunk')
@click.option('--chunk-bytes', default=None, type=int, help='Bytes per chunk')
@click.option('--no-disposition', is_flag=True, help='Do not send Content-Disposition')
@click.pass_context
def serve(ctx, root, host, port, delay, chunk_bytes, no_disposition):
    """Serve a directory with range and throttle support."""
    config = ctx.obj['config']

    if root:
        config.root_dir = Path(root)
    if host:
        config.host = host
    if port is not None:
        config.port = port
    if delay is not None:
        config.delay_seconds = delay
    if chunk_bytes is not None:
        config.chunk_bytes = chunk_bytes
    if no_disposition:
        config.with_disposition = False

    try:
        policy = config.policy()
    except ValueError as e:
        raise click.BadParameter(str(e))

    rate = policy.max_bytes_per_sec
    console.print(Panel.fit(
        f"[bold green]File Server Started[/bold green]\n\n"
        f"Root: [blue]{config.root_dir.resolve()}[/blue]\n"
        f"Address: [yellow]http://{config.host}:{config.port}/files/[/yellow]\n"
        f"Chunk: [yellow]{format_size(policy.chunk_bytes)}[/yellow] "
        f"every [yellow]{policy.delay_seconds}s[/yellow]\n"
        f"Max rate: [cyan]{format_size(rate) + '/s' if rate else 'unthrottled'}[/cyan]",
        title="Server Info"
    ))
    console.print(f"\n[dim]API docs at http://localhost:{config.port}/docs[/dim]\n")

    from .api import run_api_server

    try:
        asyncio.run(run_api_server(config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutting down...[/yellow]")


@cli.command()
@click.argument('file_path', type=click.Path())
def probe(file_path):
    """Show the content type a download would be sent with."""
    try:
        descriptor = FileDescriptor.from_path(file_path)
    except FileNotReadable as e:
        console.print(f"[red]✗ {e}[/red]")
        raise SystemExit(1)

    mime_type = ContentTypeProbe().probe(descriptor.path)
    console.print(Panel.fit(
        f"Name: [cyan]{descriptor.name}[/cyan]\n"
        f"Size: [yellow]{descriptor.size:,} bytes[/yellow]\n"
        f"Content-Type: [green]{mime_type}[/green]",
        title="Probe"
    ))


@cli.command('range')
@click.argument('header')
@click.option('--size', required=True, type=int, help='File size in bytes')
def show_range(header, size):
    """Show how a Range header is interpreted for a file of SIZE bytes."""
    try:
        window = parse_range(header, size)
    except RangeNotSatisfiable as e:
        console.print(f"[red]416 Range Not Satisfiable[/red] (Content-Range: {e.content_range})")
        raise SystemExit(1)

    table = Table(title=f"Range: {header}")
    table.add_column("Status", style="cyan")
    table.add_column("Start", justify="right", style="yellow")
    table.add_column("End", justify="right", style="yellow")
    table.add_column("Length", justify="right")
    table.add_column("Content-Range", style="green")

    table.add_row(
        "206" if window.is_partial else "200",
        str(window.start),
        str(window.end),
        str(window.length),
        window.content_range(size) if window.is_partial else "-",
    )
    console.print(table)


@cli.command('config')
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    click.echo(json.dumps(ctx.obj['config'].to_dict(), indent=2))


def format_size(bytes_count: float) -> str:
    """Format bytes as human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024
    return f"{bytes_count:.1f} PB"


if __name__ == '__main__':
    cli()
