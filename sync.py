#!/usr/bin/env python3
"""
Blog → standard.site Sync CLI

Usage:
    python sync.py                  # Run full sync
    python sync.py --dry-run        # Preview records without publishing
    python sync.py --force          # Publish every post regardless of changes
    python sync.py watch            # Sync, then keep syncing on file changes
    python sync.py inspect FILE     # Show how a single post would be published
    python sync.py version          # Show version
"""

import json
import sys
import threading
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from standard_site_sync import __version__
from standard_site_sync.config import Config
from standard_site_sync.errors import ContentSourceError, SyncError
from standard_site_sync.frontmatter import extract_frontmatter
from standard_site_sync.record import build_document
from standard_site_sync.schema import validate_post
from standard_site_sync.sync_engine import SyncEngine
from standard_site_sync.tid import derive_record_key

console = Console()


def _load_config(ctx: click.Context) -> Config:
    """Load configuration and apply CLI overrides."""
    config = Config.from_env()

    if ctx.obj.get("force"):
        config.force_sync = True
    if ctx.obj.get("dry_run"):
        config.dry_run = True
    if ctx.obj.get("debug"):
        config.debug = True
    if ctx.obj.get("workers"):
        config.workers = ctx.obj["workers"]
    if ctx.obj.get("content_dir"):
        config.content_dir = Path(ctx.obj["content_dir"]).resolve()

    config.validate_for_publish()
    return config


@click.group(invoke_without_command=True)
@click.option("--force", is_flag=True, help="Publish all posts regardless of changes")
@click.option("--dry-run", is_flag=True, help="Preview records without publishing")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option("--workers", type=click.IntRange(min=1), help="Number of posts synced in parallel")
@click.option(
    "--content-dir",
    type=click.Path(file_okay=False),
    help="Directory containing the blog posts",
)
@click.pass_context
def cli(
    ctx,
    force: bool,
    dry_run: bool,
    debug: bool,
    workers: Optional[int],
    content_dir: Optional[str],
):
    """
    Blog → standard.site Sync

    Publishes Markdown blog posts to a PDS as site.standard.document records.
    """
    load_dotenv()

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["dry_run"] = dry_run
    ctx.obj["debug"] = debug
    ctx.obj["workers"] = workers
    ctx.obj["content_dir"] = content_dir

    # If no subcommand, run sync
    if ctx.invoked_subcommand is None:
        ctx.invoke(sync)


@cli.command()
@click.pass_context
def sync(ctx):
    """Publish every changed post once."""
    try:
        config = _load_config(ctx)
        engine = SyncEngine(config)
        result = engine.sync()

        # Exit with error code if any post failed
        if not result.success:
            sys.exit(1)

    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        console.print("\n[dim]Make sure you have created a .env file with your PDS settings.[/dim]")
        sys.exit(1)
    except ContentSourceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync cancelled.[/yellow]")
        sys.exit(130)


@cli.command()
@click.pass_context
def watch(ctx):
    """Publish changed posts, then keep publishing as files change."""
    try:
        config = _load_config(ctx)
        engine = SyncEngine(config)
        engine.watch(threading.Event())
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching.[/yellow]")
        sys.exit(130)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(file: Path):
    """Show how FILE would be published, without publishing it."""
    try:
        config = Config.from_env()
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)

    frontmatter = extract_frontmatter(file.read_text(encoding="utf-8"))

    console.print("[bold]Frontmatter[/bold]")
    console.print_json(data=frontmatter.data)
    for issue in frontmatter.issues:
        console.print(f"[yellow]Skipped {escape(str(issue))}[/yellow]")

    validation = validate_post(frontmatter.data)
    if not validation.success:
        console.print("\n[red]Validation failed[/red]")
        for issue in validation.issues:
            console.print(f"  [red]- {escape(str(issue))}[/red]")
        sys.exit(1)

    post = validation.output
    if post.draft:
        console.print("\n[yellow]Draft: this post would be skipped.[/yellow]")

    try:
        rkey = derive_record_key(post.date, config.fixed_clock_id)
        document = build_document(post, config.site_url, config.collection)
    except SyncError as e:
        console.print(f"\n[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"\n[bold]Record[/bold] {config.collection}/{rkey}")
    console.print_json(json.dumps(document))


@cli.command()
def version():
    """Show version information."""
    console.print(f"Blog → standard.site Sync v{__version__}")


if __name__ == "__main__":
    cli()
