"""Main CLI interface for the note state library."""

import sys
import click
from pathlib import Path
from datetime import datetime
from typing import List, Optional
import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from studentnotes.application.engine import StateEngine
from studentnotes.application.config import Config, STORAGE_KINDS
from studentnotes.binding.codec import SnapshotCodec
from studentnotes.domain.models import Entry, Snapshot
from studentnotes.domain.errors import StateError

console = Console()

FORMAT_OPTION = click.option(
    '--format', 'output_format', default='rich',
    type=click.Choice(['rich', 'plain', 'json'])
)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--kind', '-k', type=click.Choice(STORAGE_KINDS), help='Storage kind')
@click.option('--name', '-n', help='Database path (sqlite) or namespace (memory)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx, config, kind, name, verbose):
    """Student notes - create, edit and search note entries."""
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        config_obj = Config.load_from_file(Path(config))
    else:
        config_obj = Config()

    if kind:
        config_obj.storage.kind = kind
    if name:
        if config_obj.storage.kind in ("memory", "development"):
            config_obj.storage.memory_namespace = name
        else:
            config_obj.storage.db_path = Path(name)

    if verbose:
        config_obj.log_level = "DEBUG"

    ctx.obj['config'] = config_obj
    ctx.obj['engine'] = StateEngine(config_obj)
    ctx.call_on_close(ctx.obj['engine'].close)


def fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def listing(engine: StateEngine, entry: Entry, output_format: str) -> List[Entry]:
    """Entries to print after a change: the full listing for json, else the changed entry."""
    if output_format != 'json':
        return [entry]
    try:
        return engine.current()
    except StateError as e:
        fail(f"Error listing entries: {e}")


def show(ctx, entries: List[Entry], output_format: str, title: str, entry: Optional[Entry] = None) -> None:
    """Render a listing in the requested format."""
    if output_format == 'json':
        codec = SnapshotCodec(indent=ctx.obj['config'].binding.indent)
        click.echo(codec.encode(Snapshot(entries=entries, entry=entry)).decode("utf-8"))

    elif output_format == 'plain':
        for e in entries:
            click.echo(f"{e.id}\t{e.color}\t{e.text}")

    else:  # rich format
        codec = SnapshotCodec()
        table = Table(title=title)
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Color", style="yellow", justify="right")
        table.add_column("Text", style="white")
        table.add_column("Tags", style="magenta")
        table.add_column("Modified", style="dim")

        for e in entries:
            payload = codec.to_payload(e)
            tags = ", ".join(f"#{t.id}" for t in payload.tags)
            modified = datetime.fromtimestamp(e.modified).strftime("%Y-%m-%d %H:%M")
            table.add_row(str(e.id), str(e.color), payload.text, tags, modified)

        console.print(table)


@cli.command()
@FORMAT_OPTION
@click.pass_context
def current(ctx, output_format):
    """List every entry, newest first."""
    engine = ctx.obj['engine']

    try:
        entries = engine.current()
    except StateError as e:
        fail(f"Error listing entries: {e}")

    show(ctx, entries, output_format, "Entries")


@cli.command()
@click.argument('text')
@click.option('--color', default=0, type=int, help='Color code')
@FORMAT_OPTION
@click.pass_context
def create(ctx, text, color, output_format):
    """Create a new entry."""
    engine = ctx.obj['engine']

    try:
        entry = engine.create(text, color)
    except StateError as e:
        fail(f"Error creating entry: {e}")

    if output_format == 'rich':
        console.print(f"[green]Created entry {entry.id}[/green]")
    else:
        show(ctx, listing(engine, entry, output_format), output_format, "Created", entry=entry)


@cli.command()
@click.argument('entry_id', type=int)
@click.argument('text')
@click.option('--color', default=0, type=int, help='Color code')
@FORMAT_OPTION
@click.pass_context
def update(ctx, entry_id, text, color, output_format):
    """Replace the text and color of an entry."""
    engine = ctx.obj['engine']

    try:
        entry = engine.update(entry_id, text, color)
    except StateError as e:
        fail(f"Error updating entry: {e}")

    if output_format == 'rich':
        console.print(f"[green]Updated entry {entry.id}[/green]")
    else:
        show(ctx, listing(engine, entry, output_format), output_format, "Updated", entry=entry)


@cli.command()
@click.argument('entry_id', type=int)
@FORMAT_OPTION
@click.pass_context
def delete(ctx, entry_id, output_format):
    """Delete an entry."""
    engine = ctx.obj['engine']

    try:
        entry = engine.delete(entry_id)
    except StateError as e:
        fail(f"Error deleting entry: {e}")

    if output_format == 'rich':
        console.print(f"[green]Deleted entry {entry.id}[/green]")
    else:
        show(ctx, listing(engine, entry, output_format), output_format, "Deleted", entry=entry)


@cli.command()
@click.argument('query')
@FORMAT_OPTION
@click.pass_context
def search(ctx, query, output_format):
    """Search entries by word prefixes."""
    engine = ctx.obj['engine']

    try:
        entries = engine.search(query)
    except StateError as e:
        fail(f"Error during search: {e}")

    show(ctx, entries, output_format, f"Results for: {query}")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show store statistics."""
    engine = ctx.obj['engine']

    try:
        stats = engine.get_statistics()
    except StateError as e:
        fail(f"Error getting statistics: {e}")

    table = Table(title="Store Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Storage", f"{stats['kind']} ({stats['location']})")
    table.add_row("Total Entries", str(stats['total_entries']))
    if stats['colors']:
        table.add_row("Colors", ", ".join(f"{k}: {v}" for k, v in stats['colors'].items()))
    if stats['tags']:
        table.add_row("Tags", ", ".join(f"#{k}: {v}" for k, v in stats['tags'].items()))

    console.print(table)


@cli.command()
@click.pass_context
def config_show(ctx):
    """Show current configuration."""
    config = ctx.obj['config']

    config_json = json.dumps(config.model_dump(mode="json"), indent=2)

    panel = Panel(
        config_json,
        title="Current Configuration",
        border_style="green"
    )
    console.print(panel)


@cli.command()
@click.option('--output', '-o', required=True, help='Output file path')
@click.pass_context
def config_save(ctx, output):
    """Save current configuration to file."""
    config = ctx.obj['config']
    output_path = Path(output)

    try:
        config.save_to_file(output_path)
        console.print(f"[green]Configuration saved to {output_path}[/green]")
    except ValueError as e:
        fail(f"Error saving configuration: {e}")


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
