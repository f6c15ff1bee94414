#!/usr/bin/env python3
"""
NotePrompt CLI.

Developer entry point for inspecting and editing the local note store.
Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service list
    python cli.py --service add --content "# Groceries"
    python cli.py --service search --query Groceries
    python cli.py --service show --note-id <id>
    python cli.py --service config
"""

import asyncio
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from noteprompt.core.config import validate_project_root
from noteprompt.core.logging import get_logger, log_with_source, setup_logging


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["list", "search", "show", "add", "edit", "delete", "count", "config", "info"]),
    default="info",
    help="Command to run.",
)
@click.option(
    "--note-id", "-n",
    default=None,
    help="Note id (show, edit, delete).",
)
@click.option(
    "--content", "-c",
    default=None,
    help="Markdown content (add, edit). Read from stdin when omitted.",
)
@click.option(
    "--query", "-q",
    default="",
    help="Case-sensitive search text (search).",
)
@click.option(
    "--database",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite file to use instead of database.yaml.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
def main(
    service: str,
    note_id: str | None,
    content: str | None,
    query: str,
    database: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """
    NotePrompt CLI.

    \b
    Examples:
        python cli.py --service list
        python cli.py --service add --content "# Idea"
        echo "# From stdin" | python cli.py --service add
        python cli.py --service edit --note-id <id> --content "# New"
        python cli.py --service search --query Idea
        python cli.py --service delete --note-id <id>
        python cli.py --service count --database /tmp/notes.db
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "config":
        show_config()
        return
    if service == "info":
        show_info()
        return

    if service in ("show", "edit", "delete") and not note_id:
        click.echo(click.style(f"Error: --note-id is required for {service}.", fg="red"), err=True)
        sys.exit(2)
    if service in ("add", "edit") and content is None:
        content = click.get_text_stream("stdin").read()

    exit_code = asyncio.run(run_notes(logger, service, database, note_id, content, query))
    if exit_code:
        sys.exit(exit_code)


async def run_notes(
    logger,
    service: str,
    database: Path | None,
    note_id: str | None,
    content: str | None,
    query: str,
) -> int:
    """Open the store and run one note command. Returns the exit code."""
    from noteprompt.core.database import NoteStore
    from noteprompt.core.exceptions import ApplicationError
    from noteprompt.main import open_app

    store = NoteStore(f"sqlite+aiosqlite:///{database}") if database else None

    try:
        async with open_app(store=store, configure_logging=False) as app:
            if service == "list":
                _echo_notes(await app.notes.list_notes())
            elif service == "search":
                _echo_notes(await app.notes.search_notes(query))
            elif service == "count":
                click.echo(await app.notes.count_notes())
            elif service == "show":
                note = await app.notes.get_note(note_id)
                if note is None:
                    click.echo(f"Note {note_id} not found.", err=True)
                    return 1
                _echo_note(note)
            elif service == "add":
                _warn_if_long(content)
                note = await app.notes.create_note(content)
                click.echo(note.id)
            elif service == "edit":
                _warn_if_long(content)
                note = await app.notes.update_note_content(note_id, content)
                if note is None:
                    click.echo(f"Note {note_id} not found.", err=True)
                    return 1
                click.echo(f"Updated {note.id}: {note.title}")
            elif service == "delete":
                if not await app.notes.delete_note(note_id):
                    click.echo(f"Note {note_id} not found.", err=True)
                    return 1
                click.echo(f"Deleted {note_id}")
    except ApplicationError as e:
        log_with_source(logger, "cli", "error", "Command failed", service=service, code=e.code, error=e.message)
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        return 1
    return 0


def _echo_notes(notes) -> None:
    from noteprompt.core.dates import format_relative

    if not notes:
        click.echo("No notes.")
        return
    for note in notes:
        click.echo(f"{note.id}  {format_relative(note.updated_at):>14}  {note.title}")


def _echo_note(note) -> None:
    from noteprompt.core.dates import format_full

    click.echo(click.style(note.title, bold=True))
    click.echo(f"Created:  {format_full(note.created_at)}")
    click.echo(f"Modified: {format_full(note.updated_at)}")
    click.echo()
    click.echo(note.content)


def _warn_if_long(content: str) -> None:
    from noteprompt.core.config import get_app_config
    from noteprompt.core.markdown import exceeds_length_guideline

    limit = get_app_config().editor.max_note_length
    if exceeds_length_guideline(content, limit):
        click.echo(
            click.style(f"Warning: note is longer than {limit} characters.", fg="yellow"),
            err=True,
        )


def show_config() -> None:
    """Display the loaded YAML configuration."""
    from noteprompt.core.config import get_app_config

    config = get_app_config()
    sections = {
        "Application": config.application,
        "Database": config.database,
        "Logging": config.logging,
        "Editor": config.editor,
        "Shortcuts": config.shortcuts,
    }
    for title, section in sections.items():
        click.echo(click.style(f"{title} Settings", bold=True))
        for key, value in section.model_dump().items():
            click.echo(f"  {key}: {value}")
        click.echo()


def show_info() -> None:
    """Display application identity."""
    from noteprompt.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} {app.version} ({app.environment})")
    click.echo(app.description)


if __name__ == "__main__":
    main()
