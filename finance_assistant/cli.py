"""CLI commands for previewing uploads and inspecting categories."""

from __future__ import annotations

import json
import mimetypes

import click
from flask.cli import with_appcontext

from finance_assistant.api.services import process_upload
from finance_assistant.constants.categories import get_default_categories
from finance_assistant.ingest import IngestionError


@click.group("ingest")
def ingest_cli():
    """Document ingestion commands."""


@click.group("category")
def category_cli():
    """Category taxonomy commands."""


def register_commands(app):
    """Register CLI commands with the application."""
    app.cli.add_command(ingest_cli)
    app.cli.add_command(category_cli)

    ingest_cli.add_command(preview_file)
    category_cli.add_command(list_categories)


@click.command("preview")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--media-type", default=None, help="Declared MIME type (guessed from the file name if omitted)")
@with_appcontext
def preview_file(path: str, media_type: str | None):
    """Run FILE through the ingestion pipeline and print the result as JSON."""
    media_type = media_type or mimetypes.guess_type(path)[0]

    with open(path, "rb") as handle:
        data = handle.read()

    try:
        payload = process_upload(media_type, path, data)
    except IngestionError as e:
        raise click.ClickException(e.message) from e

    click.echo(json.dumps(payload, indent=2))


@click.command("list")
@click.option("--kind", type=click.Choice(["expense", "income"]), default=None, help="Only list one kind")
def list_categories(kind: str | None):
    """List the default category taxonomy."""
    categories = get_default_categories()
    kinds = [kind] if kind else ["expense", "income"]
    for current_kind in kinds:
        click.echo(f"{current_kind.title()} categories:")
        for name in categories[current_kind]:
            click.echo(f"  - {name}")
