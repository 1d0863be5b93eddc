"""Flask CLI commands for the publication search index."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from scholarhub.infra import get_container
from scholarhub.services._shared.errors import SyncError


@click.group("search")
def search_cli() -> None:
    """Search index maintenance."""


@search_cli.command("reindex")
@click.option(
    "--batch-size",
    default=200,
    show_default=True,
    type=click.IntRange(min=1),
    help="Publications loaded and sent per bulk request.",
)
@with_appcontext
def reindex_command(batch_size: int) -> None:
    """Re-send every publication from the database to the search index.

    This is the recovery path for synchronization jobs that failed after a
    write was committed. Documents of deleted publications are removed.
    """
    try:
        report = get_container().search.reindex(batch_size=batch_size)
    except SyncError as exc:
        raise click.ClickException(f"Reindex failed: {exc}") from exc
    click.echo(f"Indexed {report.indexed} publication(s), {report.failed} failed.")
    click.echo(f"Removed {report.removed} stale document(s).")
    if report.failed_ids:
        click.echo("Failed ids: " + ", ".join(str(i) for i in report.failed_ids))
        raise click.exceptions.Exit(1)
