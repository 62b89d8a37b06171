"""Flip Journal CLI - a date-by-date personal journal."""

import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .config import load_config
from .core.bundle import InvalidBundleError
from .core.entry import EntryFormatError
from .navigator import Journal
from .ports.storage import StorageError
from .sync import BackupResult

SECTIONS = {
    "letter": "letter_body",
    "continued": "continued",
    "notes": "notes_content",
    "sticky": "sticky_note",
}


def _open_journal(start_date: date | None = None) -> Journal:
    try:
        return Journal.open(load_config(), start_date=start_date)
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _parse_date(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a YYYY-MM-DD date")


def _echo_results(results: list[BackupResult]) -> bool:
    for result in results:
        mark = "✓" if result.ok else ("-" if result.skipped else "✗")
        click.echo(f"  {mark} {result.describe()}", err=not result.ok and not result.skipped)
    return all(r.ok or r.skipped for r in results)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Flip Journal - Personal Journal CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
def serve():
    """Run the journal server (static pages + backup API)."""
    from .server import run_server

    config = load_config()
    click.echo(f"Journal server on http://{config.host}:{config.port}")
    click.echo(f"Backup file: {config.backup_file}")
    click.echo("Press Ctrl+C to stop")
    run_server(config)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def entries(as_json: bool):
    """List journal entries, newest first."""
    with _open_journal() as journal:
        summaries = journal.store.recent_entries()

    if as_json:
        click.echo(
            json.dumps(
                [{"date": s.date.isoformat(), "preview": s.preview} for s in summaries],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not summaries:
        click.echo("No entries yet! Start writing today ♡")
        return

    for summary in summaries:
        preview = summary.preview.replace("\n", " ") or "No content yet..."
        click.echo(f"{summary.date.strftime('%a, %b %d, %Y')}  {preview}")


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output the stored record as JSON")
def show(target_date: str | None, as_json: bool):
    """Show the journal entry for a date."""
    target = _parse_date(target_date)
    with _open_journal() as journal:
        try:
            entry = journal.store.get(target)
        except EntryFormatError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    if entry is None:
        click.echo(f"No journal entry for {target.strftime('%A, %b %d')}.")
        return

    if as_json:
        click.echo(json.dumps(entry.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Journal for {target.strftime('%A, %b %d')}\n")
    if entry.letter:
        click.echo(entry.letter.greeting or "")
        click.echo(entry.letter.body or "")
    if entry.continued:
        click.echo(f"\n{entry.continued}")
    if entry.notes and entry.notes.content:
        click.echo(f"\n## {entry.notes.title or 'Notes'}\n\n{entry.notes.content}")


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to write (YYYY-MM-DD), defaults to today")
@click.option("--section", "-s", type=click.Choice(sorted(SECTIONS)), default="letter",
              help="Which part of the page to write")
@click.option("--text", "-t", default=None, help="New text (opens $EDITOR if omitted)")
def write(target_date: str | None, section: str, text: str | None):
    """Write part of a day's entry."""
    target = _parse_date(target_date)
    attr = SECTIONS[section]

    if target > date.today():
        click.echo(f"Error: can't write entries for future dates ({target}).", err=True)
        sys.exit(1)

    with _open_journal(start_date=target) as journal:
        if text is None:
            text = click.edit(getattr(journal.page, attr))
            if text is None:
                click.echo("No changes.")
                return
            text = text.rstrip("\n")

        setattr(journal.page, attr, text)
        try:
            journal.save(backup=False)
        except StorageError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        click.echo(f"✓ Saved {section} for {target}")

        journal.sync.backup()


@main.command()
def backup():
    """Back up all entries to the cloud and the journal server now."""
    with _open_journal() as journal:
        click.echo("Backing up...")
        ok = _echo_results(journal.sync.backup())
    if not ok:
        sys.exit(1)


@main.command()
@click.argument("source", type=click.Choice(["cloud", "server"]))
def restore(source: str):
    """Restore all entries from a backup (overwrites matching dates)."""
    with _open_journal() as journal:
        result = journal.sync.restore(source)
    ok = _echo_results([result])
    if not ok or result.skipped:
        sys.exit(1)
    click.echo("Restored! ✨")


@main.command("export")
@click.option("--output", "-o", "output_dir", default=".", type=click.Path(file_okay=False),
              help="Directory to write the backup file to")
def export_cmd(output_dir: str):
    """Download a backup file of every entry."""
    with _open_journal() as journal:
        path = journal.sync.download(Path(output_dir), journal.session.active_date)
    click.echo(f"✓ Backup written to {path}")


@main.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
def import_cmd(backup_file: str):
    """Restore entries from a downloaded backup file."""
    with _open_journal() as journal:
        try:
            count = journal.sync.upload(backup_file)
        except InvalidBundleError as e:
            click.echo(f"Invalid backup file: {e}", err=True)
            sys.exit(1)
        except StorageError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    click.echo(f"✓ Restored {count} keys from {backup_file}")


@main.command()
def theme():
    """Cycle the journal theme (light, dark, sepia)."""
    with _open_journal() as journal:
        current = journal.navigator.toggle_theme()
    click.echo(f"Theme: {current}")


if __name__ == "__main__":
    main()
