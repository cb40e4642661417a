"""Archive commands: zip, unzip, backup."""

from __future__ import annotations

import click

from ..archive import backup as backup_archive
from ..archive import default_archive_name, extract_archive, zip_path
from ..stats import human_size
from ._helpers import main, _library_errors, _report_errors, _status


def _finish(ctx, report, message: str) -> None:
    _report_errors(report.errors)
    click.echo(message)
    if report.errors:
        ctx.exit(1)


def _archive_size(report) -> str:
    try:
        return human_size(report.archive.stat().st_size)
    except OSError:
        return "?"


@main.command("zip")
@click.argument("source", type=click.Path())
@click.argument("output", required=False, type=click.Path())
@click.pass_context
def zip_(ctx, source, output):
    """Zip SOURCE (a file or directory) into OUTPUT.

    OUTPUT defaults to <name>.zip in the current directory.  Hidden
    files, permission bits and symlinks are kept.

    \b
    Examples:
        vasu zip src/
        vasu zip notes.txt notes-2024.zip
    """
    output = output or default_archive_name(source)
    _status(ctx, f"Zipping {source} -> {output}")
    with _library_errors():
        report = zip_path(source, output)
    _finish(ctx, report, f"Zipped {report.files} file(s) -> {output} ({_archive_size(report)})")


@main.command()
@click.argument("archive", type=click.Path())
@click.argument("destination", default=".", type=click.Path())
@click.pass_context
def unzip(ctx, archive, destination):
    """Extract ARCHIVE into DESTINATION (default: current directory).

    Members that would land outside DESTINATION are refused and reported.
    """
    _status(ctx, f"Extracting {archive} -> {destination}")
    with _library_errors():
        report = extract_archive(archive, destination)
    _finish(ctx, report, f"Extracted {report.files} file(s) -> {destination}")


@main.command()
@click.argument("source", default=".", type=click.Path())
@click.option("-d", "--dest", default=".", type=click.Path(),
              help="Directory to write the backup into (default: current directory).")
@click.pass_context
def backup(ctx, source, dest):
    """Zip SOURCE into a timestamped <name>_<YYYYmmdd_HHMMSS>.zip."""
    _status(ctx, f"Backing up {source} into {dest}")
    with _library_errors():
        report = backup_archive(source, dest)
    _finish(ctx, report, f"Backup saved -> {report.archive} ({_archive_size(report)}, "
                         f"{report.files} file(s))")
