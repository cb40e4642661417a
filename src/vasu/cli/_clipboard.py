"""The cb command."""

from __future__ import annotations

import click

from ..clipboard import ClipboardUnavailable, collect_files, copy_to_clipboard, join_files
from ..stats import human_size
from ._helpers import main, _library_errors, _status

_PREVIEW = 8


@main.command()
@click.argument("targets", nargs=-1)
@click.option("--no-header", is_flag=True, default=False,
              help="Do not put a '# ─── path ───' header above each file.")
@click.option("-a", "--all", "include_hidden", is_flag=True, default=False,
              help="Include hidden files when expanding directories and patterns.")
@click.pass_context
def cb(ctx, targets, no_header, include_hidden):
    """Copy the text of files to the clipboard.

    Each TARGET may be a file, a directory (all files below it), or a
    name pattern matched recursively from the current directory.  With
    no TARGETS the whole current directory is used.  Files that are not
    UTF-8 text are skipped.  If no clipboard tool is available the text
    is written to stdout instead.

    \b
    Examples:
        vasu cb '*'
        vasu cb '*.py' README.md
        vasu cb src/ --no-header
    """
    with _library_errors():
        files = collect_files(targets, include_hidden=include_hidden)
    if not files:
        raise click.ClickException("No files found.")

    text, used = join_files(files, header=not no_header)
    if not used:
        raise click.ClickException("No readable text files found.")
    _status(ctx, f"Collected {used} of {len(files)} file(s)")

    try:
        tool = copy_to_clipboard(text)
    except ClipboardUnavailable as exc:
        click.echo(f"WARNING: {exc}; writing to stdout instead.", err=True)
        click.echo(text)
        return

    size = human_size(len(text.encode("utf-8")))
    click.echo(click.style(f"Copied {used} file(s) ({size}) to clipboard via {tool}.",
                           fg="green"))
    for p in files[:_PREVIEW]:
        click.echo(f"  {p}")
    if len(files) > _PREVIEW:
        click.echo(f"  ... and {len(files) - _PREVIEW} more")
