"""Tidy-up commands: del, clean, rename."""

from __future__ import annotations

from pathlib import Path

import click

from ..cleanup import apply_renames, find_junk, plan_keep_delete, plan_renames, remove_paths
from ..exceptions import EntryError
from ..walk import check_root
from ._helpers import (
    main,
    _confirm,
    _display,
    _dry_run_option,
    _library_errors,
    _report_errors,
    _status,
    _yes_option,
)

_CLEAN_PREVIEW = 15


def _remove_confirmed(ctx, paths: list[Path], base: Path, yes: bool, noun: str) -> None:
    """Confirm, remove *paths*, and report; exits 1 if any removal failed."""
    if not _confirm(ctx, f"Delete {len(paths)} item(s)?", yes):
        click.echo("Aborted.")
        return
    report = remove_paths(paths)
    for p in report.removed:
        _status(ctx, f"  removed {_display(p, base)}")
    _report_errors(report.errors)
    click.echo(f"{noun} {len(report.removed)} item(s).")
    if report.errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# del
# ---------------------------------------------------------------------------

@main.command("del")
@click.argument("keep", nargs=-1, required=True)
@click.option("-C", "--directory", default=".", type=click.Path(),
              help="Directory to clean out (default: current directory).")
@_yes_option
@click.pass_context
def del_(ctx, keep, directory, yes):
    """Delete everything in the directory EXCEPT the KEEP names.

    Only immediate children are considered; kept names are matched
    exactly.  The list of victims is shown before anything is removed.

    \b
    Examples:
        vasu del .git src README.md
        vasu del -C build/ keep.txt -y
    """
    with _library_errors():
        base = check_root(directory)
        victims = plan_keep_delete(base, list(keep))
    if not victims:
        click.echo("Nothing to delete; only kept items are present.")
        return

    click.echo(click.style("Will delete:", fg="red", bold=True))
    for p in victims:
        suffix = "/" if p.is_dir() and not p.is_symlink() else ""
        click.echo(f"  {p.name}{suffix}")
    click.echo(click.style("Will keep: ", fg="green", bold=True) + ", ".join(keep))
    _remove_confirmed(ctx, victims, base, yes, "Deleted")


# ---------------------------------------------------------------------------
# clean
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", default=".", type=click.Path())
@_yes_option
@click.pass_context
def clean(ctx, directory, yes):
    """Remove build artifacts and OS junk under DIRECTORY.

    \b
    Junk is:
        __pycache__ .pytest_cache .mypy_cache .ruff_cache target .eggs
        .DS_Store Thumbs.db, and files ending .pyc .pyo .class .o .obj .log
    """
    errors: list[EntryError] = []
    with _library_errors():
        base = check_root(directory)
        junk = find_junk(base, errors)
    _report_errors(errors)
    if not junk:
        click.echo("Nothing to clean.")
        if errors:
            ctx.exit(1)
        return

    click.echo(click.style(f"Found {len(junk)} junk item(s):", fg="yellow", bold=True))
    for entry in junk[:_CLEAN_PREVIEW]:
        click.echo(f"  {entry.relative}{'/' if entry.is_dir else ''}")
    if len(junk) > _CLEAN_PREVIEW:
        click.echo(f"  ... and {len(junk) - _CLEAN_PREVIEW} more")
    _remove_confirmed(ctx, [e.path for e in junk], base, yes, "Cleaned")
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# rename
# ---------------------------------------------------------------------------

@main.command()
@click.argument("pattern")
@click.argument("replacement")
@click.argument("directory", default=".", type=click.Path())
@_dry_run_option
@click.pass_context
def rename(ctx, pattern, replacement, directory, dry_run):
    """Replace PATTERN with REPLACEMENT in file names under DIRECTORY.

    The match is a plain substring.  A file is never renamed over an
    existing one; such renames are reported as conflicts.

    \b
    Examples:
        vasu rename ' ' _ photos/ -n
        vasu rename .jpeg .jpg
    """
    if not pattern:
        raise click.ClickException("PATTERN must not be empty")
    with _library_errors():
        base = check_root(directory)
        plan = plan_renames(base, pattern, replacement)
    if not plan:
        click.echo(f"No file names contain '{pattern}'.")
        return

    report = apply_renames(plan, dry_run=dry_run)
    for old, new in report.renamed:
        click.echo(f"  {_display(old, base)} -> {new.name}")
    for c in report.conflicts:
        click.echo(f"CONFLICT: {_display(Path(c.path), base)}: {c.error}", err=True)
    _report_errors(report.errors)
    verb = "Would rename" if dry_run else "Renamed"
    click.echo(f"{verb} {len(report.renamed)} file(s).")
    if report.conflicts or report.errors:
        ctx.exit(1)
