"""The cp command."""

from __future__ import annotations

import click

from ..copy import copy_tree
from ._helpers import (
    main,
    _build_exclude,
    _dry_run_option,
    _exclude_options,
    _library_errors,
    _report_errors,
    _status,
)


@main.command()
@click.argument("src", type=click.Path())
@click.argument("dst", type=click.Path())
@click.option("-o", "--overwrite", is_flag=True, default=False,
              help="Replace existing files and symlinks at the destination.")
@_dry_run_option
@_exclude_options
@click.pass_context
def cp(ctx, src, dst, overwrite, dry_run, exclude, exclude_from, gitignore):
    """Deep-copy SRC to DST, keeping hidden files, permissions, and symlinks.

    Directories that already exist at the destination are merged into.
    Existing files are never replaced unless --overwrite is given; each
    one that blocks the copy is reported as a CONFLICT and skipped.

    \b
    Examples:
        vasu cp src/ dst/
        vasu cp -o src/ dst/                  # replace existing files
        vasu cp src/ dst/ --exclude '*.log'
        vasu cp src/ dst/ --gitignore -n      # preview, honoring .gitignore
    """
    excl = _build_exclude(exclude, exclude_from, gitignore)
    _status(ctx, f"Copying {src} -> {dst}")
    try:
        with _library_errors():
            report = copy_tree(src, dst, overwrite=overwrite, exclude=excl, dry_run=dry_run)
    except KeyboardInterrupt:
        click.echo("\nInterrupted; the destination may be partially copied.", err=True)
        ctx.exit(130)

    verb = "Would copy" if dry_run else "Copied"
    if dry_run:
        for entry in report.copied:
            click.echo(f"  {entry.relative or entry.name}")
    elif ctx.obj.get("verbose"):
        for entry in report.copied:
            _status(ctx, f"  {entry.relative or entry.name}")

    for c in report.conflicts:
        click.echo(f"CONFLICT: {c.path}: {c.error} (use --overwrite to replace)", err=True)
    _report_errors(report.errors)

    click.echo(f"{verb} {len(report.copied)}, skipped {len(report.conflicts)}, "
               f"failed {len(report.errors)}.")
    if not report.ok:
        ctx.exit(1)
