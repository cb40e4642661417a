"""Tree comparison commands: diff and dupe."""

from __future__ import annotations

import os

import click

from ..dedup import find_duplicates
from ..diff import DiffTag, diff_trees
from ..stats import human_size
from ._helpers import (
    main,
    _build_exclude,
    _emit_json,
    _exclude_options,
    _format_option,
    _jobs_option,
    _library_errors,
    _report_errors,
    _status,
)

_TAG_COLORS = {
    DiffTag.ADDED: "green",
    DiffTag.REMOVED: "red",
    DiffTag.MODIFIED: "yellow",
    DiffTag.UNCHANGED: None,
}


def _errors_json(errors):
    return [{"path": e.path, "error": e.error, "kind": e.kind.value} for e in errors]


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------

@main.command()
@click.argument("dir_a", type=click.Path())
@click.argument("dir_b", type=click.Path())
@click.option("-c", "--changes-only", is_flag=True, default=False,
              help="Hide unchanged paths.")
@click.option("--mode", "compare_mode", is_flag=True, default=False,
              help="Also treat permission changes as modifications.")
@_jobs_option
@_format_option
@_exclude_options
@click.pass_context
def diff(ctx, dir_a, dir_b, changes_only, compare_mode, jobs, fmt,
         exclude, exclude_from, gitignore):
    """Compare two directory trees by content.

    Every path found in either tree is printed with its status:
    added (only in DIR_B), removed (only in DIR_A), modified, or unchanged.
    Files are compared by SHA-256 digest.

    \b
    Examples:
        vasu diff a/ b/
        vasu diff a/ b/ -c -j 8
        vasu diff a/ b/ --format json
    """
    excl = _build_exclude(exclude, exclude_from, gitignore)
    _status(ctx, f"Comparing {dir_a} with {dir_b} ({jobs} job(s))")
    with _library_errors():
        report = diff_trees(dir_a, dir_b, jobs=jobs, compare_mode=compare_mode, exclude=excl)

    records = report.changes if changes_only else report.records

    if fmt == "json":
        _emit_json({
            "a": dir_a,
            "b": dir_b,
            "records": [
                {"path": r.path, "tag": r.tag.value,
                 "digests": list(r.digests) if r.digests else None}
                for r in records
            ],
            "counts": {tag.value: n for tag, n in report.counts().items()},
            "errors": _errors_json(report.errors),
        })
    else:
        for r in records:
            line = f"{r.tag.value} {r.path}"
            color = _TAG_COLORS[r.tag]
            click.echo(click.style(line, fg=color) if color else line)
        counts = report.counts()
        if report.identical:
            click.echo("Directories are identical.")
        else:
            click.echo(", ".join(f"{counts[t]} {t.value}" for t in DiffTag))
    _report_errors(report.errors)
    if report.errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# dupe
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", default=".", type=click.Path())
@click.option("--min-size", type=click.IntRange(min=0), default=0, show_default=True,
              help="Ignore files smaller than this many bytes.")
@click.option("--skip-hidden", is_flag=True, default=False,
              help="Leave hidden files and directories out.")
@_jobs_option
@_format_option
@_exclude_options
@click.pass_context
def dupe(ctx, directory, min_size, skip_hidden, jobs, fmt, exclude, exclude_from, gitignore):
    """Find files with identical content under DIRECTORY.

    Only files that share their size with another file are hashed.
    Groups are listed by wasted space, largest first.

    \b
    Examples:
        vasu dupe
        vasu dupe ~/Pictures -j 8 --min-size 1024
        vasu dupe . --format json
    """
    excl = _build_exclude(exclude, exclude_from, gitignore)
    _status(ctx, f"Scanning {directory} for duplicates ({jobs} job(s))")
    with _library_errors():
        report = find_duplicates(directory, jobs=jobs, include_hidden=not skip_hidden,
                                 min_size=min_size, exclude=excl)

    if fmt == "json":
        _emit_json({
            "root": directory,
            "scanned": report.scanned,
            "groups": [
                {"digest": g.digest, "size": g.size,
                 "paths": [os.fspath(p) for p in g.paths]}
                for g in report.groups
            ],
            "extra_copies": report.extra_copies,
            "wasted": report.wasted,
            "errors": _errors_json(report.errors),
        })
    elif not report.groups:
        click.echo(f"No duplicates found ({report.scanned} files scanned).")
    else:
        for g in report.groups:
            click.echo(click.style(g.digest, fg="cyan") +
                       f"  {human_size(g.size)} x {len(g.paths)}")
            for p in g.paths:
                click.echo(f"    {p}")
        click.echo(f"{len(report.groups)} group(s), {report.extra_copies} extra "
                   f"copies, {human_size(report.wasted)} wasted.")
    _report_errors(report.errors)
    if report.errors:
        ctx.exit(1)
