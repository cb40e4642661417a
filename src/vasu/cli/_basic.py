"""Basic commands: tree, find, size, count, hash, env."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import click

from .._glob import compile_pattern
from ..exceptions import EntryError
from ..hashing import file_digests
from ..stats import count_lines, human_size, item_sizes
from ..tree import render_tree
from ..walk import check_root, walk
from ._helpers import (
    main,
    _emit_json,
    _format_option,
    _library_errors,
    _report_errors,
)


# ---------------------------------------------------------------------------
# tree
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", default=".", type=click.Path())
@click.option("-d", "--depth", type=click.IntRange(min=1), default=4, show_default=True,
              help="Number of levels to draw.")
@click.option("-a", "--all", "show_all", is_flag=True, default=False,
              help="Show hidden files and directories.")
@click.pass_context
def tree(ctx, directory, depth, show_all):
    """Draw DIRECTORY as a tree, directories first."""
    errors: list[EntryError] = []
    with _library_errors():
        root = check_root(directory)
        lines = list(render_tree(root, levels=depth, include_hidden=show_all, errors=errors))

    click.echo(click.style(str(root), fg="cyan", bold=True))
    n_dirs = n_files = 0
    for line in lines:
        if line.is_dir:
            n_dirs += 1
            name = click.style(f"{line.name}/", fg="blue", bold=True)
        elif line.link_target is not None:
            n_files += 1
            name = click.style(line.name, fg="magenta") + f" -> {line.link_target}"
        else:
            n_files += 1
            name = line.name
            if line.size is not None:
                name += click.style(f" ({human_size(line.size)})", dim=True)
        click.echo(f"{line.prefix}{name}")
    click.echo(f"\n{n_dirs} directories, {n_files} files")
    _report_errors(errors)
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# find
# ---------------------------------------------------------------------------

@main.command()
@click.argument("pattern")
@click.argument("directory", default=".", type=click.Path())
@click.option("-t", "--type", "entry_type", type=click.Choice(["f", "d", "all"]),
              default="all", show_default=True, help="Only files (f) or directories (d).")
@click.option("-d", "--depth", type=click.IntRange(min=1), default=None,
              help="Descend at most this many levels.")
@_format_option
@click.pass_context
def find(ctx, pattern, directory, entry_type, depth, fmt):
    """Find entries under DIRECTORY whose name matches PATTERN.

    Matching ignores case.  '*' matches any run of characters; a pattern
    without '*' matches any name that contains it.

    \b
    Examples:
        vasu find '*.py'
        vasu find readme ~/src -t f
        vasu find 'test_*' -t d --format json
    """
    matches = compile_pattern(pattern)
    errors: list[EntryError] = []
    found = []
    with _library_errors():
        for entry in walk(directory, include_hidden=True, match=matches,
                          max_depth=None if depth is None else depth - 1, errors=errors):
            if entry_type == "f" and entry.is_dir:
                continue
            if entry_type == "d" and not entry.is_dir:
                continue
            found.append(entry)

    if fmt == "json":
        _emit_json([
            {"path": e.relative, "type": e.kind.value, "size": e.size}
            for e in found
        ])
    elif not found:
        click.echo(f"No matches for '{pattern}'.")
    else:
        for e in found:
            if e.is_dir:
                click.echo(click.style(f"{e.relative}/", fg="blue", bold=True))
            else:
                click.echo(e.relative)
        click.echo(f"\n{len(found)} match(es)")
    _report_errors(errors)
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# size
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", default=".", type=click.Path())
@click.option("-n", "--top", type=click.IntRange(min=1), default=20, show_default=True,
              help="Number of items to show.")
@click.pass_context
def size(ctx, directory, top):
    """Show the largest items directly inside DIRECTORY."""
    errors: list[EntryError] = []
    with _library_errors():
        items = item_sizes(directory, errors)

    total = sum(i.size for i in items)
    click.echo(click.style(f"{'SIZE':>10}  ITEM", bold=True))
    for item in items[:top]:
        name = f"{item.path.name}/" if item.is_dir else item.path.name
        click.echo(f"{human_size(item.size):>10}  {name}")
    if len(items) > top:
        click.echo(f"{'':>10}  ... and {len(items) - top} more")
    click.echo(click.style(f"{human_size(total):>10}  total", bold=True))
    _report_errors(errors)
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# count
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", default=".", type=click.Path())
@click.option("-e", "--ext", "extensions", multiple=True,
              help="Only count this extension (repeatable, e.g. -e py -e rs).")
@click.pass_context
def count(ctx, directory, extensions):
    """Count files and lines per extension under DIRECTORY."""
    errors: list[EntryError] = []
    with _library_errors():
        rows = count_lines(directory, list(extensions), errors)

    if not rows:
        click.echo("No files found.")
    else:
        click.echo(click.style(f"{'EXTENSION':<14}{'FILES':>8}{'LINES':>12}", bold=True))
        for row in rows:
            click.echo(f"{row.extension:<14}{row.files:>8}{row.lines:>12}")
        total_files = sum(r.files for r in rows)
        total_lines = sum(r.lines for r in rows)
        click.echo(click.style(f"{'TOTAL':<14}{total_files:>8}{total_lines:>12}", bold=True))
    _report_errors(errors)
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# hash
# ---------------------------------------------------------------------------

@main.command("hash")
@click.argument("file", type=click.Path())
@click.option("-a", "--algorithm", "algorithms", multiple=True,
              type=click.Choice(sorted(hashlib.algorithms_guaranteed)),
              help="Digest to compute (repeatable; default md5 and sha256).")
@_format_option
def hash_(file, algorithms, fmt):
    """Show the size and MD5/SHA-256 digests of FILE."""
    p = Path(file)
    if not p.is_file():
        raise click.ClickException(f"Not a file: {file}")
    algorithms = algorithms or ("md5", "sha256")
    try:
        size_bytes = p.stat().st_size
        digests = file_digests(p, algorithms)
    except OSError as exc:
        raise click.ClickException(f"Cannot read {file}: {exc.strerror or exc}")

    if fmt == "json":
        _emit_json({"path": file, "size": size_bytes, **digests})
        return
    click.echo(f"{'File:':<8} {file}")
    click.echo(f"{'Size:':<8} {human_size(size_bytes)} ({size_bytes} bytes)")
    for name, digest in digests.items():
        click.echo(f"{name.upper() + ':':<8} {digest}")


# ---------------------------------------------------------------------------
# env
# ---------------------------------------------------------------------------

@main.command()
@click.argument("filter_text", metavar="[FILTER]", default="")
def env(filter_text):
    """Print environment variables, optionally only those containing FILTER.

    The filter is matched case-insensitively against names and values.
    """
    needle = filter_text.lower()
    for key in sorted(os.environ):
        value = os.environ[key]
        if needle and needle not in key.lower() and needle not in value.lower():
            continue
        click.echo(f"{click.style(key, fg='green')}={value}")
