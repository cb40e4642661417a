"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path

import click

from .. import __version__
from .._exclude import ExcludeFilter
from ..exceptions import EntryError, VasuError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


@contextmanager
def _library_errors():
    """Turn whole-operation :class:`VasuError` aborts into click errors (exit 1)."""
    try:
        yield
    except VasuError as exc:
        raise click.ClickException(str(exc))


def _report_errors(errors: list[EntryError], label: str = "ERROR") -> None:
    """Print per-entry errors to stderr as ``LABEL: path: message``."""
    for e in errors:
        click.echo(f"{label}: {e.path}: {e.error}", err=True)


def _confirm(ctx, message: str, yes: bool = False) -> bool:
    """Ask for confirmation unless -y was given here or on the main group."""
    if yes or ctx.obj.get("assume_yes"):
        return True
    return click.confirm(click.style(message, fg="yellow"), default=False)


def _display(path: Path, base: Path) -> str:
    """Show *path* relative to *base* when it lies below it."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return str(path)


def _emit_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


def _build_exclude(exclude, exclude_from, gitignore) -> ExcludeFilter | None:
    """Build an :class:`ExcludeFilter` from the shared exclude options, or None."""
    if not (exclude or exclude_from or gitignore):
        return None
    return ExcludeFilter(patterns=exclude, exclude_from=exclude_from, gitignore=gitignore)


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

def _yes_option(f):
    """Shared -y/--yes flag for commands that ask before deleting."""
    return click.option("-y", "--yes", is_flag=True, default=False,
                        help="Skip the confirmation prompt.")(f)


def _dry_run_option(f):
    return click.option("-n", "--dry-run", is_flag=True, default=False,
                        help="Show what would happen without changing anything.")(f)


def _jobs_option(f):
    """Shared --jobs option for commands that hash many files."""
    return click.option(
        "-j", "--jobs", type=click.IntRange(min=1), default=1, envvar="VASU_JOBS",
        show_default=True,
        help="Hash files on N worker threads (or set VASU_JOBS).",
    )(f)


def _format_option(f):
    return click.option("--format", "fmt", type=click.Choice(["text", "json"]),
                        default="text", show_default=True, help="Output format.")(f)


def _exclude_options(f):
    """Shared --exclude / --exclude-from / --gitignore options."""
    f = click.option("--gitignore", is_flag=True, default=False,
                     help="Honor .gitignore files found while walking.")(f)
    f = click.option("--exclude-from", "exclude_from", type=click.Path(exists=True),
                     help="Read exclude patterns from file.")(f)
    f = click.option("--exclude", multiple=True,
                     help="Exclude entries matching pattern (gitignore syntax, repeatable).")(f)
    return f


# ---------------------------------------------------------------------------
# Banner
# ---------------------------------------------------------------------------

_LOGO = r"""
  ██╗   ██╗ █████╗ ███████╗██╗   ██╗
  ██║   ██║██╔══██╗██╔════╝██║   ██║
  ██║   ██║███████║███████╗██║   ██║
  ╚██╗ ██╔╝██╔══██║╚════██║██║   ██║
   ╚████╔╝ ██║  ██║███████║╚██████╔╝
    ╚═══╝  ╚═╝  ╚═╝╚══════╝ ╚═════╝"""

_COMMANDS = (
    ("vasu", "Show this banner"),
    ("vasu del .git vasu", "Delete everything EXCEPT listed items"),
    ("vasu cp src/ dst/", "Deep-copy (hidden files, perms, symlinks)"),
    ("vasu cb '*'", "Copy ALL file contents to clipboard (recursive)"),
    ("vasu cb f1 f2 dir/", "Copy specific files/globs to clipboard"),
    ("vasu tree", "Pretty directory tree"),
    ("vasu find '*.py'", "Find files by name pattern"),
    ("vasu size", "Disk usage per item, sorted"),
    ("vasu clean", "Remove build artifacts & junk"),
    ("vasu zip src/", "Zip a file/folder"),
    ("vasu unzip f.zip", "Unzip an archive"),
    ("vasu rename p r", "Bulk rename files"),
    ("vasu count", "Count files & lines of code"),
    ("vasu hash file", "Show MD5/SHA256"),
    ("vasu backup", "Timestamped zip backup"),
    ("vasu env [filter]", "Print env vars"),
    ("vasu http [port]", "Quick HTTP file server"),
    ("vasu diff a/ b/", "Compare two directories"),
    ("vasu dupe", "Find duplicate files"),
)


def _show_banner():
    click.echo(click.style(_LOGO, fg="cyan", bold=True))
    click.echo(f"  {click.style(f'v{__version__}', fg='green', bold=True)}\n")
    click.echo(f"  {click.style('COMMAND', bold=True, underline=True):<32} "
               f"{click.style('DESCRIPTION', bold=True, underline=True)}")
    for cmd, desc in _COMMANDS:
        click.echo(f"  {click.style(f'{cmd:<24}', fg='yellow')} {desc}")
    click.echo(f"\n  Run {click.style('vasu <command> --help', fg='cyan')} for details\n")


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.option("-y", "--yes", "assume_yes", is_flag=True, envvar="VASU_YES",
              help="Answer yes to every confirmation (or set VASU_YES=1).")
@click.version_option(__version__, prog_name="vasu")
@click.pass_context
def main(ctx, verbose, assume_yes):
    """vasu: a personal power toolkit of everyday filesystem commands.

    \b
    Common workflows:
      cp / diff / dupe        Copy, compare, and deduplicate trees
      tree / find / size      Look around a directory
      count / hash / env      Quick facts about files and the environment
      del / clean / rename    Tidy up (asks before deleting)
      zip / unzip / backup    Archives
      cb / http               Share files via clipboard or HTTP

    Run without a command to see the banner.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["assume_yes"] = assume_yes
    if ctx.invoked_subcommand is None:
        _show_banner()
