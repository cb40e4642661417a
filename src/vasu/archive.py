"""Zip archives: create from a file or tree, extract safely, timestamped backups."""

from __future__ import annotations

import datetime
import os
import shutil
import stat
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .exceptions import EntryError, ErrorKind, IoFailureError, NotFoundError, error_from_os
from .walk import walk

_S_IFLNK = 0o120000


@dataclass
class ArchiveReport:
    """Result of :func:`zip_path` or :func:`extract_archive`.

    Attributes:
        archive: Path of the archive written or read.
        files: Number of files and symlinks stored or extracted.
        errors: Entries that could not be read or written.
    """
    archive: Path
    files: int = 0
    errors: list[EntryError] = field(default_factory=list)


def default_archive_name(source: str | os.PathLike[str]) -> str:
    """``<name>.zip`` for *source*; ``.`` and other relative roots use the resolved name."""
    return f"{Path(source).resolve().name or 'archive'}.zip"


def backup_name(source: str | os.PathLike[str], now: datetime.datetime | None = None) -> str:
    """``<name>_<YYYYmmdd_HHMMSS>.zip`` for *source*."""
    now = now or datetime.datetime.now()
    name = Path(source).resolve().name or "backup"
    return f"{name}_{now.strftime('%Y%m%d_%H%M%S')}.zip"


def _link_info(arcname: str, target: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(arcname)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = 3  # Unix
    info.external_attr = (_S_IFLNK | 0o777) << 16
    return info


def zip_path(source: str | os.PathLike[str], output: str | os.PathLike[str]) -> ArchiveReport:
    """Deflate *source* (a file or directory tree) into the zip file *output*.

    Entry names are relative to the source's parent, so a directory
    ``proj`` archives as ``proj/...``.  Hidden entries are included,
    permission bits are kept, and symlinks are stored as links.  Entries
    that cannot be read are reported and skipped.
    """
    src = Path(source)
    out = Path(output)
    if not os.path.lexists(src):
        raise NotFoundError(f"Source not found: {src}", path=str(src))
    base_name = src.resolve().name
    out_resolved = out.resolve()
    report = ArchiveReport(archive=out)

    try:
        zf = zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED, strict_timestamps=False)
    except OSError as exc:
        raise error_from_os(exc, f"Cannot create {out}", path=str(out))

    with zf:
        if not src.is_dir() or src.is_symlink():
            if src.is_symlink():
                zf.writestr(_link_info(src.name, os.readlink(src)), os.readlink(src))
            else:
                zf.write(src, src.name)
            report.files = 1
            return report

        for entry in walk(src, include_hidden=True, errors=report.errors):
            if entry.path.resolve() == out_resolved:
                continue
            arcname = f"{base_name}/{entry.relative}"
            try:
                if entry.is_symlink:
                    target = os.readlink(entry.path)
                    zf.writestr(_link_info(arcname, target), target)
                    report.files += 1
                else:
                    zf.write(entry.path, arcname)
                    if entry.is_file:
                        report.files += 1
            except OSError as exc:
                report.errors.append(EntryError.from_os_error(entry.relative, exc))
    return report


def _safe_target(root: Path, name: str) -> Path | None:
    """Map archive member *name* under *root*, or None if it would escape."""
    posix = PurePosixPath(name.replace("\\", "/"))
    if posix.is_absolute() or ".." in posix.parts or ":" in (posix.parts[0] if posix.parts else ""):
        return None
    parts = [p for p in posix.parts if p not in ("", ".")]
    if not parts:
        return None
    target = root.joinpath(*parts)
    try:
        target.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    return target


def extract_archive(archive: str | os.PathLike[str],
                    destination: str | os.PathLike[str]) -> ArchiveReport:
    """Extract the zip file *archive* into *destination*.

    Members whose names would land outside *destination* (absolute paths,
    ``..`` segments, or paths through an extracted symlink) are reported
    and skipped.  Unix permission bits and symlinks are restored.
    """
    src = Path(archive)
    if not src.exists():
        raise NotFoundError(f"Archive not found: {src}", path=str(src))
    if not zipfile.is_zipfile(src):
        raise IoFailureError(f"Not a valid zip file: {src}", path=str(src))
    root = Path(destination)
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise error_from_os(exc, f"Cannot create {root}", path=str(root))

    report = ArchiveReport(archive=src)
    with zipfile.ZipFile(src, "r") as zf:
        for info in zf.infolist():
            target = _safe_target(root, info.filename)
            if target is None:
                report.errors.append(EntryError(
                    path=info.filename, error="path escapes the destination",
                    kind=ErrorKind.PERMISSION_DENIED,
                ))
                continue
            unix_mode = info.external_attr >> 16
            try:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                if os.path.lexists(target) and not target.is_dir():
                    target.unlink()
                if stat.S_ISLNK(unix_mode):
                    os.symlink(zf.read(info).decode(), target)
                else:
                    with zf.open(info) as fin, open(target, "wb") as fout:
                        shutil.copyfileobj(fin, fout)
                    if unix_mode & 0o777:
                        os.chmod(target, stat.S_IMODE(unix_mode))
                report.files += 1
            except OSError as exc:
                report.errors.append(EntryError.from_os_error(info.filename, exc))
    return report


def backup(source: str | os.PathLike[str], dest_dir: str | os.PathLike[str],
           now: datetime.datetime | None = None) -> ArchiveReport:
    """Zip *source* into *dest_dir* under a timestamped name."""
    dest = Path(dest_dir)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise error_from_os(exc, f"Cannot create {dest}", path=str(dest))
    return zip_path(source, dest / backup_name(source, now))
