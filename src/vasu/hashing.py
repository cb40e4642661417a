"""Content digests: streaming file hashing and a bounded hashing pool."""

from __future__ import annotations

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Sequence

from .exceptions import EntryError

_HASH_CHUNK_SIZE = 65536

DEFAULT_ALGORITHM = "sha256"


def _hasher(algorithm: str):
    return hashlib.new(algorithm, usedforsecurity=False)


def file_digests(path: str | os.PathLike[str], algorithms: Sequence[str]) -> dict[str, str]:
    """Hash the file at *path* with every algorithm in *algorithms* in one pass.

    The file is streamed in chunks so large files are never loaded into
    memory.  Returns ``{algorithm: hexdigest}``.
    """
    hashers = {name: _hasher(name) for name in algorithms}
    with open(path, "rb") as f:
        while True:
            chunk = f.read(_HASH_CHUNK_SIZE)
            if not chunk:
                break
            for h in hashers.values():
                h.update(chunk)
    return {name: h.hexdigest() for name, h in hashers.items()}


def file_digest(path: str | os.PathLike[str], algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the hex digest of the file at *path*."""
    return file_digests(path, (algorithm,))[algorithm]


def digest_files(
    items: Iterable[tuple[str, str | os.PathLike[str]]],
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    jobs: int = 1,
    errors: list[EntryError] | None = None,
) -> dict[str, str]:
    """Hash many files, returning ``{key: hexdigest}``.

    *items* are ``(key, path)`` pairs; the key (usually a relative path)
    labels the result and any error.  With *jobs* > 1 the files are hashed
    on a thread pool of that size.  Completion order does not matter: the
    result is a mapping, and errors are appended sorted by key.
    """
    results: dict[str, str] = {}
    failed: list[EntryError] = []

    if jobs <= 1:
        for key, path in items:
            try:
                results[key] = file_digest(path, algorithm)
            except OSError as exc:
                failed.append(EntryError.from_os_error(key, exc))
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = {
                executor.submit(file_digest, path, algorithm): key
                for key, path in items
            }
            for future in as_completed(futures):
                key = futures[future]
                try:
                    results[key] = future.result()
                except OSError as exc:
                    failed.append(EntryError.from_os_error(key, exc))

    if errors is not None:
        errors.extend(sorted(failed, key=lambda e: e.path))
    return results
