from .exceptions import (
    EntryError, ErrorKind, VasuError,
    NotFoundError, PermissionDeniedError, ConflictError, IoFailureError,
)
from .walk import Entry, EntryKind, walk, index_tree
from .hashing import file_digest, file_digests, digest_files
from .copy import CopyReport, copy_tree
from .diff import DiffRecord, DiffReport, DiffTag, diff_trees
from .dedup import DedupReport, DuplicateGroup, find_duplicates
from ._exclude import ExcludeFilter
from ._glob import compile_pattern

__version__ = "0.3.0"

__all__ = [
    "EntryError", "ErrorKind", "VasuError",
    "NotFoundError", "PermissionDeniedError", "ConflictError", "IoFailureError",
    "Entry", "EntryKind", "walk", "index_tree",
    "file_digest", "file_digests", "digest_files",
    "CopyReport", "copy_tree",
    "DiffRecord", "DiffReport", "DiffTag", "diff_trees",
    "DedupReport", "DuplicateGroup", "find_duplicates",
    "ExcludeFilter", "compile_pattern",
]
