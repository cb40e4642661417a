"""Exceptions and per-entry error records for vasu."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Kind of a failure: ``NOT_FOUND``, ``PERMISSION_DENIED``, ``CONFLICT``, ``IO_FAILURE``."""
    NOT_FOUND = "not-found"
    PERMISSION_DENIED = "permission-denied"
    CONFLICT = "conflict"
    IO_FAILURE = "io-failure"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @classmethod
    def from_os_error(cls, exc: OSError) -> ErrorKind:
        """Map an :class:`OSError` subclass to an :class:`ErrorKind`."""
        if isinstance(exc, FileNotFoundError):
            return cls.NOT_FOUND
        if isinstance(exc, PermissionError):
            return cls.PERMISSION_DENIED
        if isinstance(exc, FileExistsError):
            return cls.CONFLICT
        return cls.IO_FAILURE


@dataclass(frozen=True)
class EntryError:
    """A single entry that failed during an operation.

    Attributes:
        path: The path that caused the error (relative where the operation
            has a root, absolute otherwise).
        error: Human-readable error message.
        kind: :class:`ErrorKind` of the failure.
    """
    path: str
    error: str
    kind: ErrorKind = ErrorKind.IO_FAILURE

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> EntryError:
        """Build an EntryError from a caught :class:`OSError`."""
        return cls(path=path, error=exc.strerror or str(exc),
                   kind=ErrorKind.from_os_error(exc))


class VasuError(Exception):
    """Base class for errors that abort a whole operation."""

    kind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(VasuError):
    """Raised when a root path given to an operation does not exist."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(VasuError):
    """Raised when a root path cannot be read or a destination root cannot be written."""

    kind = ErrorKind.PERMISSION_DENIED


class ConflictError(VasuError):
    """Raised when an operation would replace something it must not."""

    kind = ErrorKind.CONFLICT


class IoFailureError(VasuError):
    """Raised for any other whole-operation I/O failure."""

    kind = ErrorKind.IO_FAILURE


def error_from_os(exc: OSError, message: str, path: str | None = None) -> VasuError:
    """Wrap *exc* in the :class:`VasuError` subclass matching its kind."""
    cls = {
        ErrorKind.NOT_FOUND: NotFoundError,
        ErrorKind.PERMISSION_DENIED: PermissionDeniedError,
        ErrorKind.CONFLICT: ConflictError,
    }.get(ErrorKind.from_os_error(exc), IoFailureError)
    return cls(f"{message}: {exc.strerror or exc}", path=path)
