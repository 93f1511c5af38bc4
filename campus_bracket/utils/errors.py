import re
import sqlite3
from enum import auto
from typing import ClassVar

from fastapi import HTTPException
from starlette import status

from campus_bracket.utils.types import EnumAutoStr

SERIALIZATION_FAILURE_SQLSTATES = frozenset({"40001", "40P01"})
UNDEFINED_TABLE_SQLSTATE = "42P01"
UNIQUE_VIOLATION_SQLSTATE = "23505"

_MISSING_TABLE_PATTERN = re.compile(r'(?:relation "|no such table: )(?:\w+\.)?(\w+)')


class ErrorKind(EnumAutoStr):
    VALIDATION = auto()
    PERMISSION = auto()
    NOT_FOUND = auto()
    CONFLICT = auto()
    INTEGRITY = auto()
    TRANSIENT = auto()
    MISCONFIGURED = auto()
    INTERNAL = auto()


STATUS_CODE_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PERMISSION: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTEGRITY: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.TRANSIENT: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.MISCONFIGURED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class TournamentEngineError(HTTPException):
    """
    Failure of a bracket engine operation.

    The HTTP status code is derived from `kind`, so the route layer can hand the exception to
    FastAPI unchanged.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=STATUS_CODE_BY_KIND[self.kind], detail=detail)

    @property
    def is_fatal(self) -> bool:
        return self.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationFailed(TournamentEngineError):
    kind = ErrorKind.VALIDATION


class PermissionDenied(TournamentEngineError):
    kind = ErrorKind.PERMISSION


class NotFound(TournamentEngineError):
    kind = ErrorKind.NOT_FOUND


class Conflict(TournamentEngineError):
    kind = ErrorKind.CONFLICT


class BracketIntegrityError(TournamentEngineError):
    kind = ErrorKind.INTEGRITY


class TransactionRetryError(TournamentEngineError):
    kind = ErrorKind.TRANSIENT


class MissingTableError(TournamentEngineError):
    kind = ErrorKind.MISCONFIGURED

    def __init__(self, table_name: str) -> None:
        label = table_name.removeprefix("tournament_").replace("_", " ")
        super().__init__(f"Tournament {label} table is missing. Run database migrations.")
        self.table_name = table_name


class UnexpectedStorageError(TournamentEngineError):
    kind = ErrorKind.INTERNAL


class SlugGenerationError(TournamentEngineError):
    kind = ErrorKind.INTERNAL


def get_sqlstate(exc: BaseException) -> str | None:
    sqlstate = getattr(exc, "sqlstate", None)
    return sqlstate if isinstance(sqlstate, str) else None


def is_serialization_failure(exc: BaseException) -> bool:
    if get_sqlstate(exc) in SERIALIZATION_FAILURE_SQLSTATES:
        return True
    return isinstance(exc, sqlite3.OperationalError) and "database is locked" in str(exc)


def get_missing_table_name(exc: BaseException) -> str | None:
    is_undefined_table = get_sqlstate(exc) == UNDEFINED_TABLE_SQLSTATE or (
        isinstance(exc, sqlite3.OperationalError) and "no such table" in str(exc)
    )
    if not is_undefined_table:
        return None

    match = _MISSING_TABLE_PATTERN.search(str(exc))
    return match.group(1) if match is not None else "unknown"


def is_unique_violation(exc: BaseException) -> bool:
    if get_sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return isinstance(exc, sqlite3.IntegrityError) and "UNIQUE constraint failed" in str(exc)
