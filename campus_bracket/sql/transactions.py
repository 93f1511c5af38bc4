from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from campus_bracket.config import config
from campus_bracket.database import database
from campus_bracket.sql.capabilities import schema_capabilities
from campus_bracket.utils.errors import (
    Conflict,
    MissingTableError,
    TournamentEngineError,
    TransactionRetryError,
    UnexpectedStorageError,
    get_missing_table_name,
    is_serialization_failure,
    is_unique_violation,
)
from campus_bracket.utils.logging import logger

T = TypeVar("T")


def map_storage_error(exc: Exception, fallback_message: str) -> TournamentEngineError:
    if (table_name := get_missing_table_name(exc)) is not None:
        schema_capabilities.invalidate()
        logger.error("Table %s is missing, database migrations have not been run", table_name)
        return MissingTableError(table_name)

    if is_unique_violation(exc):
        return Conflict("Tournament operation conflicts with existing data.")

    logger.exception(f"{fallback_message} Unexpected storage error: {exc}")
    return UnexpectedStorageError(fallback_message)


async def run_serializable(
    operation: Callable[[], Awaitable[T]],
    *,
    fallback_message: str,
    required_tables: Sequence[str] = (),
    retries: int | None = None,
) -> T:
    """
    Run `operation` in one serializable transaction.

    A serialization failure rolls the transaction back and re-runs the whole operation from
    scratch, at most `retries` more times. Engine errors raised by the operation pass through
    untouched, any other storage error is mapped by `map_storage_error`.
    """
    await schema_capabilities.require_tables(*required_tables)
    max_retries = config.serializable_retries if retries is None else retries

    for attempt in range(max_retries + 1):
        try:
            async with database.transaction(isolation="serializable"):
                return await operation()
        except TournamentEngineError:
            raise
        except Exception as exc:
            if not is_serialization_failure(exc):
                raise map_storage_error(exc, fallback_message) from exc

            if attempt < max_retries:
                logger.warning(
                    "Serialization failure, retrying transaction: attempt=%s max_retries=%s",
                    attempt + 1,
                    max_retries,
                )
                continue

            logger.error(f"{fallback_message} Transaction failed after {max_retries} retries")
            raise TransactionRetryError("Transaction failed after retries.") from exc

    raise TransactionRetryError("Transaction failed after retries.")
