from threading import Lock

from campus_bracket.database import database
from campus_bracket.utils.errors import MissingTableError, get_missing_table_name
from campus_bracket.utils.logging import logger

SETTINGS_TABLE = "tournament_settings"
JOIN_REQUESTS_TABLE = "tournament_join_requests"
AUXILIARY_TABLES = frozenset({SETTINGS_TABLE, JOIN_REQUESTS_TABLE})


class SchemaCapabilities:
    """
    Process-wide record of which auxiliary tables have been provisioned.

    Only positive probes are cached, so a deployment that runs its migrations later is picked
    up without a restart. `invalidate` is called whenever a query reports an undefined table.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._known_tables: set[str] = set()

    def is_known(self, table_name: str) -> bool:
        with self._lock:
            return table_name in self._known_tables

    def remember(self, table_name: str) -> None:
        with self._lock:
            self._known_tables.add(table_name)

    def invalidate(self) -> None:
        with self._lock:
            self._known_tables.clear()

    async def has_table(self, table_name: str) -> bool:
        assert table_name in AUXILIARY_TABLES, f"Not an auxiliary table: {table_name}"
        if self.is_known(table_name):
            return True

        exists = await _probe_table(table_name)
        if exists:
            self.remember(table_name)
        return exists

    async def require_tables(self, *table_names: str) -> None:
        for table_name in table_names:
            if not await self.has_table(table_name):
                logger.error(
                    "Table %s is missing, database migrations have not been run", table_name
                )
                raise MissingTableError(table_name)


async def _probe_table(table_name: str) -> bool:
    try:
        await database.fetch_val(f"SELECT COUNT(*) FROM {table_name} WHERE 1 = 0")
    except Exception as exc:
        if get_missing_table_name(exc) is None:
            raise
        return False
    return True


schema_capabilities = SchemaCapabilities()
