import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

from alembic import command
from campus_bracket.config import config
from campus_bracket.utils.logging import logger

PROJECT_ROOT = Path(__file__).resolve().parents[2]
MIGRATION_LOCK_PATH = Path("/tmp/campus-bracket-alembic.lock")


@contextmanager
def migration_lock() -> Iterator[None]:
    # Workers booting together must not run migrations concurrently.
    with MIGRATION_LOCK_PATH.open("w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config() -> Config:
    alembic_config = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return alembic_config


def get_head_revision() -> str | None:
    return ScriptDirectory.from_config(get_alembic_config()).get_current_head()


def get_current_revision() -> str | None:
    engine = create_engine(config.db_dsn)
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()


def alembic_run_migrations(revision: str = "head") -> None:
    """
    Upgrade the schema to `revision`, skipping the upgrade when the database is already at head.

    The bracket engine refuses roster and seeding operations while its tables are missing, so
    deployments that cannot run `alembic upgrade` by hand enable this on startup instead.
    """
    with migration_lock():
        current_revision = get_current_revision()
        if revision == "head" and current_revision == get_head_revision():
            logger.info("Database schema is up to date at revision %s", current_revision)
            return

        logger.info("Migrating database schema from %s to %s", current_revision, revision)
        command.upgrade(get_alembic_config(), revision)
