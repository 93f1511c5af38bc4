import sqlite3

import sqlalchemy
from databases import Database
from heliclockter import datetime_utc

from campus_bracket.config import config


def _adapt_datetime_utc(value: datetime_utc) -> str:
    return value.isoformat(" ")


# sqlite3 looks adapters up by exact type, so the datetime subclass needs its own entry.
sqlite3.register_adapter(datetime_utc, _adapt_datetime_utc)

database = Database(config.db_dsn)


def create_sync_engine() -> sqlalchemy.Engine:
    return sqlalchemy.create_engine(config.db_dsn)
