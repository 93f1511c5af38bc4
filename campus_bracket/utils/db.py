from typing import Any, TypeVar

from databases import Database
from sqlalchemy.sql import ClauseElement

from campus_bracket.models.db.shared import BaseModelORM

BaseModelT = TypeVar("BaseModelT", bound=BaseModelORM)


async def fetch_one_parsed(
    database: Database,
    model: type[BaseModelT],
    query: ClauseElement | str,
    values: dict[str, Any] | None = None,
) -> BaseModelT | None:
    record = await database.fetch_one(query, values=values)
    return model.model_validate(dict(record._mapping)) if record is not None else None


async def fetch_all_parsed(
    database: Database,
    model: type[BaseModelT],
    query: ClauseElement | str,
    values: dict[str, Any] | None = None,
) -> list[BaseModelT]:
    records = await database.fetch_all(query, values=values)
    return [model.model_validate(dict(record._mapping)) for record in records]
