from heliclockter import datetime_utc

from campus_bracket.database import database
from campus_bracket.models.db.settings import DEFAULT_TOURNAMENT_SETTINGS, TournamentSettings
from campus_bracket.utils.db import fetch_one_parsed
from campus_bracket.utils.id_types import TournamentId


async def load_settings(tournament_id: TournamentId) -> TournamentSettings:
    """
    Settings of a tournament, or the defaults when no settings row was ever written.

    A missing row is a product default. A missing table is not, the storage error is left to
    propagate so the caller reports it as a misconfiguration.
    """
    query = """
        SELECT team_limit, match_best_of, final_best_of
        FROM tournament_settings
        WHERE tournament_id = :tournament_id
        LIMIT 1
        """
    settings = await fetch_one_parsed(
        database, TournamentSettings, query, values={"tournament_id": tournament_id}
    )
    return settings if settings is not None else DEFAULT_TOURNAMENT_SETTINGS


async def sql_upsert_settings(
    tournament_id: TournamentId, settings: TournamentSettings, updated: datetime_utc
) -> None:
    query = """
        INSERT INTO tournament_settings (
            tournament_id,
            team_limit,
            match_best_of,
            final_best_of,
            updated
        )
        VALUES (
            :tournament_id,
            :team_limit,
            :match_best_of,
            :final_best_of,
            :updated
        )
        ON CONFLICT (tournament_id) DO UPDATE SET
            team_limit = EXCLUDED.team_limit,
            match_best_of = EXCLUDED.match_best_of,
            final_best_of = EXCLUDED.final_best_of,
            updated = EXCLUDED.updated
        """
    await database.execute(
        query=query,
        values={"tournament_id": tournament_id, "updated": updated, **settings.model_dump()},
    )
