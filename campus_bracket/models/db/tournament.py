from enum import auto
from typing import Annotated

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, StringConstraints, model_validator

from campus_bracket.models.db.settings import (
    MAX_TEAM_LIMIT,
    MIN_TEAM_LIMIT,
    FinalBestOf,
    MatchBestOf,
    TournamentSettingsBody,
)
from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import TeamId, TournamentId
from campus_bracket.utils.types import EnumAutoStr

TournamentTitle = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=80)
]
Headliner = Annotated[str, StringConstraints(strip_whitespace=True, max_length=120)]


class TournamentStatus(EnumAutoStr):
    DRAFT = auto()
    ACTIVE = auto()
    FINISHED = auto()


class TournamentFormat(EnumAutoStr):
    SINGLE_ELIMINATION = auto()


class TournamentInsertable(BaseModelORM):
    title: str
    slug: str
    format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION
    status: TournamentStatus = TournamentStatus.DRAFT
    start_date: datetime_utc
    end_date: datetime_utc | None = None
    headliner: str | None = None
    created: datetime_utc


class Tournament(TournamentInsertable):
    id: TournamentId
    champion_team_id: TeamId | None = None
    seeded_at: datetime_utc | None = None
    finished_at: datetime_utc | None = None


class TournamentCreateBody(TournamentSettingsBody):
    title: TournamentTitle
    start_date: datetime_utc
    end_date: datetime_utc | None = None
    headliner: Headliner | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "TournamentCreateBody":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must be after start date.")
        return self


class TournamentUpdateBody(BaseModel):
    """
    Partial update of a tournament and its settings.

    Fields that are left out are kept as they are. `end_date` and `headliner` can be cleared by
    sending an explicit null.
    """

    title: TournamentTitle | None = None
    start_date: datetime_utc | None = None
    end_date: datetime_utc | None = None
    headliner: Headliner | None = None
    team_limit: int | None = Field(default=None, ge=MIN_TEAM_LIMIT, le=MAX_TEAM_LIMIT)
    match_best_of: MatchBestOf | None = None
    final_best_of: FinalBestOf | None = None

    @model_validator(mode="after")
    def check_any_field_set(self) -> "TournamentUpdateBody":
        if len(self.model_fields_set) < 1:
            raise ValueError("Provide at least one field to update.")
        return self

    def has_field(self, name: str) -> bool:
        return name in self.model_fields_set
