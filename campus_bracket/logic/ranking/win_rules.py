from campus_bracket.models.db.match import Match, MatchResultBody
from campus_bracket.models.db.settings import TournamentSettings
from campus_bracket.utils.errors import ValidationFailed


def get_best_of(settings: TournamentSettings, matches_in_round: int) -> int:
    # A round with a single match is the final.
    return settings.final_best_of if matches_in_round == 1 else settings.match_best_of


def get_required_wins(best_of: int) -> int:
    return best_of // 2 + 1


def validate_match_result(match: Match, body: MatchResultBody, best_of: int) -> None:
    """
    Check a submitted result against the teams of the match and the best-of rule.

    Scores are optional, but when given the winner must have exactly the required number of
    wins, the loser fewer, and the score must agree with the declared winner.
    """
    has_home_score = body.home_score is not None
    has_away_score = body.away_score is not None
    if has_home_score != has_away_score:
        raise ValidationFailed("Provide both homeScore and awayScore together.")

    if body.home_score is not None and body.away_score is not None:
        required_wins = get_required_wins(best_of)
        if body.home_score == body.away_score:
            raise ValidationFailed("Draw scores are not allowed in single elimination.")

        if max(body.home_score, body.away_score) != required_wins:
            raise ValidationFailed(
                f"For BO{best_of}, winner score must be exactly {required_wins}."
            )

        if min(body.home_score, body.away_score) >= required_wins:
            raise ValidationFailed(
                f"For BO{best_of}, loser score must be less than {required_wins}."
            )

    if body.winner_team_id not in (match.home_team_id, match.away_team_id):
        raise ValidationFailed("Winner must be one of the teams in this match.")

    if body.home_score is not None and body.away_score is not None:
        winner_by_score = (
            match.home_team_id if body.home_score > body.away_score else match.away_team_id
        )
        if winner_by_score != body.winner_team_id:
            raise ValidationFailed("Winner does not match the submitted score.")
