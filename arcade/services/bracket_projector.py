from typing import Dict, List, Optional

from arcade.models.tournament_model import Match, Player, Tournament
from arcade.schemas.bracket_schemas import TBD, BracketData, BracketRound, DisplayMatch


def to_display_match(match: Match) -> DisplayMatch:
    return DisplayMatch(
        id=match.id,
        round=match.round,
        player1=match.player1.name if match.player1 else TBD,
        player2=match.player2.name if match.player2 else TBD,
        winner=match.winner.name if match.winner else None,
        score=match.score.model_copy(),
        completed=match.completed,
    )


def get_champion(tournament: Tournament) -> Optional[Player]:
    """
    The player with the most wins once the tournament is completed.

    ``max`` keeps the first of equal candidates, so ties go to whoever
    registered first.
    """
    if not tournament.completed or not tournament.players:
        return None
    return max(tournament.players, key=lambda p: p.wins)


def get_bracket_data(tournament: Tournament) -> BracketData:
    if not tournament.matches:
        return BracketData(rounds=[], completed=False, champion=None)

    matches_by_round: Dict[int, List[DisplayMatch]] = {}
    for match in tournament.matches:
        matches_by_round.setdefault(match.round, []).append(to_display_match(match))

    rounds = [
        BracketRound(round=round_number, matches=matches_by_round[round_number])
        for round_number in sorted(matches_by_round)
    ]
    return BracketData(
        rounds=rounds,
        completed=tournament.completed,
        champion=get_champion(tournament),
    )
