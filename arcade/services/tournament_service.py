import logging
import random
from datetime import datetime, timezone
from typing import List, Optional

from arcade.core.exceptions import (
    AlreadyStarted,
    DuplicateName,
    EmptyName,
    InvalidScore,
    MatchNotFound,
    NoActiveMatch,
    NotEnoughPlayers,
    PlayerNotFound,
    TournamentAlreadyStarted,
)
from arcade.models.tournament_model import Match, Player, Tournament, TournamentState
from arcade.schemas.bracket_schemas import BracketData
from arcade.services import bracket_projector
from arcade.services.bracket_builder import BracketBuilder

logger = logging.getLogger(__name__)


class TournamentService:
    """
    Owns one single elimination tournament and drives it from registration
    to a champion.

    Every mutating call validates first and writes after, so a failed call
    leaves the tournament untouched. Calls are not synchronised: callers must
    not run two mutations against the same service concurrently.
    """

    def __init__(self, tournament: Optional[Tournament] = None, rng: Optional[random.Random] = None):
        self.tournament = tournament or Tournament()
        self.builder = BracketBuilder(rng=rng)

    # --- State ---

    @property
    def state(self) -> TournamentState:
        return self.tournament.state

    @property
    def players(self) -> List[Player]:
        return self.tournament.players

    @property
    def matches(self) -> List[Match]:
        return self.tournament.matches

    @property
    def current_match(self) -> Optional[Match]:
        if self.tournament.state != TournamentState.IN_PROGRESS:
            return None
        return self.tournament.matches[self.tournament.current_match_index]

    def reset(self) -> Tournament:
        """Discard the current tournament and start a fresh, empty one."""
        self.tournament = Tournament()
        return self.tournament

    # --- Roster ---

    def add_player(self, name: str, user_id: Optional[str] = None) -> Player:
        if not isinstance(name, str) or not name.strip():
            raise EmptyName()
        name = name.strip()
        if self.tournament.matches:
            raise TournamentAlreadyStarted()
        if any(p.name.lower() == name.lower() for p in self.tournament.players):
            raise DuplicateName(name)

        player = Player(name=name, user_id=user_id)
        self.tournament.players.append(player)
        logger.debug("Added player %s (%s) to tournament %s", player.name, player.id, self.tournament.id)
        return player

    def remove_player(self, player_id: str) -> None:
        if self.tournament.matches:
            raise TournamentAlreadyStarted()

        for i, player in enumerate(self.tournament.players):
            if player.id == player_id:
                del self.tournament.players[i]
                return
        raise PlayerNotFound(player_id)

    # --- Progression ---

    def start(self) -> Match:
        if len(self.tournament.players) < 2:
            raise NotEnoughPlayers(len(self.tournament.players))
        if self.tournament.matches:
            raise AlreadyStarted()

        matches = self.builder.build(self.tournament.players)

        self.tournament.matches = matches
        self.tournament.start_date = datetime.now(timezone.utc)
        self.tournament.current_match_index = 0
        self.tournament.state = TournamentState.IN_PROGRESS
        logger.info(
            "Tournament %s started: %d players, %d matches",
            self.tournament.id, len(self.tournament.players), len(matches),
        )
        return matches[0]

    def record_match_result(self, score1: int, score2: int) -> Optional[Match]:
        """
        Records the score of the current match and moves on.

        Returns the next playable match, or ``None`` when no playable match is
        left and the tournament is completed.
        """
        tournament = self.tournament
        if tournament.state != TournamentState.IN_PROGRESS or not tournament.matches:
            raise NoActiveMatch()
        if not 0 <= tournament.current_match_index < len(tournament.matches):
            raise NoActiveMatch()

        match = tournament.matches[tournament.current_match_index]
        if not match.is_playable:
            raise NoActiveMatch()
        if score1 < 0 or score2 < 0:
            raise InvalidScore(score1, score2, reason="Scores cannot be negative")
        if score1 == score2:
            raise InvalidScore(score1, score2)

        next_match = None
        if match.next_match_id is not None:
            next_match = self._resolve_next_match(match)

        if score1 > score2:
            winner, loser = match.player1, match.player2
        else:
            winner, loser = match.player2, match.player1

        match.score.player1 = score1
        match.score.player2 = score2
        match.winner = winner
        match.loser = loser
        match.completed = True

        winner.wins += 1
        loser.losses += 1

        if next_match is not None:
            if next_match.player1 is None:
                next_match.player1 = winner
            else:
                next_match.player2 = winner

        logger.info("%s: %s beat %s %d-%d", match.id, winner.name, loser.name, score1, score2)
        return self._advance()

    def _resolve_next_match(self, match: Match) -> Match:
        index = match.next_match_index
        matches = self.tournament.matches
        if index is None or not 0 <= index < len(matches) or matches[index].id != match.next_match_id:
            # Arena index missing (e.g. a tournament loaded from JSON): fall back to the id
            for candidate in matches:
                if candidate.id == match.next_match_id:
                    return candidate
            raise MatchNotFound(match.next_match_id)
        return matches[index]

    def _advance(self) -> Optional[Match]:
        tournament = self.tournament
        # Forward-only scan from the match after the one just played
        for index in range(tournament.current_match_index + 1, len(tournament.matches)):
            if tournament.matches[index].is_playable:
                tournament.current_match_index = index
                return tournament.matches[index]

        tournament.current_match_index = -1
        tournament.completed = True
        tournament.state = TournamentState.COMPLETED
        champion = bracket_projector.get_champion(tournament)
        logger.info("Tournament %s completed, champion: %s", tournament.id, champion.name if champion else None)
        return None

    # --- Projection ---

    def get_bracket_data(self) -> BracketData:
        return bracket_projector.get_bracket_data(self.tournament)

    def get_champion(self) -> Optional[Player]:
        return bracket_projector.get_champion(self.tournament)
