import logging
import math # For calculating rounds, byes
import random # For shuffling players
from typing import Dict, List, Optional, Sequence, Tuple

from arcade.core.exceptions import NotEnoughPlayers
from arcade.models.tournament_model import Match, Player

logger = logging.getLogger(__name__)


def calculate_required_rounds(player_count: int) -> int:
    if player_count < 2:
        raise NotEnoughPlayers(player_count)
    return math.ceil(math.log2(player_count))


def calculate_bye_count(player_count: int) -> Tuple[int, int, int]:
    """
    Returns ``(rounds, slot_count, bye_count)`` for a roster size.

    ``slot_count`` is the number of first-round match slots and ``bye_count``
    the number of those slots that get no match.
    """
    rounds = calculate_required_rounds(player_count)
    slot_count = 2 ** (rounds - 1)
    return rounds, slot_count, slot_count * 2 - player_count


def match_id_for(number: int) -> str:
    return f"match_{number}"


class BracketBuilder:
    """
    Turns a roster into the full, linked list of single elimination matches.

    The builder is pure apart from its random source: it never mutates the
    roster it is given. Pass a seeded ``random.Random`` to get a reproducible
    draw.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def seed_players(self, players: Sequence[Player]) -> Tuple[Player, ...]:
        # random.shuffle is an in-place Fisher-Yates, so work on a copy
        seeded = list(players)
        self.rng.shuffle(seeded)
        return tuple(seeded)

    def build(self, players: Sequence[Player]) -> List[Match]:
        rounds, slot_count, bye_count = calculate_bye_count(len(players))
        seeded = self.seed_players(players)

        matches: List[Match] = []
        # round number -> arena index per slot (None for a bye slot)
        slots_by_round: Dict[int, List[Optional[int]]] = {1: []}
        next_number = 1
        cursor = 0

        # --- Round 1 ---
        for slot in range(slot_count):
            if slot < bye_count:
                # Bye slot: no match is created and no player is consumed or
                # moved forward.
                slots_by_round[1].append(None)
                continue

            match = Match(
                id=match_id_for(next_number),
                round=1,
                player1=seeded[cursor],
                player2=seeded[cursor + 1],
            )
            cursor += 2
            next_number += 1
            slots_by_round[1].append(len(matches))
            matches.append(match)

        if cursor < len(seeded):
            logger.warning(
                "%d of %d players hold bye slots and were not placed in round 1: %s",
                len(seeded) - cursor, len(seeded), ", ".join(p.name for p in seeded[cursor:]),
            )

        # --- Placeholder rounds, filled as winners advance ---
        for round_number in range(2, rounds + 1):
            slots_by_round[round_number] = []
            for _ in range(2 ** (rounds - round_number)):
                slots_by_round[round_number].append(len(matches))
                matches.append(Match(id=match_id_for(next_number), round=round_number))
                next_number += 1

        self._link_rounds(matches, slots_by_round, rounds)
        return matches

    @staticmethod
    def _link_rounds(matches: List[Match], slots_by_round: Dict[int, List[Optional[int]]], rounds: int) -> None:
        """
        Points every non-final match at the match its winner plays next.

        Slot ``s`` of round ``r`` feeds position ``s // 2`` of round ``r + 1``.
        """
        for round_number in range(1, rounds):
            next_round = slots_by_round[round_number + 1]
            for slot, index in enumerate(slots_by_round[round_number]):
                if index is None:
                    continue
                target = next_round[slot // 2]
                matches[index].next_match_index = target
                matches[index].next_match_id = matches[target].id
