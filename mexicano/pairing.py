"""Pairing algorithms for Mexicano rounds.

Both pairings split the player order into consecutive quartets and, within
each quartet ``[a, b, c, d]``, play ``a & d`` against ``b & c``. Round 1 uses
entry order; later rounds use the current standings, best first. Callers must
pass a multiple of four players.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Union

from .models import PLAYERS_PER_MATCH, Match, PlayerStats


def _quartet_matches(names: Sequence[str], first_id: int) -> List[Match]:
    matches: List[Match] = []
    for offset in range(0, len(names), PLAYERS_PER_MATCH):
        first, second, third, fourth = names[offset : offset + PLAYERS_PER_MATCH]
        matches.append(
            Match(
                id=first_id + len(matches),
                team1_player1=first,
                team1_player2=fourth,
                team2_player1=second,
                team2_player2=third,
            )
        )
    return matches


def initial_pairing(player_names: Sequence[str], first_id: int = 1) -> List[Match]:
    """Pair players in the given order: 1+4 vs 2+3, 5+8 vs 6+7, and so on."""

    return _quartet_matches(list(player_names), first_id)


def mexicano_pairing(
    ranked_players: Sequence[Union[PlayerStats, str]],
    first_id: int = 1,
) -> List[Match]:
    """Pair players by standing position, best with weakest of each quartet.

    Grouping is by position in ``ranked_players``, never by rank value, so
    tied players in adjacent slots can still land in different quartets.
    """

    names = [player if isinstance(player, str) else player.name for player in ranked_players]
    return _quartet_matches(names, first_id)


def shuffle_players(players: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    """Return a shuffled copy of ``players``; pass a seeded ``rng`` for repeatable order."""

    shuffled = list(players)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def describe_match(match: Match) -> str:
    team1 = f"{match.team1_player1} & {match.team1_player2}"
    team2 = f"{match.team2_player1} & {match.team2_player2}"
    if match.team1_score is not None and match.team2_score is not None:
        return f"{team1} [{match.team1_score}] vs [{match.team2_score}] {team2}"
    return f"{team1} vs {team2}"


__all__ = ["describe_match", "initial_pairing", "mexicano_pairing", "shuffle_players"]
