"""Player statistics and standings for a tournament.

Nothing here is cached. Stats are rebuilt from the full match history on every
call, so they always agree with the tournament's current rounds.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

from .models import PlayerStats, Tournament


def compute_stats(tournament: Tournament) -> Dict[str, PlayerStats]:
    """Return a fresh ``PlayerStats`` for every declared player, in roster order."""

    stats: Dict[str, PlayerStats] = {name: PlayerStats(name=name) for name in tournament.players}

    for match in tournament.iter_matches():
        if not match.is_complete:
            continue

        team1_won = match.team1_won
        for name in match.team1:
            if name in stats:
                stats[name].record_match(match.team1_score, team1_won)  # type: ignore[arg-type]
        for name in match.team2:
            if name in stats:
                stats[name].record_match(match.team2_score, not team1_won)  # type: ignore[arg-type]

    return stats


def _sort_key(player: PlayerStats):
    # Name only makes the order total; it never decides a displayed rank.
    return (-player.total_points, -player.wins, -player.points_per_game, player.name)


def rank_stats(stats: Mapping[str, PlayerStats]) -> List[PlayerStats]:
    """Order ``stats`` best-first and assign competition ("1224") ranks.

    A player shares the rank of the one directly above only when both total
    points and wins are equal. Points per game still decides their order but
    never splits a shared rank.
    """

    ranked = sorted(stats.values(), key=_sort_key)
    for index, player in enumerate(ranked):
        if index == 0:
            player.rank = 1
            continue
        previous = ranked[index - 1]
        if player.total_points == previous.total_points and player.wins == previous.wins:
            player.rank = previous.rank
        else:
            player.rank = index + 1
    return ranked


def rank_players(tournament: Tournament) -> List[PlayerStats]:
    return rank_stats(compute_stats(tournament))


__all__ = ["compute_stats", "rank_players", "rank_stats"]
