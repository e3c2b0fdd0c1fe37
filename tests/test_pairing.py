import random

import pytest

from mexicano.models import Match, PlayerStats
from mexicano.pairing import describe_match, initial_pairing, mexicano_pairing, shuffle_players


def _teams(match):
    return (set(match.team1), set(match.team2))


def test_initial_pairing_plays_first_and_fourth_against_middle_pair():
    players = [f"P{index}" for index in range(1, 9)]

    matches = initial_pairing(players)

    assert [_teams(match) for match in matches] == [
        ({"P1", "P4"}, {"P2", "P3"}),
        ({"P5", "P8"}, {"P6", "P7"}),
    ]
    assert all(match.team1_score is None and match.team2_score is None for match in matches)


def test_mexicano_pairing_groups_by_standing_position():
    ranked = [PlayerStats(name=f"P{index}") for index in range(1, 9)]

    group_a, group_b = mexicano_pairing(ranked)

    assert (group_a.team1_player1, group_a.team1_player2) == ("P1", "P4")
    assert (group_a.team2_player1, group_a.team2_player2) == ("P2", "P3")
    assert _teams(group_b) == ({"P5", "P8"}, {"P6", "P7"})


def test_mexicano_pairing_ignores_rank_values():
    # Five players share rank 1; grouping still follows list position.
    ranked = [PlayerStats(name=f"P{index}", rank=1 if index <= 5 else 6) for index in range(1, 9)]

    matches = mexicano_pairing(ranked)

    assert set(matches[0].players) == {"P1", "P2", "P3", "P4"}
    assert set(matches[1].players) == {"P5", "P6", "P7", "P8"}


def test_mexicano_pairing_accepts_plain_names():
    assert mexicano_pairing(["A", "B", "C", "D"]) == [
        Match(id=1, team1_player1="A", team1_player2="D", team2_player1="B", team2_player2="C")
    ]


@pytest.mark.parametrize("count", [8, 12, 16])
@pytest.mark.parametrize("pair", [initial_pairing, mexicano_pairing])
def test_every_player_plays_exactly_once(pair, count):
    players = [f"Player {index}" for index in range(count)]

    matches = pair(players)

    assert len(matches) == count // 4
    seen = [name for match in matches for name in match.players]
    assert all(len(set(match.players)) == 4 for match in matches)
    assert sorted(seen) == sorted(players)


def test_ids_continue_from_first_id():
    players = [f"Player {index}" for index in range(12)]

    assert [match.id for match in initial_pairing(players, first_id=7)] == [7, 8, 9]
    assert [match.id for match in mexicano_pairing(players, first_id=4)] == [4, 5, 6]


def test_seeded_shuffle_is_reproducible():
    players = [f"Player {index}" for index in range(16)]

    first = shuffle_players(players, random.Random(42))
    second = shuffle_players(players, random.Random(42))

    assert first == second
    assert sorted(first) == sorted(players)
    assert players == [f"Player {index}" for index in range(16)]


def test_describe_match():
    match = initial_pairing(["A", "B", "C", "D"])[0]

    assert describe_match(match) == "A & D vs B & C"
    assert describe_match(match.with_scores(15, 10)) == "A & D [15] vs [10] B & C"
