from datetime import date, datetime, timezone

import pytest

from mexicano.lifecycle import current_round, update_match_score
from mexicano.models import Tournament

PLAYERS = ["Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Grace", "Heidi"]
TOURNAMENT_DATE = date(2024, 3, 10)
CREATED_AT = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def players():
    return list(PLAYERS)


@pytest.fixture
def tournament(players):
    return Tournament.create("Sunday Mexicano", TOURNAMENT_DATE, players, now=CREATED_AT)


@pytest.fixture
def score_round():
    """Return a helper that enters ``scores`` for the current round, match by match."""

    def _score(tournament, scores):
        round_ = current_round(tournament)
        for match, (team1_score, team2_score) in zip(round_.matches, scores):
            tournament = update_match_score(
                tournament, round_.round_number, match.id, team1_score, team2_score, now=CREATED_AT
            )
        return tournament

    return _score
