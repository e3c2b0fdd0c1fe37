import copy
from datetime import datetime, timezone

import pytest

from mexicano.errors import InvalidPlayersError, ValidationError
from mexicano.lifecycle import generate_next_round
from mexicano.models import Match, Round, Tournament, court_count, validate_players


def _match(match_id, team1_score=None, team2_score=None):
    return Match(
        id=match_id,
        team1_player1="Alice",
        team1_player2="Dave",
        team2_player1="Bob",
        team2_player2="Carol",
        team1_score=team1_score,
        team2_score=team2_score,
    )


class TestValidatePlayers:
    def test_names_are_trimmed(self, players):
        players[0] = "  Alice "
        assert validate_players(players)[0] == "Alice"

    @pytest.mark.parametrize("bad_name", ["", "   ", None])
    def test_empty_name_rejected(self, players, bad_name):
        players[3] = bad_name
        with pytest.raises(InvalidPlayersError, match="non-empty"):
            validate_players(players)

    def test_duplicates_ignore_case_and_whitespace(self, players):
        players[7] = " alice"
        with pytest.raises(InvalidPlayersError, match="unique"):
            validate_players(players)

    @pytest.mark.parametrize("count", [0, 4, 7, 9, 10, 20])
    def test_unsupported_player_counts(self, count):
        names = [f"Player {index}" for index in range(count)]
        with pytest.raises(InvalidPlayersError, match="8, 12, or 16"):
            validate_players(names)

    @pytest.mark.parametrize("count", [8, 12, 16])
    def test_supported_player_counts(self, count):
        names = [f"Player {index}" for index in range(count)]
        assert len(validate_players(names)) == count

    def test_error_names_the_field(self, players):
        with pytest.raises(InvalidPlayersError) as excinfo:
            validate_players(players[:5])
        assert excinfo.value.field == "players"


def test_create_starts_without_rounds(tournament, players):
    assert tournament.rounds == ()
    assert tournament.players == tuple(players)
    assert tournament.created_at == tournament.updated_at
    assert tournament.court_count == 2
    assert tournament.max_match_id() == 0


def test_court_count():
    assert [court_count(n) for n in (8, 12, 16)] == [2, 3, 4]


class TestMatch:
    def test_incomplete_until_both_scores_set(self):
        assert not _match(1).is_complete
        assert not _match(1, team1_score=15).is_complete
        assert _match(1, 15, 10).is_complete

    def test_scores_must_total_25_to_count(self):
        assert not _match(1, 15, 5).is_complete

    def test_winner(self):
        assert _match(1, 15, 10).team1_won
        assert not _match(1, 10, 15).team1_won

    def test_winner_of_unfinished_match_is_an_error(self):
        with pytest.raises(ValidationError):
            _match(1, 12, 12).team1_won

    def test_with_scores_leaves_original(self):
        match = _match(1)
        scored = match.with_scores(15, 10)
        assert match.team1_score is None
        assert (scored.team1_score, scored.team2_score) == (15, 10)


class TestRecords:
    def test_record_uses_camel_case_shape(self, tournament):
        record = generate_next_round(tournament, now=tournament.created_at).to_record()

        assert record["tournamentDate"] == "2024-03-10"
        assert record["rounds"][0]["roundNumber"] == 1
        assert record["rounds"][0]["matches"][0] == {
            "id": 1,
            "team1Player1": "Alice",
            "team1Player2": "Dave",
            "team2Player1": "Bob",
            "team2Player2": "Carol",
            "team1Score": None,
            "team2Score": None,
        }
        assert record["lastMatchId"] == 2
        assert record["createdAt"] == "2024-03-10T09:00:00+00:00"

    def test_record_restores_tournament(self, tournament):
        played = generate_next_round(tournament, now=tournament.created_at)
        assert Tournament.from_record(played.to_record()) == played

    def test_last_match_id_defaults_to_highest_id(self, tournament):
        record = generate_next_round(tournament).to_record()
        del record["lastMatchId"]
        assert Tournament.from_record(record).last_match_id == 2

    def test_last_match_id_survives_beyond_present_ids(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["lastMatchId"] = 9
        restored = Tournament.from_record(record)
        assert restored.max_match_id() == 9

    @pytest.mark.parametrize("value", ["9", -1, True, 2.5])
    def test_last_match_id_must_be_a_non_negative_integer(self, tournament, value):
        record = generate_next_round(tournament).to_record()
        record["lastMatchId"] = value
        with pytest.raises(ValidationError) as excinfo:
            Tournament.from_record(record)
        assert excinfo.value.field == "lastMatchId"

    def test_browser_timestamps_are_accepted(self, tournament):
        record = tournament.to_record()
        record["createdAt"] = "2024-03-10T09:00:00.000Z"
        record["updatedAt"] = "2024-03-10T10:30:00.000Z"
        restored = Tournament.from_record(record)
        assert restored.updated_at == datetime(2024, 3, 10, 10, 30, tzinfo=timezone.utc)

    def test_invalid_roster_rejected(self, tournament):
        record = tournament.to_record()
        record["players"] = record["players"][:6]
        with pytest.raises(InvalidPlayersError):
            Tournament.from_record(record)

    def test_round_numbers_must_be_contiguous(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["rounds"][0]["roundNumber"] = 2
        with pytest.raises(ValidationError, match="without gaps"):
            Tournament.from_record(record)

    def test_duplicate_match_ids_rejected(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["rounds"][0]["matches"][1]["id"] = 1
        with pytest.raises(ValidationError, match="Duplicate match id 1"):
            Tournament.from_record(record)

    def test_unknown_player_rejected(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["rounds"][0]["matches"][0]["team1Player1"] = "Mallory"
        with pytest.raises(ValidationError, match="Mallory"):
            Tournament.from_record(record)

    def test_round_must_seat_every_player_once(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["rounds"][0]["matches"][1]["team1Player1"] = "Alice"
        with pytest.raises(ValidationError, match="Round 1 must seat every player exactly once"):
            Tournament.from_record(record)

    def test_only_the_last_round_may_be_incomplete(self, tournament):
        record = generate_next_round(tournament).to_record()
        later = copy.deepcopy(record["rounds"][0])
        later["roundNumber"] = 2
        for match, match_id in zip(later["matches"], (3, 4)):
            match["id"] = match_id
        record["rounds"].append(later)
        with pytest.raises(ValidationError, match="Round 1 is incomplete"):
            Tournament.from_record(record)

    def test_negative_score_rejected(self, tournament):
        record = generate_next_round(tournament).to_record()
        record["rounds"][0]["matches"][0]["team1Score"] = -3
        with pytest.raises(ValidationError):
            Tournament.from_record(record)

    def test_missing_field_rejected(self, tournament):
        record = tournament.to_record()
        del record["tournamentDate"]
        with pytest.raises(ValidationError) as excinfo:
            Tournament.from_record(record)
        assert excinfo.value.field == "tournamentDate"

    def test_malformed_date_rejected(self, tournament):
        record = tournament.to_record()
        record["tournamentDate"] = "10/03/2024"
        with pytest.raises(ValidationError):
            Tournament.from_record(record)


def test_round_lookup(tournament):
    played = generate_next_round(tournament)
    assert played.find_round(1) is played.rounds[0]
    assert played.find_round(0) is None
    assert played.find_round(2) is None
    assert played.rounds[0].find_match(2).id == 2
    assert played.rounds[0].find_match(3) is None


def test_round_complete_only_when_every_match_is():
    round_ = Round(round_number=1, matches=(_match(1, 15, 10), _match(2)))
    assert not round_.is_complete
    assert round_.with_match(_match(2, 5, 20)).is_complete

