"""Round lifecycle: generating rounds, recording scores and the edit cascade.

Every transition takes a ``Tournament`` and returns a new one; the input is
never modified, so a rejected call leaves the caller's tournament as it was.

Editing a score in a round before the current one invalidates the standings
that produced every later round. Those rounds are dropped and, once the edited
round is complete again, the next round is regenerated from the new standings.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional

from .config import load_settings
from .errors import EditWindowClosedError, MatchNotFoundError, RoundIncompleteError, RoundNotFoundError
from .models import Round, Tournament, utcnow
from .pairing import describe_match, initial_pairing, mexicano_pairing
from .scoring import validate_score
from .standings import rank_players

logger = logging.getLogger(__name__)

# Scores stay editable on the tournament day and the whole day after.
EDIT_WINDOW_DAYS = 2


def current_round_number(tournament: Tournament) -> int:
    """Return the number of the last round, or 0 before round 1 exists."""

    return len(tournament.rounds)


def current_round(tournament: Tournament) -> Optional[Round]:
    if not tournament.rounds:
        return None
    return tournament.rounds[-1]


def can_start_next_round(tournament: Tournament) -> bool:
    round_ = current_round(tournament)
    return round_ is None or round_.is_complete


def next_round(tournament: Tournament) -> Round:
    """Build the round that would follow the current one, without adding it.

    Raises:
        RoundIncompleteError: if the current round still has unscored matches.
    """

    if not can_start_next_round(tournament):
        raise RoundIncompleteError(current_round_number(tournament))

    round_number = current_round_number(tournament) + 1
    first_id = tournament.max_match_id() + 1
    if round_number == 1:
        matches = initial_pairing(tournament.players, first_id)
    else:
        matches = mexicano_pairing(rank_players(tournament), first_id)

    for match in matches:
        logger.debug("Round %d match %d: %s", round_number, match.id, describe_match(match))
    return Round(round_number=round_number, matches=tuple(matches))


def generate_next_round(tournament: Tournament, now: Optional[datetime] = None) -> Tournament:
    """Return ``tournament`` with its next round appended."""

    round_ = next_round(tournament)
    last_match_id = max([tournament.max_match_id(), *(match.id for match in round_.matches)])
    logger.info(
        "Generated round %d for %s (match ids %d-%d)",
        round_.round_number,
        tournament.tournament_date.isoformat(),
        round_.matches[0].id,
        round_.matches[-1].id,
    )
    return replace(
        tournament,
        rounds=tournament.rounds + (round_,),
        last_match_id=last_match_id,
        updated_at=now or utcnow(),
    )


def update_match_score(
    tournament: Tournament,
    round_number: int,
    match_id: int,
    team1_score: int,
    team2_score: int,
    now: Optional[datetime] = None,
) -> Tournament:
    """Record a final score and cascade the change through later rounds.

    Raises:
        InvalidScoreError: if the scores are not a legal 25-point result.
        RoundNotFoundError: if ``round_number`` does not exist.
        MatchNotFoundError: if the round has no match ``match_id``.
    """

    validate_score(team1_score, team2_score)

    round_ = tournament.find_round(round_number)
    if round_ is None:
        raise RoundNotFoundError(round_number)
    match = round_.find_match(match_id)
    if match is None:
        raise MatchNotFoundError(round_number, match_id)

    edited_round = round_.with_match(match.with_scores(team1_score, team2_score))
    updated_at = now or utcnow()
    # Captured before truncation so ids of dropped rounds are never reissued.
    last_match_id = tournament.max_match_id()

    if round_number == current_round_number(tournament):
        rounds = tournament.rounds[: round_number - 1] + (edited_round,)
        return replace(tournament, rounds=rounds, last_match_id=last_match_id, updated_at=updated_at)

    dropped = current_round_number(tournament) - round_number
    logger.info(
        "Score edit in round %d of %s discards %d later round(s)",
        round_number,
        tournament.tournament_date.isoformat(),
        dropped,
    )
    truncated = replace(
        tournament,
        rounds=tournament.rounds[: round_number - 1] + (edited_round,),
        last_match_id=last_match_id,
        updated_at=updated_at,
    )
    if not edited_round.is_complete:
        return truncated
    return generate_next_round(truncated, now=updated_at)


def _edit_deadline(tournament: Tournament, tz: tzinfo) -> datetime:
    return datetime.combine(tournament.tournament_date + timedelta(days=EDIT_WINDOW_DAYS), time.min, tzinfo=tz)


def can_edit(tournament: Tournament, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> bool:
    """Return True while scores may still change.

    The window closes at midnight starting the second day after the
    tournament date, in ``tz`` (the configured timezone by default). A naive
    ``now`` is read as local time in that zone.
    """

    zone = tz or load_settings().timezone
    moment = now or utcnow()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=zone)
    return moment < _edit_deadline(tournament, zone)


def ensure_editable(tournament: Tournament, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> None:
    if not can_edit(tournament, now=now, tz=tz):
        raise EditWindowClosedError(tournament.tournament_date)


__all__ = [
    "EDIT_WINDOW_DAYS",
    "can_edit",
    "can_start_next_round",
    "current_round",
    "current_round_number",
    "ensure_editable",
    "generate_next_round",
    "next_round",
    "update_match_score",
]
