"""Exceptions raised by the mexicano engine."""

from __future__ import annotations

from datetime import date
from typing import Optional


class MexicanoError(Exception):
    """Base exception for all tournament engine errors."""

    pass


# ========== Validation ==========


class ValidationError(MexicanoError, ValueError):
    """Raised when caller-supplied input breaks a tournament rule."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidPlayersError(ValidationError):
    """Raised for a bad player count, an empty name or a duplicate name."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="players")


class InvalidScoreError(ValidationError):
    """Raised when a score pair is negative, non-integer or does not total 25."""

    def __init__(self, team1_score: object, team2_score: object, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"Invalid score {team1_score!r}-{team2_score!r}: scores must be non-negative integers totalling 25",
            field="score",
        )
        self.team1_score = team1_score
        self.team2_score = team2_score


# ========== Tournament state ==========


class StateError(MexicanoError):
    """Raised when the tournament is in the wrong state for an operation."""

    pass


class RoundNotFoundError(StateError):
    def __init__(self, round_number: int) -> None:
        super().__init__(f"Round {round_number} does not exist")
        self.round_number = round_number


class MatchNotFoundError(StateError):
    def __init__(self, round_number: int, match_id: int) -> None:
        super().__init__(f"Match {match_id} not found in round {round_number}")
        self.round_number = round_number
        self.match_id = match_id


class RoundIncompleteError(StateError):
    """Raised when generating a round while the current one still lacks scores."""

    def __init__(self, round_number: int) -> None:
        super().__init__(f"Cannot start next round: round {round_number} is not complete")
        self.round_number = round_number


class EditWindowClosedError(StateError):
    def __init__(self, tournament_date: date) -> None:
        super().__init__(f"Tournament {tournament_date.isoformat()} is read-only: edit window expired")
        self.tournament_date = tournament_date


# ========== Lookup ==========


class NotFoundError(MexicanoError):
    """Raised when a referenced record does not exist."""

    pass


class TournamentNotFoundError(NotFoundError):
    def __init__(self, tournament_date: date) -> None:
        super().__init__(f"No tournament found for {tournament_date.isoformat()}")
        self.tournament_date = tournament_date


__all__ = [
    "EditWindowClosedError",
    "InvalidPlayersError",
    "InvalidScoreError",
    "MatchNotFoundError",
    "MexicanoError",
    "NotFoundError",
    "RoundIncompleteError",
    "RoundNotFoundError",
    "StateError",
    "TournamentNotFoundError",
    "ValidationError",
]
