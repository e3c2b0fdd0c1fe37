"""Score validation for 25-point Mexicano matches."""

from __future__ import annotations

from .errors import InvalidScoreError

POINTS_PER_MATCH = 25


def _is_score_value(value: object) -> bool:
    # bool is an int subclass; True/False are never scores.
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_valid_score(team1_score: object, team2_score: object) -> bool:
    """Return True when both scores are non-negative integers totalling 25."""

    return (
        _is_score_value(team1_score)
        and _is_score_value(team2_score)
        and team1_score + team2_score == POINTS_PER_MATCH  # type: ignore[operator]
    )


def validate_score(team1_score: object, team2_score: object) -> None:
    """Raise ``InvalidScoreError`` unless the pair is a legal final score."""

    if not is_valid_score(team1_score, team2_score):
        raise InvalidScoreError(team1_score, team2_score)


__all__ = ["POINTS_PER_MATCH", "is_valid_score", "validate_score"]
