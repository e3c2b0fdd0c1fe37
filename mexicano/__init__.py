"""mexicano package exposing the tournament engine and repository."""

from .errors import (
    EditWindowClosedError,
    InvalidPlayersError,
    InvalidScoreError,
    MatchNotFoundError,
    MexicanoError,
    NotFoundError,
    RoundIncompleteError,
    RoundNotFoundError,
    StateError,
    TournamentNotFoundError,
    ValidationError,
)
from .lifecycle import (
    can_edit,
    can_start_next_round,
    current_round,
    current_round_number,
    ensure_editable,
    generate_next_round,
    next_round,
    update_match_score,
)
from .models import Match, PlayerStats, Round, Tournament, court_count, validate_players
from .pairing import describe_match, initial_pairing, mexicano_pairing, shuffle_players
from .repository import TournamentRepository, TournamentSummary
from .scoring import is_valid_score, validate_score
from .standings import compute_stats, rank_players, rank_stats

__all__ = [
    "EditWindowClosedError",
    "InvalidPlayersError",
    "InvalidScoreError",
    "Match",
    "MatchNotFoundError",
    "MexicanoError",
    "NotFoundError",
    "PlayerStats",
    "Round",
    "RoundIncompleteError",
    "RoundNotFoundError",
    "StateError",
    "Tournament",
    "TournamentNotFoundError",
    "TournamentRepository",
    "TournamentSummary",
    "ValidationError",
    "can_edit",
    "can_start_next_round",
    "compute_stats",
    "court_count",
    "current_round",
    "current_round_number",
    "describe_match",
    "ensure_editable",
    "generate_next_round",
    "initial_pairing",
    "is_valid_score",
    "mexicano_pairing",
    "next_round",
    "rank_players",
    "rank_stats",
    "shuffle_players",
    "update_match_score",
    "validate_players",
    "validate_score",
]
