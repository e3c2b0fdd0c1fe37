"""FastAPI application driving the tournament engine."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictInt

from . import lifecycle
from .config import load_settings
from .errors import (
    MatchNotFoundError,
    MexicanoError,
    NotFoundError,
    RoundNotFoundError,
    StateError,
    TournamentNotFoundError,
    ValidationError,
)
from .models import Match, PlayerStats, Round, Tournament, validate_players
from .pairing import shuffle_players
from .repository import TournamentRepository, TournamentSummary
from .standings import rank_players

settings = load_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mexicano Tournament API")

_repository = TournamentRepository(settings.database_path)


@app.on_event("startup")
def _initialize_schema() -> None:
    _repository.initialize_schema()


def get_repository() -> TournamentRepository:
    """Provide the repository instance for FastAPI dependencies."""

    return _repository


def get_now() -> datetime:
    """Current time for edit-window checks; overridden in tests."""

    return datetime.now(settings.timezone)


# Request / response schemas ------------------------------------------------
class TournamentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    tournament_date: date
    players: List[str]
    description: str = ""
    shuffle: bool = True
    seed: Optional[int] = None
    overwrite: bool = False


class ScoreUpdate(BaseModel):
    team1_score: StrictInt
    team2_score: StrictInt


class MatchResponse(BaseModel):
    id: int
    team1_player1: str
    team1_player2: str
    team2_player1: str
    team2_player2: str
    team1_score: Optional[int]
    team2_score: Optional[int]
    is_complete: bool


class RoundResponse(BaseModel):
    round_number: int
    matches: List[MatchResponse]
    is_complete: bool


class TournamentResponse(BaseModel):
    name: str
    description: str
    tournament_date: date
    players: List[str]
    rounds: List[RoundResponse]
    court_count: int
    current_round: int
    can_start_next_round: bool
    editable: bool
    created_at: datetime
    updated_at: datetime


class TournamentSummaryResponse(BaseModel):
    tournament_date: date
    name: str
    description: str
    player_count: int
    round_count: int
    updated_at: datetime


class StandingResponse(BaseModel):
    rank: int
    name: str
    total_points: int
    games_played: int
    wins: int
    losses: int
    points_per_game: float
    win_percentage: float


class EditableResponse(BaseModel):
    editable: bool


def _match_to_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        team1_player1=match.team1_player1,
        team1_player2=match.team1_player2,
        team2_player1=match.team2_player1,
        team2_player2=match.team2_player2,
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        is_complete=match.is_complete,
    )


def _round_to_response(round_: Round) -> RoundResponse:
    return RoundResponse(
        round_number=round_.round_number,
        matches=[_match_to_response(match) for match in round_.matches],
        is_complete=round_.is_complete,
    )


def _tournament_to_response(tournament: Tournament, now: datetime) -> TournamentResponse:
    return TournamentResponse(
        name=tournament.name,
        description=tournament.description,
        tournament_date=tournament.tournament_date,
        players=list(tournament.players),
        rounds=[_round_to_response(round_) for round_ in tournament.rounds],
        court_count=tournament.court_count,
        current_round=lifecycle.current_round_number(tournament),
        can_start_next_round=lifecycle.can_start_next_round(tournament),
        editable=lifecycle.can_edit(tournament, now=now, tz=settings.timezone),
        created_at=tournament.created_at,
        updated_at=tournament.updated_at,
    )


def _summary_to_response(summary: TournamentSummary) -> TournamentSummaryResponse:
    return TournamentSummaryResponse(
        tournament_date=summary.tournament_date,
        name=summary.name,
        description=summary.description,
        player_count=summary.player_count,
        round_count=summary.round_count,
        updated_at=summary.updated_at,
    )


def _standing_to_response(player: PlayerStats) -> StandingResponse:
    return StandingResponse(
        rank=player.rank,
        name=player.name,
        total_points=player.total_points,
        games_played=player.games_played,
        wins=player.wins,
        losses=player.losses,
        points_per_game=player.points_per_game,
        win_percentage=player.win_percentage,
    )


# Error translation ---------------------------------------------------------
def _status_for(exc: MexicanoError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, (NotFoundError, RoundNotFoundError, MatchNotFoundError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, StateError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(MexicanoError)
async def _handle_engine_error(request: Request, exc: MexicanoError) -> JSONResponse:
    logger.warning("%s %s refused: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})


# Endpoints -----------------------------------------------------------------
@app.get("/tournaments", response_model=List[TournamentSummaryResponse])
def list_tournaments(
    repository: TournamentRepository = Depends(get_repository),
) -> List[TournamentSummaryResponse]:
    return [_summary_to_response(summary) for summary in repository.list_tournaments()]


@app.post("/tournaments", response_model=TournamentResponse, status_code=status.HTTP_201_CREATED)
def create_tournament(
    payload: TournamentCreate,
    repository: TournamentRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
) -> TournamentResponse:
    players = list(validate_players(payload.players))
    if payload.shuffle:
        players = shuffle_players(players, random.Random(payload.seed))

    if repository.tournament_exists(payload.tournament_date):
        if not payload.overwrite:
            raise StateError(f"A tournament already exists for {payload.tournament_date.isoformat()}")
        repository.delete_tournament(payload.tournament_date)

    tournament = Tournament.create(
        payload.name,
        payload.tournament_date,
        players,
        description=payload.description,
    )
    tournament = lifecycle.generate_next_round(tournament)
    saved = repository.save_tournament(tournament)
    return _tournament_to_response(saved, now)


@app.get("/tournaments/{tournament_date}", response_model=TournamentResponse)
def get_tournament(
    tournament_date: date,
    repository: TournamentRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
) -> TournamentResponse:
    return _tournament_to_response(repository.require_tournament(tournament_date), now)


@app.delete("/tournaments/{tournament_date}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tournament(
    tournament_date: date,
    repository: TournamentRepository = Depends(get_repository),
) -> None:
    if not repository.delete_tournament(tournament_date):
        raise TournamentNotFoundError(tournament_date)


@app.post("/tournaments/{tournament_date}/rounds", response_model=TournamentResponse)
def generate_next_round(
    tournament_date: date,
    repository: TournamentRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
) -> TournamentResponse:
    tournament = repository.require_tournament(tournament_date)
    lifecycle.ensure_editable(tournament, now=now, tz=settings.timezone)
    updated = lifecycle.generate_next_round(tournament)
    return _tournament_to_response(repository.save_tournament(updated), now)


@app.put(
    "/tournaments/{tournament_date}/rounds/{round_number}/matches/{match_id}",
    response_model=TournamentResponse,
)
def update_match_score(
    tournament_date: date,
    round_number: int,
    match_id: int,
    payload: ScoreUpdate,
    repository: TournamentRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
) -> TournamentResponse:
    tournament = repository.require_tournament(tournament_date)
    lifecycle.ensure_editable(tournament, now=now, tz=settings.timezone)
    updated = lifecycle.update_match_score(
        tournament,
        round_number,
        match_id,
        payload.team1_score,
        payload.team2_score,
    )
    return _tournament_to_response(repository.save_tournament(updated), now)


@app.get("/tournaments/{tournament_date}/standings", response_model=List[StandingResponse])
def get_standings(
    tournament_date: date,
    repository: TournamentRepository = Depends(get_repository),
) -> List[StandingResponse]:
    tournament = repository.require_tournament(tournament_date)
    return [_standing_to_response(player) for player in rank_players(tournament)]


@app.get("/tournaments/{tournament_date}/editable", response_model=EditableResponse)
def get_editable(
    tournament_date: date,
    repository: TournamentRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
) -> EditableResponse:
    tournament = repository.require_tournament(tournament_date)
    return EditableResponse(editable=lifecycle.can_edit(tournament, now=now, tz=settings.timezone))
