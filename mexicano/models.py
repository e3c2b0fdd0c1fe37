"""Domain models for the mexicano project.

Tournaments, rounds and matches are frozen dataclasses: every lifecycle
transition builds a new ``Tournament`` instead of editing one in place. They
convert to and from the camelCase JSON record kept by the tournament store.
``PlayerStats`` is the one mutable type; it is derived from the match history
on demand and never stored back onto a tournament.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .errors import InvalidPlayersError, InvalidScoreError, ValidationError
from .scoring import is_valid_score

VALID_PLAYER_COUNTS = (8, 12, 16)
PLAYERS_PER_MATCH = 4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso_datetime(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def _parse_datetime(value: str) -> datetime:
    # Records written by browsers end in "Z", which older fromisoformat rejects.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def court_count(player_count: int) -> int:
    """Number of matches played at once for ``player_count`` players."""

    return player_count // PLAYERS_PER_MATCH


def validate_players(players: Iterable[Any]) -> Tuple[str, ...]:
    """Return the trimmed player names, or raise ``InvalidPlayersError``.

    This is the only place player-name rules are enforced: names must be
    non-empty after trimming and unique ignoring case, and there must be 8,
    12 or 16 of them.
    """

    raw = list(players)
    if any(not isinstance(name, str) or not name.strip() for name in raw):
        raise InvalidPlayersError("All player names must be non-empty")

    names = tuple(name.strip() for name in raw)
    if len({name.lower() for name in names}) != len(names):
        raise InvalidPlayersError("All player names must be unique")

    if len(names) not in VALID_PLAYER_COUNTS:
        raise InvalidPlayersError("Must have exactly 8, 12, or 16 players")

    return names


@dataclass(frozen=True)
class Match:
    """A 2v2 contest; scores stay ``None`` until the result is entered."""

    id: int
    team1_player1: str
    team1_player2: str
    team2_player1: str
    team2_player2: str
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None

    @property
    def team1(self) -> Tuple[str, str]:
        return (self.team1_player1, self.team1_player2)

    @property
    def team2(self) -> Tuple[str, str]:
        return (self.team2_player1, self.team2_player2)

    @property
    def players(self) -> Tuple[str, str, str, str]:
        return self.team1 + self.team2

    @property
    def is_complete(self) -> bool:
        return (
            self.team1_score is not None
            and self.team2_score is not None
            and is_valid_score(self.team1_score, self.team2_score)
        )

    @property
    def team1_won(self) -> bool:
        """Return True when team 1 outscored team 2 in a complete match."""

        if not self.is_complete:
            raise ValidationError(f"Match {self.id} has no final score", field="score")
        if self.team1_score == self.team2_score:
            raise InvalidScoreError(
                self.team1_score,
                self.team2_score,
                f"Match {self.id} is tied {self.team1_score}-{self.team2_score}; 25-point matches cannot tie",
            )
        return self.team1_score > self.team2_score  # type: ignore[operator]

    def with_scores(self, team1_score: Optional[int], team2_score: Optional[int]) -> "Match":
        return replace(self, team1_score=team1_score, team2_score=team2_score)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team1Player1": self.team1_player1,
            "team1Player2": self.team1_player2,
            "team2Player1": self.team2_player1,
            "team2Player2": self.team2_player2,
            "team1Score": self.team1_score,
            "team2Score": self.team2_score,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Match":
        try:
            match = cls(
                id=record["id"],
                team1_player1=record["team1Player1"],
                team1_player2=record["team1Player2"],
                team2_player1=record["team2Player1"],
                team2_player2=record["team2Player2"],
                team1_score=record.get("team1Score"),
                team2_score=record.get("team2Score"),
            )
        except KeyError as exc:
            raise ValidationError(f"Match record is missing {exc.args[0]!r}", field="rounds") from exc

        if not isinstance(match.id, int) or isinstance(match.id, bool):
            raise ValidationError(f"Match id must be an integer, got {match.id!r}", field="rounds")
        if len(set(match.players)) != PLAYERS_PER_MATCH:
            raise ValidationError(f"Match {match.id} lists a player more than once", field="rounds")
        for score in (match.team1_score, match.team2_score):
            if score is not None and (not isinstance(score, int) or isinstance(score, bool) or score < 0):
                raise ValidationError(f"Match {match.id} has an invalid score {score!r}", field="rounds")
        return match


@dataclass(frozen=True)
class Round:
    """A batch of matches generated together, one per court."""

    round_number: int
    matches: Tuple[Match, ...] = ()

    @property
    def is_complete(self) -> bool:
        return all(match.is_complete for match in self.matches)

    def find_match(self, match_id: int) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def with_match(self, updated: Match) -> "Round":
        """Return a copy of the round with the same-id match swapped for ``updated``."""

        return replace(
            self,
            matches=tuple(updated if match.id == updated.id else match for match in self.matches),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "roundNumber": self.round_number,
            "matches": [match.to_record() for match in self.matches],
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Round":
        try:
            return cls(
                round_number=record["roundNumber"],
                matches=tuple(Match.from_record(item) for item in record["matches"]),
            )
        except KeyError as exc:
            raise ValidationError(f"Round record is missing {exc.args[0]!r}", field="rounds") from exc


@dataclass(frozen=True)
class Tournament:
    """The aggregate root: a single day's Mexicano event."""

    name: str
    tournament_date: date
    players: Tuple[str, ...]
    rounds: Tuple[Round, ...] = ()
    description: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    # Highest match id ever issued, including ids of rounds dropped by a cascade.
    last_match_id: int = 0

    @classmethod
    def create(
        cls,
        name: str,
        tournament_date: date,
        players: Iterable[Any],
        *,
        description: str = "",
        now: Optional[datetime] = None,
    ) -> "Tournament":
        """Validate the roster and build a tournament with no rounds yet."""

        names = validate_players(players)
        created = now or utcnow()
        return cls(
            name=name,
            tournament_date=tournament_date,
            players=names,
            description=description or "",
            created_at=created,
            updated_at=created,
        )

    @property
    def court_count(self) -> int:
        return court_count(len(self.players))

    def iter_matches(self) -> Iterator[Match]:
        for round_ in self.rounds:
            yield from round_.matches

    def find_round(self, round_number: int) -> Optional[Round]:
        if 1 <= round_number <= len(self.rounds):
            return self.rounds[round_number - 1]
        return None

    def max_match_id(self) -> int:
        """Return the highest id issued so far, or 0 before any round exists."""

        return max([self.last_match_id, *(match.id for match in self.iter_matches())])

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "tournamentDate": self.tournament_date.isoformat(),
            "players": list(self.players),
            "rounds": [round_.to_record() for round_ in self.rounds],
            "createdAt": _iso_datetime(self.created_at),
            "updatedAt": _iso_datetime(self.updated_at),
            "lastMatchId": self.max_match_id(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Tournament":
        """Rebuild a tournament from its stored record, enforcing every invariant."""

        try:
            players = validate_players(record["players"])
            rounds = tuple(Round.from_record(item) for item in record.get("rounds") or [])
            tournament_date = date.fromisoformat(record["tournamentDate"])
            created_at = _parse_datetime(record["createdAt"]) if record.get("createdAt") else utcnow()
            updated_at = _parse_datetime(record["updatedAt"]) if record.get("updatedAt") else created_at
        except KeyError as exc:
            raise ValidationError(f"Tournament record is missing {exc.args[0]!r}", field=exc.args[0]) from exc
        except ValidationError:
            raise
        except (AttributeError, TypeError, ValueError) as exc:
            raise ValidationError(f"Malformed tournament record: {exc}") from exc

        for index, round_ in enumerate(rounds, start=1):
            if round_.round_number != index:
                raise ValidationError(
                    f"Round numbers must run 1..{len(rounds)} without gaps; found {round_.round_number} at position {index}",
                    field="rounds",
                )

        seen_ids: set = set()
        roster = set(players)
        for round_ in rounds:
            for match in round_.matches:
                if match.id in seen_ids:
                    raise ValidationError(f"Duplicate match id {match.id}", field="rounds")
                seen_ids.add(match.id)
                unknown = [name for name in match.players if name not in roster]
                if unknown:
                    raise ValidationError(
                        f"Match {match.id} references unknown players: {', '.join(unknown)}",
                        field="rounds",
                    )

            seated = sorted(name for match in round_.matches for name in match.players)
            if seated != sorted(players):
                raise ValidationError(
                    f"Round {round_.round_number} must seat every player exactly once",
                    field="rounds",
                )
            if round_.round_number < len(rounds) and not round_.is_complete:
                raise ValidationError(
                    f"Round {round_.round_number} is incomplete but round {round_.round_number + 1} exists",
                    field="rounds",
                )

        last_match_id = record.get("lastMatchId")
        if last_match_id is None:
            last_match_id = 0
        if not isinstance(last_match_id, int) or isinstance(last_match_id, bool) or last_match_id < 0:
            raise ValidationError(
                f"lastMatchId must be a non-negative integer, got {last_match_id!r}",
                field="lastMatchId",
            )
        return cls(
            name=record.get("name", ""),
            description=record.get("description") or "",
            tournament_date=tournament_date,
            players=players,
            rounds=rounds,
            created_at=created_at,
            updated_at=updated_at,
            last_match_id=max([last_match_id, *seen_ids]),
        )


@dataclass
class PlayerStats:
    """Aggregate statistics for one player, derived from completed matches."""

    name: str
    total_points: int = 0
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    rank: Optional[int] = None

    @property
    def points_per_game(self) -> float:
        if self.games_played == 0:
            return 0
        return self.total_points / self.games_played

    @property
    def win_percentage(self) -> float:
        if self.games_played == 0:
            return 0
        return 100 * self.wins / self.games_played

    def record_match(self, points: int, won: bool) -> None:
        """Credit one finished match to this player."""

        self.total_points += points
        self.games_played += 1
        if won:
            self.wins += 1
        else:
            self.losses += 1


__all__ = [
    "Match",
    "PLAYERS_PER_MATCH",
    "PlayerStats",
    "Round",
    "Tournament",
    "VALID_PLAYER_COUNTS",
    "court_count",
    "utcnow",
    "validate_players",
]
