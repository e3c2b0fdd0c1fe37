"""SQLite store for tournament records, one row per tournament date."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterator, List, Optional

from .errors import TournamentNotFoundError
from .models import Tournament, _iso_datetime, _parse_datetime

logger = logging.getLogger(__name__)


def _iso_date(value: date) -> str:
    return value.isoformat()


def _parse_date(value: str) -> date:
    return date.fromisoformat(value)


@dataclass(frozen=True)
class TournamentSummary:
    """Listing metadata for a stored tournament."""

    tournament_date: date
    name: str
    description: str
    player_count: int
    round_count: int
    updated_at: datetime


class TournamentRepository:
    """Persistence layer backed by SQLite.

    The tournament itself is kept as its JSON record; the other columns only
    serve listings.
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create tables if they do not already exist."""

        with self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS tournaments (
                    tournament_date TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    player_count INTEGER NOT NULL,
                    round_count INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    record TEXT NOT NULL
                );
                """
            )

    def list_tournaments(self) -> List[TournamentSummary]:
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT tournament_date, name, description, player_count, round_count, updated_at
                FROM tournaments
                ORDER BY tournament_date DESC
                """
            ).fetchall()
        return [
            TournamentSummary(
                tournament_date=_parse_date(row["tournament_date"]),
                name=row["name"],
                description=row["description"],
                player_count=row["player_count"],
                round_count=row["round_count"],
                updated_at=_parse_datetime(row["updated_at"]),
            )
            for row in rows
        ]

    def get_tournament(self, tournament_date: date) -> Optional[Tournament]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT record FROM tournaments WHERE tournament_date = ?",
                (_iso_date(tournament_date),),
            ).fetchone()
        if row is None:
            return None
        return Tournament.from_record(json.loads(row["record"]))

    def require_tournament(self, tournament_date: date) -> Tournament:
        tournament = self.get_tournament(tournament_date)
        if tournament is None:
            raise TournamentNotFoundError(tournament_date)
        return tournament

    def tournament_exists(self, tournament_date: date) -> bool:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM tournaments WHERE tournament_date = ?",
                (_iso_date(tournament_date),),
            ).fetchone()
        return row is not None

    def save_tournament(self, tournament: Tournament) -> Tournament:
        """Insert or replace the record for the tournament's date.

        The creation timestamp of an already stored tournament is kept.
        """

        existing = self.get_tournament(tournament.tournament_date)
        if existing is not None and existing.created_at != tournament.created_at:
            tournament = replace(tournament, created_at=existing.created_at)

        record = tournament.to_record()
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO tournaments (
                    tournament_date,
                    name,
                    description,
                    player_count,
                    round_count,
                    created_at,
                    updated_at,
                    record
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (tournament_date) DO UPDATE SET
                    name = excluded.name,
                    description = excluded.description,
                    player_count = excluded.player_count,
                    round_count = excluded.round_count,
                    updated_at = excluded.updated_at,
                    record = excluded.record
                """,
                (
                    _iso_date(tournament.tournament_date),
                    tournament.name,
                    tournament.description,
                    len(tournament.players),
                    len(tournament.rounds),
                    _iso_datetime(tournament.created_at),
                    _iso_datetime(tournament.updated_at),
                    json.dumps(record),
                ),
            )
        logger.info(
            "Saved tournament %s (%d rounds)",
            tournament.tournament_date.isoformat(),
            len(tournament.rounds),
        )
        return tournament

    def delete_tournament(self, tournament_date: date) -> bool:
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM tournaments WHERE tournament_date = ?",
                (_iso_date(tournament_date),),
            )
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted tournament %s", tournament_date.isoformat())
        return deleted


__all__ = ["TournamentRepository", "TournamentSummary"]
