"""
Storage access for the scrape pipeline and the API.

``StatStore`` is the contract the upsert engine, the orchestrator and the API
handlers depend on. ``SqliteStatStore`` implements it over a single shared
``sqlite3`` connection; tests substitute an in-memory fake.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Optional, Protocol

from config import setup_logging
from errors import QueryError, RecordWriteError
from mapping import BattedBallLine, HittingLine, PlayerIdentity

logger = setup_logging(__name__)

HITTING_COLUMNS = [
    "games_played",
    "plate_appearances",
    "at_bats",
    "hits",
    "runs",
    "rbi",
    "home_runs",
    "doubles",
    "triples",
    "stolen_bases",
    "walks",
    "strikeouts",
    "barrels",
    "wrc_plus",
    "xwoba",
    "xba",
    "xslg",
    "hard_hit_percent",
    "max_exit_velocity",
    "avg_exit_velocity",
    "max_distance",
    "avg_launch_angle",
    "sweet_spot_percent",
]

CATEGORY_COLUMNS = ("hitting_categories", "pitching_categories")


class StatStore(Protocol):
    """Operations the pipeline and API need from persistent storage."""

    def upsert_player(self, player: PlayerIdentity) -> int:
        """Insert or refresh a player keyed by savant_id; return its row id."""
        ...

    def upsert_hitting_line(self, player_id: int, line: HittingLine) -> None:
        """Insert or replace the (player, season) hitting row."""
        ...

    def update_batted_ball(self, line: BattedBallLine) -> bool:
        """Patch batted-ball rates onto an existing row; False if none matched."""
        ...

    def get_data_summary(self, season: int) -> dict[str, Any]:
        ...

    def query_hitting_stats(
        self, season: int, position: Optional[str] = None, limit: int = 50
    ) -> list[dict[str, Any]]:
        ...

    def list_stat_packages(self) -> list[dict[str, Any]]:
        ...

    def get_stat_package(self, package_id: str) -> Optional[dict[str, Any]]:
        ...

    def create_room(
        self,
        room_id: str,
        name: str,
        creator_name: str,
        max_teams: int,
        stat_package: Optional[str],
    ) -> None:
        ...

    def get_room(self, room_id: str) -> Optional[dict[str, Any]]:
        ...


def decode_stat_package(row: dict[str, Any]) -> dict[str, Any]:
    """Deserialize the JSON category columns of a stat package row."""
    package = dict(row)
    for column in CATEGORY_COLUMNS:
        try:
            package[column] = json.loads(package[column])
        except (TypeError, json.JSONDecodeError) as e:
            raise QueryError(
                f"Stat package {package.get('id')} has unreadable {column}: {e}"
            ) from e
    return package


class SqliteStatStore:
    """StatStore backed by an open sqlite3 connection (row_factory=Row)."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert_player(self, player: PlayerIdentity) -> int:
        try:
            row = self.conn.execute(
                """INSERT INTO players
                   (savant_id, name, team, primary_position, active, last_updated)
                   VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                   ON CONFLICT(savant_id) DO UPDATE SET
                       team = excluded.team,
                       primary_position = excluded.primary_position,
                       active = excluded.active,
                       last_updated = CURRENT_TIMESTAMP
                   RETURNING id""",
                (
                    player.savant_id,
                    player.name,
                    player.team,
                    player.primary_position,
                    int(player.active),
                ),
            ).fetchone()
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise RecordWriteError(f"player {player.savant_id}: {e}") from e
        return row["id"]

    def upsert_hitting_line(self, player_id: int, line: HittingLine) -> None:
        columns = ", ".join(HITTING_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in HITTING_COLUMNS)
        updates = ",\n".join(f"{c} = excluded.{c}" for c in HITTING_COLUMNS)
        params = line.as_row()
        params["player_id"] = player_id
        try:
            self.conn.execute(
                f"""INSERT INTO hitting_stats
                    (player_id, season, {columns}, last_updated)
                    VALUES (:player_id, :season, {placeholders}, CURRENT_TIMESTAMP)
                    ON CONFLICT(player_id, season) DO UPDATE SET
                    {updates},
                    last_updated = CURRENT_TIMESTAMP""",  # nosec B608
                params,
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise RecordWriteError(
                f"hitting line player_id={player_id} season={line.season}: {e}"
            ) from e

    def update_batted_ball(self, line: BattedBallLine) -> bool:
        try:
            cursor = self.conn.execute(
                """UPDATE hitting_stats
                   SET ground_ball_rate = :ground_ball_rate,
                       fly_ball_rate = :fly_ball_rate,
                       line_drive_rate = :line_drive_rate,
                       pull_rate = :pull_rate,
                       opposite_field_rate = :opposite_field_rate,
                       last_updated = CURRENT_TIMESTAMP
                   WHERE player_id = (SELECT id FROM players WHERE savant_id = :savant_id)
                     AND season = :season""",
                line.as_row(),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise RecordWriteError(f"batted ball {line.savant_id}: {e}") from e
        return cursor.rowcount > 0

    def create_room(
        self,
        room_id: str,
        name: str,
        creator_name: str,
        max_teams: int,
        stat_package: Optional[str],
    ) -> None:
        try:
            self.conn.execute(
                """INSERT INTO draft_rooms (id, name, creator_name, max_teams, stat_package)
                   VALUES (?, ?, ?, ?, ?)""",
                (room_id, name, creator_name, max_teams, stat_package),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise RecordWriteError(f"draft room {room_id}: {e}") from e

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _fetchall(self, query: str, params=()) -> list[dict[str, Any]]:
        try:
            rows = self.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e
        return [dict(row) for row in rows]

    def _fetchone(self, query: str, params=()) -> Optional[dict[str, Any]]:
        try:
            row = self.conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e
        return dict(row) if row else None

    def get_data_summary(self, season: int) -> dict[str, Any]:
        """Aggregate figures reported at the end of a scrape run."""
        summary = self._fetchone(
            """SELECT
                COUNT(*) as total_players,
                COUNT(CASE WHEN h.barrels > 0 THEN 1 END) as players_with_barrels,
                AVG(h.xwoba) as avg_xwoba,
                AVG(h.wrc_plus) as avg_wrc_plus,
                MAX(h.barrels) as max_barrels,
                MAX(h.max_exit_velocity) as max_exit_velocity
            FROM players p
            JOIN hitting_stats h ON p.id = h.player_id
            WHERE h.season = ?""",
            (season,),
        )
        return summary or {}

    def query_hitting_stats(
        self, season: int, position: Optional[str] = None, limit: int = 50
    ) -> list[dict[str, Any]]:
        """Season stat lines joined to players, best barrel totals first."""
        query = """
            SELECT p.*, h.season, h.barrels, h.xwoba, h.max_exit_velocity,
                   h.hard_hit_percent, h.avg_exit_velocity, h.home_runs,
                   h.plate_appearances
            FROM players p
            JOIN hitting_stats h ON p.id = h.player_id
            WHERE h.season = ?
        """
        params: list[Any] = [season]

        if position and position.upper() != "ALL":
            query += " AND p.primary_position = ?"
            params.append(position)

        query += " ORDER BY h.barrels DESC, p.name LIMIT ?"
        params.append(int(limit))

        return self._fetchall(query, params)

    def list_stat_packages(self) -> list[dict[str, Any]]:
        rows = self._fetchall("SELECT * FROM stat_packages ORDER BY rowid")
        return [decode_stat_package(row) for row in rows]

    def get_stat_package(self, package_id: str) -> Optional[dict[str, Any]]:
        row = self._fetchone("SELECT * FROM stat_packages WHERE id = ?", (package_id,))
        return decode_stat_package(row) if row else None

    def get_room(self, room_id: str) -> Optional[dict[str, Any]]:
        return self._fetchone("SELECT * FROM draft_rooms WHERE id = ?", (room_id,))

    def has_table(self, table: str) -> bool:
        row = self._fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name = ?", (table,)
        )
        return row is not None

    def count_rows(self, table: str) -> int:
        # table names come from code, never from requests
        row = self._fetchone(f"SELECT COUNT(*) as count FROM {table}")  # nosec B608
        return row["count"] if row else 0
