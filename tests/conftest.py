"""
Shared pytest fixtures for Baseball Draft Stats tests.
"""

import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add tools directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from errors import RecordWriteError  # noqa: E402


@pytest.fixture
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        temp_path = Path(f.name)
    yield temp_path
    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def test_db(temp_db_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Initialize a test database with schema and stat packages."""
    # Patch DB_PATH in database module
    import database

    monkeypatch.setattr(database, "DB_PATH", temp_db_path)

    # Initialize the database
    database.init_db()

    yield temp_db_path


@pytest.fixture
def store(test_db):
    """SqliteStatStore over a connection to the test database."""
    import database
    from storage import SqliteStatStore

    with database.get_connection() as conn:
        yield SqliteStatStore(conn)


class FakeStatStore:
    """In-memory StatStore used to test the pipeline without SQLite.

    Args:
        fail_on: savant_ids whose player upsert raises RecordWriteError
    """

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.players = {}
        self.hitting = {}
        self.packages = {}
        self.rooms = {}
        self.calls = []
        self._next_id = 1

    def upsert_player(self, player):
        self.calls.append(("upsert_player", player.savant_id))
        if player.savant_id in self.fail_on:
            raise RecordWriteError(f"player {player.savant_id}: forced failure")
        existing = self.players.get(player.savant_id)
        if existing:
            existing.update(
                team=player.team,
                primary_position=player.primary_position,
                active=int(player.active),
            )
            return existing["id"]
        row = {
            "id": self._next_id,
            "savant_id": player.savant_id,
            "name": player.name,
            "team": player.team,
            "primary_position": player.primary_position,
            "active": int(player.active),
        }
        self.players[player.savant_id] = row
        self._next_id += 1
        return row["id"]

    def upsert_hitting_line(self, player_id, line):
        self.calls.append(("upsert_hitting_line", player_id))
        key = (player_id, line.season)
        row = self.hitting.setdefault(key, {"player_id": player_id})
        row.update(line.as_row())

    def update_batted_ball(self, line):
        self.calls.append(("update_batted_ball", line.savant_id))
        player = self.players.get(line.savant_id)
        if not player or (player["id"], line.season) not in self.hitting:
            return False
        rates = line.as_row()
        rates.pop("savant_id")
        self.hitting[(player["id"], line.season)].update(rates)
        return True

    def _joined(self, season):
        by_id = {p["id"]: p for p in self.players.values()}
        return [
            {**by_id[pid], **row}
            for (pid, row_season), row in self.hitting.items()
            if row_season == season
        ]

    def get_data_summary(self, season):
        rows = self._joined(season)
        xwobas = [r["xwoba"] for r in rows if r.get("xwoba") is not None]
        return {
            "total_players": len(rows),
            "players_with_barrels": sum(1 for r in rows if r["barrels"] > 0),
            "avg_xwoba": sum(xwobas) / len(xwobas) if xwobas else None,
            "avg_wrc_plus": None,
            "max_barrels": max((r["barrels"] for r in rows), default=None),
            "max_exit_velocity": max(
                (r["max_exit_velocity"] for r in rows if r.get("max_exit_velocity")),
                default=None,
            ),
        }

    def query_hitting_stats(self, season, position=None, limit=50):
        rows = self._joined(season)
        if position and position.upper() != "ALL":
            rows = [r for r in rows if r["primary_position"] == position]
        rows.sort(key=lambda r: (-r["barrels"], r["name"]))
        return rows[:limit]

    def list_stat_packages(self):
        return list(self.packages.values())

    def get_stat_package(self, package_id):
        return self.packages.get(package_id)

    def create_room(self, room_id, name, creator_name, max_teams, stat_package):
        if room_id in self.rooms:
            raise RecordWriteError(f"draft room {room_id}: duplicate id")
        self.rooms[room_id] = {
            "id": room_id,
            "name": name,
            "creator_name": creator_name,
            "max_teams": max_teams,
            "stat_package": stat_package,
        }

    def get_room(self, room_id):
        return self.rooms.get(room_id)


@pytest.fixture
def fake_store():
    return FakeStatStore()


def make_hitter_row(entity_id=592450, name="Judge, Aaron", pos="9", **overrides):
    """Statcast leaderboard row as the page embeds it."""
    row = {
        "entity_id": entity_id,
        "entity_name": name,
        "entity_team_name": "NYY",
        "pos": pos,
        "g": 152,
        "pa": 679,
        "ab": 541,
        "h": 179,
        "r": 137,
        "rbi": 114,
        "hr": 53,
        "doubles": 30,
        "triples": 2,
        "sb": 12,
        "bb": 124,
        "k": 160,
        "barrel_ct": 88,
        "est_woba": "0.459",
        "est_ba": "0.301",
        "est_slg": "0.667",
        "hard_hit_percent": 58.2,
        "exit_velocity_max": 117.4,
        "exit_velocity_avg": 96.2,
        "distance_max": 468,
        "launch_angle_avg": 18.9,
        "sweet_spot_percent": 36.0,
    }
    row.update(overrides)
    return row


def make_batted_ball_row(savant_batter_id=592450, **overrides):
    """Batted-ball leaderboard row as the page embeds it."""
    row = {
        "savant_batter_id": savant_batter_id,
        "gb_rate": 0.331,
        "fb_rate": 0.412,
        "ld_rate": 0.218,
        "pull_rate": 0.452,
        "oppo_rate": 0.221,
    }
    row.update(overrides)
    return row


@pytest.fixture
def hitter_row():
    return make_hitter_row()


@pytest.fixture
def batted_ball_row():
    return make_batted_ball_row()
