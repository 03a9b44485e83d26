"""
Baseball Draft Stats Database Module

SQLite schema, preset stat packages, and connection helpers.
"""

import argparse
import json
import sqlite3
from pathlib import Path
from contextlib import contextmanager

from config import DB_PATH, setup_logging

logger = setup_logging(__name__)

SCHEMA = """
-- Players
CREATE TABLE IF NOT EXISTS players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    savant_id TEXT NOT NULL UNIQUE,   -- Baseball Savant entity id
    name TEXT NOT NULL,
    team TEXT,
    primary_position TEXT,            -- P, C, 1B, 2B, 3B, SS, LF, CF, RF, DH, OF
    birthdate TEXT,                   -- YYYY-MM-DD
    age INTEGER,
    bats TEXT,                        -- L, R, S
    throws TEXT,                      -- L, R
    active INTEGER DEFAULT 1,
    last_updated TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Season hitting lines (one row per player per season)
CREATE TABLE IF NOT EXISTS hitting_stats (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    player_id INTEGER NOT NULL,
    season INTEGER NOT NULL,

    -- Counting stats
    games_played INTEGER DEFAULT 0,
    plate_appearances INTEGER DEFAULT 0,
    at_bats INTEGER DEFAULT 0,
    hits INTEGER DEFAULT 0,
    runs INTEGER DEFAULT 0,
    rbi INTEGER DEFAULT 0,
    home_runs INTEGER DEFAULT 0,
    doubles INTEGER DEFAULT 0,
    triples INTEGER DEFAULT 0,
    stolen_bases INTEGER DEFAULT 0,
    walks INTEGER DEFAULT 0,
    strikeouts INTEGER DEFAULT 0,
    barrels INTEGER DEFAULT 0,

    -- Advanced metrics (NULL = not measured)
    wrc_plus REAL,
    xwoba REAL,
    xba REAL,
    xslg REAL,
    hard_hit_percent REAL,
    max_exit_velocity REAL,
    avg_exit_velocity REAL,
    max_distance REAL,
    avg_launch_angle REAL,
    sweet_spot_percent REAL,

    -- Batted-ball profile (patched from the batted-ball leaderboard)
    ground_ball_rate REAL,
    fly_ball_rate REAL,
    line_drive_rate REAL,
    pull_rate REAL,
    opposite_field_rate REAL,

    last_updated TEXT DEFAULT CURRENT_TIMESTAMP,

    FOREIGN KEY (player_id) REFERENCES players(id),
    UNIQUE (player_id, season)
);

-- Preset scoring category bundles
CREATE TABLE IF NOT EXISTS stat_packages (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    philosophy TEXT,
    hitting_categories TEXT NOT NULL,   -- JSON array
    pitching_categories TEXT NOT NULL   -- JSON array
);

-- Draft rooms
CREATE TABLE IF NOT EXISTS draft_rooms (
    id TEXT PRIMARY KEY,               -- 6-char share token
    name TEXT NOT NULL,
    creator_name TEXT NOT NULL,
    max_teams INTEGER NOT NULL,
    stat_package TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (stat_package) REFERENCES stat_packages(id)
);

CREATE INDEX IF NOT EXISTS idx_hitting_stats_season ON hitting_stats(season);
CREATE INDEX IF NOT EXISTS idx_players_position ON players(primary_position);
"""

# (id, name, philosophy, hitting_categories, pitching_categories)
STAT_PACKAGES_DATA = [
    (
        "traditional",
        "Traditional 5x5",
        "Classic rotisserie categories that reward volume and batting average.",
        ["R", "HR", "RBI", "SB", "AVG"],
        ["W", "SV", "K", "ERA", "WHIP"],
    ),
    (
        "sabermetric",
        "Sabermetric",
        "On-base and power skills over counting luck; quality starts over wins.",
        ["R", "HR", "RBI", "SB", "OBP", "SLG"],
        ["QS", "SV+HLD", "K", "ERA", "WHIP", "K/BB"],
    ),
    (
        "statcast",
        "Statcast Contact Quality",
        "Scores how hard and how well hitters make contact, not the outcomes.",
        ["BARRELS", "XWOBA", "HARD_HIT_PCT", "MAX_EV", "SWEET_SPOT_PCT"],
        ["K", "XERA", "WHIFF_PCT", "BARREL_PCT_AGAINST", "CSW_PCT"],
    ),
    (
        "points",
        "Head-to-Head Points",
        "Every event is worth points, so durable everyday players rise.",
        ["1B", "2B", "3B", "HR", "R", "RBI", "BB", "SB", "K"],
        ["IP", "K", "W", "SV", "ER", "H", "BB"],
    ),
]


@contextmanager
def get_connection(check_same_thread: bool = True):
    """Database connection context manager.

    Args:
        check_same_thread: Pass False when the connection is handed between
            threadpool threads, as the API request dependency does.
    """
    conn = None
    try:
        conn = sqlite3.connect(DB_PATH, check_same_thread=check_same_thread)
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        if conn:
            conn.close()


def init_db(reset: bool = False):
    """Initialize database with schema and preset stat packages.

    Args:
        reset: Delete an existing database file first (development only).
    """
    db_file = Path(DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    if reset and db_file.exists():
        db_file.unlink()
        logger.info(f"Removed existing database at {DB_PATH}")

    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.executescript(SCHEMA)

        cursor.executemany(
            """INSERT OR IGNORE INTO stat_packages
               (id, name, philosophy, hitting_categories, pitching_categories)
               VALUES (?, ?, ?, ?, ?)""",
            [
                (pkg_id, name, philosophy, json.dumps(hitting), json.dumps(pitching))
                for pkg_id, name, philosophy, hitting, pitching in STAT_PACKAGES_DATA
            ],
        )

        conn.commit()
        logger.info(f"Database initialized at {DB_PATH}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the draft stats database")
    parser.add_argument(
        "--reset", action="store_true", help="delete the existing database first"
    )
    args = parser.parse_args()
    init_db(reset=args.reset)
    print(f"Database initialized at {DB_PATH}")
