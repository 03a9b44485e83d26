#!/usr/bin/env python3
"""Centralized configuration for Baseball Draft Stats."""

import logging
import os

# URL Constants
SAVANT_BASE_URL = "https://baseballsavant.mlb.com"
STATCAST_LEADERBOARD_URL = SAVANT_BASE_URL + "/leaderboard/statcast?year={season}&abs={min_pa}"
BATTED_BALL_LEADERBOARD_URL = (
    SAVANT_BASE_URL + "/leaderboard/batted-ball?year={season}&abs={min_pa}"
)

# Variable name the leaderboard pages assign their JSON rows to
LEADERBOARD_VARIABLE = "leaderboard_data"

# Server Settings
HOST = os.getenv("HOST", "")
PORT = int(os.getenv("PORT", "3000"))

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(BASE_DIR, "data")
STATUS_PATH = os.path.join(DATA_DIR, "scrape_status.json")

# Render-style hosts only allow writes under /tmp
if os.getenv("APP_ENV") == "production":
    DB_PATH = os.getenv("DB_PATH", "/tmp/baseball_draft.db")  # nosec B108
else:
    DB_PATH = os.getenv("DB_PATH", os.path.join(DATA_DIR, "baseball_draft.db"))

# Season Settings
CURRENT_SEASON = int(os.getenv("CURRENT_SEASON", "2025"))
MIN_PA = 50  # qualifying plate appearances for leaderboard pages

# Request Settings
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
REQUEST_HEADERS = {"User-Agent": USER_AGENT}
TIMEOUT = 30
COOL_DOWN_SECONDS = 15.0

# API Settings
DEFAULT_PLAYER_LIMIT = 50
MAX_PLAYER_LIMIT = 500
ROOM_ID_LENGTH = 6


def setup_logging(name, level=logging.INFO):
    """Configure and return a logger with consistent formatting."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
