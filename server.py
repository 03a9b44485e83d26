#!/usr/bin/env python3
"""
Baseball Draft Stats Server

Combined server providing:
- REST API endpoints (/api/*)
- Health check (/health)
- Once-a-day Baseball Savant scrape before start-up
"""

import datetime
import json
import os
import subprocess  # nosec B404
import sys
from contextlib import asynccontextmanager

# Add tools directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "tools"))

from fastapi import FastAPI

import database
from config import CURRENT_SEASON, HOST, PORT, STATUS_PATH, setup_logging
from api import app as api_app

logger = setup_logging("server")


def load_status():
    """Load scrape status from the status file."""
    if not os.path.exists(STATUS_PATH):
        return {}
    try:
        with open(STATUS_PATH, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load status file: {e}")
        return {}


def save_status(status):
    """Save scrape status to the status file."""
    os.makedirs(os.path.dirname(STATUS_PATH), exist_ok=True)
    with open(STATUS_PATH, "w", encoding="utf-8") as f:
        json.dump(status, f, ensure_ascii=False, indent=2)


def run_scrape_if_needed():
    """Run the scraper unless today's run already succeeded.

    The subprocess runs to completion; it is never cut short mid-write.
    """
    today = datetime.date.today().strftime("%Y%m%d")
    status = load_status()

    if status.get("date") == today:
        logger.info("Data is up to date, skipping scrape")
        return False

    logger.info(f"Starting daily scrape for {today}")

    cmd = [
        sys.executable,
        "tools/scraper.py",
        "--season",
        str(CURRENT_SEASON),
        "--init-db",
    ]

    try:
        result = subprocess.run(  # nosec B603
            cmd,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            logger.error(f"Scrape failed with code {result.returncode}")
            if result.stderr:
                logger.error(f"stderr: {result.stderr}")
            return False

        save_status({"date": today})
        logger.info("Scrape completed successfully")
        return True

    except subprocess.SubprocessError as e:
        logger.error(f"Subprocess error during scrape: {e}")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Mounted sub-apps do not get lifespan events of their own
    database.init_db()
    yield


# Create main app that includes API routes
app = FastAPI(
    title="Baseball Draft Stats",
    description="Fantasy baseball draft rooms backed by Statcast data",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


# Mount API routes
app.mount("/api", api_app)

# Get the base directory for the data and tools directories
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def main():
    """Main entry point."""
    import uvicorn

    os.chdir(BASE_DIR)
    os.makedirs("data", exist_ok=True)

    # Scrape before serving unless SKIP_SCRAPE is set
    if not os.getenv("SKIP_SCRAPE"):
        try:
            run_scrape_if_needed()
        except Exception as exc:
            logger.warning(f"Scrape failed, serving existing data: {exc}")

    logger.info(f"Starting server on http://localhost:{PORT}")
    logger.info(f"API docs available at http://localhost:{PORT}/api/docs")

    uvicorn.run(
        app,
        host=HOST or "0.0.0.0",  # nosec B104 - intentional for dev server
        port=PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
