#!/usr/bin/env python3
"""Baseball Savant scrape pipeline.

Fetches the Statcast hitting leaderboard, waits out a cool-down, fetches the
batted-ball leaderboard, and writes both into SQLite. Stages run strictly in
order:

    IDLE -> FETCHING_PRIMARY -> COOLING -> FETCHING_SECONDARY
         -> SUMMARIZING -> DONE

A failure inside a fetching stage is logged and that stage reports zero
rows; the run always continues to the next stage. The CLI exits 1 when the
store cannot be opened and 2 when every fetch stage failed.
"""

import argparse
import asyncio
import enum
import json
import sys
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

import httpx

import database
from config import (
    BATTED_BALL_LEADERBOARD_URL,
    COOL_DOWN_SECONDS,
    CURRENT_SEASON,
    MIN_PA,
    STATCAST_LEADERBOARD_URL,
    TIMEOUT,
    setup_logging,
)
from errors import StatsError
from extract import describe_fields, scrape_leaderboard
from storage import SqliteStatStore, StatStore
from upsert import UpsertResult, save_hitting_data, update_batted_ball_data

logger = setup_logging("scraper")


class ScrapeState(enum.Enum):
    IDLE = "idle"
    FETCHING_PRIMARY = "fetching_primary"
    COOLING = "cooling"
    FETCHING_SECONDARY = "fetching_secondary"
    SUMMARIZING = "summarizing"
    DONE = "done"


NEXT_STATE = {
    ScrapeState.IDLE: ScrapeState.FETCHING_PRIMARY,
    ScrapeState.FETCHING_PRIMARY: ScrapeState.COOLING,
    ScrapeState.COOLING: ScrapeState.FETCHING_SECONDARY,
    ScrapeState.FETCHING_SECONDARY: ScrapeState.SUMMARIZING,
    ScrapeState.SUMMARIZING: ScrapeState.DONE,
}

# report.errors keys of the stages that fetch pages
FETCH_STAGES = {"hitting", "batted_ball"}


@dataclass
class ScrapeReport:
    season: int
    hitting: UpsertResult = field(default_factory=UpsertResult)
    batted_ball: UpsertResult = field(default_factory=UpsertResult)
    summary: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    states: list[ScrapeState] = field(default_factory=list)


class ScrapeRun:
    """One pass of the two-source scrape.

    Args:
        store: Storage the rows are written to
        client: HTTP client; one is created (and closed) per run when omitted
        season: Season year for URLs and stat rows
        min_pa: Plate-appearance qualifier passed to the leaderboards
        cooldown: Seconds to wait between the two fetches
        sleep: Awaitable sleep, replaceable in tests
    """

    def __init__(
        self,
        store: StatStore,
        client: Optional[httpx.AsyncClient] = None,
        season: int = CURRENT_SEASON,
        min_pa: int = MIN_PA,
        cooldown: float = COOL_DOWN_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.store = store
        self.client = client
        self.season = season
        self.min_pa = min_pa
        self.cooldown = cooldown
        self.sleep = sleep
        self.state = ScrapeState.IDLE
        self.report = ScrapeReport(season=season)
        self._handlers = {
            ScrapeState.IDLE: self._start,
            ScrapeState.FETCHING_PRIMARY: self._fetch_primary,
            ScrapeState.COOLING: self._cool_down,
            ScrapeState.FETCHING_SECONDARY: self._fetch_secondary,
            ScrapeState.SUMMARIZING: self._summarize,
        }

    @property
    def statcast_url(self) -> str:
        return STATCAST_LEADERBOARD_URL.format(season=self.season, min_pa=self.min_pa)

    @property
    def batted_ball_url(self) -> str:
        return BATTED_BALL_LEADERBOARD_URL.format(season=self.season, min_pa=self.min_pa)

    async def run(self) -> ScrapeReport:
        owns_client = self.client is None
        if owns_client:
            self.client = httpx.AsyncClient(timeout=TIMEOUT, follow_redirects=True)

        try:
            while self.state is not ScrapeState.DONE:
                self.report.states.append(self.state)
                await self._handlers[self.state]()
                self.state = NEXT_STATE[self.state]
            self.report.states.append(self.state)
        finally:
            if owns_client:
                await self.client.aclose()
                self.client = None

        return self.report

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    async def _start(self):
        logger.info(f"Starting Baseball Savant scrape for {self.season}")

    async def _fetch_primary(self):
        try:
            rows = await scrape_leaderboard(self.client, self.statcast_url)
            self.report.hitting = save_hitting_data(self.store, rows, self.season)
        except Exception as e:
            self.report.errors["hitting"] = str(e)
            logger.error(f"Error scraping hitting data: {e}")

    async def _cool_down(self):
        logger.info(f"Waiting {self.cooldown:g} seconds before next request...")
        await self.sleep(self.cooldown)

    async def _fetch_secondary(self):
        try:
            rows = await scrape_leaderboard(self.client, self.batted_ball_url)
            self.report.batted_ball = update_batted_ball_data(
                self.store, rows, self.season
            )
        except Exception as e:
            self.report.errors["batted_ball"] = str(e)
            logger.error(f"Error scraping batted ball data: {e}")

    async def _summarize(self):
        try:
            self.report.summary = self.store.get_data_summary(self.season)
        except Exception as e:
            self.report.errors["summary"] = str(e)
            logger.error(f"Error building data summary: {e}")
        log_report(self.report)


def log_report(report: ScrapeReport):
    summary = report.summary
    logger.info(f"Statcast hitting data: {report.hitting.written} players")
    logger.info(f"Batted ball data: {report.batted_ball.written} players")
    logger.info(f"Total players: {summary.get('total_players') or 0}")
    logger.info(f"Players with barrels: {summary.get('players_with_barrels') or 0}")
    logger.info(f"Average xwOBA: {summary.get('avg_xwoba') or 0:.3f}")
    logger.info(f"Max barrels: {summary.get('max_barrels') or 0}")
    logger.info(f"Max exit velocity: {summary.get('max_exit_velocity') or 0} mph")
    if report.errors:
        logger.warning(f"Completed with stage errors: {sorted(report.errors)}")
    else:
        logger.info("Scraping completed successfully")


async def dump_fields(season: int, min_pa: int) -> dict[str, Any]:
    """Fetch the Statcast leaderboard and describe its field names."""
    url = STATCAST_LEADERBOARD_URL.format(season=season, min_pa=min_pa)
    async with httpx.AsyncClient(timeout=TIMEOUT, follow_redirects=True) as client:
        rows = await scrape_leaderboard(client, url)
    return describe_fields(rows)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Baseball Savant scrape")
    parser.add_argument("--season", type=int, default=CURRENT_SEASON)
    parser.add_argument("--min-pa", type=int, default=MIN_PA)
    parser.add_argument("--cooldown", type=float, default=COOL_DOWN_SECONDS)
    parser.add_argument(
        "--init-db", action="store_true", help="create tables and seed data first"
    )
    parser.add_argument(
        "--dump-fields",
        action="store_true",
        help="print the leaderboard field names and exit",
    )
    args = parser.parse_args(argv)

    if args.dump_fields:
        try:
            fields = asyncio.run(dump_fields(args.season, args.min_pa))
        except StatsError as e:
            logger.error(f"Field dump failed: {e}")
            return 1
        print(json.dumps(fields, indent=2))
        return 0

    try:
        if args.init_db:
            database.init_db()
        with database.get_connection() as conn:
            store = SqliteStatStore(conn)
            report = asyncio.run(
                ScrapeRun(
                    store, season=args.season, min_pa=args.min_pa, cooldown=args.cooldown
                ).run()
            )
    except Exception as e:
        logger.error(f"Scraping failed: {e}")
        return 1

    if FETCH_STAGES.issubset(report.errors):
        logger.error("Every fetch stage failed, nothing was scraped")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
