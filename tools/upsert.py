"""Merge mapped leaderboard rows into the store.

Each row is handled on its own: a row that fails validation or cannot be
written is logged and counted, and the rest of the batch still runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from config import setup_logging
from errors import RecordWriteError
from mapping import map_batted_ball, map_hitter
from storage import StatStore

logger = setup_logging("upsert")


@dataclass
class UpsertResult:
    """Counts for one batch."""

    attempted: int = 0
    written: int = 0
    skipped: int = 0
    failed: int = 0


def _describe(raw: Mapping[str, Any]) -> str:
    for key in ("entity_name", "entity_id", "savant_batter_id"):
        if isinstance(raw, Mapping) and raw.get(key):
            return str(raw[key])
    return "<unknown>"


def save_hitting_data(
    store: StatStore, rows: Iterable[Mapping[str, Any]], season: int
) -> UpsertResult:
    """Upsert players and their season hitting lines.

    For each row: player upsert keyed by savant_id, then the (player, season)
    hitting line using the resolved player id.
    """
    result = UpsertResult()

    for raw in rows:
        result.attempted += 1
        try:
            record = map_hitter(raw, season)
            player_id = store.upsert_player(record.player)
            store.upsert_hitting_line(player_id, record.hitting)
        except (ValidationError, RecordWriteError) as e:
            result.failed += 1
            logger.error(f"Error saving data for {_describe(raw)}: {e}")
            continue
        result.written += 1

    logger.info(
        f"Saved {result.written}/{result.attempted} hitting records "
        f"({result.failed} failed)"
    )
    return result


def update_batted_ball_data(
    store: StatStore, rows: Iterable[Mapping[str, Any]], season: int
) -> UpsertResult:
    """Patch batted-ball rates onto existing hitting lines.

    Rows whose player has no hitting line for the season are skipped; they
    are not inserted and not treated as failures.
    """
    result = UpsertResult()

    for raw in rows:
        result.attempted += 1
        try:
            line = map_batted_ball(raw, season)
            matched = store.update_batted_ball(line)
        except (ValidationError, RecordWriteError) as e:
            result.failed += 1
            logger.error(f"Error updating batted ball data for {_describe(raw)}: {e}")
            continue

        if matched:
            result.written += 1
        else:
            result.skipped += 1
            logger.debug(f"No {season} hitting line for {line.savant_id}, skipped")

    logger.info(
        f"Updated batted ball data for {result.written}/{result.attempted} players "
        f"({result.skipped} unmatched, {result.failed} failed)"
    )
    return result
