"""Field mapping from Baseball Savant leaderboard rows to canonical records.

Savant rows are loosely typed: numbers may arrive as strings, keys may be
missing, and values may be null. Rows are validated once at this boundary;
everything downstream works with the frozen dataclasses defined here.

Defaults follow one rule: a missing counting stat is ``0``, a missing rate or
advanced metric is ``None`` ("not measured", which is not the same as zero).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

POSITION_CODES = {
    "1": "P",
    "2": "C",
    "3": "1B",
    "4": "2B",
    "5": "3B",
    "6": "SS",
    "7": "LF",
    "8": "CF",
    "9": "RF",
    "10": "DH",
}
DEFAULT_POSITION = "OF"

# canonical column -> Savant field
COUNTING_FIELDS = {
    "games_played": "g",
    "plate_appearances": "pa",
    "at_bats": "ab",
    "hits": "h",
    "runs": "r",
    "rbi": "rbi",
    "home_runs": "hr",
    "doubles": "doubles",
    "triples": "triples",
    "stolen_bases": "sb",
    "walks": "bb",
    "strikeouts": "k",
    "barrels": "barrel_ct",
}

RATE_FIELDS = {
    "xwoba": "est_woba",
    "xba": "est_ba",
    "xslg": "est_slg",
    "hard_hit_percent": "hard_hit_percent",
    "max_exit_velocity": "exit_velocity_max",
    "avg_exit_velocity": "exit_velocity_avg",
    "max_distance": "distance_max",
    "avg_launch_angle": "launch_angle_avg",
    "sweet_spot_percent": "sweet_spot_percent",
}

BATTED_BALL_FIELDS = {
    "ground_ball_rate": "gb_rate",
    "fly_ball_rate": "fb_rate",
    "line_drive_rate": "ld_rate",
    "pull_rate": "pull_rate",
    "opposite_field_rate": "oppo_rate",
}


# =============================================================================
# Source rows
# =============================================================================


class _SavantRow(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SavantHitterRow(_SavantRow):
    """One row of the Statcast hitting leaderboard."""

    entity_id: str
    entity_name: str
    entity_team_name: Optional[str] = None
    pos: Optional[str] = None

    g: Optional[int] = None
    pa: Optional[int] = None
    ab: Optional[int] = None
    h: Optional[int] = None
    r: Optional[int] = None
    rbi: Optional[int] = None
    hr: Optional[int] = None
    doubles: Optional[int] = None
    triples: Optional[int] = None
    sb: Optional[int] = None
    bb: Optional[int] = None
    k: Optional[int] = None
    barrel_ct: Optional[int] = None

    est_woba: Optional[float] = None
    est_ba: Optional[float] = None
    est_slg: Optional[float] = None
    hard_hit_percent: Optional[float] = None
    exit_velocity_max: Optional[float] = None
    exit_velocity_avg: Optional[float] = None
    distance_max: Optional[float] = None
    launch_angle_avg: Optional[float] = None
    sweet_spot_percent: Optional[float] = None


class SavantBattedBallRow(_SavantRow):
    """One row of the batted-ball profile leaderboard."""

    savant_batter_id: str
    gb_rate: Optional[float] = None
    fb_rate: Optional[float] = None
    ld_rate: Optional[float] = None
    pull_rate: Optional[float] = None
    oppo_rate: Optional[float] = None


# =============================================================================
# Canonical records
# =============================================================================


@dataclass(frozen=True)
class PlayerIdentity:
    savant_id: str
    name: str
    team: Optional[str]
    primary_position: str
    active: bool = True


@dataclass(frozen=True)
class HittingLine:
    """Season hitting line keyed by (player, season)."""

    season: int
    games_played: int = 0
    plate_appearances: int = 0
    at_bats: int = 0
    hits: int = 0
    runs: int = 0
    rbi: int = 0
    home_runs: int = 0
    doubles: int = 0
    triples: int = 0
    stolen_bases: int = 0
    walks: int = 0
    strikeouts: int = 0
    barrels: int = 0
    wrc_plus: Optional[float] = None  # not published on the Statcast leaderboard
    xwoba: Optional[float] = None
    xba: Optional[float] = None
    xslg: Optional[float] = None
    hard_hit_percent: Optional[float] = None
    max_exit_velocity: Optional[float] = None
    avg_exit_velocity: Optional[float] = None
    max_distance: Optional[float] = None
    avg_launch_angle: Optional[float] = None
    sweet_spot_percent: Optional[float] = None

    def as_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HitterRecord:
    player: PlayerIdentity
    hitting: HittingLine


@dataclass(frozen=True)
class BattedBallLine:
    savant_id: str
    season: int
    ground_ball_rate: Optional[float] = None
    fly_ball_rate: Optional[float] = None
    line_drive_rate: Optional[float] = None
    pull_rate: Optional[float] = None
    opposite_field_rate: Optional[float] = None

    def as_row(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Mapping
# =============================================================================


def map_position(code: Any) -> str:
    """Translate a Savant numeric position code into a position label."""
    if code is None:
        return DEFAULT_POSITION
    return POSITION_CODES.get(str(code).strip(), DEFAULT_POSITION)


def map_hitter(raw: Mapping[str, Any], season: int) -> HitterRecord:
    """Map one Statcast leaderboard row to a canonical hitter record.

    Raises:
        pydantic.ValidationError: the row has no id/name or a value that
            cannot be read as a number.
    """
    row = SavantHitterRow.model_validate(raw)

    player = PlayerIdentity(
        savant_id=row.entity_id,
        name=row.entity_name,
        team=row.entity_team_name,
        primary_position=map_position(row.pos),
    )

    counting = {
        column: getattr(row, source) or 0 for column, source in COUNTING_FIELDS.items()
    }
    rates = {column: getattr(row, source) for column, source in RATE_FIELDS.items()}

    return HitterRecord(player=player, hitting=HittingLine(season=season, **counting, **rates))


def map_batted_ball(raw: Mapping[str, Any], season: int) -> BattedBallLine:
    """Map one batted-ball leaderboard row to its rate columns."""
    row = SavantBattedBallRow.model_validate(raw)
    rates = {
        column: getattr(row, source) for column, source in BATTED_BALL_FIELDS.items()
    }
    return BattedBallLine(savant_id=row.savant_batter_id, season=season, **rates)
