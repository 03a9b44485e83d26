#!/usr/bin/env python3
"""
Baseball Draft Stats REST API

FastAPI application serving stat packages, draft rooms, and scraped
hitting data to the draft front end. Mounted under /api by server.py.
"""

import secrets
import string
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import database
from config import (
    CURRENT_SEASON,
    DEFAULT_PLAYER_LIMIT,
    MAX_PLAYER_LIMIT,
    ROOM_ID_LENGTH,
    setup_logging,
)
from errors import QueryError, RecordWriteError
from storage import SqliteStatStore, StatStore

logger = setup_logging("api")

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits


# =============================================================================
# Pydantic Models
# =============================================================================


class RoomCreate(BaseModel):
    name: str = Field(min_length=1)
    creator_name: str = Field(min_length=1)
    max_teams: int = Field(ge=2, le=30)
    stat_package: Optional[str] = None


class RoomCreated(BaseModel):
    roomId: str
    message: str
    shareUrl: str


# =============================================================================
# Helpers
# =============================================================================


def get_store():
    """Yield a store over a fresh connection for one request.

    FastAPI runs this dependency and the sync handler in its threadpool,
    possibly on different threads, so the connection skips the thread check.
    """
    with database.get_connection(check_same_thread=False) as conn:
        yield SqliteStatStore(conn)


def generate_room_id(length: int = ROOM_ID_LENGTH) -> str:
    """Random uppercase share token. Uniqueness is not checked."""
    return "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(length))


def parse_limit(value: Optional[str]) -> int:
    """Read the caller's row limit; anything unusable falls back to the default."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PLAYER_LIMIT
    if limit < 1:
        return DEFAULT_PLAYER_LIMIT
    return min(limit, MAX_PLAYER_LIMIT)


# =============================================================================
# FastAPI Application
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    database.init_db()
    logger.info("API server started")
    yield
    logger.info("API server stopped")


app = FastAPI(
    title="Baseball Draft Stats API",
    description="Stat packages, draft rooms, and Statcast hitting data",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    logger.error(f"Query failed on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# =============================================================================
# API Endpoints
# =============================================================================


@app.get("/stat-packages")
def api_get_stat_packages(store: StatStore = Depends(get_store)):
    """List preset stat packages with their category lists."""
    packages = store.list_stat_packages()
    logger.info(f"Found {len(packages)} stat packages")
    if not packages:
        raise HTTPException(
            status_code=500,
            detail="No stat packages found - database may not be initialized",
        )
    return packages


@app.post("/rooms", response_model=RoomCreated)
def api_create_room(
    room: RoomCreate, request: Request, store: StatStore = Depends(get_store)
):
    """Create a draft room and return its share link."""
    room_id = generate_room_id()
    try:
        store.create_room(
            room_id, room.name, room.creator_name, room.max_teams, room.stat_package
        )
    except RecordWriteError as e:
        logger.error(f"Failed to create room: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Created draft room {room_id} for {room.creator_name}")
    return {
        "roomId": room_id,
        "message": "Draft room created successfully",
        "shareUrl": f"{request.url.scheme}://{request.url.netloc}/join/{room_id}",
    }


@app.get("/rooms/{room_id}")
def api_get_room(room_id: str, store: StatStore = Depends(get_store)):
    """Get a draft room with its stat package resolved."""
    room = store.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    package = None
    if room.get("stat_package"):
        package = store.get_stat_package(room["stat_package"])
    return {**room, "stat_package_details": package}


@app.get("/players")
def api_get_players(
    position: Optional[str] = Query(default=None, description="Position, e.g. SS or ALL"),
    limit: Optional[str] = Query(
        default=None, description=f"Max rows (default {DEFAULT_PLAYER_LIMIT})"
    ),
    store: StatStore = Depends(get_store),
):
    """Current-season hitters, most barrels first."""
    return store.query_hitting_stats(
        CURRENT_SEASON, position=position, limit=parse_limit(limit)
    )


@app.get("/debug")
def api_debug(store: SqliteStatStore = Depends(get_store)):
    """Report whether the stat package table exists and how many rows it has."""
    if not store.has_table("stat_packages"):
        return {"error": "stat_packages table does not exist", "dbPath": database.DB_PATH}
    return {
        "status": "Database OK",
        "tableExists": True,
        "statPackageCount": store.count_rows("stat_packages"),
        "dbPath": database.DB_PATH,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)  # nosec B104
