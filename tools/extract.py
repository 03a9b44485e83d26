#!/usr/bin/env python3
"""Leaderboard page fetching and embedded JSON extraction.

Baseball Savant leaderboard pages render from a JSON array assigned to a
script variable (``var leaderboard_data = [...];``). This module fetches a
page and pulls that array back out.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterator

import httpx

from config import LEADERBOARD_VARIABLE, REQUEST_HEADERS, setup_logging
from errors import FetchError, NotFoundError, ParseError

logger = setup_logging("extract")

SCRIPT_BLOCK_RE = re.compile(r"<script\b[^>]*>(.*?)</script\s*>", re.S | re.I)


_decoder = json.JSONDecoder()


def _array_starts(variable: str) -> list[re.Pattern]:
    """Patterns ending at the opening bracket of the data array.

    Assignment form first, then the object-key form. The JSON decoder finds
    where the array ends, so the trailing semicolon is optional.
    """
    name = re.escape(variable)
    return [
        re.compile(name + r"\s*=\s*\["),
        re.compile(r"[\"']" + name + r"[\"']\s*:\s*\["),
    ]


async def fetch_page(client: httpx.AsyncClient, url: str) -> str:
    """Fetch a page body as text. No retries; failures raise FetchError."""
    try:
        response = await client.get(url, headers=REQUEST_HEADERS)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or e.__class__.__name__) from e

    logger.debug(f"Fetched: {url} ({len(response.text) // 1024}KB)")
    return response.text


def iter_script_blocks(html: str) -> Iterator[str]:
    for m in SCRIPT_BLOCK_RE.finditer(html):
        yield m.group(1)


def extract_leaderboard_data(
    html: str, variable: str = LEADERBOARD_VARIABLE
) -> list[dict[str, Any]]:
    """Extract the JSON array assigned to ``variable`` in an inline script.

    Args:
        html: Page HTML
        variable: Script variable (or object key) holding the rows

    Returns:
        List of row dicts in page order

    Raises:
        NotFoundError: no script mentions the variable, or no pattern matched
        ParseError: a pattern matched but nothing parsed as an array of objects
    """
    candidates = []
    for script in iter_script_blocks(html):
        if variable not in script:
            continue
        for pattern in _array_starts(variable):
            for m in pattern.finditer(script):
                candidates.append((script, m.end() - 1))

    if not candidates:
        raise NotFoundError(f"No script block assigns {variable}")

    last_error = None
    for script, start in candidates:
        try:
            data, _ = _decoder.raw_decode(script, start)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(data, list) and all(isinstance(item, dict) for item in data):
            return data
        last_error = ValueError(f"{variable} is not an array of objects")

    raise ParseError(f"Could not parse {variable}: {last_error}")


async def scrape_leaderboard(
    client: httpx.AsyncClient, url: str, variable: str = LEADERBOARD_VARIABLE
) -> list[dict[str, Any]]:
    """Fetch a leaderboard page and return its embedded rows."""
    html = await fetch_page(client, url)
    rows = extract_leaderboard_data(html, variable)
    logger.info(f"Found {len(rows)} rows at {url}")
    return rows


def describe_fields(rows: list[dict[str, Any]]) -> dict[str, Any]:
    """Summarize the field names of the first row.

    Used to spot renamed source fields when the leaderboard layout changes.
    """
    if not rows:
        return {"keys": [], "barrel_fields": {}, "wrc_fields": {}}

    sample = rows[0]
    keys = sorted(sample)
    return {
        "keys": keys,
        "barrel_fields": {
            k: sample[k] for k in keys if "barrel" in k.lower() or "brl" in k.lower()
        },
        "wrc_fields": {
            k: sample[k] for k in keys if "wrc" in k.lower() or "plus" in k.lower()
        },
    }
