"""Pacing between consecutive upstream calls."""
from __future__ import annotations

import asyncio


async def pace(seconds: float) -> None:
    """Sleep for ``seconds`` to stay under upstream rate limits; no-op when non-positive."""
    if seconds <= 0:
        return
    await asyncio.sleep(seconds)
