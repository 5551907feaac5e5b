"""Hand-off of parsed samples to downstream consumers."""

from __future__ import annotations

import asyncio

from .models import Sample


async def publish(channel: asyncio.Queue[Sample], sample: Sample) -> bool:
    """Put a non-empty sample on the channel; waits while a bounded channel is full.

    Returns False (and publishes nothing) for an empty sample.
    """
    if not sample:
        return False
    await channel.put(sample)
    return True
