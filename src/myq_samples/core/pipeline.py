"""Status log loading and sample iteration.

This module is the main integration point: it opens status dumps and runs the
segment -> throttle -> parse -> publish pipeline over them.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import os
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .interval import IntervalFilter, parse_interval
from .models import ParseStats, Sample
from .publisher import publish
from .record_parser import parse_record
from .segmenter import DEFAULT_CHUNK_SIZE, END_STRING, AsyncByteReader, RecordSegmenter

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 64


@asynccontextmanager
async def open_status_log(path: str | Path):
    """Open a status dump for async binary reading (plain or gzip)."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Status log not found: {path}")

    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rb")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, mode="rb") as f:
            yield f


def _resolve_positive_env(name: str, value: int | None, default: int) -> int:
    if value is not None:
        if value < 1:
            raise ValueError(f"{name.removeprefix('MYQ_SAMPLES_').lower()} must be >= 1")
        return value

    env = os.getenv(name)
    if not env:
        return default
    try:
        resolved = int(env)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if resolved < 1:
        raise ValueError(f"{name} must be >= 1")
    return resolved


def resolve_chunk_size(chunk_size: int | None = None) -> int:
    """Explicit chunk size, else MYQ_SAMPLES_CHUNK_SIZE, else the default."""
    return _resolve_positive_env("MYQ_SAMPLES_CHUNK_SIZE", chunk_size, DEFAULT_CHUNK_SIZE)


def resolve_queue_size(queue_size: int | None = None) -> int:
    """Explicit queue bound, else MYQ_SAMPLES_QUEUE_SIZE, else the default."""
    return _resolve_positive_env("MYQ_SAMPLES_QUEUE_SIZE", queue_size, DEFAULT_QUEUE_SIZE)


async def parse_samples(
    stream: AsyncByteReader,
    channel: asyncio.Queue[Sample],
    *,
    interval: str | float | timedelta | None = None,
    end_marker: str | bytes = END_STRING,
    chunk_size: int | None = None,
    encoding: str = "utf-8",
) -> ParseStats:
    """Parse every sample in ``stream`` and publish it on ``channel``.

    Read errors are logged and re-raised; malformed lines and empty records
    are dropped silently.
    """
    segmenter = RecordSegmenter(
        stream,
        end_marker=end_marker,
        interval_filter=IntervalFilter(parse_interval(interval)),
        chunk_size=resolve_chunk_size(chunk_size),
    )
    stats = ParseStats()

    try:
        async for record in segmenter:
            stats.records += 1
            sample = parse_record(record, encoding=encoding)
            if await publish(channel, sample):
                stats.published += 1
            else:
                stats.dropped_empty += 1
    except Exception:
        logger.exception("Reading status stream failed after %d records", stats.records)
        raise

    stats.skipped_interval = segmenter.skipped
    stats.records += segmenter.skipped
    logger.debug(
        "Parsed %s stream: %d records, %d published, %d skipped by interval, %d empty",
        segmenter.layout.value if segmenter.layout else "empty",
        stats.records,
        stats.published,
        stats.skipped_interval,
        stats.dropped_empty,
    )
    return stats


async def iter_samples(
    stream: AsyncByteReader,
    *,
    interval: str | float | timedelta | None = None,
    end_marker: str | bytes = END_STRING,
    chunk_size: int | None = None,
    queue_size: int | None = None,
    encoding: str = "utf-8",
) -> AsyncIterator[Sample]:
    """Yield samples in stream order from a producer task over a bounded queue."""
    channel: asyncio.Queue[object] = asyncio.Queue(maxsize=resolve_queue_size(queue_size))
    done_sentinel = object()
    errors: list[BaseException] = []

    async def producer() -> None:
        try:
            await parse_samples(
                stream,
                channel,
                interval=interval,
                end_marker=end_marker,
                chunk_size=chunk_size,
                encoding=encoding,
            )
        except Exception as exc:
            errors.append(exc)
        await channel.put(done_sentinel)

    producer_task = asyncio.create_task(producer())
    try:
        while True:
            item = await channel.get()
            if item is done_sentinel:
                break
            yield item

        if errors:
            raise errors[0]
    finally:
        producer_task.cancel()
        await asyncio.gather(producer_task, return_exceptions=True)


def _project(sample: Sample, fields: set[str] | None) -> Sample:
    if fields is None:
        return sample
    return {k: v for k, v in sample.items() if k in fields}


async def load_samples(
    log_path: str | Path,
    *,
    interval: str | float | timedelta | None = None,
    limit: int | None = None,
    fields: Iterable[str] | None = None,
    end_marker: str | bytes = END_STRING,
    chunk_size: int | None = None,
) -> list[Sample]:
    """Collect samples from a status log file into a list."""
    if limit is not None and limit <= 0:
        raise ValueError("limit must be > 0")

    wanted: set[str] | None = None
    if fields is not None:
        wanted = {f.strip().lower() for f in fields if f.strip()}
        if not wanted:
            raise ValueError("fields must name at least one field")

    out: list[Sample] = []
    async with open_status_log(log_path) as f:
        samples = iter_samples(f, interval=interval, end_marker=end_marker, chunk_size=chunk_size)
        try:
            async for sample in samples:
                sample = _project(sample, wanted)
                # none of the requested fields: nothing to return
                if not sample:
                    continue
                out.append(sample)
                if limit is not None and len(out) >= limit:
                    break
        finally:
            await samples.aclose()
    return out
