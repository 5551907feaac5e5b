"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from myq_samples.core.interval import parse_interval
from myq_samples.core.pipeline import load_samples

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
BASE_DIR_ENV = "MYQ_SAMPLES_BASE_DIR"


class SamplesResponse(BaseModel):
    count: int = Field(ge=0, description="Number of samples returned.")
    interval_seconds: float = Field(ge=0.0, description="Minimum uptime delta between samples.")
    samples: list[dict[str, str]] = Field(
        default_factory=list, description="Parsed samples (lowercase field -> raw value)."
    )


def _base_dir() -> Path:
    """Return the resolved base directory for status logs."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


async def status_samples_impl(
    *,
    log_path: str,
    interval: str | None = None,
    fields: Sequence[str] | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `status_samples` MCP tool."""
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    min_interval = parse_interval(interval)
    samples = await load_samples(
        _safe_resolve(log_path),
        interval=min_interval,
        limit=limit,
        fields=fields or None,
    )

    return SamplesResponse(
        count=len(samples),
        interval_seconds=min_interval.total_seconds(),
        samples=samples,
    ).model_dump()
