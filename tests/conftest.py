from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

BATCH_SNAPSHOTS = [
    (
        "Aborted_clients\t0\n"
        "Questions\t1200\n"
        "Threads_connected\t3\n"
        "Uptime\t100\n"
        "Uptime_since_flush_status\t100\n"
    ),
    (
        "Aborted_clients\t1\n"
        "Questions\t1250\n"
        "Threads_connected\t4\n"
        "Uptime\t101\n"
        "Uptime_since_flush_status\t101\n"
    ),
    (
        "Aborted_clients\t1\n"
        "Questions\t1400\n"
        "Threads_connected\t2\n"
        "Uptime\t110\n"
        "Uptime_since_flush_status\t110\n"
    ),
]

_BORDER = "+---------------------------+-------+\n"


def tabular_snapshot(rows: Sequence[tuple[str, str]]) -> str:
    lines = [_BORDER, "| Variable_name             | Value |\n", _BORDER]
    for name, value in rows:
        lines.append(f"| {name:<25} | {value:<5} |\n")
    lines.append(_BORDER)
    return "".join(lines)


TABULAR_SNAPSHOTS = [
    tabular_snapshot(
        [
            ("Aborted_clients", "0"),
            ("Threads_connected", "3"),
            ("Uptime", "100"),
            ("Uptime_since_flush_status", "100"),
        ]
    ),
    tabular_snapshot(
        [
            ("Aborted_clients", "1"),
            ("Threads_connected", "4"),
            ("Uptime", "102"),
            ("Uptime_since_flush_status", "102"),
        ]
    ),
]


class ChunkedReader:
    """Async reader returning the payload in fixed-size chunks."""

    def __init__(self, data: bytes, *, chunk: int | None = None, fail_after: int | None = None) -> None:
        self._data = data
        self._pos = 0
        self._chunk = chunk
        self._fail_after = fail_after
        self.reads = 0

    async def read(self, n: int = -1) -> bytes:
        if self._fail_after is not None and self.reads >= self._fail_after:
            raise OSError("connection reset")
        self.reads += 1
        size = n if self._chunk is None else min(n, self._chunk)
        out = self._data[self._pos : self._pos + size]
        self._pos += len(out)
        return out


@pytest.fixture
def make_reader() -> Callable[..., ChunkedReader]:
    def _make(data: str | bytes, **kwargs) -> ChunkedReader:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return ChunkedReader(data, **kwargs)

    return _make


@pytest.fixture
def write_batch_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text("".join(BATCH_SNAPSHOTS), encoding="utf-8")

    return _write


@pytest.fixture
def write_tabular_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text("".join(TABULAR_SNAPSHOTS), encoding="utf-8")

    return _write


@pytest.fixture
def batch_text() -> str:
    return "".join(BATCH_SNAPSHOTS)


@pytest.fixture
def tabular_text() -> str:
    return "".join(TABULAR_SNAPSHOTS)


@pytest.fixture
def make_table() -> Callable[[Sequence[tuple[str, str]]], str]:
    return tabular_snapshot
