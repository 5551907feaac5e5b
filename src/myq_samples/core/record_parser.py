"""Field extraction for a single status record.

Best-effort: lines that do not look like a field are skipped, never reported.
"""

from __future__ import annotations

from collections.abc import Iterator

from .models import Layout, RawRecord, Sample

_DIVIDER = b" | "
_TRIM = b"| "


def _iter_batch_fields(data: bytes) -> Iterator[tuple[bytes, bytes]]:
    for line in data.splitlines():
        raw = line.split(b"\t")
        # If we don't get 2 fields, skip it.
        if len(raw) != 2:
            continue
        yield raw[0], raw[1]


def _iter_tabular_fields(data: bytes) -> Iterator[tuple[bytes, bytes]]:
    # Columns are aligned for the whole table, so the divider is located once.
    divider = -1
    for line in data.splitlines():
        # | varname   | value    |
        if not line.startswith(b"|"):
            continue

        if divider < 0:
            divider = line.find(_DIVIDER)
            if divider < 0:
                continue
        elif len(line) < divider:
            # truncated row, probably EOF
            continue

        yield line[:divider].strip(_TRIM), line[divider:].strip(_TRIM)


def parse_record(record: RawRecord, *, encoding: str = "utf-8") -> Sample:
    """Parse a record's lines into a sample (lowercase keys, last line wins)."""
    if record.layout is Layout.TABULAR:
        fields = _iter_tabular_fields(record.data)
    else:
        fields = _iter_batch_fields(record.data)

    sample: Sample = {}
    for key, value in fields:
        if not key.strip():
            continue
        name = key.decode(encoding, errors="replace").lower()
        sample[name] = value.decode(encoding, errors="replace")
    return sample
