"""Core data models for status sample parsing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# One parsed snapshot: lowercase field name -> raw field value.
Sample = dict[str, str]


class Layout(str, Enum):
    """Textual rendering style of a status dump."""

    BATCH = "batch"  # key<TAB>value lines (mysql -B)
    TABULAR = "tabular"  # bordered table with pipe-delimited columns


@dataclass(frozen=True, slots=True)
class RawRecord:
    """Unparsed byte span of one snapshot, tagged with the stream layout."""

    data: bytes
    layout: Layout


@dataclass(slots=True)
class ParseStats:
    """Counters collected while parsing one stream."""

    records: int = 0
    skipped_interval: int = 0
    dropped_empty: int = 0
    published: int = 0
