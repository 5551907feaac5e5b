"""Streaming parser for MySQL status dumps."""

from __future__ import annotations

from .interval import IntervalFilter, extract_uptime, parse_interval
from .models import Layout, ParseStats, RawRecord, Sample
from .pipeline import iter_samples, load_samples, open_status_log, parse_samples
from .publisher import publish
from .record_parser import parse_record
from .segmenter import END_STRING, RecordSegmenter, detect_layout

__all__ = [
    "END_STRING",
    "IntervalFilter",
    "Layout",
    "ParseStats",
    "RawRecord",
    "RecordSegmenter",
    "Sample",
    "detect_layout",
    "extract_uptime",
    "iter_samples",
    "load_samples",
    "open_status_log",
    "parse_interval",
    "parse_record",
    "parse_samples",
    "publish",
]
