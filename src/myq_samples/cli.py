from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import timedelta
from pathlib import Path

from myq_samples.core.interval import parse_interval
from myq_samples.core.pipeline import load_samples
from myq_samples.core.segmenter import END_STRING


def _parse_fields(s: str) -> list[str]:
    out = [part.strip() for part in s.split(",") if part.strip()]
    if not out:
        raise argparse.ArgumentTypeError("At least one field must be provided")
    return out


def _parse_interval_arg(s: str) -> timedelta:
    try:
        return parse_interval(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _configure_logging() -> None:
    level_name = os.getenv("MYQ_SAMPLES_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Parse MySQL SHOW GLOBAL STATUS dumps into JSON samples.")
    p.add_argument("log_path")
    p.add_argument(
        "--interval",
        type=_parse_interval_arg,
        default=parse_interval(0),
        help="Minimum Uptime delta between samples (e.g., 10s, 1m). Default: every sample",
    )
    p.add_argument(
        "--fields",
        type=_parse_fields,
        default=None,
        help="Comma-separated status variables to keep (e.g., uptime,threads_connected)",
    )
    p.add_argument("--max", dest="max_results", type=int, default=None, help="Max samples to print (default: no cap)")
    p.add_argument(
        "--end-marker",
        default=END_STRING,
        help=f"Line marking the end of a batch sample (default: {END_STRING})",
    )

    args = p.parse_args(argv)
    _configure_logging()
    path = Path(args.log_path)

    try:
        samples = asyncio.run(
            load_samples(
                path,
                interval=args.interval,
                limit=args.max_results,
                fields=args.fields,
                end_marker=args.end_marker,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    for sample in samples:
        print(json.dumps(sample, sort_keys=True))

    print(f"\nFound {len(samples)} samples.", file=sys.stderr)


if __name__ == "__main__":
    main()
