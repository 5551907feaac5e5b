"""MCP server entrypoint (stdio transport).

Exposes the status sample parser as a tool so clients can pull samples out of
a captured `SHOW GLOBAL STATUS` log.

Run locally (stdio):
    python -m myq_samples.server.samples_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from myq_samples.tools.samples import status_samples_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("MYQ_SAMPLES_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("myq-samples", json_response=True)


@mcp.tool()
async def status_samples(
    log_path: str,
    interval: str | None = None,
    fields: Sequence[str] | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return parsed status samples from a SHOW GLOBAL STATUS log.

    Parameters
    ----------
    log_path:
        Path to a status dump (mysql -B batch output or the bordered table
        output). Supports plain text and .gz.
    interval:
        Minimum time between returned samples, measured with the Uptime
        counter (e.g., "10s", "1m"). Below one second disables throttling.
    fields:
        Only return these status variables (case-insensitive), e.g.
        ["uptime", "threads_connected"].
    limit:
        Maximum number of samples returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"count": int, "interval_seconds": float, "samples": list[dict]}
    """
    return await status_samples_impl(
        log_path=log_path,
        interval=interval,
        fields=fields,
        limit=limit,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
