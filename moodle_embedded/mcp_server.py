"""MCP server exposing the read-only embedded link report."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import load_environment
from .report import build_report, render_report_text
from .store import TARGETS, RecordStore, target_for_key
from .utils import split_exceptions

logger = logging.getLogger("moodle_embedded.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="moodle-embedded")


@mcp.tool()
def targets() -> str:
    """List the content areas that can be reported on, one ``key = label`` per line."""
    return "\n".join(f"{target.key} = {target.label}" for target in TARGETS)


@mcp.tool()
def report(table: str, match: str, exclude: str = "") -> str:
    """List links in a content area that contain ``match``, without changing anything.

    ``table`` is a key returned by ``targets`` such as ``page-content``;
    ``exclude`` is a comma separated list of substrings that rule a link out.
    """
    target = target_for_key(table)
    env = load_environment()
    store = RecordStore.from_url(env.database_url, prefix=env.table_prefix)
    store.validate_target(target.table, target.field)
    sections = build_report(
        store,
        target.table,
        target.field,
        match,
        split_exceptions(exclude),
        wwwroot=env.wwwroot,
    )
    return render_report_text(sections) or "No matching records."


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
