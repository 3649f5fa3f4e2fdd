"""Text rewriting and replacement log helpers."""

from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Iterable, Mapping

from .models import LogEntry


def rewrite_text(text: str, replacements: Mapping[str, str]) -> str:
    """Swap each remote URL in ``text`` for its local path.

    All URLs are substituted in one pass, longest first, so a URL that is a
    prefix of another never clobbers the longer one.
    """
    if not replacements:
        return text
    pattern = re.compile(
        "|".join(re.escape(url) for url in sorted(replacements, key=len, reverse=True))
    )
    return pattern.sub(lambda found: replacements[found.group(0)], text)


def append_log(log_path: Path, entries: Iterable[LogEntry]) -> int:
    """Append entries to the CSV log, one row each, without a header.

    The file is opened and closed on every call so that rows for completed
    records are on disk even if a later record aborts the run.
    """
    count = 0
    with open(log_path, "a", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        for entry in entries:
            writer.writerow(entry.as_row())
            count += 1
    return count
