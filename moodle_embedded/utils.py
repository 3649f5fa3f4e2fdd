"""Utility helpers for string splitting and URL path handling."""

from __future__ import annotations

import hashlib
import re
from typing import List
from urllib.parse import urlparse

QUERY_SLUG_PATTERN = re.compile(r"[^A-Za-z0-9]+")
MAX_QUERY_SLUG = 40


def split_exceptions(value: str | None) -> List[str]:
    """Split a comma-separated exception string, dropping empty items."""
    if not value:
        return []
    return [item for item in value.split(",") if item]


def _query_suffix(query: str) -> str:
    slug = QUERY_SLUG_PATTERN.sub("-", query).strip("-")
    if len(slug) > MAX_QUERY_SLUG:
        slug = hashlib.sha1(query.encode("utf-8")).hexdigest()[:12]
    return slug


def filename_from_url(url: str) -> str:
    """Return the URL path segment after the last slash.

    A query string is folded into the name (``file?id=2`` becomes
    ``file_id-2``, ``doc.pdf?v=2`` becomes ``doc_v-2.pdf``) so URLs that
    differ only by query are saved to different files.
    """
    parsed = urlparse(url)
    name = parsed.path.rsplit("/", 1)[-1]
    if not name or not parsed.query:
        return name
    suffix = _query_suffix(parsed.query)
    if not suffix:
        return name
    stem, dot, extension = name.rpartition(".")
    if dot and stem:
        return f"{stem}_{suffix}.{extension}"
    return f"{name}_{suffix}"
