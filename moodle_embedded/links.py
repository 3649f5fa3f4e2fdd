"""Embedded link extraction and match filtering."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Iterator, Sequence

from .models import CandidateLink

# Scanned in this order; the first kind under which a URL appears wins.
MATCH_TYPES: Dict[str, str] = {"image": "src", "file": "href"}


@lru_cache(maxsize=None)
def _pattern_for(attribute: str) -> re.Pattern[str]:
    return re.compile(re.escape(attribute) + r'="([^\s"]+)"')


def extract_links(html: str, attribute: str) -> Iterator[str]:
    """Yield every double-quoted value of ``attribute`` in ``html``.

    This is a textual scan rather than an HTML parse: values containing
    whitespace or a quote, and single-quoted or unquoted attributes, are
    not reported.
    """
    for found in _pattern_for(attribute).finditer(html or ""):
        yield found.group(1)


def qualifies(url: str, match: str, exceptions: Sequence[str] | None = None) -> bool:
    """Return True when ``url`` contains ``match`` and none of ``exceptions``."""
    if match not in url:
        return False
    if exceptions and any(exception in url for exception in exceptions):
        return False
    return True


def find_candidate_links(
    html: str,
    match: str,
    exceptions: Sequence[str] | None = None,
) -> Iterator[CandidateLink]:
    """Yield qualifying links of every kind, in kind order then text order."""
    for kind, attribute in MATCH_TYPES.items():
        for url in extract_links(html, attribute):
            if qualifies(url, match, exceptions):
                yield CandidateLink(url=url, kind=kind)
