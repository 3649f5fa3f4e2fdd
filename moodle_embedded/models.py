"""Data models used throughout the rewrite and report pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ContentTarget:
    """A table/field pair known to hold HTML content."""

    table: str
    field: str
    label: str

    @property
    def key(self) -> str:
        return f"{self.table}-{self.field}"


@dataclass
class Record:
    """A content row selected from the host database."""

    context_id: int
    id: int
    name: str
    text: str


@dataclass
class CandidateLink:
    """Embedded URL discovered in a record's text."""

    url: str
    kind: str


@dataclass
class Replacement:
    """A downloaded resource and the local path that replaces its URL."""

    url: str
    kind: str
    path: str


@dataclass
class LogEntry:
    """A single row of the replacement log."""

    context_id: int
    table: str
    field: str
    record_id: int
    kind: str
    url: str
    path: str

    def as_row(self) -> List[str]:
        return [
            str(self.context_id),
            self.table,
            self.field,
            str(self.record_id),
            self.kind,
            self.url,
            self.path,
        ]


@dataclass
class RecordResult:
    """Outcome of rewriting a single record."""

    record: Record
    replacements: Dict[str, Replacement] = field(default_factory=dict)


@dataclass
class ReportSection:
    """Matched links for one record, as listed by the report."""

    record: Record
    links: List[CandidateLink]
    view_url: Optional[str] = None
