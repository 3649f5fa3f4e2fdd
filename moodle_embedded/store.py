"""Access to Moodle content tables through SQLAlchemy."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine

from .config import DEFAULT_TABLE_PREFIX, ConfigurationError
from .models import ContentTarget, Record

logger = logging.getLogger("moodle_embedded.store")

TARGETS: List[ContentTarget] = [
    ContentTarget("assign", "intro", "Assignment Description"),
    ContentTarget("book", "intro", "Book Introduction"),
    ContentTarget("book_chapters", "content", "Book Chapter"),
    ContentTarget("course", "summary", "Course Summary"),
    ContentTarget("folder", "intro", "Folder Introduction"),
    ContentTarget("forum", "intro", "Forum Introduction"),
    ContentTarget("label", "intro", "Label Content"),
    ContentTarget("page", "intro", "Page Introduction"),
    ContentTarget("page", "content", "Page Content"),
    ContentTarget("question", "questiontext", "Quiz Questions"),
    ContentTarget("quiz", "intro", "Quiz Introduction"),
    ContentTarget("url", "intro", "URL Introduction"),
    ContentTarget("wiki", "intro", "Wiki Introduction"),
    ContentTarget("wiki_pages", "cachedcontent", "Wiki Pages"),
]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_LIKE_ESCAPE = "!"


def target_for_key(key: str) -> ContentTarget:
    """Look up a catalog entry from a ``table-field`` key."""
    for target in TARGETS:
        if target.key == key:
            return target
    raise ConfigurationError(f"Unknown content area: {key}")


def like_pattern(match: str) -> str:
    """Wrap ``match`` for a LIKE containment test, escaping wildcards."""
    escaped = (
        match.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


@dataclass(frozen=True)
class QueryStrategy:
    """How records of a table are selected and whether they have a view page.

    Activity tables are joined to their course module so the course module id
    becomes the record's context id. Standalone tables have no course module;
    their own id is used instead and no view link can be built.
    """

    module_linked: bool = True
    name_column: str = "name"

    def select_sql(self, prefix: str, table: str, field: str) -> str:
        where = f"LOWER(t.{field}) LIKE LOWER(:match) ESCAPE '{_LIKE_ESCAPE}'"
        if self.module_linked:
            return (
                f"SELECT cm.id AS context_id, t.id AS id, t.{self.name_column} AS name, "
                f"t.{field} AS text "
                f"FROM {prefix}{table} t, {prefix}modules m, {prefix}course_modules cm "
                f"WHERE {where} "
                "AND m.name = :module "
                "AND cm.module = m.id "
                "AND cm.instance = t.id "
                "ORDER BY cm.id"
            )
        return (
            f"SELECT t.id AS context_id, t.id AS id, t.{self.name_column} AS name, "
            f"t.{field} AS text "
            f"FROM {prefix}{table} t "
            f"WHERE {where} "
            "ORDER BY t.id"
        )


MODULE_STRATEGY = QueryStrategy()

STANDALONE_STRATEGIES: Dict[str, QueryStrategy] = {
    "book_chapters": QueryStrategy(module_linked=False, name_column="title"),
    "course": QueryStrategy(module_linked=False, name_column="shortname"),
    "question": QueryStrategy(module_linked=False, name_column="name"),
    "wiki_pages": QueryStrategy(module_linked=False, name_column="title"),
}


def strategy_for(table: str) -> QueryStrategy:
    return STANDALONE_STRATEGIES.get(table, MODULE_STRATEGY)


def view_url(wwwroot: str, table: str, record: Record) -> Optional[str]:
    """Return the activity view page for a record, if its table has one."""
    if not strategy_for(table).module_linked:
        return None
    return f"{wwwroot}/mod/{table}/view.php?id={record.context_id}"


class RecordStore:
    """Reads and updates HTML fields of Moodle tables."""

    def __init__(self, engine: Engine, prefix: str = DEFAULT_TABLE_PREFIX) -> None:
        self.engine = engine
        self.prefix = prefix

    @classmethod
    def from_url(cls, database_url: Optional[str], prefix: str = DEFAULT_TABLE_PREFIX) -> "RecordStore":
        if not database_url:
            raise ConfigurationError("No database configured; set DATABASE_URL or pass --database-url")
        return cls(create_engine(database_url, future=True), prefix=prefix)

    def validate_target(self, table: str, field: str) -> None:
        """Ensure ``table`` and ``field`` exist before any processing starts."""
        if not _IDENTIFIER.match(table or "") or not inspect(self.engine).has_table(self.prefix + table):
            raise ConfigurationError(f"Table {table} does not exist.")
        columns = {column["name"] for column in inspect(self.engine).get_columns(self.prefix + table)}
        if not _IDENTIFIER.match(field or "") or field not in columns:
            raise ConfigurationError(f"Field {field} does not exist in table {table}.")

    def find_records(self, table: str, field: str, match: str) -> List[Record]:
        """Return records whose ``field`` contains ``match``, ignoring case."""
        if not (_IDENTIFIER.match(table or "") and _IDENTIFIER.match(field or "")):
            raise ConfigurationError(f"Invalid table or field name: {table}.{field}")
        sql = strategy_for(table).select_sql(self.prefix, table, field)
        params = {"match": like_pattern(match)}
        if strategy_for(table).module_linked:
            params["module"] = table
        with self.engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        logger.debug("Matched %d record(s) in %s.%s", len(rows), table, field)
        return [
            Record(
                context_id=row["context_id"],
                id=row["id"],
                name=row["name"] or "",
                text=row["text"] or "",
            )
            for row in rows
        ]

    def update_field(self, table: str, field: str, record_id: int, value: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(f"UPDATE {self.prefix}{table} SET {field} = :value WHERE id = :id"),
                {"value": value, "id": record_id},
            )
