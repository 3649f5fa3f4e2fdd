from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from sqlalchemy import create_engine, text

from moodle_embedded.store import RecordStore


SCHEMA = [
    "CREATE TABLE mdl_modules (id INTEGER PRIMARY KEY, name TEXT)",
    "CREATE TABLE mdl_course_modules (id INTEGER PRIMARY KEY, module INTEGER, instance INTEGER)",
    "CREATE TABLE mdl_page (id INTEGER PRIMARY KEY, name TEXT, intro TEXT, content TEXT)",
    "CREATE TABLE mdl_course (id INTEGER PRIMARY KEY, shortname TEXT, summary TEXT)",
    "CREATE TABLE mdl_book_chapters (id INTEGER PRIMARY KEY, title TEXT, content TEXT)",
]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'moodle.db'}", future=True)
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
        conn.execute(text("INSERT INTO mdl_modules (id, name) VALUES (1, 'page'), (2, 'label')"))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return RecordStore(engine)


def add_page(engine, page_id: int, cmid: int, name: str, content: str) -> None:
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO mdl_page (id, name, intro, content) VALUES (:id, :name, '', :content)"),
            {"id": page_id, "name": name, "content": content},
        )
        conn.execute(
            text("INSERT INTO mdl_course_modules (id, module, instance) VALUES (:cmid, 1, :id)"),
            {"cmid": cmid, "id": page_id},
        )


def page_content(engine, page_id: int) -> str:
    with engine.connect() as conn:
        return conn.execute(
            text("SELECT content FROM mdl_page WHERE id = :id"), {"id": page_id}
        ).scalar_one()


class FakeResponse:
    def __init__(self, status: int = 200, headers: Optional[Dict[str, str]] = None, body: bytes = b""):
        self.status_code = status
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start : start + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


class FakeSession:
    """Serves canned HEAD/GET responses and records every request."""

    def __init__(self) -> None:
        self.heads: Dict[str, object] = {}
        self.bodies: Dict[str, object] = {}
        self.calls: List[Tuple[str, str, object]] = []

    def add(self, url: str, body: bytes = b"data", headers: Optional[Dict[str, str]] = None) -> None:
        if headers is None:
            headers = {"Content-Length": str(len(body)), "Content-Type": "application/octet-stream"}
        self.heads[url] = FakeResponse(headers=headers)
        self.bodies[url] = FakeResponse(headers=headers, body=body)

    def head(self, url, timeout=None, allow_redirects=False):
        self.calls.append(("HEAD", url, timeout))
        return self._respond(self.heads, url)

    def get(self, url, timeout=None, stream=False):
        self.calls.append(("GET", url, timeout))
        return self._respond(self.bodies, url)

    def gets(self) -> List[str]:
        return [url for method, url, _ in self.calls if method == "GET"]

    @staticmethod
    def _respond(responses, url):
        response = responses.get(url)
        if response is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def session():
    return FakeSession()
